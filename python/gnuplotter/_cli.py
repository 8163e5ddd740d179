"""Command-line entry point for gnuplotter."""

import argparse
import json
import sys

from ._errors import GnuplotterError
from ._options import FORMATS, PlotRequest
from ._plot import plot_sync
from ._script import render_script


def _load_data(path: str):
    if path == "-":
        return json.load(sys.stdin)
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gnuplotter",
        description="Plot JSON series data to an image file with gnuplot.",
    )
    parser.add_argument("data", help="JSON file with a list or an object of series ('-' for stdin)")
    parser.add_argument("-o", "--output", required=True, dest="filename", help="destination file")
    parser.add_argument("-f", "--format", choices=FORMATS, default=None)
    parser.add_argument("--style", default=None, help="gnuplot line style (default: lines)")
    parser.add_argument("--title")
    parser.add_argument("--xlabel")
    parser.add_argument("--ylabel")
    parser.add_argument("--time", help="x values are epoch seconds; days, hours or a format string")
    parser.add_argument("--moving-avg", type=int, dest="moving_avg", metavar="N")
    parser.add_argument("--moving-max", type=int, dest="moving_max", metavar="N")
    parser.add_argument("--logscale", action="store_true")
    parser.add_argument("--nokey", action="store_true", help="hide the legend")
    parser.add_argument("--hide-series-title", action="store_true", dest="hide_series_title")
    parser.add_argument("--dry-run", action="store_true", help="print the gnuplot script and exit")
    return parser


def main(argv=None) -> int:
    """Entry point for the 'gnuplotter' console script."""
    args = build_parser().parse_args(argv)
    options = vars(args)
    dry_run = options.pop("dry_run")

    try:
        options["data"] = _load_data(options["data"])
    except (OSError, ValueError) as e:
        print(f"gnuplotter: cannot read data: {e}", file=sys.stderr)
        return 1

    request = PlotRequest.from_options(**options)
    try:
        if dry_run:
            sys.stdout.write(render_script(request))
        else:
            plot_sync(request)
    except GnuplotterError as e:
        print(f"gnuplotter: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
