"""gnuplot script generation.

A script is a list of directive lines::

    set term png size 800,640 font "Arial, 13"      <- setup, fixed order
    set title "Load" font "Helvetica, 13"
    plot '-' using 1:2 with lines title "cpu"       <- one plot directive
    0 3                                             <- inline data
    1 1
    e                                               <- end-of-data marker

Nothing here touches a process; :mod:`._launcher` streams the text.
"""

from __future__ import annotations

import math
from typing import Any, List, Tuple

from ._errors import InvalidInputError
from ._filters import apply_moving_filter, moving_average, moving_maximum
from ._log import log
from ._options import PlotRequest, Range, Settings, resolve_settings, validate_request
from ._series import SeriesSet, is_number, normalize_data

END_OF_DATA = "e"

_TIME_FORMATS = {
    "days": "%d/%m",
    "Days": "%d/%m",
    "hours": "%H:%M",
    "Hours": "%H:%M",
}
DEFAULT_TIME_FORMAT = "%H:%M"


# ─── Quoting ──────────────────────────────────────────────────────────────────

def _bare(value: Any) -> str:
    text = str(value)
    if "\n" in text or "\r" in text:
        raise InvalidInputError(f"Line breaks are not allowed in plot options: {text!r}")
    return text


def _dq(value: Any) -> str:
    """Double-quoted gnuplot string."""
    text = _bare(value).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{text}"'


def _sq(value: Any) -> str:
    """Single-quoted gnuplot string; a quote is escaped by doubling it."""
    text = _bare(value).replace("'", "''")
    return f"'{text}'"


def _range(r: Range) -> str:
    lo = "*" if r.min is None else _sq(r.min)
    hi = "*" if r.max is None else _sq(r.max)
    return f"[{lo}:{hi}]"


def format_number(value: Any) -> str:
    """Render a data value: integral floats lose their ``.0``, NaN becomes ``NaN``."""
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if value.is_integer() and abs(value) < 1e16:
            return str(int(value))
        return repr(value)
    if is_number(value):
        return str(value)
    return _bare(value)


# ─── Setup directives ─────────────────────────────────────────────────────────

def time_format(time: Any) -> str:
    """Translate the ``time`` option into a gnuplot time format string."""
    if isinstance(time, str):
        return _TIME_FORMATS.get(time, time)
    return DEFAULT_TIME_FORMAT


def _terminal(s: Settings) -> List[str]:
    if s.format == "svg":
        log.warning("svg output has no terminal setup; gnuplot will use its default terminal")
        return []
    if s.format == "pdf":
        # postscript, converted by ps2pdf downstream
        return [
            f"set term postscript landscape enhanced color dashed "
            f"{_dq(s.font)} fsize {_bare(s.font_size)}"
        ]
    return [
        f"set term png size {_bare(s.width)},{_bare(s.height)} "
        f"font {_dq(f'{s.font}, {s.font_size}')}"
    ]


def build_setup(s: Settings) -> List[str]:
    """Return setup directives in their fixed order. Only set options emit."""
    lines = _terminal(s)

    if s.locale:
        lines.append(f"set locale {_sq(s.locale)}")

    if s.x_range is not None:
        lines.append(f"set xrange {_range(s.x_range)}")
    if s.y_range is not None:
        lines.append(f"set yrange {_range(s.y_range)}")

    if s.margin is not None:
        lines.append(f"set lmargin {_bare(s.margin.left)}")
        lines.append(f"set rmargin {_bare(s.margin.right)}")
        lines.append(f"set tmargin {_bare(s.margin.top)}")
        lines.append(f"set bmargin {_bare(s.margin.bottom)}")

    if s.time is not None:
        lines.append("set xdata time")
        lines.append('set timefmt "%s"')
        lines.append(f"set format x {_dq(time_format(s.time))}")
        lines.append('set xlabel ""')

    if s.title:
        lines.append(
            f"set title {_dq(s.title)} font {_dq(f'{s.title_font}, {s.title_size}')}"
        )
    if s.logscale:
        lines.append("set logscale y")
    if s.xlabel:
        lines.append(f"set xlabel {_dq(s.xlabel)}")
    if s.ylabel:
        lines.append(f"set ylabel {_dq(s.ylabel)}")
    if s.decimalsign:
        lines.append(f"set decimalsign {_sq(s.decimalsign)}")
    if s.x_rotate is not None:
        r = s.x_rotate
        lines.append(
            f"set xtics rotate by {_bare(r.value)} "
            f"offset {_bare(r.x_offset)},{_bare(r.y_offset)}"
        )
    if s.y_format:
        lines.append(f"set format y {_sq(s.y_format)}")
    if s.nokey:
        lines.append("set nokey")

    return lines


# ─── Plot directive and data ──────────────────────────────────────────────────

def build_plot_command(series_set: SeriesSet, style: str, hide_series_title: bool = False) -> str:
    """One ``plot`` line with an inline-data entry per series."""
    entries = []
    for name in series_set:
        entry = f"'-' using 1:2 with {_bare(style)}"
        entry += " notitle" if hide_series_title else f" title {_dq(name)}"
        entries.append(entry)
    if not entries:
        return "plot"
    return "plot " + ", ".join(entries)


def build_data_blocks(series_set: SeriesSet) -> List[str]:
    """``x y`` lines per series, each block closed by the end-of-data marker."""
    lines: List[str] = []
    for points in series_set.values():
        for x, y in points.items():
            lines.append(f"{format_number(x)} {format_number(y)}")
        lines.append(END_OF_DATA)
    return lines


def prepare(request: PlotRequest) -> Tuple[Settings, SeriesSet]:
    """Validate, resolve settings, normalize and smooth the data."""
    validate_request(request)
    settings = resolve_settings(request)
    series_set = normalize_data(request.data)

    if settings.moving_avg is not None:
        series_set = apply_moving_filter(series_set, moving_average, settings.moving_avg)
    if settings.moving_max is not None:
        series_set = apply_moving_filter(series_set, moving_maximum, settings.moving_max)

    return settings, series_set


def build_script(settings: Settings, series_set: SeriesSet) -> List[str]:
    lines = build_setup(settings)
    lines.append(build_plot_command(series_set, settings.style, settings.hide_series_title))
    lines.extend(build_data_blocks(series_set))
    return lines


def render_script(request: PlotRequest) -> str:
    """Full script text for ``request``, newline terminated."""
    settings, series_set = prepare(request)
    return "\n".join(build_script(settings, series_set)) + "\n"
