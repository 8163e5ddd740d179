"""Tests for gnuplot script generation (_script.py)."""

import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from gnuplotter._errors import InvalidInputError
from gnuplotter._options import PlotRequest, resolve_settings
from gnuplotter._script import (
    build_data_blocks,
    build_plot_command,
    build_setup,
    format_number,
    prepare,
    render_script,
    time_format,
)


def _setup(**options):
    return build_setup(resolve_settings(PlotRequest(data=[1], filename="out.png", **options)))


# ─── Terminal ────────────────────────────────────────────────────────────────

class TestTerminal:
    def test_png_default(self):
        assert _setup() == ['set term png size 800,640 font "Arial, 13"']

    def test_png_custom(self):
        lines = _setup(width=1024, height=768, font="Courier", font_size=10)
        assert lines == ['set term png size 1024,768 font "Courier, 10"']

    def test_pdf(self):
        lines = _setup(format="pdf")
        assert lines == ['set term postscript landscape enhanced color dashed "Arial" fsize 14']

    def test_svg_emits_nothing(self, caplog):
        with caplog.at_level("WARNING", logger="gnuplotter"):
            assert _setup(format="svg") == []
        assert "svg" in caplog.text


# ─── Individual directives ───────────────────────────────────────────────────

class TestDirectives:
    def test_title_only(self):
        lines = _setup(title="T")
        assert lines[1:] == ['set title "T" font "Helvetica, 13"']
        assert sum(1 for l in lines if l.startswith("set title")) == 1
        for prefix in ("set xrange", "set yrange", "set lmargin", "set xdata", "set xlabel", "set ylabel"):
            assert not any(l.startswith(prefix) for l in lines)

    def test_title_size(self):
        assert _setup(title="T", title_size=20)[-1] == 'set title "T" font "Helvetica, 20"'

    def test_locale(self):
        assert _setup(locale="de_DE.UTF-8")[-1] == "set locale 'de_DE.UTF-8'"

    def test_ranges(self):
        lines = _setup(x_range={"min": 0, "max": 10}, y_range=(-1, 1))
        assert lines[1:] == ["set xrange ['0':'10']", "set yrange ['-1':'1']"]

    def test_range_open_end(self):
        assert _setup(x_range={"min": 5})[-1] == "set xrange ['5':*]"

    def test_margins_fixed_order(self):
        lines = _setup(margin={"bottom": 4, "top": 3, "right": 2, "left": 1})
        assert lines[1:] == ["set lmargin 1", "set rmargin 2", "set tmargin 3", "set bmargin 4"]

    def test_time_group(self):
        assert _setup(time="days")[1:] == [
            "set xdata time",
            'set timefmt "%s"',
            'set format x "%d/%m"',
            'set xlabel ""',
        ]

    def test_logscale(self):
        assert _setup(logscale=True)[-1] == "set logscale y"

    def test_labels(self):
        assert _setup(xlabel="X", ylabel="Y")[1:] == ['set xlabel "X"', 'set ylabel "Y"']

    def test_decimalsign(self):
        assert _setup(decimalsign=",")[-1] == "set decimalsign ','"

    def test_x_rotate(self):
        lines = _setup(x_rotate={"value": 45, "xOffset": -2, "yOffset": -1})
        assert lines[-1] == "set xtics rotate by 45 offset -2,-1"

    def test_y_format(self):
        assert _setup(y_format="%.2f")[-1] == "set format y '%.2f'"

    def test_nokey(self):
        assert _setup(nokey=True)[-1] == "set nokey"


class TestOrder:
    def test_fixed_priority_order(self):
        options = dict(
            nokey=True,
            y_format="%g",
            x_rotate=30,
            decimalsign=".",
            ylabel="Y",
            xlabel="X",
            logscale=True,
            title="T",
            time="hours",
            margin=(1, 2, 3, 4),
            y_range=(0, 1),
            x_range=(0, 1),
            locale="C",
        )
        lines = _setup(**options)
        prefixes = [
            "set term", "set locale", "set xrange", "set yrange",
            "set lmargin", "set rmargin", "set tmargin", "set bmargin",
            "set xdata", "set timefmt", "set format x", 'set xlabel ""',
            "set title", "set logscale", 'set xlabel "X"', "set ylabel",
            "set decimalsign", "set xtics", "set format y", "set nokey",
        ]
        assert len(lines) == len(prefixes)
        for line, prefix in zip(lines, prefixes):
            assert line.startswith(prefix)


class TestTimeFormat:
    @pytest.mark.parametrize("value,expected", [
        ("days", "%d/%m"),
        ("Days", "%d/%m"),
        ("hours", "%H:%M"),
        ("Hours", "%H:%M"),
        ("%Y-%m-%d", "%Y-%m-%d"),
        (True, "%H:%M"),
        (1, "%H:%M"),
    ])
    def test_translation(self, value, expected):
        assert time_format(value) == expected


# ─── Quoting ─────────────────────────────────────────────────────────────────

class TestQuoting:
    def test_double_quote_escaped(self):
        assert _setup(title='Say "hi"')[-1] == 'set title "Say \\"hi\\"" font "Helvetica, 13"'

    def test_backslash_escaped(self):
        assert _setup(xlabel="a\\b")[-1] == 'set xlabel "a\\\\b"'

    def test_single_quote_doubled(self):
        assert _setup(y_format="it's")[-1] == "set format y 'it''s'"

    def test_newline_rejected(self):
        with pytest.raises(InvalidInputError, match="Line breaks"):
            _setup(title="a\nset output '/etc/passwd'")


# ─── Plot command and data ───────────────────────────────────────────────────

class TestPlotCommand:
    def test_single_series(self):
        cmd = build_plot_command({"Series 1": {0: 1}}, "lines")
        assert cmd == "plot '-' using 1:2 with lines title \"Series 1\""

    def test_multiple_series_comma_separated(self):
        cmd = build_plot_command({"a": {}, "b": {}}, "linespoints")
        assert cmd == (
            "plot '-' using 1:2 with linespoints title \"a\", "
            "'-' using 1:2 with linespoints title \"b\""
        )
        assert not cmd.endswith(",")

    def test_hide_series_title(self):
        cmd = build_plot_command({"a": {}, "b": {}}, "lines", hide_series_title=True)
        assert cmd == "plot '-' using 1:2 with lines notitle, '-' using 1:2 with lines notitle"

    def test_no_series(self):
        assert build_plot_command({}, "lines") == "plot"


class TestDataBlocks:
    def test_blocks_per_series(self):
        lines = build_data_blocks({"a": {0: 3, 1: 1}, "b": {"1700000000": 2.5}})
        assert lines == ["0 3", "1 1", "e", "1700000000 2.5", "e"]

    def test_empty_series_still_terminated(self):
        assert build_data_blocks({"a": {}}) == ["e"]


class TestFormatNumber:
    def test_integral_float(self):
        assert format_number(3.0) == "3"

    def test_fraction(self):
        assert format_number(2.5) == "2.5"

    def test_int(self):
        assert format_number(7) == "7"

    def test_nan(self):
        assert format_number(float("nan")) == "NaN"

    def test_string_key(self):
        assert format_number("2024-01-01") == "2024-01-01"


# ─── Whole script ────────────────────────────────────────────────────────────

class TestRenderScript:
    def test_reference_request(self):
        script = render_script(PlotRequest(data=[3, 1, 2, 3, 4], filename="out.png", format="png"))
        assert script == (
            'set term png size 800,640 font "Arial, 13"\n'
            "plot '-' using 1:2 with lines title \"Series 1\"\n"
            "0 3\n1 1\n2 2\n3 3\n4 4\n"
            "e\n"
        )

    def test_setup_before_plot_before_data(self):
        lines = render_script(PlotRequest(
            data={"a": [1, 2], "b": [3]}, filename="o.png", title="T", nokey=True,
        )).splitlines()
        plot_index = next(i for i, l in enumerate(lines) if l.startswith("plot"))
        assert all(l.startswith("set ") for l in lines[:plot_index])
        assert lines[plot_index + 1:] == ["0 1", "1 2", "e", "0 3", "e"]
        assert lines[-1] == "e"

    def test_smoothing_applied(self):
        script = render_script(PlotRequest(data=[3, 1, 2, 3, 4], filename="o.png", moving_avg=3))
        assert script.splitlines()[2:] == ["0 3", "1 2", "2 2", "3 2", "4 3", "e"]

    def test_average_then_maximum(self):
        _, series = prepare(PlotRequest(data=[3, 1, 2, 3, 4], filename="o.png", moving_avg=3, moving_max=2))
        # avg(3) -> [3, 2, 2, 2, 3], then mean over 2 -> [3, 2.5, 2, 2, 2.5]
        assert list(series["Series 1"].values()) == [3, 2.5, 2, 2, 2.5]

    def test_missing_filename_before_anything(self):
        with pytest.raises(InvalidInputError, match="'data' and 'filename'"):
            render_script(PlotRequest(data=[1], format="jpeg"))
