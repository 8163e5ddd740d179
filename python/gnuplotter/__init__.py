"""gnuplotter: render line plots to png, pdf or svg files with gnuplot.

Usage::

    import gnuplotter as gp

    gp.plot(data=[3, 1, 2, 3, 4], filename="out.png").result()

    gp.plot(
        data={"tick": [3, 1, 2, 3, 4], "line": {1: 5, 5: 6}},
        filename="out.pdf",
        format="pdf",
        title="Example",
        moving_avg=3,
        finish=lambda error, stdout, stderr: print(error),
    )

Advanced usage (script only, no process)::

    req = gp.PlotRequest(data=[1, 2, 3], filename="out.png", title="T")
    print(gp.render_script(req))
"""

from ._plot import plot, plot_sync
from ._options import (
    PlotRequest,
    Settings,
    Range,
    Margin,
    Rotation,
    resolve_settings,
)
from ._series import (
    normalize_data,
    from_values,
    from_named,
    from_sparse,
)
from ._filters import moving_average, moving_maximum, apply_moving_filter
from ._script import (
    build_setup,
    build_plot_command,
    build_data_blocks,
    render_script,
    time_format,
)
from ._launcher import RunResult
from ._errors import (
    GnuplotterError,
    InvalidInputError,
    ProcessError,
    BinaryNotFoundError,
)

try:
    from importlib.metadata import version as _pkg_version
    __version__ = _pkg_version("gnuplotter")
except Exception:
    __version__ = "0.1.0"

__all__ = [
    "plot",
    "plot_sync",
    "PlotRequest",
    "Settings",
    "Range",
    "Margin",
    "Rotation",
    "resolve_settings",
    "normalize_data",
    "from_values",
    "from_named",
    "from_sparse",
    "moving_average",
    "moving_maximum",
    "apply_moving_filter",
    "build_setup",
    "build_plot_command",
    "build_data_blocks",
    "render_script",
    "time_format",
    "RunResult",
    "GnuplotterError",
    "InvalidInputError",
    "ProcessError",
    "BinaryNotFoundError",
]
