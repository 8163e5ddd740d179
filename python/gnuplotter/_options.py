"""Plot request and settings resolution.

A :class:`PlotRequest` holds what the caller asked for. :func:`resolve_settings`
turns it into a fully populated :class:`Settings` record; every default lives
here and nowhere else.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, NamedTuple, Optional

from ._errors import InvalidInputError
from ._series import is_number

FORMATS = ("png", "pdf", "svg")

DEFAULT_FORMAT = "png"
DEFAULT_STYLE = "lines"
DEFAULT_WIDTH = 800
DEFAULT_HEIGHT = 640
DEFAULT_FONT = "Arial"
DEFAULT_TITLE_FONT = "Helvetica"
DEFAULT_TITLE_SIZE = 13
DEFAULT_FONT_SIZE = {"png": 13, "pdf": 14, "svg": 13}

# camelCase keys accepted for compatibility with the node-plotter option names
_ALIASES = {
    "xRange": "x_range",
    "yRange": "y_range",
    "xRotate": "x_rotate",
    "yFormat": "y_format",
    "titleSize": "title_size",
    "fontSize": "font_size",
    "hideSeriesTitle": "hide_series_title",
    "movingAvg": "moving_avg",
    "movingMax": "moving_max",
    "exec": "exec_options",
}


class Range(NamedTuple):
    min: Any = None
    max: Any = None


class Margin(NamedTuple):
    left: Any
    right: Any
    top: Any
    bottom: Any


class Rotation(NamedTuple):
    value: Any
    x_offset: Any = 0
    y_offset: Any = 0


class PlotRequest(NamedTuple):
    """Everything needed for one plot invocation."""

    data: Any = None
    filename: Optional[str] = None
    format: Optional[str] = None
    style: Optional[str] = None
    moving_avg: Any = None
    moving_max: Any = None
    title: Optional[str] = None
    title_size: Any = None
    xlabel: Optional[str] = None
    ylabel: Optional[str] = None
    x_range: Any = None
    y_range: Any = None
    margin: Any = None
    time: Any = None
    locale: Optional[str] = None
    decimalsign: Optional[str] = None
    x_rotate: Any = None
    y_format: Optional[str] = None
    font: Optional[str] = None
    font_size: Any = None
    width: Any = None
    height: Any = None
    logscale: bool = False
    nokey: bool = False
    hide_series_title: bool = False
    exec_options: Optional[Dict[str, Any]] = None

    @classmethod
    def from_options(cls, **options: Any) -> "PlotRequest":
        """Build a request from keyword options, accepting camelCase aliases."""
        return cls(**option_fields(options))


def option_fields(options: Mapping[str, Any]) -> Dict[str, Any]:
    """Map option names (snake_case or camelCase) to PlotRequest fields."""
    fields: Dict[str, Any] = {}
    for key, value in options.items():
        name = _ALIASES.get(key, key)
        if name not in PlotRequest._fields:
            raise InvalidInputError(f"Unknown plot option: {key!r}")
        fields[name] = value
    return fields


class Settings(NamedTuple):
    """Resolved, immutable plot settings. Produced by :func:`resolve_settings`."""

    format: str
    style: str
    width: Any
    height: Any
    font: str
    font_size: Any
    title_font: str
    title_size: Any
    title: Optional[str]
    xlabel: Optional[str]
    ylabel: Optional[str]
    x_range: Optional[Range]
    y_range: Optional[Range]
    margin: Optional[Margin]
    time: Any
    locale: Optional[str]
    decimalsign: Optional[str]
    x_rotate: Optional[Rotation]
    y_format: Optional[str]
    logscale: bool
    nokey: bool
    hide_series_title: bool
    moving_avg: Any
    moving_max: Any


def _set(value: Any) -> bool:
    """Option presence test: None, empty strings and False count as unset."""
    return value is not None and value != "" and value is not False


def _or(value: Any, default: Any) -> Any:
    return value if _set(value) and value != 0 else default


def _field(raw: Any, *names: str, default: Any = KeyError) -> Any:
    for name in names:
        if isinstance(raw, Mapping):
            if name in raw:
                return raw[name]
        elif hasattr(raw, name):
            return getattr(raw, name)
    if default is KeyError:
        raise InvalidInputError(f"Missing {names[0]!r} in {raw!r}")
    return default


def _to_range(raw: Any, what: str) -> Optional[Range]:
    if not _set(raw):
        return None
    if isinstance(raw, Range):
        return raw
    if isinstance(raw, (tuple, list)):
        if len(raw) != 2:
            raise InvalidInputError(f"{what} needs exactly two values, got {raw!r}")
        return Range(raw[0], raw[1])
    return Range(_field(raw, "min", default=None), _field(raw, "max", default=None))


def _to_margin(raw: Any) -> Optional[Margin]:
    if not _set(raw):
        return None
    if isinstance(raw, Margin):
        return raw
    if isinstance(raw, (tuple, list)):
        if len(raw) != 4:
            raise InvalidInputError(f"margin needs left, right, top and bottom, got {raw!r}")
        return Margin(*raw)
    return Margin(
        _field(raw, "left"),
        _field(raw, "right"),
        _field(raw, "top"),
        _field(raw, "bottom"),
    )


def _to_rotation(raw: Any) -> Optional[Rotation]:
    if not _set(raw):
        return None
    if isinstance(raw, Rotation):
        return raw
    if is_number(raw):
        return Rotation(raw)
    if isinstance(raw, (tuple, list)):
        if not 1 <= len(raw) <= 3:
            raise InvalidInputError(f"x_rotate needs a value and optional offsets, got {raw!r}")
        return Rotation(*raw)
    return Rotation(
        _field(raw, "value"),
        _field(raw, "x_offset", "xOffset", default=0),
        _field(raw, "y_offset", "yOffset", default=0),
    )


def validate_request(request: PlotRequest) -> None:
    """Raise InvalidInputError unless both ``data`` and ``filename`` are present."""
    if request.data is None or not request.filename:
        raise InvalidInputError(
            "The plot request must have 'data' and 'filename' properties!"
        )


def resolve_settings(request: PlotRequest) -> Settings:
    """Fill in every default and coerce nested options into records."""
    fmt = (request.format or DEFAULT_FORMAT).lower()
    if fmt not in FORMATS:
        raise InvalidInputError(
            f"Unsupported format {request.format!r}; expected one of {', '.join(FORMATS)}"
        )

    return Settings(
        format=fmt,
        style=request.style or DEFAULT_STYLE,
        width=_or(request.width, DEFAULT_WIDTH),
        height=_or(request.height, DEFAULT_HEIGHT),
        font=request.font or DEFAULT_FONT,
        font_size=_or(request.font_size, DEFAULT_FONT_SIZE[fmt]),
        title_font=request.font or DEFAULT_TITLE_FONT,
        title_size=_or(request.title_size, DEFAULT_TITLE_SIZE),
        title=request.title if _set(request.title) else None,
        xlabel=request.xlabel if _set(request.xlabel) else None,
        ylabel=request.ylabel if _set(request.ylabel) else None,
        x_range=_to_range(request.x_range, "x_range"),
        y_range=_to_range(request.y_range, "y_range"),
        margin=_to_margin(request.margin),
        time=_or(request.time, None),
        locale=request.locale if _set(request.locale) else None,
        decimalsign=request.decimalsign if _set(request.decimalsign) else None,
        x_rotate=_to_rotation(request.x_rotate),
        y_format=request.y_format if _set(request.y_format) else None,
        logscale=bool(request.logscale),
        nokey=bool(request.nokey),
        hide_series_title=bool(request.hide_series_title),
        moving_avg=_or(request.moving_avg, None),
        moving_max=_or(request.moving_max, None),
    )
