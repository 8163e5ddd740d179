"""Normalize caller data into the canonical series set.

Three input shapes are accepted::

    [3, 1, 2]                                  # one series, "Series 1"
    {"cpu": [3, 1, 2], "mem": [5, 5, 6]}       # named series, positional x
    {"temp": {1700000000: 21.5, 1700000060: 22}}  # sparse, x taken from keys

Each becomes ``{name: {x: y, ...}}`` with insertion order preserved.
"""

from __future__ import annotations

import numbers
from typing import Any, Dict, Iterable, Mapping, Union

from ._errors import InvalidInputError

XValue = Union[str, int, float]
Series = Dict[XValue, float]
SeriesSet = Dict[str, Series]

DEFAULT_SERIES_NAME = "Series 1"


def is_number(value: Any) -> bool:
    """True for real numbers, excluding bool."""
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _as_list(values: Any) -> list:
    # numpy arrays and similar expose tolist()
    if hasattr(values, "tolist") and not isinstance(values, (list, tuple)):
        values = values.tolist()
    return list(values)


def _is_sequence(value: Any) -> bool:
    if isinstance(value, (str, bytes, Mapping)):
        return False
    return isinstance(value, (list, tuple, range)) or hasattr(value, "tolist")


def _check_y(name: str, x: XValue, y: Any) -> float:
    if not is_number(y):
        raise InvalidInputError(
            f"Series {name!r} has a non-numeric value at x={x!r}: {y!r}"
        )
    return y


def from_values(values: Iterable[Any], name: str = DEFAULT_SERIES_NAME) -> SeriesSet:
    """Wrap a flat sequence as a single series with x = position."""
    return {name: _positional(name, values)}


def _positional(name: str, values: Iterable[Any]) -> Series:
    return {i: _check_y(name, i, y) for i, y in enumerate(_as_list(values))}


def _sparse(name: str, points: Mapping[XValue, Any]) -> Series:
    return {x: _check_y(name, x, y) for x, y in points.items()}


def from_named(mapping: Mapping[Any, Iterable[Any]]) -> SeriesSet:
    """Each flat sequence value becomes a series keyed by its name."""
    return {str(name): _positional(str(name), values) for name, values in mapping.items()}


def from_sparse(mapping: Mapping[Any, Mapping[XValue, Any]]) -> SeriesSet:
    """Each mapping value is kept as x -> y; keys are not coerced."""
    return {str(name): _sparse(str(name), points) for name, points in mapping.items()}


def normalize_data(data: Any) -> SeriesSet:
    """Dispatch raw ``data`` to the matching constructor.

    Mappings may mix sequence-valued and mapping-valued series. A sequence of
    sequences yields one series per row, named by row index.
    """
    if isinstance(data, Mapping):
        result: SeriesSet = {}
        for name, values in data.items():
            key = str(name)
            if isinstance(values, Mapping):
                result[key] = _sparse(key, values)
            elif _is_sequence(values):
                result[key] = _positional(key, values)
            else:
                raise InvalidInputError(
                    f"Series {key!r} must be a sequence or a mapping, "
                    f"got {type(values).__name__}"
                )
        return result

    if _is_sequence(data) or (isinstance(data, Iterable) and not isinstance(data, (str, bytes))):
        rows = _as_list(data)
        if rows and all(_is_sequence(row) for row in rows):
            return {str(i): _positional(str(i), row) for i, row in enumerate(rows)}
        return from_values(rows)

    raise InvalidInputError(
        f"data must be a sequence or a mapping of series, got {type(data).__name__}"
    )
