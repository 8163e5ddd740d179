"""Trailing-window smoothing filters applied per series."""

from __future__ import annotations

import math
from collections import deque
from typing import Any, Callable, List, Sequence

from ._series import SeriesSet, is_number

DEFAULT_WINDOW = 3

Filter = Callable[[Sequence[Any], int], List[Any]]


def moving_average(values: Sequence[Any], n: int) -> List[Any]:
    """n-point trailing moving average.

    Position i holds the mean of the last min(i+1, n) numeric values up to and
    including i. Non-numeric entries are passed through and skipped by the window.
    """
    window: deque = deque(maxlen=max(int(n), 1))
    out: List[Any] = []
    for value in values:
        if not is_number(value):
            out.append(value)
            continue
        window.append(value)
        out.append(sum(window) / len(window))
    return out


def moving_maximum(values: Sequence[Any], n: int) -> List[Any]:
    """n-point "moving maximum".

    Note: this returns the trailing window *mean*, exactly like
    :func:`moving_average`. Existing plots depend on that output, so it is kept
    rather than turned into a true sliding maximum.
    """
    return moving_average(values, n)


def apply_moving_filter(series_set: SeriesSet, filter: Filter, n: Any = None) -> SeriesSet:
    """Apply ``filter`` to every series. ``n`` falls back to 3 when not a finite number."""
    if not is_number(n) or not math.isfinite(n):
        n = DEFAULT_WINDOW
    result: SeriesSet = {}
    for name, points in series_set.items():
        smoothed = filter(list(points.values()), n)
        result[name] = dict(zip(points.keys(), smoothed))
    return result
