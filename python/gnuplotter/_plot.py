"""Public plot entry point."""

from __future__ import annotations

import threading
from concurrent.futures import Future
from typing import Any, Callable, Mapping, Optional

from . import _launcher
from ._errors import InvalidInputError
from ._log import log
from ._options import PlotRequest, option_fields
from ._script import build_script, prepare

FinishCallback = Callable[[Optional[BaseException], str, str], Any]


def _as_request(request: Any, options: dict) -> PlotRequest:
    if request is None:
        return PlotRequest.from_options(**options)
    if isinstance(request, Mapping):
        return PlotRequest.from_options(**{**request, **options})
    if options:
        return request._replace(**option_fields(options))
    return request


def _notify(finish: FinishCallback, error, stdout: str, stderr: str) -> None:
    try:
        finish(error, stdout, stderr)
    except Exception as e:
        log.warning("finish callback raised %s: %s", type(e).__name__, e)


def _run(script: str, fmt: str, request: PlotRequest, finish: FinishCallback) -> None:
    try:
        result = _launcher.run(script, request.filename, fmt, request.exec_options)
    except Exception as e:
        _notify(finish, e, getattr(e, "stdout", ""), getattr(e, "stderr", ""))
        return
    _notify(finish, None, result.stdout, result.stderr)


def plot(
    request: Any = None,
    finish: Optional[FinishCallback] = None,
    **options: Any,
) -> Optional["Future[bool]"]:
    """Render a plot to ``filename`` with gnuplot.

    Usage::

        import gnuplotter as gp

        gp.plot(data=[3, 1, 2, 3, 4], filename="out.png").result()   # True

        gp.plot(
            data={"cpu": {1700000000: 12, 1700000060: 40}},
            filename="cpu.pdf", format="pdf", time="hours",
            finish=lambda err, out, errout: print(err),
        )

    Invalid input raises :class:`InvalidInputError` immediately, before any
    process starts. Everything after that is reported through the completion
    path: ``finish(error, stdout, stderr)`` when a callback is given, otherwise
    the returned future resolves to ``True`` or raises the error. There is no
    timeout; use ``future.result(timeout=...)``.
    """
    if isinstance(request, Mapping) and "finish" in request:
        request = dict(request)
        finish = finish or request.pop("finish")
    request = _as_request(request, options)
    settings, series_set = prepare(request)
    script = "\n".join(build_script(settings, series_set)) + "\n"
    _launcher.check_exec_options(request.exec_options)
    log.debug("script for %s:\n%s", request.filename, script)

    future: Optional[Future] = None
    if finish is None:
        future = Future()
        future.set_running_or_notify_cancel()

        def _resolve(error, stdout, stderr):
            if error is not None:
                future.set_exception(error)
            else:
                future.set_result(True)

        finish = _resolve
    elif not callable(finish):
        raise InvalidInputError("finish must be callable")

    thread = threading.Thread(
        target=_run,
        args=(script, settings.format, request, finish),
        daemon=False,
        name="gnuplotter-plot",
    )
    thread.start()
    return future


def plot_sync(request: Any = None, **options: Any) -> bool:
    """Blocking :func:`plot`. Returns True or raises the failure."""
    return plot(request, **options).result()
