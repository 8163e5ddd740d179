"""Locate and run gnuplot (and ps2pdf for PDF output)."""

import os
import shutil
import subprocess
import tempfile
from typing import Any, Dict, NamedTuple, Optional

from ._errors import BinaryNotFoundError, InvalidInputError, ProcessError
from ._log import log

GNUPLOT_ENV = "GNUPLOTTER_GNUPLOT"
PS2PDF_ENV = "GNUPLOTTER_PS2PDF"

EXEC_OPTIONS = ("cwd", "env")


class RunResult(NamedTuple):
    returncode: int
    stdout: str
    stderr: str


def find_binary(name: str, env_var: str) -> Optional[str]:
    """Find an executable.

    Search order:
    1. the path in ``env_var``
    2. system PATH
    """
    env_path = os.environ.get(env_var)
    if env_path:
        if os.path.isfile(env_path) and os.access(env_path, os.X_OK):
            return env_path
        log.warning("$%s=%s is not an executable file, searching PATH", env_var, env_path)
    return shutil.which(name)


def _require_binary(name: str, env_var: str) -> str:
    binary = find_binary(name, env_var)
    if binary is None:
        raise BinaryNotFoundError(
            f"{name} binary not found. Set {env_var} or add it to PATH."
        )
    return binary


def check_exec_options(exec_options: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    if not exec_options:
        return {}
    unknown = sorted(set(exec_options) - set(EXEC_OPTIONS))
    if unknown:
        raise InvalidInputError(
            f"Unsupported exec options: {', '.join(unknown)} (allowed: {', '.join(EXEC_OPTIONS)})"
        )
    return dict(exec_options)


def output_path(filename: str, exec_options: Dict[str, Any]) -> str:
    """Relative paths resolve against the spawn ``cwd`` when one is given."""
    cwd = exec_options.get("cwd")
    if cwd and not os.path.isabs(filename):
        return os.path.abspath(os.path.join(cwd, filename))
    return filename


def prepare_output(path: str) -> None:
    """Create the parent directory and touch ``path``. Failures are only logged."""
    try:
        parent = os.path.dirname(path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(path, "a"):
            pass
    except OSError as e:
        log.warning("could not prepare output file %s: %s", path, e)


def _decode(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


def _read(f) -> str:
    f.seek(0)
    return _decode(f.read())


def _feed(proc: subprocess.Popen, data: bytes) -> None:
    """Write the whole script to ``proc`` and close its stdin."""
    try:
        proc.stdin.write(data)
    except BrokenPipeError:
        # exit status and stderr report the reason
        log.debug("gnuplot closed its input early")
    finally:
        try:
            proc.stdin.close()
        except BrokenPipeError:
            pass


def _run_direct(gnuplot: str, script: bytes, path: str, exec_options: Dict[str, Any]) -> RunResult:
    """``gnuplot > path``"""
    try:
        with open(path, "wb") as out:
            proc = subprocess.Popen(
                [gnuplot],
                stdin=subprocess.PIPE,
                stdout=out,
                stderr=subprocess.PIPE,
                **exec_options,
            )
            _, err = proc.communicate(script)
    except OSError as e:
        raise ProcessError(f"Failed to run {gnuplot}: {e}") from e
    return RunResult(proc.returncode, "", _decode(err))


def _run_pdf(
    gnuplot: str,
    ps2pdf: str,
    script: bytes,
    path: str,
    exec_options: Dict[str, Any],
) -> RunResult:
    """``gnuplot | ps2pdf - path``"""
    with tempfile.TemporaryFile() as gp_err, \
            tempfile.TemporaryFile() as ps_out, \
            tempfile.TemporaryFile() as ps_err:
        try:
            gp = subprocess.Popen(
                [gnuplot],
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=gp_err,
                **exec_options,
            )
        except OSError as e:
            raise ProcessError(f"Failed to run {gnuplot}: {e}") from e
        try:
            ps = subprocess.Popen(
                [ps2pdf, "-", path],
                stdin=gp.stdout,
                stdout=ps_out,
                stderr=ps_err,
                **exec_options,
            )
        except OSError as e:
            gp.kill()
            gp.wait()
            raise ProcessError(f"Failed to run {ps2pdf}: {e}") from e
        # ps2pdf owns the read end now
        gp.stdout.close()

        _feed(gp, script)
        gp_code = gp.wait()
        ps_code = ps.wait()

        stderr = _read(gp_err) + _read(ps_err)
        returncode = ps_code if ps_code != 0 else gp_code
        return RunResult(returncode, _read(ps_out), stderr)


def run(script: str, filename: str, fmt: str, exec_options: Optional[Dict[str, Any]] = None) -> RunResult:
    """Stream ``script`` to gnuplot and write its output to ``filename``.

    Raises BinaryNotFoundError when an executable is missing and ProcessError
    when any stage exits non-zero.
    """
    exec_options = check_exec_options(exec_options)
    path = output_path(filename, exec_options)
    gnuplot = _require_binary("gnuplot", GNUPLOT_ENV)
    data = script.encode("utf-8")

    if fmt == "pdf":
        ps2pdf = _require_binary("ps2pdf", PS2PDF_ENV)
        prepare_output(path)
        log.debug("running %s | %s - %s", gnuplot, ps2pdf, path)
        result = _run_pdf(gnuplot, ps2pdf, data, path, exec_options)
    else:
        prepare_output(path)
        log.debug("running %s > %s", gnuplot, path)
        result = _run_direct(gnuplot, data, path, exec_options)

    if result.stdout:
        log.debug("stdout: %s", result.stdout)
    if result.stderr:
        log.debug("stderr: %s", result.stderr)

    if result.returncode != 0:
        log.warning("plot to %s failed with exit code %d", path, result.returncode)
        raise ProcessError(
            f"gnuplot exited with code {result.returncode}: {result.stderr.strip()}",
            returncode=result.returncode,
            stdout=result.stdout,
            stderr=result.stderr,
        )
    return result
