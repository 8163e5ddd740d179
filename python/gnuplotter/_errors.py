"""Exception hierarchy for gnuplotter."""

from typing import Optional


class GnuplotterError(Exception):
    """Base exception for all gnuplotter errors."""
    pass


class InvalidInputError(GnuplotterError, ValueError):
    """The plot request is missing required fields or carries unusable values."""
    pass


class ProcessError(GnuplotterError):
    """gnuplot (or the ps2pdf stage) exited with an error."""

    def __init__(
        self,
        message: str,
        returncode: Optional[int] = None,
        stdout: str = "",
        stderr: str = "",
    ):
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(message)


class BinaryNotFoundError(ProcessError):
    """A required executable could not be located."""
    pass
