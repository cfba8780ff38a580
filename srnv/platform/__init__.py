"""Process execution."""

from srnv.platform.process import ProcessError, run

__all__ = ["ProcessError", "run"]
