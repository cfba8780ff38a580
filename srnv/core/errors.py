"""Exit codes for next-version-helper.

CI scripts only test for zero, so every way of not producing a version
exits with ``USER_ERROR``.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    OK = 0
    USER_ERROR = 1
