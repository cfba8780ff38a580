"""Core types shared by every layer."""

from .config import Config, ConfigError, load_config, load_config_or_default
from .environment import CiEnvironment
from .errors import ErrorCode
from .result import Err, Ok, Result

__all__ = [
    "CiEnvironment",
    "Config",
    "ConfigError",
    "Err",
    "ErrorCode",
    "Ok",
    "Result",
    "load_config",
    "load_config_or_default",
]
