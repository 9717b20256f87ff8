"""
Runtime configuration for poseval.

Settings come from the environment:

    POSEVAL_MAX_DEPTH   how many definition hops the resolver may follow (default 8)
    POSEVAL_LOG_LEVEL   log level used by the command line tool (default WARNING)
"""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_MAX_DEPTH = 8
DEFAULT_LOG_LEVEL = "WARNING"

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


@dataclass(frozen=True)
class EvaluatorConfig:
    """Settings shared by the resolver and the command line tool."""
    max_depth: int = DEFAULT_MAX_DEPTH
    log_level: str = DEFAULT_LOG_LEVEL

    def __post_init__(self):
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {self.max_depth}")
        level = self.log_level.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"unknown log level {self.log_level!r}; "
                             f"expected one of {', '.join(_LOG_LEVELS)}")
        object.__setattr__(self, "log_level", level)

    @property
    def logging_level(self) -> int:
        """The log level as a `logging` module constant."""
        return getattr(logging, self.log_level)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EvaluatorConfig":
        """Build a config from environment variables; invalid values raise ValueError."""
        if environ is None:
            environ = os.environ
        raw_depth = environ.get('POSEVAL_MAX_DEPTH', str(DEFAULT_MAX_DEPTH))
        try:
            max_depth = int(raw_depth)
        except ValueError:
            raise ValueError(f"POSEVAL_MAX_DEPTH must be an integer, got {raw_depth!r}")
        log_level = environ.get('POSEVAL_LOG_LEVEL', DEFAULT_LOG_LEVEL)
        return cls(max_depth=max_depth, log_level=log_level)


_config: Optional[EvaluatorConfig] = None


def get_config() -> EvaluatorConfig:
    """Get the process-wide config, read from the environment on first use."""
    global _config
    if _config is None:
        _config = EvaluatorConfig.from_env()
    return _config


def reset_config() -> None:
    """Forget the cached config so the next get_config() re-reads the environment."""
    global _config
    _config = None
