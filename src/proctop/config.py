"""Pydantic-validated runtime settings.

Settings come from command-line flags only; there is no config file.
"""

import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from proctop.monitor import DEFAULT_MEMINFO_PATH, DEFAULT_PROC_ROOT

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class Settings(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    refresh_interval_ms: int = 3000
    input_poll_ms: int = 100
    proc_root: Path = DEFAULT_PROC_ROOT
    meminfo_path: Path = DEFAULT_MEMINFO_PATH
    enable_kill: bool = True
    log_file: Path | None = None
    log_level: str = "WARNING"

    @field_validator("refresh_interval_ms")
    @classmethod
    def _check_refresh_interval(cls, v: int) -> int:
        if v < 100 or v > 60_000:
            msg = "refresh_interval_ms must be between 100 and 60000"
            raise ValueError(msg)
        return v

    @field_validator("input_poll_ms")
    @classmethod
    def _check_input_poll(cls, v: int) -> int:
        if v < 10:
            msg = "input_poll_ms must be at least 10"
            raise ValueError(msg)
        return v

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in _LOG_LEVELS:
            msg = f"log_level must be one of {', '.join(_LOG_LEVELS)}"
            raise ValueError(msg)
        return level

    @model_validator(mode="after")
    def _check_poll_within_refresh(self) -> "Settings":
        # Time-based refresh must never be starved by a long input wait
        if self.input_poll_ms > self.refresh_interval_ms:
            msg = "input_poll_ms must not exceed refresh_interval_ms"
            raise ValueError(msg)
        return self

    @property
    def numeric_log_level(self) -> int:
        return getattr(logging, self.log_level)
