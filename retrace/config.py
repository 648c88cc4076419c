"""
Configuration - Environment-driven settings.

    RETRACE_ENV             development | production (default: development)
    RETRACE_RECORDING_DIR   Where recordings are stored (default: ~/.retrace/recordings)
    RETRACE_LOG_LEVEL       Log level for the CLI (default: WARNING)
"""

from __future__ import annotations
import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_RECORDING_DIR = Path.home() / ".retrace" / "recordings"
LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True)
class Settings:
    env: str = "development"
    recording_dir: Path = DEFAULT_RECORDING_DIR
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> Settings:
        """Read settings from the process environment."""
        log_level = os.getenv("RETRACE_LOG_LEVEL", "WARNING").upper()
        if log_level not in LOG_LEVELS:
            raise ValueError(
                f"RETRACE_LOG_LEVEL must be one of {', '.join(sorted(LOG_LEVELS))}"
            )
        recording_dir = os.getenv("RETRACE_RECORDING_DIR")
        return cls(
            env=os.getenv("RETRACE_ENV", "development"),
            recording_dir=Path(recording_dir).expanduser() if recording_dir else DEFAULT_RECORDING_DIR,
            log_level=log_level,
        )
