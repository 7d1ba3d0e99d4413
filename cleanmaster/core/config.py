"""
Configuration helpers for the CleanMaster records store.

Settings are read once from environment variables so that the store and the
services never fetch os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
import os

REFERENCE_POLICY_KEEP = "keep"
REFERENCE_POLICY_CASCADE = "cascade"
REFERENCE_POLICIES = {REFERENCE_POLICY_KEEP, REFERENCE_POLICY_CASCADE}

DEFAULT_DATA_FILE = Path(__file__).resolve().parents[2] / "data.json"


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    data_file: Path
    database_url: str
    reference_policy: str
    log_level: str
    log_file: str


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _choice(value: str | None, allowed: set[str], default: str) -> str:
        normalized = (value or "").strip().lower()
        return normalized if normalized in allowed else default

    data_file = (os.getenv("CLEANMASTER_DATA_FILE") or "").strip()
    return Settings(
        data_file=Path(data_file).expanduser() if data_file else DEFAULT_DATA_FILE,
        database_url=(os.getenv("DATABASE_URL") or "").strip(),
        reference_policy=_choice(
            os.getenv("CLEANMASTER_REFERENCE_POLICY"), REFERENCE_POLICIES, REFERENCE_POLICY_KEEP
        ),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        log_file=(os.getenv("LOG_FILE") or "").strip(),
    )
