# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Application configuration.
All secrets and tunables are loaded from environment variables (or the
etc/app.conf file).  The signing secret has no default and must be provided.
"""

import re
from datetime import timedelta
from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings

# Project root is two levels up from this file  (backend/core/config.py → project/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent

# extension → MIME types accepted for it
DEFAULT_ALLOWED_FILE_TYPES: dict[str, list[str]] = {
    "jpg": ["image/jpeg"],
    "jpeg": ["image/jpeg"],
    "png": ["image/png"],
    "gif": ["image/gif"],
    "pdf": ["application/pdf"],
    "txt": ["text/plain"],
    "doc": ["application/msword"],
    "docx": ["application/vnd.openxmlformats-officedocument.wordprocessingml.document"],
    "zip": ["application/zip", "application/x-zip-compressed"],
}


class Settings(BaseSettings):
    # JWT signing secret – must be a long, random string
    secret_key: str

    # Token lifetime as a duration string: "24h", "30m", "7d", "90s" or seconds
    token_expires_in: str = "24h"

    # pbkdf2_sha256 work factor
    password_hash_rounds: int = 600_000

    # Upload policy
    max_file_size: int = 5 * 1024 * 1024
    max_files_per_request: int = 5
    allowed_file_types: dict[str, list[str]] = DEFAULT_ALLOWED_FILE_TYPES
    upload_dir: Path = _PROJECT_ROOT / "uploads"

    # Empty → volatile in-memory stores.  Any SQLAlchemy URL switches the
    # users/products/files collections to the SQL backend.
    database_url: str = ""

    # Seeded on start-up when both are set.
    first_admin_email: str = ""
    first_admin_password: str = ""
    first_admin_name: str = "Administrator"

    # Load the demo product catalogue into an empty store on start-up
    seed_demo_products: bool = False

    cors_origins: list[str] = ["http://localhost:8000"]
    api_version: str = "v1"

    model_config = {"env_file": str(_PROJECT_ROOT / "etc" / "app.conf")}

    @property
    def token_lifetime(self) -> timedelta:
        return parse_duration(self.token_expires_in)


_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$", re.IGNORECASE)
_UNIT_SECONDS = {"": 1, "s": 1, "m": 60, "h": 3600, "d": 86400}


def parse_duration(value: str) -> timedelta:
    """
    Parse a compact duration such as ``"24h"`` into a timedelta.

    Raises ``ValueError`` for anything that is not a positive integer
    optionally followed by one of s/m/h/d.
    """
    match = _DURATION_RE.match(str(value))
    if not match:
        raise ValueError(f"Invalid duration: {value!r}")
    amount = int(match.group(1))
    if amount <= 0:
        raise ValueError(f"Duration must be positive: {value!r}")
    return timedelta(seconds=amount * _UNIT_SECONDS[match.group(2).lower()])


@lru_cache
def get_settings() -> Settings:
    """Process-wide settings instance, built on first use."""
    return Settings()
