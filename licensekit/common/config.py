"""
Configuration settings for the license issuing tool.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from licensekit.common.models import LicenseDefaults, ToolMetadata

VERSION = "1.3.0"
AUTHOR = "Stalwart Labs Ltd <hello@stalw.art>"

METADATA = ToolMetadata(name="licensekit", version=VERSION, author=AUTHOR)


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError as err:
        msg = f"{name} must be an integer, got {raw!r}"
        raise ValueError(msg) from err


class Config:
    """Central configuration class for all system settings."""

    def __init__(self) -> None:
        # License defaults
        self.DEFAULT_DOMAIN: str = os.getenv("LICENSEKIT_DOMAIN", "example.com")
        self.DEFAULT_ACCOUNT_LIMIT: int = _env_int("LICENSEKIT_ACCOUNTS", 100)
        self.DEFAULT_VALIDITY_SECONDS: int = _env_int(
            "LICENSEKIT_VALIDITY_SECONDS", 5 * 365 * 24 * 60 * 60
        )  # 5 years
        self.API_KEY_LENGTH: int = 32

        # File paths
        self.set_dirs(
            keys_dir=Path(os.getenv("LICENSEKIT_KEYS_DIR", ".")),
            output_dir=Path(os.getenv("LICENSEKIT_OUTPUT_DIR", ".")),
        )

        # Logging
        level_name = os.getenv("LICENSEKIT_LOG_LEVEL", "INFO").upper()
        level = logging.getLevelName(level_name)
        if not isinstance(level, int):
            msg = f"Unknown log level: {level_name}"
            raise ValueError(msg)
        self.LOG_LEVEL: int = level

        self.METADATA: ToolMetadata = METADATA

    def set_dirs(
        self, keys_dir: Path | None = None, output_dir: Path | None = None
    ) -> None:
        """Point the artifact paths at new directories."""
        if keys_dir is not None:
            self.KEYS_DIR: Path = keys_dir
            self.PRIVATE_KEY_PATH: Path = keys_dir / "private_key.pkcs8"
            self.PUBLIC_KEY_PATH: Path = keys_dir / "public_key.txt"
        if output_dir is not None:
            self.OUTPUT_DIR: Path = output_dir
            self.LICENSE_KEY_PATH: Path = output_dir / "license_key.txt"
            self.API_KEY_PATH: Path = output_dir / "api_key.txt"

    def license_defaults(self) -> LicenseDefaults:
        """Build the defaults applied to fields the caller leaves out."""
        return LicenseDefaults(
            domain=self.DEFAULT_DOMAIN,
            account_limit=self.DEFAULT_ACCOUNT_LIMIT,
            validity_seconds=self.DEFAULT_VALIDITY_SECONDS,
        )
