"""
Reading and writing license artifacts.
"""

from __future__ import annotations

import logging
from pathlib import Path  # noqa: TC003

from licensekit.common.exceptions import LicenseFileError

logger = logging.getLogger(__name__)


class LicenseFiles:
    """Handles loading and saving the issued artifacts."""

    @staticmethod
    def write_bytes(file_path: Path, data: bytes) -> None:
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            with file_path.open("wb") as f:
                f.write(data)
        except OSError as err:
            msg = f"Failed to write {file_path}: {err}"
            raise LicenseFileError(msg, file_path) from err
        logger.debug("Wrote %s", file_path)

    @staticmethod
    def read_bytes(file_path: Path) -> bytes:
        try:
            with file_path.open("rb") as f:
                return f.read()
        except FileNotFoundError as err:
            msg = f"{file_path} not found"
            raise LicenseFileError(msg, file_path) from err
        except OSError as err:
            msg = f"Failed to read {file_path}: {err}"
            raise LicenseFileError(msg, file_path) from err

    @staticmethod
    def write_text(file_path: Path, text: str) -> None:
        LicenseFiles.write_bytes(file_path, text.encode("utf-8"))

    @staticmethod
    def read_text(file_path: Path) -> str:
        data = LicenseFiles.read_bytes(file_path)
        try:
            return data.decode("utf-8").strip()
        except UnicodeDecodeError as err:
            msg = f"{file_path} is not valid UTF-8 text"
            raise LicenseFileError(msg, file_path) from err
