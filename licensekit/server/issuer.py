"""
Issuing workflow: key pair, signed license key and API key in one step.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone

from licensekit.common.config import Config
from licensekit.common.models import IssuedLicense, LicenseFields, ToolMetadata
from licensekit.server.keygen import KeyManager, KeyPair
from licensekit.server.license_generator import LicenseGenerator
from licensekit.server.secret_generator import SecretGenerator

logger = logging.getLogger(__name__)

DATE_FORMAT = "%B %d, %Y"


class LicenseIssuer:
    """Issues licenses, filling omitted fields from configured defaults."""

    def __init__(
        self,
        config: Config | None = None,
        key_manager: KeyManager | None = None,
        secret_generator: SecretGenerator | None = None,
    ) -> None:
        self.config = config or Config()
        self.defaults = self.config.license_defaults()
        self.key_manager = key_manager or KeyManager()
        self.secret_generator = secret_generator or SecretGenerator()

    def issue(
        self,
        domain: str | None = None,
        account_limit: int | None = None,
        valid_from: int | None = None,
        valid_to: int | None = None,
        key_pair: KeyPair | None = None,
        now: int | None = None,
    ) -> tuple[IssuedLicense, KeyPair]:
        """Issue a license.

        A new key pair is generated when ``key_pair`` is None. The key pair
        actually used is returned alongside the license so the caller can
        export and persist it.
        """
        if now is None:
            now = int(time.time())
        start, end = self.defaults.resolve_window(valid_from, valid_to, now)
        fields = LicenseFields(
            valid_from=start,
            valid_to=end,
            account_limit=(
                self.defaults.account_limit if account_limit is None else account_limit
            ),
            domain=self.defaults.domain if domain is None else domain,
        )

        if key_pair is None:
            key_pair = self.key_manager.generate()
            logger.info("Generated new signing key pair")

        license_key = LicenseGenerator(key_pair).issue_fields(fields)
        api_key = self.secret_generator.generate(self.config.API_KEY_LENGTH)
        logger.info(
            "Issued license to %s for %s accounts", fields.domain, fields.account_limit
        )
        issued = IssuedLicense(
            license_key=license_key,
            api_key=api_key,
            public_key=KeyManager.export_public(key_pair),
            token_fields=fields,
        )
        return issued, key_pair


def format_timestamp(value: int) -> str:
    try:
        return datetime.fromtimestamp(value, tz=timezone.utc).strftime(DATE_FORMAT)
    except (OverflowError, ValueError, OSError):
        return str(value)


def format_summary(issued: IssuedLicense, metadata: ToolMetadata | None = None) -> str:
    """Human-readable report of an issued license."""
    fields = issued.token_fields
    lines = []
    if metadata is not None:
        lines.append(f"{metadata.name} {metadata.version} ({metadata.author})")
    lines += [
        "License Key",
        issued.license_key,
        "API Key (for auto-renewal)",
        issued.api_key,
        "Issued To",
        fields.domain,
        "Licenses",
        str(fields.account_limit),
        "Validity",
        f"{format_timestamp(fields.valid_from)} to {format_timestamp(fields.valid_to)}",
    ]
    return "\n".join(lines)
