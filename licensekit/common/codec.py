"""
Canonical binary encoding of license token fields.

Layout, little-endian, no separators::

    valid_from     8 bytes
    valid_to       8 bytes
    account_limit  4 bytes
    domain_len     4 bytes
    domain         domain_len bytes (UTF-8)

The codec knows nothing about signatures; it only handles the field region.
"""

from __future__ import annotations

from licensekit.common.exceptions import MalformedTokenError
from licensekit.common.models import LicenseFields

_FIELD_WIDTHS = (8, 8, 4, 4)  # valid_from, valid_to, account_limit, domain_len


class TokenCodec:
    """Bidirectional mapping between LicenseFields and canonical bytes."""

    HEADER_LEN = sum(_FIELD_WIDTHS)  # 24

    @staticmethod
    def encode(
        valid_from: int, valid_to: int, account_limit: int, domain: str
    ) -> bytes:
        """Encode raw field values; ranges are validated by LicenseFields."""
        fields = LicenseFields(
            valid_from=valid_from,
            valid_to=valid_to,
            account_limit=account_limit,
            domain=domain,
        )
        return TokenCodec.encode_fields(fields)

    @staticmethod
    def encode_fields(fields: LicenseFields) -> bytes:
        if fields.valid_from > fields.valid_to:
            msg = (
                f"valid_from ({fields.valid_from}) is after "
                f"valid_to ({fields.valid_to})"
            )
            raise ValueError(msg)
        domain = fields.domain.encode("utf-8")
        values = (fields.valid_from, fields.valid_to, fields.account_limit, len(domain))
        header = b"".join(
            value.to_bytes(width, "little")
            for value, width in zip(values, _FIELD_WIDTHS, strict=True)
        )
        return header + domain

    @staticmethod
    def decode(data: bytes) -> LicenseFields:
        """Decode canonical bytes. Raises MalformedTokenError on bad input."""
        header_len = TokenCodec.HEADER_LEN
        if len(data) < header_len:
            msg = f"field region is {len(data)} bytes, need at least {header_len}"
            raise MalformedTokenError(msg)

        values = []
        offset = 0
        for width in _FIELD_WIDTHS:
            values.append(int.from_bytes(data[offset : offset + width], "little"))
            offset += width
        valid_from, valid_to, account_limit, domain_len = values
        domain_bytes = data[header_len:]
        if domain_len != len(domain_bytes):
            msg = (
                f"declared domain length {domain_len} does not match "
                f"{len(domain_bytes)} remaining bytes"
            )
            raise MalformedTokenError(msg)

        try:
            domain = domain_bytes.decode("utf-8")
        except UnicodeDecodeError as err:
            msg = "domain is not valid UTF-8"
            raise MalformedTokenError(msg) from err

        return LicenseFields(
            valid_from=valid_from,
            valid_to=valid_to,
            account_limit=account_limit,
            domain=domain,
        )
