"""
Pydantic models for license fields, issued artifacts and tool metadata.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

U32_MAX = 2**32 - 1
U64_MAX = 2**64 - 1


class LicenseFields(BaseModel):
    """Fields carried by a license token, before signing."""

    model_config = ConfigDict(frozen=True)

    valid_from: int = Field(ge=0, le=U64_MAX)
    valid_to: int = Field(ge=0, le=U64_MAX)
    account_limit: int = Field(ge=0, le=U32_MAX)
    domain: str

    @field_validator("domain")
    @classmethod
    def _domain_fits_length_prefix(cls, value: str) -> str:
        if len(value.encode("utf-8")) > U32_MAX:
            msg = "domain is too long to encode"
            raise ValueError(msg)
        return value


class VerifiedToken(LicenseFields):
    """Fields of a token whose signature and validity window were checked."""


class LicenseDefaults(BaseModel):
    """Values used when the caller does not supply a field."""

    model_config = ConfigDict(frozen=True)

    domain: str = Field(
        default="example.com", description="Domain the license is issued to"
    )
    account_limit: int = Field(
        default=100, ge=0, le=U32_MAX, description="Number of accounts"
    )
    validity_seconds: int = Field(
        default=5 * 365 * 24 * 60 * 60,
        ge=0,
        description="Span added to valid_from when valid_to is omitted",
    )

    def resolve_window(
        self, valid_from: int | None, valid_to: int | None, now: int
    ) -> tuple[int, int]:
        """Fill in a missing validity bound."""
        start = now if valid_from is None else valid_from
        end = start + self.validity_seconds if valid_to is None else valid_to
        return start, end


class IssuedLicense(BaseModel):
    model_config = ConfigDict(frozen=True)

    license_key: str
    api_key: str
    public_key: bytes
    token_fields: LicenseFields


class ToolMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    version: str
    author: str
