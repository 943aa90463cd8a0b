"""
Command-line interface for licensekit.
"""

from __future__ import annotations

import logging
from pathlib import Path

import click

from licensekit.common.config import METADATA, Config
from licensekit.common.exceptions import (
    CryptoError,
    LicenseFileError,
    MalformedTokenError,
    SignatureInvalidError,
    TokenError,
    TokenExpiredError,
    TokenNotYetValidError,
)
from licensekit.common.logging_utils import setup_logger
from licensekit.common.models import U32_MAX, U64_MAX
from licensekit.server.issuer import LicenseIssuer, format_summary, format_timestamp
from licensekit.server.keygen import KeyManager, KeyPair
from licensekit.server.license_validator import LicenseValidator
from licensekit.server.persistence import LicenseFiles
from licensekit.server.secret_generator import SecretGenerator

EXIT_CODES: dict[type[TokenError], int] = {
    MalformedTokenError: 2,
    SignatureInvalidError: 3,
    TokenExpiredError: 4,
    TokenNotYetValidError: 5,
}

MESSAGES: dict[type[TokenError], str] = {
    MalformedTokenError: "This license is corrupt",
    SignatureInvalidError: "This license was not issued by the trusted key",
    TokenExpiredError: "This license has expired",
    TokenNotYetValidError: "This license is not valid yet",
}


class TokenRejected(click.ClickException):
    """Verification failure carrying a per-kind exit code."""

    def __init__(self, err: TokenError) -> None:
        super().__init__(f"{MESSAGES.get(type(err), 'Invalid license')}: {err}")
        self.exit_code = EXIT_CODES.get(type(err), 1)


def _load_config() -> Config:
    try:
        return Config()
    except ValueError as err:
        msg = f"Invalid configuration: {err}"
        raise click.ClickException(msg) from err


def _config(keys_dir: str | None, output_dir: str | None = None) -> Config:
    config = _load_config()
    config.set_dirs(
        keys_dir=Path(keys_dir) if keys_dir else None,
        output_dir=Path(output_dir) if output_dir else None,
    )
    return config


def _save_key_pair(config: Config, key_pair: KeyPair) -> None:
    LicenseFiles.write_bytes(
        config.PRIVATE_KEY_PATH, KeyManager.export_private(key_pair)
    )
    LicenseFiles.write_bytes(config.PUBLIC_KEY_PATH, KeyManager.export_public(key_pair))


@click.group()
@click.version_option(METADATA.version, prog_name=METADATA.name)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:  # noqa: FBT001
    """Issue and verify signed license keys"""
    level = logging.DEBUG if verbose else _load_config().LOG_LEVEL
    setup_logger(logging.getLogger("licensekit"), level)


@cli.command()
@click.option(
    "--keys-dir",
    default=None,
    help="Directory to save keys (default: from LICENSEKIT_KEYS_DIR env or .)",
)
def keygen(keys_dir: str | None) -> None:
    """Generate an Ed25519 signing key pair"""
    config = _config(keys_dir)
    try:
        with KeyManager().generate() as key_pair:
            _save_key_pair(config, key_pair)
            public_key = KeyManager.export_public(key_pair)
    except (CryptoError, LicenseFileError) as err:
        raise click.ClickException(str(err)) from err

    click.echo("Keys generated and saved")
    click.echo("Replace the public key in your code with the following:")
    click.echo(str(list(public_key)))


@cli.command()
@click.option(
    "--no-keys",
    is_flag=True,
    help="Do not generate new keys, load the existing private key",
)
@click.option("--keys-dir", default=None, help="Directory holding the key files")
@click.option("--output-dir", default=None, help="Directory for license and API key")
@click.option("--domain", default=None, help="Domain for the license")
@click.option(
    "--accounts",
    default=None,
    type=click.IntRange(0, U32_MAX),
    help="Number of accounts",
)
@click.option(
    "--valid-from",
    default=None,
    type=click.IntRange(0, U64_MAX),
    help="License valid from timestamp (default: current time)",
)
@click.option(
    "--valid-to",
    default=None,
    type=click.IntRange(0, U64_MAX),
    help="License valid to timestamp (default: 5 years from valid-from)",
)
def issue(  # noqa: PLR0913
    no_keys: bool,  # noqa: FBT001
    keys_dir: str | None,
    output_dir: str | None,
    domain: str | None,
    accounts: int | None,
    valid_from: int | None,
    valid_to: int | None,
) -> None:
    """Issue a signed license key and API key"""
    config = _config(keys_dir, output_dir)
    try:
        issuer = LicenseIssuer(config=config)
    except ValueError as err:
        msg = f"Invalid configuration: {err}"
        raise click.ClickException(msg) from err

    try:
        key_pair = None
        if no_keys:
            key_pair = KeyManager.load(LicenseFiles.read_bytes(config.PRIVATE_KEY_PATH))

        issued, key_pair = issuer.issue(
            domain=domain,
            account_limit=accounts,
            valid_from=valid_from,
            valid_to=valid_to,
            key_pair=key_pair,
        )
        with key_pair:
            if not no_keys:
                _save_key_pair(config, key_pair)
                click.echo("Replace the public key in your code with the following:")
                click.echo(str(list(issued.public_key)))

        LicenseFiles.write_text(config.LICENSE_KEY_PATH, issued.license_key)
        LicenseFiles.write_text(config.API_KEY_PATH, issued.api_key)
    except (CryptoError, LicenseFileError, ValueError) as err:
        raise click.ClickException(str(err)) from err

    click.echo(format_summary(issued, METADATA))


@cli.command()
@click.argument("token", required=False)
@click.option(
    "--token-file",
    default=None,
    type=click.Path(dir_okay=False),
    help="Read the license key from a file",
)
@click.option(
    "--public-key",
    "public_key_path",
    default=None,
    type=click.Path(dir_okay=False),
    help="Public key file (default: <keys-dir>/public_key.txt)",
)
@click.option("--keys-dir", default=None, help="Directory holding the key files")
@click.option(
    "--now",
    default=None,
    type=click.IntRange(0, U64_MAX),
    help="Check validity at this timestamp instead of the current time",
)
def verify(
    token: str | None,
    token_file: str | None,
    public_key_path: str | None,
    keys_dir: str | None,
    now: int | None,
) -> None:
    """Verify a license key against a public key"""
    if (token is None) == (token_file is None):
        msg = "Provide either TOKEN or --token-file"
        raise click.UsageError(msg)

    config = _config(keys_dir)
    try:
        if token_file is not None:
            token = LicenseFiles.read_text(Path(token_file))
        key_path = Path(public_key_path) if public_key_path else config.PUBLIC_KEY_PATH
        validator = LicenseValidator(LicenseFiles.read_bytes(key_path))
    except (CryptoError, LicenseFileError) as err:
        raise click.ClickException(str(err)) from err

    try:
        verified = validator.verify(token, now=now)
    except TokenError as err:
        raise TokenRejected(err) from err

    click.echo("License is valid")
    click.echo(f"Issued To: {verified.domain}")
    click.echo(f"Licenses: {verified.account_limit}")
    click.echo(
        f"Validity: {format_timestamp(verified.valid_from)} to "
        f"{format_timestamp(verified.valid_to)}"
    )


@cli.command()
@click.option(
    "--length",
    default=32,
    show_default=True,
    type=click.IntRange(min=1),
    help="Number of characters",
)
def apikey(length: int) -> None:
    """Generate a random API key"""
    click.echo(SecretGenerator().generate(length))


if __name__ == "__main__":
    cli()
