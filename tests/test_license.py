import base64
import threading

import pytest
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey

from licensekit.common.codec import TokenCodec
from licensekit.common.crypto import CryptoUtils
from licensekit.common.exceptions import (
    MalformedTokenError,
    SignatureInvalidError,
    SigningError,
    TokenError,
    TokenExpiredError,
    TokenNotYetValidError,
)
from licensekit.common.models import LicenseFields, VerifiedToken
from licensekit.server.keygen import KeyManager, KeyPair
from licensekit.server.license_generator import LicenseGenerator
from licensekit.server.license_validator import LicenseValidator

from .conftest import RFC8032_EMPTY_SIGNATURE, RFC8032_PUBLIC, fixed_source

VALID_FROM = 1700000000
VALID_TO = 1857680000
ACCOUNTS = 100
DOMAIN = "example.com"

CANONICAL_HEX = (
    "00f1536500000000"  # valid_from
    "80f2b96e00000000"  # valid_to
    "64000000"  # account_limit
    "0b000000"  # domain_len
    "6578616d706c652e636f6d"  # example.com
)
# base64 of the first 33 canonical bytes
WIRE_PREFIX = "APFTZQAAAACA8rluAAAAAGQAAAALAAAAZXhhbXBsZS5j"


@pytest.fixture
def token(key_pair: KeyPair) -> str:
    return LicenseGenerator(key_pair).issue(VALID_FROM, VALID_TO, ACCOUNTS, DOMAIN)


@pytest.fixture
def validator(key_pair: KeyPair) -> LicenseValidator:
    return LicenseValidator(key_pair.public_key)


def test_issue_and_verify(token: str, validator: LicenseValidator) -> None:
    """Test issuing a token and verifying it."""
    verified = validator.verify(token, now=1700000500)

    assert isinstance(verified, VerifiedToken)
    assert verified.valid_from == VALID_FROM
    assert verified.valid_to == VALID_TO
    assert verified.account_limit == ACCOUNTS
    assert verified.domain == DOMAIN


def test_wire_format(token: str, key_pair: KeyPair) -> None:
    """Test the decoded wire layout of an issued token."""
    raw = base64.b64decode(token, validate=True)

    assert len(raw) == 35 + CryptoUtils.SIGNATURE_LEN
    canonical, signature = raw[:35], raw[35:]
    assert int.from_bytes(canonical[:8], "little") == VALID_FROM
    assert canonical[24:] == DOMAIN.encode()
    key_pair.public_key.verify(signature, canonical)


def test_signature_is_reproducible(token: str) -> None:
    """Test that the same key and fields give the same token."""
    same_key = KeyManager(random_source=fixed_source(7)).generate()
    again = LicenseGenerator(same_key).issue(VALID_FROM, VALID_TO, ACCOUNTS, DOMAIN)
    assert again == token


def test_known_answer_canonical_bytes() -> None:
    """Test the canonical field bytes against a pinned encoding."""
    canonical = TokenCodec.encode(VALID_FROM, VALID_TO, ACCOUNTS, DOMAIN)
    assert canonical.hex() == CANONICAL_HEX


def test_known_answer_signature(rfc8032_key_pair: KeyPair) -> None:
    """Test signing against the RFC 8032 empty-message vector."""
    signature = LicenseGenerator(rfc8032_key_pair).sign(b"")
    assert signature == RFC8032_EMPTY_SIGNATURE


def test_known_answer_token(rfc8032_key_pair: KeyPair) -> None:
    """Test the wire token issued under the RFC 8032 key."""
    generator = LicenseGenerator(rfc8032_key_pair)
    token = generator.issue(VALID_FROM, VALID_TO, ACCOUNTS, DOMAIN)
    raw = base64.b64decode(token, validate=True)
    canonical = bytes.fromhex(CANONICAL_HEX)

    assert token.startswith(WIRE_PREFIX)
    assert len(token) == 132  # noqa: PLR2004
    assert raw[:35] == canonical
    assert raw[35:] == generator.sign(canonical)
    Ed25519PublicKey.from_public_bytes(RFC8032_PUBLIC).verify(raw[35:], canonical)
    assert LicenseValidator(RFC8032_PUBLIC).verify(token, now=VALID_FROM).domain == (
        DOMAIN
    )


def test_sign_covers_exact_bytes(key_pair: KeyPair) -> None:
    """Test signing raw bytes."""
    generator = LicenseGenerator(key_pair)
    signature = generator.sign(b"payload")
    assert len(signature) == CryptoUtils.SIGNATURE_LEN
    key_pair.public_key.verify(signature, b"payload")


def test_issue_fields_matches_issue(key_pair: KeyPair, token: str) -> None:
    """Test issue_fields against issue."""
    fields = LicenseFields(
        valid_from=VALID_FROM, valid_to=VALID_TO, account_limit=ACCOUNTS, domain=DOMAIN
    )
    assert LicenseGenerator(key_pair).issue_fields(fields) == token


def test_validator_accepts_raw_public_key(token: str, key_pair: KeyPair) -> None:
    """Test a validator built from raw public key bytes."""
    validator = LicenseValidator(KeyManager.export_public(key_pair))
    assert validator.verify(token, now=VALID_FROM).domain == DOMAIN


@pytest.mark.parametrize("now", [VALID_FROM, VALID_TO])
def test_window_bounds_are_inclusive(
    token: str, validator: LicenseValidator, now: int
) -> None:
    """Test both window bounds are accepted."""
    assert validator.verify(token, now=now).account_limit == ACCOUNTS


def test_not_yet_valid(token: str, validator: LicenseValidator) -> None:
    """Test verification before valid_from."""
    with pytest.raises(TokenNotYetValidError) as exc_info:
        validator.verify(token, now=VALID_FROM - 1)
    assert exc_info.value.kind == "not_yet_valid"


def test_expired(token: str, validator: LicenseValidator) -> None:
    """Test verification after valid_to."""
    with pytest.raises(TokenExpiredError) as exc_info:
        validator.verify(token, now=VALID_TO + 1)
    assert exc_info.value.kind == "expired"


def test_default_now_uses_current_time(key_pair: KeyPair) -> None:
    """Test verification against the current time."""
    old = LicenseGenerator(key_pair).issue(0, 1, 1, DOMAIN)
    with pytest.raises(TokenExpiredError):
        LicenseValidator(key_pair.public_key).verify(old)


def test_cross_key_rejection(token: str, other_key_pair: KeyPair) -> None:
    """Test a token checked against another key."""
    with pytest.raises(SignatureInvalidError):
        LicenseValidator(other_key_pair.public_key).verify(token, now=VALID_FROM)


def test_signature_checked_before_window(
    token: str, other_key_pair: KeyPair
) -> None:
    """Test that a forged token is never reported as expired."""
    # An expired forgery is reported as forged, not as expired.
    with pytest.raises(SignatureInvalidError):
        LicenseValidator(other_key_pair.public_key).verify(token, now=VALID_TO + 1)


def test_every_single_bit_flip_is_rejected(
    token: str, validator: LicenseValidator
) -> None:
    """Test that flipping any bit invalidates the token."""
    raw = base64.b64decode(token)
    for index in range(len(raw)):
        for bit in range(8):
            mutated = bytearray(raw)
            mutated[index] ^= 1 << bit
            wire = base64.b64encode(bytes(mutated)).decode()

            if 20 <= index < 24:  # noqa: PLR2004
                expected: type[TokenError] = MalformedTokenError
            elif 24 <= index < 35 and bit == 7:  # noqa: PLR2004
                expected = MalformedTokenError
            else:
                expected = SignatureInvalidError

            with pytest.raises(expected):
                validator.verify(wire, now=VALID_FROM)


def test_every_base64_character_mutation_is_rejected(
    token: str, validator: LicenseValidator
) -> None:
    """Test that changing any character invalidates the token."""
    for index, char in enumerate(token):
        if char == "=":
            continue
        replacement = "A" if char != "A" else "B"
        mutated = token[:index] + replacement + token[index + 1 :]
        with pytest.raises((SignatureInvalidError, MalformedTokenError)):
            validator.verify(mutated, now=VALID_FROM)


@pytest.mark.parametrize(
    "wire",
    ["", "not base64!", "QUJD", "QUJ", "Zm9v\x00", "ünïcödé"],
)
def test_malformed_tokens(validator: LicenseValidator, wire: str) -> None:
    """Test tokens that are not valid base64."""
    with pytest.raises(MalformedTokenError):
        validator.verify(wire, now=VALID_FROM)


def test_token_shorter_than_signature(validator: LicenseValidator) -> None:
    """Test a token too short to hold a signature."""
    wire = base64.b64encode(b"\x00" * (CryptoUtils.SIGNATURE_LEN - 1)).decode()
    with pytest.raises(MalformedTokenError, match="shorter"):
        validator.verify(wire, now=VALID_FROM)


def test_truncated_field_region(token: str, validator: LicenseValidator) -> None:
    """Test a signed but truncated field region."""
    raw = base64.b64decode(token)
    wire = base64.b64encode(raw[10:]).decode()
    with pytest.raises(MalformedTokenError):
        validator.verify(wire, now=VALID_FROM)


def test_surrounding_whitespace_is_ignored(
    token: str, validator: LicenseValidator
) -> None:
    """Test a token with a trailing newline."""
    assert validator.verify(f"  {token}\n", now=VALID_FROM).domain == DOMAIN
    assert validator.verify(token.encode(), now=VALID_FROM).domain == DOMAIN


def test_destroyed_key_cannot_sign(key_pair: KeyPair) -> None:
    """Test signing with a destroyed key pair."""
    generator = LicenseGenerator(key_pair)
    key_pair.destroy()
    with pytest.raises(SigningError):
        generator.issue(VALID_FROM, VALID_TO, ACCOUNTS, DOMAIN)


def test_inverted_window_is_not_issued(key_pair: KeyPair) -> None:
    """Test issuing with valid_from after valid_to."""
    with pytest.raises(ValueError, match="valid_from"):
        LicenseGenerator(key_pair).issue(VALID_TO, VALID_FROM, ACCOUNTS, DOMAIN)


def test_concurrent_verification(token: str, validator: LicenseValidator) -> None:
    """Test one validator shared across threads."""
    results: list[VerifiedToken] = []
    errors: list[Exception] = []

    def worker() -> None:
        try:
            for _ in range(50):
                results.append(validator.verify(token, now=VALID_FROM))
        except Exception as err:  # noqa: BLE001
            errors.append(err)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert not errors
    assert len(results) == 400  # noqa: PLR2004
    assert all(result.domain == DOMAIN for result in results)
