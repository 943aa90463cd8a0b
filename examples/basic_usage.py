"""
Basic usage example of licensekit.

This example generates a key pair, issues a license, and verifies it the way
a product holding only the public key would.
"""

import logging
import sys
import time

from licensekit import (
    KeyManager,
    LicenseGenerator,
    LicenseValidator,
    SecretGenerator,
    TokenError,
)


def main() -> None:
    # Configure logging
    logging.basicConfig(level=logging.INFO)
    logger = logging.getLogger(__name__)

    with KeyManager().generate() as key_pair:
        public_key = KeyManager.export_public(key_pair)
        now = int(time.time())
        token = LicenseGenerator(key_pair).issue(
            valid_from=now,
            valid_to=now + 365 * 24 * 60 * 60,
            account_limit=100,
            domain="example.com",
        )
    api_key = SecretGenerator().generate()

    logger.info("License key: %s", token)
    logger.info("API key: %s", api_key)

    # Verifier side: only the public key is available
    try:
        verified = LicenseValidator(public_key).verify(token)
    except TokenError as err:
        logger.error("License rejected (%s): %s", err.kind, err)
        sys.exit(1)

    logger.info(
        "License valid for %s, %s accounts", verified.domain, verified.account_limit
    )


if __name__ == "__main__":
    main()
