"""
Threaded verification example.

One LicenseValidator is shared by several worker threads; verification keeps
no mutable state, so no locking is needed.
"""

import logging
import threading
import time

from licensekit import KeyManager, LicenseGenerator, LicenseValidator, TokenError


def worker(validator: LicenseValidator, token: str, worker_id: int) -> None:
    logger = logging.getLogger(f"worker-{worker_id}")
    for _ in range(3):
        try:
            verified = validator.verify(token)
            logger.info("License valid for %s", verified.domain)
        except TokenError as err:
            logger.warning("License rejected: %s", err.kind)
        time.sleep(0.1)


def main() -> None:
    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s - %(name)s - %(message)s"
    )

    key_pair = KeyManager().generate()
    now = int(time.time())
    token = LicenseGenerator(key_pair).issue(now, now + 3600, 10, "example.com")
    validator = LicenseValidator(key_pair.public_key)
    key_pair.destroy()

    threads = [
        threading.Thread(target=worker, args=(validator, token, i)) for i in range(4)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()


if __name__ == "__main__":
    main()
