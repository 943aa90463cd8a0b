# Common utilities
from licensekit.common.codec import TokenCodec as TokenCodec
from licensekit.common.crypto import CryptoUtils as CryptoUtils
from licensekit.common.logging_utils import setup_logger as setup_logger

__all__ = ["CryptoUtils", "TokenCodec", "setup_logger"]
