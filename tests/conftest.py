import pytest

from licensekit.server.keygen import KeyManager, KeyPair

# RFC 8032 section 7.1, test 1
RFC8032_SEED = bytes.fromhex(
    "9d61b19deffd5a60ba844af492ec2cc44449c5697b326919703bac031cae7f60"
)
RFC8032_PUBLIC = bytes.fromhex(
    "d75a980182b10ab7d54bfed3c964073a0ee172f3daa62325af021a68f707511a"
)
RFC8032_EMPTY_SIGNATURE = bytes.fromhex(
    "e5564300c360ac729086e2cc806e828a84877f1eb8e5d974d873e065224901555fb8821590a33bac"
    "c61e39701cf9b46bd25bf5f0595bbe24655141438e7a100b"
)

# PKCS#8 v2 framing around a seed and its public key
V2_PREFIX = bytes.fromhex("3053020101300506032b657004220420")
V2_PUBLIC_TAG = bytes.fromhex("a123032100")


def fixed_source(fill: int):
    """Deterministic random source returning ``n`` copies of ``fill``."""

    def source(n: int) -> bytes:
        return bytes([fill]) * n

    return source


def pkcs8_v2(seed: bytes, public: bytes) -> bytes:
    return V2_PREFIX + seed + V2_PUBLIC_TAG + public


@pytest.fixture
def key_pair() -> KeyPair:
    return KeyManager(random_source=fixed_source(7)).generate()


@pytest.fixture
def other_key_pair() -> KeyPair:
    return KeyManager(random_source=fixed_source(9)).generate()


@pytest.fixture
def rfc8032_key_pair() -> KeyPair:
    return KeyManager(random_source=lambda n: RFC8032_SEED[:n]).generate()
