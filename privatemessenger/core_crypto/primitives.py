"""
Primitive Provider

Names the fixed choice of elliptic curve, symmetric cipher and hash
function, and checks at startup that the cryptography backend provides all
of them. A missing primitive is fatal: nothing else can run without it.

Default suite:
    Curve:  sect571r1 (NIST B-571)
    Cipher: aes-256-ctr
    Hash:   sha256
"""

from dataclasses import dataclass

from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.ciphers import algorithms, modes

from ..config import CURVE_NAME, CIPHER_NAME, HASH_NAME
from ..errors import UnsupportedPrimitiveError


# Supported names -> cryptography class names. Curve classes are resolved
# lazily since a backend build may drop some of them.
CURVES = {
    "sect571r1": "SECT571R1",
    "secp521r1": "SECP521R1",
    "secp384r1": "SECP384R1",
    "secp256r1": "SECP256R1",
    "secp256k1": "SECP256K1",
}

# cipher name -> key size in bytes (all AES in counter mode)
CIPHERS = {
    "aes-128-ctr": 16,
    "aes-192-ctr": 24,
    "aes-256-ctr": 32,
}

HASHES = {
    "sha256": hashes.SHA256,
    "sha384": hashes.SHA384,
    "sha512": hashes.SHA512,
}

CTR_IV_SIZE = 16    # one AES block as the initial counter

# Digest behind the cipher's own key derivation (EVP_BytesToKey)
KEY_DERIVATION_HASH = "md5"


def _unavailable(kind: str, name: str) -> UnsupportedPrimitiveError:
    return UnsupportedPrimitiveError(f"The supplied {kind} ({name}) is not available.")


@dataclass(frozen=True)
class CipherSuite:
    """Immutable curve / cipher / hash selection."""
    curve_name: str = CURVE_NAME
    cipher_name: str = CIPHER_NAME
    hash_name: str = HASH_NAME

    def curve(self) -> ec.EllipticCurve:
        """Instantiate the elliptic curve."""
        class_name = CURVES.get(self.curve_name)
        curve_class = getattr(ec, class_name, None) if class_name else None
        if curve_class is None:
            raise _unavailable("curve", self.curve_name)
        return curve_class()

    @property
    def key_size(self) -> int:
        """Symmetric key size in bytes."""
        if self.cipher_name not in CIPHERS:
            raise _unavailable("cipher", self.cipher_name)
        return CIPHERS[self.cipher_name]

    @property
    def iv_size(self) -> int:
        return CTR_IV_SIZE

    def algorithm(self, key: bytes) -> algorithms.AES:
        return algorithms.AES(key)

    def mode(self, iv: bytes) -> modes.CTR:
        return modes.CTR(iv)

    def hash(self) -> hashes.HashAlgorithm:
        """Instantiate the message digest."""
        if self.hash_name not in HASHES:
            raise _unavailable("hash", self.hash_name)
        return HASHES[self.hash_name]()

    @property
    def signature_length(self) -> int:
        """Length of the hex digest appended by the signature layer."""
        return self.hash().digest_size * 2


DEFAULT_SUITE = CipherSuite()


def verify_primitives(suite: CipherSuite = DEFAULT_SUITE, backend=None) -> CipherSuite:
    """
    Check that every primitive of the suite is usable.

    Args:
        suite: Cipher suite to check
        backend: cryptography backend (defaults to the OpenSSL backend)

    Returns:
        The suite, unchanged, once it has been validated

    Raises:
        UnsupportedPrimitiveError: naming the first missing primitive
    """
    backend = backend or default_backend()

    curve = suite.curve()
    if not backend.elliptic_curve_supported(curve):
        raise _unavailable("curve", suite.curve_name)

    key = b"\x00" * suite.key_size
    iv = b"\x00" * suite.iv_size
    if not backend.cipher_supported(suite.algorithm(key), suite.mode(iv)):
        raise _unavailable("cipher", suite.cipher_name)

    if not backend.hash_supported(suite.hash()):
        raise _unavailable("hash", suite.hash_name)
    if not backend.hash_supported(hashes.MD5()):
        raise _unavailable("hash", KEY_DERIVATION_HASH)

    return suite


def is_supported(suite: CipherSuite = DEFAULT_SUITE, backend=None) -> bool:
    """Return True if verify_primitives() accepts the suite."""
    try:
        verify_primitives(suite, backend)
    except UnsupportedPrimitiveError:
        return False
    return True
