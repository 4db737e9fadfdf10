"""
Key Agreement Module

Static-key Elliptic Curve Diffie-Hellman:
- Key pair generation on the suite's curve
- Private scalar import/export (raw bytes or hex text)
- Public point export (X9.62 uncompressed point)
- Shared secret computation, including self-agreement

Self-agreement (own private scalar with own public point) yields a secret
only the key owner can reconstruct, which is how messages are encrypted
"to self" when no peer key is given.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

from ..core_crypto.primitives import CipherSuite, DEFAULT_SUITE
from ..errors import InvalidKeyError


class KeyEncoding(Enum):
    """How key material is passed in or out."""
    RAW = "raw"     # bytes
    HEX = "hex"     # lowercase hex text


KeyData = Union[bytes, str]


@dataclass
class KeyPair:
    """ECDH key pair container."""
    private_key: ec.EllipticCurvePrivateKey = field(repr=False)
    public_key: ec.EllipticCurvePublicKey
    suite: CipherSuite = DEFAULT_SUITE

    @classmethod
    def generate(cls, suite: CipherSuite = DEFAULT_SUITE) -> 'KeyPair':
        """Generate a new random key pair on the suite's curve."""
        private_key = ec.generate_private_key(suite.curve())
        return cls(private_key, private_key.public_key(), suite)

    @classmethod
    def from_private_value(cls, value: int,
                           suite: CipherSuite = DEFAULT_SUITE) -> 'KeyPair':
        """Rebuild a key pair from its private scalar."""
        private_key = ec.derive_private_key(value, suite.curve())
        return cls(private_key, private_key.public_key(), suite)

    @property
    def scalar_size(self) -> int:
        """Byte length of an exported private scalar."""
        return (self.private_key.curve.key_size + 7) // 8

    def public_bytes(self) -> bytes:
        """Get public key as bytes (uncompressed point)."""
        return self.public_key.public_bytes(
            encoding=serialization.Encoding.X962,
            format=serialization.PublicFormat.UncompressedPoint
        )

    def private_bytes(self) -> bytes:
        """Get the private scalar as fixed-length big-endian bytes."""
        value = self.private_key.private_numbers().private_value
        return value.to_bytes(self.scalar_size, "big")


def _encode(data: bytes, encoding: KeyEncoding) -> KeyData:
    return data.hex() if encoding is KeyEncoding.HEX else data


def _decode(data: KeyData, encoding: KeyEncoding, what: str) -> bytes:
    """Turn raw or hex key material into bytes, or raise InvalidKeyError."""
    if encoding is KeyEncoding.HEX:
        if not isinstance(data, str):
            raise InvalidKeyError(f"Hex-encoded {what} must be text.")
        try:
            return bytes.fromhex(data.strip())
        except ValueError as exc:
            raise InvalidKeyError(f"The {what} is not valid hex.") from exc

    if not isinstance(data, (bytes, bytearray)):
        raise InvalidKeyError(f"Raw {what} must be bytes.")
    return bytes(data)


# ============================================================================
# Key Pair Lifecycle
# ============================================================================

def generate(suite: CipherSuite = DEFAULT_SUITE) -> KeyPair:
    """Produce a fresh random key pair."""
    return KeyPair.generate(suite)


def restore(encoded_private_key: KeyData,
            encoding: KeyEncoding = KeyEncoding.HEX,
            suite: CipherSuite = DEFAULT_SUITE) -> KeyPair:
    """
    Reconstruct a key pair from an exported private scalar.

    Args:
        encoded_private_key: Big-endian scalar, raw or hex
        encoding: Encoding of encoded_private_key
        suite: Cipher suite whose curve the key belongs to

    Returns:
        KeyPair with the public point recomputed from the scalar

    Raises:
        InvalidKeyError: If the encoding cannot be parsed or the scalar is
            not a valid private key on the curve
    """
    raw = _decode(encoded_private_key, encoding, "private key")
    if not raw:
        raise InvalidKeyError("The private key is empty.")

    curve = suite.curve()
    value = int.from_bytes(raw, "big")
    if value <= 0 or value.bit_length() > curve.key_size:
        raise InvalidKeyError(
            f"The private key is out of range for curve {suite.curve_name}."
        )

    try:
        return KeyPair.from_private_value(value, suite)
    except ValueError as exc:
        raise InvalidKeyError(
            f"The private key is not valid for curve {suite.curve_name}."
        ) from exc


def export_public(key_pair: KeyPair,
                  encoding: KeyEncoding = KeyEncoding.HEX) -> KeyData:
    """Return the public point in uncompressed format, raw or hex."""
    return _encode(key_pair.public_bytes(), encoding)


def export_private(key_pair: KeyPair,
                   encoding: KeyEncoding = KeyEncoding.HEX) -> KeyData:
    """Return the private scalar, raw or hex."""
    return _encode(key_pair.private_bytes(), encoding)


# ============================================================================
# Shared Secret
# ============================================================================

def load_public(peer_public_key: KeyData,
                encoding: KeyEncoding = KeyEncoding.HEX,
                suite: CipherSuite = DEFAULT_SUITE) -> ec.EllipticCurvePublicKey:
    """
    Decode a peer's public point.

    Raises:
        InvalidKeyError: If the data is not a point on the suite's curve
    """
    data = _decode(peer_public_key, encoding, "public key")
    try:
        return ec.EllipticCurvePublicKey.from_encoded_point(suite.curve(), data)
    except ValueError as exc:
        raise InvalidKeyError(
            f"The public key is not a valid point on curve {suite.curve_name}."
        ) from exc


def compute_secret(key_pair: KeyPair,
                   peer_public_key: Optional[KeyData] = None,
                   encoding: KeyEncoding = KeyEncoding.HEX) -> bytes:
    """
    Derive the ECDH shared secret.

    Args:
        key_pair: Own key pair (private scalar is used)
        peer_public_key: Peer's public point, or None for self-agreement
        encoding: Encoding of peer_public_key

    Returns:
        Shared secret bytes (the x-coordinate of the product point)
    """
    if peer_public_key is None:
        peer = key_pair.public_key
    else:
        peer = load_public(peer_public_key, encoding, key_pair.suite)

    return key_pair.private_key.exchange(ec.ECDH(), peer)
