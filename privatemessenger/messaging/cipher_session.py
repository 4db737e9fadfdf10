"""
Cipher Session Module

Symmetric stream encryption keyed by an ECDH shared secret.

The secret is handed to the cipher's own key setup, the OpenSSL
EVP_BytesToKey derivation (MD5, one round, no salt), which yields the
AES key followed by the initial counter block. No further KDF is applied.

Counter mode means no padding: ciphertext length equals plaintext length.
Transport encoding is lowercase hex.
"""

from typing import Tuple

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers import Cipher

from ..core_crypto.primitives import CipherSuite, DEFAULT_SUITE


TEXT_ENCODING = "utf-8"


def bytes_to_key(secret: bytes, key_size: int, iv_size: int) -> Tuple[bytes, bytes]:
    """
    Derive a key and IV from a secret, as EVP_BytesToKey(MD5, count=1) does.

        D_1 = MD5(secret)
        D_i = MD5(D_(i-1) || secret)
        key || iv = D_1 || D_2 || ...

    Args:
        secret: Key material (the ECDH shared secret)
        key_size: Key length in bytes
        iv_size: IV length in bytes

    Returns:
        Tuple of (key, iv)
    """
    material = b""
    block = b""
    while len(material) < key_size + iv_size:
        digest = hashes.Hash(hashes.MD5())
        digest.update(block + secret)
        block = digest.finalize()
        material += block
    return material[:key_size], material[key_size:key_size + iv_size]


class _Stream:
    """Incremental cipher stream: update() any number of times, then finalize()."""

    def __init__(self, context):
        self._context = context
        self._finalized = False

    def update(self, data: bytes) -> bytes:
        return self._context.update(data)

    def finalize(self) -> bytes:
        """Flush the stream. Further use raises AlreadyFinalized."""
        self._finalized = True
        return self._context.finalize()

    @property
    def finalized(self) -> bool:
        return self._finalized


class EncryptStream(_Stream):
    """Encrypting half of a cipher session."""


class DecryptStream(_Stream):
    """Decrypting half of a cipher session."""


def _cipher(secret: bytes, suite: CipherSuite) -> Cipher:
    key, iv = bytes_to_key(secret, suite.key_size, suite.iv_size)
    return Cipher(suite.algorithm(key), suite.mode(iv))


def cipher_for(secret: bytes, suite: CipherSuite = DEFAULT_SUITE) -> EncryptStream:
    """Create a fresh encrypt stream keyed by the shared secret."""
    return EncryptStream(_cipher(secret, suite).encryptor())


def decipher_for(secret: bytes, suite: CipherSuite = DEFAULT_SUITE) -> DecryptStream:
    """Create a fresh decrypt stream keyed by the shared secret."""
    return DecryptStream(_cipher(secret, suite).decryptor())


def encrypt_to_hex(stream: EncryptStream, plaintext: str) -> str:
    """Encrypt UTF-8 text and return hex ciphertext."""
    data = stream.update(plaintext.encode(TEXT_ENCODING)) + stream.finalize()
    return data.hex()


def decrypt_from_hex(stream: DecryptStream, ciphertext: str) -> str:
    """
    Decrypt hex ciphertext to text.

    Bytes that are not valid UTF-8 (typical for a wrong key) are replaced
    rather than raised; the envelope codec rejects the result.

    Raises:
        ValueError: If ciphertext is not valid hex
    """
    data = bytes.fromhex(ciphertext)
    plaintext = stream.update(data) + stream.finalize()
    return plaintext.decode(TEXT_ENCODING, errors="replace")
