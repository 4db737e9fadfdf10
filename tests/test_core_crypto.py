"""
Unit tests for the Primitive Provider.

Tests:
- Cipher suite construction
- Startup validation against the backend
- Error messages naming the missing primitive
"""

import pytest
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers import algorithms, modes

from privatemessenger.core_crypto.primitives import (
    CipherSuite, DEFAULT_SUITE, verify_primitives, is_supported
)
from privatemessenger.errors import UnsupportedPrimitiveError, ErrorKind


class StubBackend:
    """Backend double that reports chosen primitives as missing."""

    def __init__(self, curve=True, cipher=True, hash_=True, md5=True):
        self.curve = curve
        self.cipher = cipher
        self.hash = hash_
        self.md5 = md5

    def elliptic_curve_supported(self, curve):
        return self.curve

    def cipher_supported(self, cipher, mode):
        return self.cipher

    def hash_supported(self, algorithm):
        if algorithm.name == "md5":
            return self.md5
        return self.hash


class TestCipherSuite:
    """Tests for the suite constants."""

    def test_default_names(self):
        """Default suite is sect571r1 / aes-256-ctr / sha256."""
        assert DEFAULT_SUITE.curve_name == "sect571r1"
        assert DEFAULT_SUITE.cipher_name == "aes-256-ctr"
        assert DEFAULT_SUITE.hash_name == "sha256"

    def test_immutable(self):
        """Suites cannot be changed after creation."""
        with pytest.raises(AttributeError):
            DEFAULT_SUITE.curve_name = "secp256r1"

    def test_sizes(self):
        """AES-256 key and one-block counter."""
        assert DEFAULT_SUITE.key_size == 32
        assert DEFAULT_SUITE.iv_size == 16

    def test_signature_length(self):
        """Hex SHA-256 digest is 64 characters."""
        assert DEFAULT_SUITE.signature_length == 64
        assert CipherSuite(hash_name="sha512").signature_length == 128

    def test_builds_primitives(self):
        """Suite hands out cryptography objects."""
        assert isinstance(DEFAULT_SUITE.hash(), hashes.SHA256)
        assert isinstance(DEFAULT_SUITE.algorithm(b"\x00" * 32), algorithms.AES)
        assert isinstance(DEFAULT_SUITE.mode(b"\x00" * 16), modes.CTR)

    def test_fallback_curve(self):
        """A prime curve suite instantiates its curve."""
        curve = CipherSuite(curve_name="secp521r1").curve()
        assert curve.name == "secp521r1"


class TestVerifyPrimitives:
    """Tests for startup validation."""

    def test_all_available(self):
        """A fully supported backend passes and returns the suite."""
        suite = CipherSuite(curve_name="secp521r1")
        assert verify_primitives(suite, StubBackend()) is suite

    def test_real_backend_prime_curve(self):
        """The OpenSSL backend supports the prime curve fallback suite."""
        assert is_supported(CipherSuite(curve_name="secp521r1"))

    def test_missing_curve(self):
        """Missing curve is fatal and named."""
        with pytest.raises(UnsupportedPrimitiveError) as exc:
            verify_primitives(CipherSuite(curve_name="secp521r1"), StubBackend(curve=False))
        assert str(exc.value) == "The supplied curve (secp521r1) is not available."
        assert exc.value.kind is ErrorKind.UNSUPPORTED_PRIMITIVE

    def test_missing_cipher(self):
        """Missing cipher is fatal and named."""
        with pytest.raises(UnsupportedPrimitiveError) as exc:
            verify_primitives(CipherSuite(curve_name="secp521r1"), StubBackend(cipher=False))
        assert "aes-256-ctr" in str(exc.value)

    def test_missing_hash(self):
        """Missing hash is fatal and named."""
        with pytest.raises(UnsupportedPrimitiveError) as exc:
            verify_primitives(CipherSuite(curve_name="secp521r1"), StubBackend(hash_=False))
        assert "hash (sha256)" in str(exc.value)

    def test_missing_key_derivation_hash(self):
        """The cipher's MD5 key setup is checked too."""
        with pytest.raises(UnsupportedPrimitiveError) as exc:
            verify_primitives(CipherSuite(curve_name="secp521r1"), StubBackend(md5=False))
        assert "md5" in str(exc.value)

    def test_unknown_curve_name(self):
        """Names outside the supported table are rejected."""
        with pytest.raises(UnsupportedPrimitiveError) as exc:
            verify_primitives(CipherSuite(curve_name="curve0"), StubBackend())
        assert "curve (curve0)" in str(exc.value)

    def test_unknown_cipher_name(self):
        with pytest.raises(UnsupportedPrimitiveError):
            verify_primitives(CipherSuite(curve_name="secp521r1", cipher_name="des-ctr"),
                              StubBackend())

    def test_unknown_hash_name(self):
        with pytest.raises(UnsupportedPrimitiveError):
            verify_primitives(CipherSuite(curve_name="secp521r1", hash_name="md4"),
                              StubBackend())

    def test_is_supported(self):
        """is_supported() mirrors verify_primitives()."""
        assert is_supported(CipherSuite(curve_name="secp521r1"), StubBackend())
        assert not is_supported(CipherSuite(curve_name="secp521r1"), StubBackend(cipher=False))
