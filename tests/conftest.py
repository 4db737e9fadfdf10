"""
Shared fixtures.

The default suite uses the binary curve sect571r1. OpenSSL builds without
binary curve support still run the protocol tests on secp521r1.
"""

import pytest

from privatemessenger.core_crypto.primitives import CipherSuite, DEFAULT_SUITE, is_supported
from privatemessenger.messaging.key_agreement import KeyPair


FALLBACK_SUITE = CipherSuite(curve_name="secp521r1")
TEST_SUITE = DEFAULT_SUITE if is_supported(DEFAULT_SUITE) else FALLBACK_SUITE


@pytest.fixture
def suite():
    return TEST_SUITE


@pytest.fixture
def alice(suite):
    return KeyPair.generate(suite)


@pytest.fixture
def bob(suite):
    return KeyPair.generate(suite)
