# Core Cryptography Module
"""
Primitive selection and startup validation:
- Elliptic curve (sect571r1)
- Symmetric stream cipher (AES-256-CTR)
- Hash function (SHA-256)
"""

from .primitives import (
    CipherSuite,
    DEFAULT_SUITE,
    verify_primitives,
    is_supported,
)

__all__ = [
    'CipherSuite',
    'DEFAULT_SUITE',
    'verify_primitives',
    'is_supported',
]
