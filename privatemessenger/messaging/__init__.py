# Secure Messaging Module
"""
Secure messaging implementations including:
- ECDH key agreement on a static key pair
- AES-256-CTR keyed by the shared secret
- Timestamped JSON envelope
- SHA-256 integrity tag over the ciphertext

Message format: hex(ciphertext) || hex(sha256(hex ciphertext))
"""

from .key_agreement import (
    KeyPair,
    KeyEncoding,
    generate,
    restore,
    export_public,
    export_private,
    load_public,
    compute_secret,
)
from .cipher_session import (
    EncryptStream,
    DecryptStream,
    bytes_to_key,
    cipher_for,
    decipher_for,
)
from .envelope import Envelope
from .signature import sign, verify
from .secure_channel import (
    SecureChannel,
    encrypt_message,
    decrypt_message,
)

__all__ = [
    'KeyPair',
    'KeyEncoding',
    'generate',
    'restore',
    'export_public',
    'export_private',
    'load_public',
    'compute_secret',
    'EncryptStream',
    'DecryptStream',
    'bytes_to_key',
    'cipher_for',
    'decipher_for',
    'Envelope',
    'sign',
    'verify',
    'SecureChannel',
    'encrypt_message',
    'decrypt_message',
]
