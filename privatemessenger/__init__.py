"""
PrivateMessenger

Static-key ECDH messaging: generate a key, share the public half, and
exchange hex messages that only the two key holders can read.
"""

__version__ = "1.0.0"

from .errors import (
    ErrorKind,
    PrivateMessengerError,
    UnsupportedPrimitiveError,
    InvalidKeyError,
    KeyFileNotFoundError,
    EmptyKeyError,
    KeyFileExistsError,
    KeyWriteError,
    EmptySignInputError,
    TooShortError,
    SignatureMismatchError,
    MalformedEnvelopeError,
)
from .core_crypto.primitives import CipherSuite, DEFAULT_SUITE, verify_primitives
from .messaging import (
    KeyPair,
    KeyEncoding,
    Envelope,
    SecureChannel,
    encrypt_message,
    decrypt_message,
)
from .files.key_store import restore_from_file, write_private_key
