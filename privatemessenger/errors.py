"""
Error Taxonomy

Every failure raised by privatemessenger derives from PrivateMessengerError
and carries an ErrorKind, so callers can branch on the kind of failure
without matching on exception classes.

Groups:
- Startup:      UnsupportedPrimitiveError
- Key loading:  InvalidKeyError, KeyFileNotFoundError, EmptyKeyError
- Key storage:  KeyFileExistsError, KeyWriteError
- Integrity:    EmptySignInputError, TooShortError, SignatureMismatchError
- Envelope:     MalformedEnvelopeError
"""

from enum import Enum


class ErrorKind(Enum):
    """Kinds of failure an operation can report."""

    UNSUPPORTED_PRIMITIVE = "unsupported_primitive"
    INVALID_KEY = "invalid_key"
    KEY_FILE_NOT_FOUND = "key_file_not_found"
    EMPTY_KEY = "empty_key"
    KEY_FILE_EXISTS = "key_file_exists"
    KEY_WRITE_FAILED = "key_write_failed"
    EMPTY_SIGN_INPUT = "empty_sign_input"
    TOO_SHORT = "too_short"
    SIGNATURE_MISMATCH = "signature_mismatch"
    MALFORMED_ENVELOPE = "malformed_envelope"


class PrivateMessengerError(Exception):
    """Base class for all privatemessenger errors."""

    kind: ErrorKind = None


class UnsupportedPrimitiveError(PrivateMessengerError):
    """A curve, cipher or hash is missing from the crypto backend."""

    kind = ErrorKind.UNSUPPORTED_PRIMITIVE


# ============================================================================
# Key Loading
# ============================================================================

class KeyLoadError(PrivateMessengerError):
    """Base class for failures while loading key material."""


class InvalidKeyError(KeyLoadError, ValueError):
    """Key material could not be parsed or is not valid on the curve."""

    kind = ErrorKind.INVALID_KEY


class KeyFileNotFoundError(KeyLoadError, FileNotFoundError):
    """The private key file does not exist."""

    kind = ErrorKind.KEY_FILE_NOT_FOUND


class EmptyKeyError(KeyLoadError):
    """The private key file exists but holds no key."""

    kind = ErrorKind.EMPTY_KEY


# ============================================================================
# Key Storage
# ============================================================================

class KeyStoreError(PrivateMessengerError):
    """Base class for failures while persisting key material."""


class KeyFileExistsError(KeyStoreError, FileExistsError):
    """Refusing to replace an existing private key file."""

    kind = ErrorKind.KEY_FILE_EXISTS


class KeyWriteError(KeyStoreError):
    """The private key file could not be written."""

    kind = ErrorKind.KEY_WRITE_FAILED


# ============================================================================
# Message Integrity
# ============================================================================

class IntegrityError(PrivateMessengerError):
    """Base class for sign/verify failures."""


class EmptySignInputError(IntegrityError):
    kind = ErrorKind.EMPTY_SIGN_INPUT


class TooShortError(IntegrityError):
    kind = ErrorKind.TOO_SHORT


class SignatureMismatchError(IntegrityError):
    kind = ErrorKind.SIGNATURE_MISMATCH


class MalformedEnvelopeError(PrivateMessengerError):
    """
    Decrypted plaintext is not a valid envelope.

    Raised for every envelope parse failure with the same message, so the
    caller learns only that the message is not readable with this key pair.
    """

    kind = ErrorKind.MALFORMED_ENVELOPE
    MESSAGE = "Message is invalid or not encrypted for the current private/public key pair."

    def __init__(self, message: str = MESSAGE):
        super().__init__(message)
