"""
Signature Layer

Appends a hex digest of the ciphertext to the ciphertext itself:

    signed = ciphertext || SHA-256(ciphertext).hex()

This is an integrity check only. The digest is keyed by nothing but the
hash function, so it catches corruption in transit, not a forger.
Verification must pass before anything is handed to the cipher.
"""

import hmac

from cryptography.hazmat.primitives import hashes

from ..core_crypto.primitives import CipherSuite, DEFAULT_SUITE
from ..errors import EmptySignInputError, TooShortError, SignatureMismatchError


def digest(text: str, suite: CipherSuite = DEFAULT_SUITE) -> str:
    """Hex digest of the UTF-8 encoded text."""
    hasher = hashes.Hash(suite.hash())
    hasher.update(text.encode("utf-8"))
    return hasher.finalize().hex()


def sign(message: str, suite: CipherSuite = DEFAULT_SUITE) -> str:
    """
    Append the integrity tag to a message.

    Raises:
        EmptySignInputError: If message is empty or not a string
    """
    if not isinstance(message, str) or not message:
        raise EmptySignInputError(
            "Invalid message provided to sign. Must be non-zero length string."
        )
    return message + digest(message, suite)


def verify(signed: str, suite: CipherSuite = DEFAULT_SUITE) -> str:
    """
    Check and strip the integrity tag.

    Args:
        signed: Message with trailing tag

    Returns:
        The message without its tag

    Raises:
        TooShortError: If signed is not a string or shorter than the tag
        SignatureMismatchError: If the tag does not match the message
    """
    tag_length = suite.signature_length
    if not isinstance(signed, str) or len(signed) < tag_length:
        raise TooShortError(
            f"Invalid message provided to unsign. "
            f"Must be a string at least {tag_length} chars long."
        )

    pos = len(signed) - tag_length
    raw, tag = signed[:pos], signed[pos:]

    if not hmac.compare_digest(tag.encode("utf-8"), digest(raw, suite).encode("utf-8")):
        raise SignatureMismatchError("This message was not signed properly.")

    return raw
