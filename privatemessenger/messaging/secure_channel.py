"""
Secure Messaging Module

Point-to-point encrypted messages between static ECDH keys:
- ECDH shared secret (own private key + peer public key, or own public key
  when encrypting to self)
- AES-256-CTR keyed by the shared secret
- Timestamped JSON envelope as plaintext
- SHA-256 integrity tag appended to the hex ciphertext

Message Format:
    hex(AES-CTR(["message","timestamp"])) || hex(SHA-256(hex ciphertext))

Decrypt order:
    1. Verify the integrity tag (nothing unverified reaches the cipher)
    2. Derive the shared secret and decipher
    3. Parse the envelope; failure means "not for this key pair"

Note that there is no MAC keyed by the shared secret. A wrong key is only
detected because its output does not parse as an envelope.
"""

from datetime import datetime
from typing import Optional

from .cipher_session import cipher_for, decipher_for, encrypt_to_hex, decrypt_from_hex
from .envelope import Envelope, encode, decode
from .key_agreement import KeyPair, KeyData, KeyEncoding, compute_secret
from .signature import sign, verify
from ..errors import IntegrityError, MalformedEnvelopeError
from ..integration.event_logger import EventLogger


def _peer_bytes(peer_public_key: Optional[KeyData], encoding: KeyEncoding) -> Optional[bytes]:
    """Raw peer point for fingerprinting (only after compute_secret accepted it)."""
    if peer_public_key is None:
        return None
    if encoding is KeyEncoding.HEX:
        return bytes.fromhex(peer_public_key.strip())
    return bytes(peer_public_key)


def encrypt_message(message: str,
                    key_pair: KeyPair,
                    peer_public_key: Optional[KeyData] = None,
                    encoding: KeyEncoding = KeyEncoding.HEX,
                    now: Optional[datetime] = None,
                    event_logger: Optional[EventLogger] = None) -> str:
    """
    Encrypt and sign a message.

    Args:
        message: Plaintext message
        key_pair: Sender's key pair
        peer_public_key: Recipient's public key (None encrypts to self)
        encoding: Encoding of peer_public_key
        now: Envelope timestamp (defaults to the current time)
        event_logger: Optional audit log

    Returns:
        Signed hex ciphertext

    Raises:
        InvalidKeyError: If the peer public key is not valid
    """
    suite = key_pair.suite
    secret = compute_secret(key_pair, peer_public_key, encoding)

    if event_logger is not None:
        event_logger.log_key_exchange(key_pair.public_bytes(),
                                      _peer_bytes(peer_public_key, encoding),
                                      suite.curve_name)

    stream = cipher_for(secret, suite)
    ciphertext = encrypt_to_hex(stream, encode(message, now))
    signed = sign(ciphertext, suite)

    if event_logger is not None:
        event_logger.log_message_encrypt(key_pair.public_bytes(), len(signed),
                                         suite.cipher_name)
    return signed


def decrypt_message(signed: str,
                    key_pair: KeyPair,
                    peer_public_key: Optional[KeyData] = None,
                    encoding: KeyEncoding = KeyEncoding.HEX,
                    event_logger: Optional[EventLogger] = None) -> Envelope:
    """
    Verify and decrypt a message.

    Args:
        signed: Signed hex ciphertext
        key_pair: Recipient's key pair
        peer_public_key: Sender's public key (None for self-encrypted)
        encoding: Encoding of peer_public_key
        event_logger: Optional audit log

    Returns:
        Decoded Envelope (message and timestamp)

    Raises:
        TooShortError, SignatureMismatchError: If the integrity tag fails
        InvalidKeyError: If the peer public key is not valid
        MalformedEnvelopeError: If the message cannot be read with this key pair
    """
    suite = key_pair.suite

    try:
        ciphertext = verify(signed, suite)
    except IntegrityError as exc:
        if event_logger is not None:
            event_logger.log_signature_failed(key_pair.public_bytes(), exc.kind.value)
        raise

    secret = compute_secret(key_pair, peer_public_key, encoding)
    if event_logger is not None:
        event_logger.log_key_exchange(key_pair.public_bytes(),
                                      _peer_bytes(peer_public_key, encoding),
                                      suite.curve_name)

    stream = decipher_for(secret, suite)
    try:
        envelope = decode(decrypt_from_hex(stream, ciphertext))
    except (ValueError, MalformedEnvelopeError):
        if event_logger is not None:
            event_logger.log_message_decrypt(key_pair.public_bytes(), success=False)
        raise MalformedEnvelopeError() from None

    if event_logger is not None:
        event_logger.log_message_decrypt(key_pair.public_bytes())
    return envelope


class SecureChannel:
    """
    Messaging channel between one key pair and one peer.

    Every call derives a fresh cipher session; nothing is cached between
    messages.

    Example:
        alice = KeyPair.generate()
        bob = KeyPair.generate()

        to_bob = SecureChannel(alice, export_public(bob))
        from_alice = SecureChannel(bob, export_public(alice))

        signed = to_bob.encrypt("Hello Bob!")
        envelope = from_alice.decrypt(signed)
    """

    def __init__(self, key_pair: KeyPair,
                 peer_public_key: Optional[KeyData] = None,
                 encoding: KeyEncoding = KeyEncoding.HEX,
                 event_logger: Optional[EventLogger] = None):
        """
        Args:
            key_pair: Own key pair
            peer_public_key: Peer's public key, or None for self-encryption
            encoding: Encoding of peer_public_key
            event_logger: Optional audit log
        """
        self._key_pair = key_pair
        self._peer_public_key = peer_public_key
        self._encoding = encoding
        self._event_logger = event_logger

    @property
    def key_pair(self) -> KeyPair:
        return self._key_pair

    @property
    def is_self(self) -> bool:
        """True when messages are encrypted to our own public key."""
        return self._peer_public_key is None

    def encrypt(self, message: str, now: Optional[datetime] = None) -> str:
        return encrypt_message(message, self._key_pair, self._peer_public_key,
                               self._encoding, now, self._event_logger)

    def decrypt(self, signed: str) -> Envelope:
        return decrypt_message(signed, self._key_pair, self._peer_public_key,
                               self._encoding, self._event_logger)
