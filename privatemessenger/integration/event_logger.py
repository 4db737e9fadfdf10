"""
Event Logger Module

Audit trail of key and message operations for a single invocation.

Features:
- Key generation, storage and loading events
- Encrypt / decrypt events, including integrity failures
- Keys identified only by a short SHA-256 fingerprint of the public point
- JSON export/import of the log

Private scalars, shared secrets and plaintext never enter the log.
"""

import json
import sys
import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict, Any, Callable, TextIO

from cryptography.hazmat.primitives import hashes


# ============================================================================
# Constants
# ============================================================================

EVENT_VERSION = "1.0"
FINGERPRINT_LENGTH = 16


# ============================================================================
# Privacy Functions
# ============================================================================

def get_key_hash(public_bytes: bytes) -> str:
    """
    Compute the fingerprint of a public key.

    Args:
        public_bytes: Uncompressed public point

    Returns:
        Hex-encoded SHA-256 of the point
    """
    digest = hashes.Hash(hashes.SHA256())
    digest.update(public_bytes)
    return digest.finalize().hex()


def get_key_hash_short(public_bytes: bytes) -> str:
    """First 16 hex characters of the key fingerprint."""
    return get_key_hash(public_bytes)[:FINGERPRINT_LENGTH]


# ============================================================================
# Event Types
# ============================================================================

class EventType(Enum):
    """Types of security events that can be logged."""

    # Key events
    KEY_GENERATE = "key_generate"
    KEY_WRITE = "key_write"
    KEY_LOAD = "key_load"
    KEY_EXCHANGE = "key_exchange"

    # Messaging events
    MESSAGE_ENCRYPT = "message_encrypt"
    MESSAGE_DECRYPT = "message_decrypt"
    SIGNATURE_FAILED = "signature_failed"
    DECRYPT_FAILED = "decrypt_failed"

    # System events
    SYSTEM_START = "system_start"


# ============================================================================
# Event Structure
# ============================================================================

@dataclass
class SecurityEvent:
    """A single audit record."""
    event_type: EventType
    key_hash: str   # short public key fingerprint, or "system"
    timestamp: int  # Unix timestamp
    details: Dict[str, Any] = field(default_factory=dict)

    def to_record(self) -> str:
        """Serialize to a compact JSON record."""
        return json.dumps({
            'version': EVENT_VERSION,
            'type': self.event_type.value,
            'key': self.key_hash,
            'time': self.timestamp,
            'iso_time': datetime.fromtimestamp(self.timestamp).isoformat(),
            'details': self.details,
        }, separators=(',', ':'))

    @classmethod
    def from_record(cls, record: str) -> 'SecurityEvent':
        """Parse an event from its JSON record."""
        data = json.loads(record)
        return cls(
            event_type=EventType(data['type']),
            key_hash=data['key'],
            timestamp=data['time'],
            details=data.get('details', {}),
        )

    def __str__(self) -> str:
        dt = datetime.fromtimestamp(self.timestamp)
        return (
            f"[{dt.strftime('%Y-%m-%d %H:%M:%S')}] "
            f"{self.event_type.value} | "
            f"key:{self.key_hash[:8]}..."
        )


# ============================================================================
# Event Logger
# ============================================================================

class EventLogger:
    """
    In-memory audit log.

    Callbacks registered with add_callback() see every event as it is
    recorded. The CLI prints the whole log with print_audit_log() once the
    command has finished (verbose mode).
    """

    def __init__(self, records: Optional[List[str]] = None):
        """
        Initialize the event logger.

        Args:
            records: Previously exported JSON records to start from
        """
        self._records: List[str] = list(records or [])
        self._callbacks: List[Callable[[SecurityEvent], None]] = []

        self._log_system_event(EventType.SYSTEM_START)

    def _log_system_event(self, event_type: EventType) -> None:
        event = SecurityEvent(
            event_type=event_type,
            key_hash="system",
            timestamp=int(time.time()),
            details={'node': 'privatemessenger'}
        )
        self._add_event(event)

    def _add_event(self, event: SecurityEvent) -> None:
        self._records.append(event.to_record())
        for callback in self._callbacks:
            callback(event)

    def _log(self, event_type: EventType, public_bytes: bytes,
             **details: Any) -> SecurityEvent:
        event = SecurityEvent(
            event_type=event_type,
            key_hash=get_key_hash_short(public_bytes),
            timestamp=int(time.time()),
            details=details,
        )
        self._add_event(event)
        return event

    def add_callback(self, callback: Callable[[SecurityEvent], None]) -> None:
        """Add a callback to be notified of new events."""
        self._callbacks.append(callback)

    def remove_callback(self, callback: Callable[[SecurityEvent], None]) -> None:
        """Remove a callback."""
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    # ========================================================================
    # Key Events
    # ========================================================================

    def log_key_generate(self, public_bytes: bytes, curve: str) -> SecurityEvent:
        """Log creation of a new key pair."""
        return self._log(EventType.KEY_GENERATE, public_bytes, curve=curve)

    def log_key_write(self, public_bytes: bytes, path: str) -> SecurityEvent:
        """Log persisting a private key to disk."""
        return self._log(EventType.KEY_WRITE, public_bytes, path=path)

    def log_key_load(self, public_bytes: bytes, source: str) -> SecurityEvent:
        """
        Log loading a private key.

        Args:
            public_bytes: Public point of the loaded key
            source: Where the key came from ("inline" or a file path)
        """
        return self._log(EventType.KEY_LOAD, public_bytes, source=source)

    def log_key_exchange(self, public_bytes: bytes,
                         peer_public_bytes: Optional[bytes],
                         curve: str) -> SecurityEvent:
        """Log an ECDH agreement; a missing peer means self-agreement."""
        peer = get_key_hash_short(peer_public_bytes) if peer_public_bytes else "self"
        return self._log(EventType.KEY_EXCHANGE, public_bytes,
                         peer=peer, algo=f"ECDH-{curve}")

    # ========================================================================
    # Messaging Events
    # ========================================================================

    def log_message_encrypt(self, public_bytes: bytes, length: int,
                            cipher: str) -> SecurityEvent:
        """Log an encryption; length is that of the signed output."""
        return self._log(EventType.MESSAGE_ENCRYPT, public_bytes,
                         length=length, cipher=cipher)

    def log_message_decrypt(self, public_bytes: bytes,
                            success: bool = True) -> SecurityEvent:
        """Log a decryption attempt that got past the signature check."""
        event_type = EventType.MESSAGE_DECRYPT if success else EventType.DECRYPT_FAILED
        return self._log(event_type, public_bytes, success=success)

    def log_signature_failed(self, public_bytes: bytes, reason: str) -> SecurityEvent:
        """Log a message rejected by the signature layer."""
        return self._log(EventType.SIGNATURE_FAILED, public_bytes, reason=reason)

    # ========================================================================
    # Retrieval
    # ========================================================================

    def get_all_events(self) -> List[SecurityEvent]:
        """Return every logged event, oldest first."""
        return [SecurityEvent.from_record(record) for record in self._records]

    def get_events_by_type(self, event_type: EventType) -> List[SecurityEvent]:
        """Get all events of a specific type."""
        return [e for e in self.get_all_events() if e.event_type == event_type]

    def get_key_events(self, public_bytes: bytes) -> List[SecurityEvent]:
        """Get all events for a specific key."""
        key_hash = get_key_hash_short(public_bytes)
        return [e for e in self.get_all_events() if e.key_hash == key_hash]

    def get_recent_events(self, count: int = 10) -> List[SecurityEvent]:
        """Get the most recent events."""
        events = self.get_all_events()
        return events[-count:] if len(events) > count else events

    def print_audit_log(self, last_n: Optional[int] = None,
                        stream: Optional[TextIO] = None) -> None:
        """Print the audit log in a readable format."""
        stream = stream or sys.stderr
        events = self.get_all_events()
        total = len(events)
        if last_n:
            events = events[-last_n:]

        print("=" * 70, file=stream)
        print("SECURITY AUDIT LOG", file=stream)
        print("=" * 70, file=stream)

        for event in events:
            print(event, file=stream)
            for k, v in event.details.items():
                print(f"    {k}: {v}", file=stream)

        print("=" * 70, file=stream)
        print(f"Total events: {total}", file=stream)

    def export_log(self) -> str:
        """Export the log as a JSON array of records."""
        return json.dumps(self._records)

    @classmethod
    def import_log(cls, json_str: str) -> 'EventLogger':
        """Import a log exported by export_log()."""
        return cls(records=json.loads(json_str))
