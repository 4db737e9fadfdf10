"""
Envelope Codec

The plaintext that actually gets encrypted is a two-element JSON array,
message first and creation time second:

    ["hello","2026-10-18T02:49:00.123Z"]

Decoding doubles as the wrong-key check: deciphering with the wrong
shared secret yields noise that will not parse as this structure. Every
parse failure is reported the same way (MalformedEnvelopeError).

Decoding is stricter than older clients: both elements must be strings and
the timestamp must be a four-digit-year ISO-8601 time representable in UTC
(extended years such as "+010000-01-01T00:00:00.000Z" are rejected).
"""

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from ..errors import MalformedEnvelopeError


def format_timestamp(moment: datetime) -> str:
    """UTC ISO-8601 with millisecond precision and a 'Z' suffix."""
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S") + f".{moment.microsecond // 1000:03d}Z"


def parse_timestamp(text: str) -> datetime:
    """
    Parse a timestamp written by format_timestamp().

    Naive timestamps are taken to be UTC.

    Raises:
        ValueError: If text is not an ISO-8601 timestamp
    """
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    moment = datetime.fromisoformat(text)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


@dataclass(frozen=True)
class Envelope:
    """Decoded plaintext: the message and when it was created."""
    message: str
    timestamp: datetime

    @property
    def timestamp_text(self) -> str:
        return format_timestamp(self.timestamp)


def encode(message: str, now: Optional[datetime] = None) -> str:
    """
    Wrap a message with the current time.

    Args:
        message: Plaintext message
        now: Creation time (defaults to the current UTC time)

    Returns:
        Compact JSON array text
    """
    if now is None:
        now = datetime.now(timezone.utc)
    return json.dumps([message, format_timestamp(now)],
                      separators=(",", ":"), ensure_ascii=False)


def decode(serialized: str) -> Envelope:
    """
    Parse envelope text back into an Envelope.

    Extra trailing elements are ignored.

    Raises:
        MalformedEnvelopeError: If the text is empty, not JSON, not an
            array of at least two elements, holds the wrong types, or has a
            timestamp outside the UTC range
    """
    if not serialized or not isinstance(serialized, str):
        raise MalformedEnvelopeError()

    try:
        parsed = json.loads(serialized)
    except ValueError:
        parsed = None

    if not isinstance(parsed, list) or len(parsed) < 2:
        raise MalformedEnvelopeError()

    message, timestamp = parsed[0], parsed[1]
    if not isinstance(message, str) or not isinstance(timestamp, str):
        raise MalformedEnvelopeError()

    # normalised to UTC; offsets that leave the datetime range are malformed
    try:
        moment = parse_timestamp(timestamp).astimezone(timezone.utc)
    except (ValueError, OverflowError):
        moment = None
    if moment is None:
        raise MalformedEnvelopeError()

    return Envelope(message=message, timestamp=moment)
