# Integration Module
"""
Audit logging of key and message operations.

Keys are identified by public key fingerprints only.
"""

# Lazy imports to avoid RuntimeWarning when running module directly
def __getattr__(name):
    """Lazy import to avoid circular import issues."""
    from . import event_logger
    return getattr(event_logger, name)

__all__ = [
    'EventType',
    'SecurityEvent',
    'EventLogger',
    'get_key_hash',
    'get_key_hash_short',
]
