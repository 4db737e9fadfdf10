# Key File Module
"""
Private key file persistence:
- Hex-encoded private scalar, UTF-8 text
- Atomic replace on write (temp file + rename)
- Owner-only permissions (0600)
"""

# Lazy imports to avoid RuntimeWarning when running module directly
def __getattr__(name):
    """Lazy import to avoid circular import issues when running module directly."""
    from . import key_store
    return getattr(key_store, name)

__all__ = [
    'key_exists',
    'read_private_key',
    'restore_from_file',
    'write_private_key',
    'KEY_FILE_MODE',
]
