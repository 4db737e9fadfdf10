"""
Key Store Module

Persistence of the private key file.

File Format:
    UTF-8 text holding the hex-encoded private scalar and nothing else
    (no header, no version, no public key).

Writes go to a temporary file in the target directory which is then
renamed over the destination, so a failed write never leaves a truncated
private key behind. Files are created with mode 0600.
"""

import os
import tempfile
from pathlib import Path
from typing import Union

from ..core_crypto.primitives import CipherSuite, DEFAULT_SUITE
from ..errors import (
    InvalidKeyError, KeyFileNotFoundError, EmptyKeyError, KeyFileExistsError, KeyWriteError
)
from ..messaging.key_agreement import KeyPair, KeyEncoding, restore, export_private


# Constants
KEY_FILE_MODE = 0o600
KEY_FILE_ENCODING = "utf-8"

PathLike = Union[str, os.PathLike]


def key_exists(path: PathLike) -> bool:
    """Check whether a key file is present."""
    return Path(path).exists()


def read_private_key(path: PathLike) -> str:
    """
    Read the hex private key text from a key file.

    Raises:
        KeyFileNotFoundError: If the file does not exist
        EmptyKeyError: If the file is empty or only whitespace
    """
    path = Path(path)
    try:
        data = path.read_text(encoding=KEY_FILE_ENCODING)
    except FileNotFoundError as exc:
        raise KeyFileNotFoundError(
            f"Private key file ({path}) does not exist."
        ) from exc
    except UnicodeDecodeError as exc:
        raise InvalidKeyError(f"Private key file ({path}) is not UTF-8 text.") from exc
    except OSError as exc:
        raise EmptyKeyError(
            f"Unable to read contents of private key file ({path})."
        ) from exc

    if not data.strip():
        raise EmptyKeyError(f"Unable to read contents of private key file ({path}).")
    return data


def restore_from_file(path: PathLike, suite: CipherSuite = DEFAULT_SUITE) -> KeyPair:
    """
    Load a key pair from a private key file.

    Args:
        path: Key file location
        suite: Cipher suite the key belongs to

    Returns:
        Restored KeyPair

    Raises:
        KeyFileNotFoundError: If the file does not exist
        EmptyKeyError: If the file holds no key
        InvalidKeyError: If the content is not a valid hex scalar
    """
    return restore(read_private_key(path), KeyEncoding.HEX, suite)


def write_private_key(key_pair: KeyPair, path: PathLike,
                      overwrite: bool = False) -> Path:
    """
    Persist the private scalar as hex text.

    Args:
        key_pair: Key pair to store
        path: Destination file
        overwrite: Replace an existing file

    Returns:
        The path written

    Raises:
        KeyFileExistsError: If the file exists and overwrite is False
        KeyWriteError: If the file cannot be written
    """
    path = Path(path)
    if path.exists() and not overwrite:
        raise KeyFileExistsError(f"Private key file ({path}) already exists.")

    content = export_private(key_pair, KeyEncoding.HEX)

    tmp_name = None
    try:
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp",
                                        dir=path.parent)
        with os.fdopen(fd, "w", encoding=KEY_FILE_ENCODING) as handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        os.chmod(tmp_name, KEY_FILE_MODE)
        os.replace(tmp_name, path)
        tmp_name = None
    except OSError as exc:
        raise KeyWriteError(f"Unable to write private key file ({path}): {exc}") from exc
    finally:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)

    return path
