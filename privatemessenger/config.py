"""
Configuration

Fixed protocol constants plus the few runtime settings that may come from
the environment (or a .env file loaded with python-dotenv).

Environment:
    PRIVATEMESSENGER_KEY_PATH   Location of the private key file
                                (default: ~/.privatemessenger)
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import find_dotenv, load_dotenv


# Constants
KEY_FILE_NAME = ".privatemessenger"
KEY_PATH_ENV = "PRIVATEMESSENGER_KEY_PATH"

CURVE_NAME = "sect571r1"
CIPHER_NAME = "aes-256-ctr"
HASH_NAME = "sha256"


def default_key_path() -> Path:
    """Per-user key file location."""
    return Path.home() / KEY_FILE_NAME


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the CLI."""
    key_path: Path


def load_settings(environ: Optional[Mapping[str, str]] = None,
                  dotenv: bool = True) -> Settings:
    """
    Build settings from the environment.

    Args:
        environ: Mapping to read from (defaults to os.environ)
        dotenv: Load a .env file from the working directory first

    Returns:
        Settings instance
    """
    if environ is None:
        if dotenv:
            load_dotenv(find_dotenv(usecwd=True))
        environ = os.environ

    raw_path = environ.get(KEY_PATH_ENV)
    key_path = Path(raw_path).expanduser() if raw_path else default_key_path()
    return Settings(key_path=key_path)
