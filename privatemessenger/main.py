"""
PrivateMessenger - Main Entry Point

Command line interface:

    privatemessenger [-v] generate [-p PATH] [-f] [-R]
    privatemessenger [-v] read     [-p PATH]
    privatemessenger [-v] encrypt  [-p PATH] [--priv HEX] [--pub HEX] MESSAGE
    privatemessenger [-v] decrypt  [-p PATH] [--priv HEX] [--pub HEX] MESSAGE

-v may also follow the command name.

Without --pub, messages are encrypted to (and decrypted from) the key's
own public key.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .config import Settings, load_settings
from .core_crypto.primitives import DEFAULT_SUITE, verify_primitives
from .errors import PrivateMessengerError, UnsupportedPrimitiveError
from .files.key_store import restore_from_file, write_private_key
from .integration.event_logger import EventLogger
from .messaging.key_agreement import (
    KeyPair, KeyEncoding, generate, restore, export_public, export_private
)
from .messaging.secure_channel import encrypt_message, decrypt_message


EXIT_OK = 0
EXIT_ERROR = 1
EXIT_UNSUPPORTED = 2

EPILOG = "Keys are static ECDH keys on sect571r1; messages use AES-256-CTR."


# ============================================================================
# Helpers
# ============================================================================

def _load_key_pair(args: argparse.Namespace, event_logger: EventLogger) -> KeyPair:
    """Inline --priv wins over the key file."""
    if args.priv:
        key_pair = restore(args.priv, KeyEncoding.HEX, DEFAULT_SUITE)
        source = "inline"
    else:
        key_pair = restore_from_file(args.path, DEFAULT_SUITE)
        source = str(args.path)
    event_logger.log_key_load(key_pair.public_bytes(), source)
    return key_pair


# ============================================================================
# Commands
# ============================================================================

def cmd_generate(args: argparse.Namespace, event_logger: EventLogger) -> int:
    """Generate a new private key."""
    key_pair = generate(DEFAULT_SUITE)
    event_logger.log_key_generate(key_pair.public_bytes(), DEFAULT_SUITE.curve_name)

    if args.no_write:
        print("\nPrivate Key (secret):\n%s\n\nPublic Key:\n%s\n" % (
            export_private(key_pair), export_public(key_pair)))
        return EXIT_OK

    path = write_private_key(key_pair, args.path, overwrite=args.force)
    event_logger.log_key_write(key_pair.public_bytes(), str(path))
    print(f"File ({path}) was written.")
    return EXIT_OK


def cmd_read(args: argparse.Namespace, event_logger: EventLogger) -> int:
    """Read information about an existing key."""
    key_pair = restore_from_file(args.path, DEFAULT_SUITE)
    event_logger.log_key_load(key_pair.public_bytes(), str(args.path))

    print("\nPrivate Key (do not share):\n%s\n" % export_private(key_pair))
    print("Public Key:\n%s\n" % export_public(key_pair))
    return EXIT_OK


def cmd_encrypt(args: argparse.Namespace, event_logger: EventLogger) -> int:
    """Encrypt a message."""
    key_pair = _load_key_pair(args, event_logger)
    signed = encrypt_message(args.message, key_pair, args.pub or None,
                             KeyEncoding.HEX, event_logger=event_logger)
    print("\nEncrypted Message:\n%s\n" % signed)
    return EXIT_OK


def cmd_decrypt(args: argparse.Namespace, event_logger: EventLogger) -> int:
    """Decrypt a message."""
    key_pair = _load_key_pair(args, event_logger)
    envelope = decrypt_message(args.message, key_pair, args.pub or None,
                               KeyEncoding.HEX, event_logger=event_logger)
    print("\nDecrypted Message (%s):\n%s\n" % (
        json.dumps(envelope.timestamp_text), envelope.message))
    return EXIT_OK


# ============================================================================
# Parser
# ============================================================================

def build_parser(settings: Settings) -> argparse.ArgumentParser:
    """Build the argument parser; settings supply the default key path."""
    parser = argparse.ArgumentParser(
        prog="privatemessenger",
        usage="%(prog)s <command> [options]",
        description="ECDH key management and encrypted messaging.",
        epilog=EPILOG,
    )
    parser.add_argument("--version", action="version",
                        version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Print the audit log to stderr when done")

    key_path = argparse.ArgumentParser(add_help=False)
    key_path.add_argument("-p", "--path", type=Path, default=settings.key_path,
                          help="Path to private key (default: %(default)s)")
    # SUPPRESS: an absent sub-command -v must not reset a top-level -v
    key_path.add_argument("-v", "--verbose", action="store_true",
                          default=argparse.SUPPRESS,
                          help="Print the audit log to stderr when done")

    key_override = argparse.ArgumentParser(add_help=False)
    key_override.add_argument("--priv", default=None,
                              help="Override private key with hex-encoded private key value.")

    commands = parser.add_subparsers(dest="command", metavar="<command>")
    commands.required = True

    generate_cmd = commands.add_parser("generate", parents=[key_path],
                                       help="Generate a new private key.")
    generate_cmd.add_argument("-f", "--force", action="store_true",
                              help="Overwrite an existing key file")
    generate_cmd.add_argument("-R", "--no-write", action="store_true",
                              help="Print the key instead of writing it")
    generate_cmd.set_defaults(handler=cmd_generate)

    read_cmd = commands.add_parser("read", parents=[key_path],
                                   help="Read information about an existing key.")
    read_cmd.set_defaults(handler=cmd_read)

    encrypt_cmd = commands.add_parser("encrypt", parents=[key_path, key_override],
                                      help="Encrypt a message.")
    encrypt_cmd.add_argument("--pub", default=None,
                             help="Public key identity to encrypt for "
                                  "(if blank, uses public key from private key)")
    encrypt_cmd.add_argument("message")
    encrypt_cmd.set_defaults(handler=cmd_encrypt)

    decrypt_cmd = commands.add_parser("decrypt", parents=[key_path, key_override],
                                      help="Decrypts a message.")
    decrypt_cmd.add_argument("--pub", default=None,
                             help="Public key identity to decrypt from "
                                  "(if blank, uses public key from private key)")
    decrypt_cmd.add_argument("message")
    decrypt_cmd.set_defaults(handler=cmd_decrypt)

    return parser


def main(argv: Optional[List[str]] = None,
         settings: Optional[Settings] = None) -> int:
    """Main entry point for PrivateMessenger."""
    settings = settings or load_settings()
    args = build_parser(settings).parse_args(argv)

    try:
        verify_primitives(DEFAULT_SUITE)
    except UnsupportedPrimitiveError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_UNSUPPORTED

    event_logger = EventLogger()
    try:
        return args.handler(args, event_logger)
    except PrivateMessengerError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_ERROR
    finally:
        if args.verbose:
            event_logger.print_audit_log()


if __name__ == "__main__":
    sys.exit(main())
