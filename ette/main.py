"""Command line entry point for ette."""

from __future__ import annotations

import argparse
import getpass
import logging
import sys
from typing import Optional, Sequence

from .core.document_service import DocumentService
from .core.errors import DocumentIOError
from .core.file_workflow_controller import FileWorkflowController
from .core.format_config import ALGORITHM_NAMES, VERSION_STR, CryptoAlgorithm, algorithm_from_filename
from .core.session_state import EditorState
from .editor.syntax import colorize_row
from .utils.logger import configure_logging
from .utils.preferences import EttePreferences

logger = logging.getLogger(__name__)


def _read_password(args: argparse.Namespace, confirm: bool = False) -> tuple[str, Optional[str]]:
    if args.password is not None:
        return args.password, args.password
    password = getpass.getpass("Enter password: ")
    if not confirm:
        return password, None
    return password, getpass.getpass("Confirm password: ")


def cmd_view(args: argparse.Namespace) -> int:
    state = EditorState(status_message_seconds=EttePreferences.status_message_seconds)
    controller = FileWorkflowController(state)

    if algorithm_from_filename(args.file) != CryptoAlgorithm.NONE:
        password, confirm = _read_password(args)
        if not controller.prepare_encryption(args.file, password, confirm):
            print(state.status_message, file=sys.stderr)
            return 1

    if not controller.open_file(args.file):
        print(state.status_message, file=sys.stderr)
        return 1

    for row in state.document:
        print(row.render if args.plain else colorize_row(row))
    return 0


def cmd_decrypt(args: argparse.Namespace) -> int:
    service = DocumentService()
    try:
        data = service.read_file(args.file)
    except DocumentIOError as e:
        print(f"Could not read file: {args.file} ({e})", file=sys.stderr)
        return 1
    if data is None:
        print(f"Could not read file: {args.file}", file=sys.stderr)
        return 1

    password, _ = _read_password(args)
    result = service.decrypt(data, password)
    if not result.ok:
        print(f"Could not decrypt file: {args.file} ({result.error})", file=sys.stderr)
        return 1

    sys.stdout.buffer.write(result.plaintext)
    sys.stdout.flush()
    return 0


def cmd_encrypt(args: argparse.Namespace) -> int:
    service = DocumentService()
    try:
        data = service.read_file(args.source)
    except DocumentIOError as e:
        print(f"Could not read file: {args.source} ({e})", file=sys.stderr)
        return 1
    if data is None:
        print(f"Could not read file: {args.source}", file=sys.stderr)
        return 1

    password, confirm = _read_password(args, confirm=True)
    if password != confirm:
        print("Password mismatch.", file=sys.stderr)
        return 1

    algorithm = ALGORITHM_NAMES[args.algorithm] if args.algorithm else EttePreferences.crypto_algorithm
    result = service.encrypt(data, password, algorithm=algorithm)
    if not result.ok:
        print(f"Could not encrypt file: {args.source} ({result.error})", file=sys.stderr)
        return 1

    try:
        written = service.write_file(args.dest, result.ciphertext)
    except DocumentIOError as e:
        print(str(e), file=sys.stderr)
        return 1
    print(f"{written} bytes written on disk")
    return 0


def cmd_check_password(args: argparse.Namespace) -> int:
    password, _ = _read_password(args)
    if DocumentService().is_key_correct(password, args.file):
        print("Password correct.")
        return 0
    print("Incorrect password.", file=sys.stderr)
    return 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ette", description="Encrypted terminal text editor tools")
    parser.add_argument("--version", action="version", version=f"ette version {VERSION_STR}")
    parser.add_argument("--debug", action="store_true", help="Log debug output to the console")
    subparsers = parser.add_subparsers(dest="command")

    view = subparsers.add_parser("view", help="Print a document with syntax highlighting")
    view.add_argument("file")
    view.add_argument("--password", help="Password for encrypted files (prompted if omitted)")
    view.add_argument("--plain", action="store_true", help="Print without colors")
    view.set_defaults(func=cmd_view)

    decrypt = subparsers.add_parser("decrypt", help="Print the plaintext of an encrypted file")
    decrypt.add_argument("file")
    decrypt.add_argument("--password")
    decrypt.set_defaults(func=cmd_decrypt)

    encrypt = subparsers.add_parser("encrypt", help="Write SOURCE into an encrypted container DEST")
    encrypt.add_argument("source")
    encrypt.add_argument("dest")
    encrypt.add_argument("--password")
    encrypt.add_argument("--algorithm", choices=sorted(ALGORITHM_NAMES))
    encrypt.set_defaults(func=cmd_encrypt)

    check = subparsers.add_parser("check-password", help="Exit 0 if the password opens the file")
    check.add_argument("file")
    check.add_argument("--password")
    check.set_defaults(func=cmd_check_password)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    EttePreferences.load_preferences()
    configure_logging(args.debug or EttePreferences.debug_logging)

    if not getattr(args, "func", None):
        parser.print_help()
        return 1
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
