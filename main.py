"""Command-line interface for the account service."""

from __future__ import annotations
import argparse
import logging
import sys
from dataclasses import replace
from getpass import getpass
from pathlib import Path
from typing import Sequence

from accounts.config import Settings, load_settings
from accounts.passwords import PasswordHasher

logger = logging.getLogger("accounts.main")


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Account service utilities")
    subparsers = parser.add_subparsers(dest="command")

    parser.set_defaults(command="serve")

    serve_parser = subparsers.add_parser("serve", help="Start the HTTP account service")
    serve_parser.add_argument("--host", default="0.0.0.0", help="Bind address for the API")
    serve_parser.add_argument(
        "--port",
        type=int,
        default=3000,
        help="Port for the HTTP API (default: 3000)",
    )
    serve_parser.add_argument(
        "--seed",
        default=None,
        help="YAML file with accounts to create at startup (overrides ACCOUNTS_SEED_PATH)",
    )

    hash_parser = subparsers.add_parser(
        "hash-password", help="Print a bcrypt hash for use as password_hash in a seed file"
    )
    hash_parser.add_argument(
        "--rounds",
        type=int,
        default=None,
        help="bcrypt cost factor (defaults to ACCOUNTS_BCRYPT_ROUNDS or 10)",
    )

    args_list = list(argv) if argv is not None else sys.argv[1:]
    known_commands = {"serve", "hash-password"}

    if not args_list:
        args_list = ["serve"]
    else:
        first = args_list[0]
        if first in ("-h", "--help"):
            return parser.parse_args(args_list)
        if first not in known_commands:
            if any(flag in args_list for flag in ("-h", "--help")):
                return parser.parse_args(args_list)
            args_list = ["serve", *args_list]

    return parser.parse_args(args_list)


def _serve(*, settings: Settings, host: str, port: int) -> None:
    from accounts.api import create_app
    import uvicorn

    logger.info("Starting account API on http://%s:%s", host, port)
    app = create_app(settings=settings)
    uvicorn.run(app, host=host, port=port, log_level="info")


def _prompt_for_password() -> str:
    for _ in range(3):
        password = getpass("Password: ")
        confirm = getpass("Confirm password: ")
        if password != confirm:
            print("Passwords do not match. Try again.", file=sys.stderr)
            continue
        if not password:
            print("Password must not be empty.", file=sys.stderr)
            continue
        return password
    raise SystemExit("Failed to read a password after three attempts.")


def _hash_password(rounds: int | None) -> None:
    if rounds is None:
        try:
            rounds = load_settings().bcrypt_rounds
        except ValueError:
            rounds = PasswordHasher().rounds
    hasher = PasswordHasher(rounds=rounds)
    print(hasher.hash(_prompt_for_password()))


def main(argv: Sequence[str] | None = None) -> None:
    """Entry point for CLI usage."""

    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")

    args = _parse_args(argv)

    if args.command == "serve":
        try:
            settings = load_settings()
        except ValueError as exc:
            raise SystemExit(str(exc)) from exc
        if args.seed:
            settings = replace(settings, seed_path=Path(args.seed).expanduser().resolve(strict=False))
        _serve(settings=settings, host=args.host, port=args.port)
    elif args.command == "hash-password":
        _hash_password(args.rounds)


if __name__ == "__main__":
    main()
