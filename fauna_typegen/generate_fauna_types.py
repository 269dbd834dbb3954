#!/usr/bin/env python3
"""
Generate TypeScript types from a live Fauna database schema.

Usage:
    python -m fauna_typegen generate [options]

Options:
    -s, --secret    Fauna admin secret (defaults to $FAUNA_ADMIN_KEY)
    -d, --dir       Directory to generate types file (default: src/fauna-typed)
    -f, --file      Name of the generated types file (default: types.ts)
    --endpoint      Fauna endpoint (defaults to $FAUNA_ENDPOINT or https://db.fauna.com)

FAUNA_ADMIN_KEY and FAUNA_ENDPOINT are also read from a .env file in the current
directory or one of its parents.
"""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from fauna_typegen.shared import MissingSecretError, SchemaError
from fauna_typegen.shared.fauna_client import DEFAULT_ENDPOINT, fetch_collections
from fauna_typegen.type_codegen.main import (
    DEFAULT_OUTPUT_DIR,
    DEFAULT_OUTPUT_FILE,
    emit,
    write_document,
)

SECRET_ENV_VAR = "FAUNA_ADMIN_KEY"
ENDPOINT_ENV_VAR = "FAUNA_ENDPOINT"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="generate-fauna-types",
        description="Generate TypeScript types from Fauna schema.",
    )
    parser.add_argument("-s", "--secret", default=None, help="Fauna admin secret")
    parser.add_argument(
        "-d",
        "--dir",
        type=Path,
        default=DEFAULT_OUTPUT_DIR,
        help="Directory to generate types file",
    )
    parser.add_argument(
        "-f",
        "--file",
        default=DEFAULT_OUTPUT_FILE,
        help="Name of the generated types file",
    )
    parser.add_argument("--endpoint", default=None, help="Fauna endpoint URL")
    return parser


def resolve_secret(cli_secret: str | None) -> str:
    """Pick the admin secret from the CLI or the environment."""
    secret = cli_secret or os.environ.get(SECRET_ENV_VAR)
    if not secret:
        raise MissingSecretError(SECRET_ENV_VAR)
    return secret


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    load_dotenv(find_dotenv(usecwd=True))
    args = build_parser().parse_args(argv)
    endpoint = args.endpoint or os.environ.get(ENDPOINT_ENV_VAR) or DEFAULT_ENDPOINT

    try:
        secret = resolve_secret(args.secret)
        records = fetch_collections(secret, endpoint=endpoint)

        if not records:
            print("No collections found in Fauna. Exiting...", file=sys.stderr)
            return

        print(f"Found collections: {', '.join(record.name for record in records)}")

        output_path = write_document(emit(records), args.dir, args.file)
        print(f"Type definitions generated at {output_path.resolve()}")
    except (SchemaError, OSError) as e:
        raise SystemExit(f"Error generating Fauna types: {e}") from e


if __name__ == "__main__":
    main()
