#!/usr/bin/env python3
"""
Unified CLI for fauna_typegen.

Usage:
    python -m fauna_typegen <command> [options]

Commands:
    generate    Generate TypeScript types from a live Fauna database
    codegen     Generate TypeScript types from local schema files

Examples:
    python -m fauna_typegen generate --secret=$FAUNA_ADMIN_KEY --dir=src/fauna-typed
    python -m fauna_typegen codegen schemas/ --file=types.ts
"""

from __future__ import annotations

import sys


def cmd_generate(args: list[str]) -> int:
    """Generate types from Fauna."""
    from fauna_typegen import generate_fauna_types
    try:
        generate_fauna_types.main(args)
        return 0
    except SystemExit as e:
        if isinstance(e.code, int):
            return e.code
        print(e.code, file=sys.stderr)
        return 1


def cmd_codegen(args: list[str]) -> int:
    """Generate types from schema files."""
    from fauna_typegen.type_codegen.main import main as codegen_main
    try:
        codegen_main(args)
        return 0
    except SystemExit as e:
        if isinstance(e.code, int):
            return e.code
        print(e.code, file=sys.stderr)
        return 1


COMMANDS = {
    "generate": (cmd_generate, "Generate TypeScript types from a live Fauna database"),
    "codegen": (cmd_codegen, "Generate TypeScript types from local schema files"),
}


def main() -> int:
    if len(sys.argv) < 2 or sys.argv[1] in ("-h", "--help"):
        print(__doc__)
        print("Available commands:")
        for name, (_, desc) in COMMANDS.items():
            print(f"  {name:12} {desc}")
        print("\nUse '<command> --help' for command-specific options.")
        return 0

    command = sys.argv[1]
    args = sys.argv[2:]

    if command not in COMMANDS:
        print(f"Unknown command: {command}")
        print(f"Available commands: {', '.join(COMMANDS.keys())}")
        return 1

    handler, _ = COMMANDS[command]
    return handler(args)


if __name__ == "__main__":
    sys.exit(main())
