"""Statement lookup command wiring for Quill CLI."""

from __future__ import annotations

import argparse
import json
from typing import Any

from store.client_sdk import QuillClient


def add_statement_command(subparsers: Any) -> None:
    """Register statement subcommand."""
    parser = subparsers.add_parser("statement", help="Retrieve a statement from the node by id")
    parser.add_argument("statement_id", help="Statement id")


def run_statement_command(client: QuillClient, args: argparse.Namespace) -> int:
    """Print one statement as indented JSON."""
    statement = client.statement(args.statement_id)
    print(json.dumps(statement, indent=2, sort_keys=True))
    return 0
