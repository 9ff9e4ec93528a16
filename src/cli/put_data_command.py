"""Raw data upload command wiring for Quill CLI."""

from __future__ import annotations

import argparse
import sys
from typing import Any

from core.constants import DEFAULT_BATCH_SIZE
from store.client_sdk import QuillClient


def add_put_data_command(subparsers: Any) -> None:
    """Register put-data subcommand."""
    parser = subparsers.add_parser(
        "put-data",
        help="Store newline-delimited JSON objects and print their content addresses",
    )
    parser.add_argument("source", nargs="?", help="Input file or s3://bucket/key, stdin if omitted")
    parser.add_argument(
        "--batch-size",
        type=int,
        default=DEFAULT_BATCH_SIZE,
        help="Objects per store call",
    )


def run_put_data_command(client: QuillClient, args: argparse.Namespace) -> int:
    """Handle put-data command."""
    outcome = client.put_data(args.source, args.batch_size)
    for message in outcome.errors:
        print(message, file=sys.stderr)
    if outcome.input_error is not None:
        print(f"Error reading from input: {outcome.input_error}", file=sys.stderr)
    return 0 if outcome.succeeded else 1
