"""Quill CLI entry points.
This module exposes publish, put-data, and statement commands.
It maps argparse commands onto SDK calls.
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from typing import Sequence

from cli.publish_command import add_publish_command, run_publish_command
from cli.put_data_command import add_put_data_command, run_put_data_command
from cli.statement_command import add_statement_command, run_statement_command
from core.config import QuillConfig, normalize_api_url
from core.errors import QuillError
from store.client_sdk import QuillClient


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="quill", description="Quill statement publishing CLI")
    parser.add_argument("--api-url", help="Override QUILL_API_URL for this command")
    subparsers = parser.add_subparsers(dest="command", required=True)
    add_publish_command(subparsers)
    add_put_data_command(subparsers)
    add_statement_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the Quill CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        client = _build_client(args.api_url)
        return _dispatch_command(parser, client, args)
    except QuillError as error:
        print(str(error), file=sys.stderr)
        return 1


def _dispatch_command(
    parser: argparse.ArgumentParser,
    client: QuillClient,
    args: argparse.Namespace,
) -> int:
    """Route parsed args to a command handler."""
    if args.command == "publish":
        return run_publish_command(client, args)
    if args.command == "put-data":
        return run_put_data_command(client, args)
    if args.command == "statement":
        return run_statement_command(client, args)
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_client(api_url: str | None) -> QuillClient:
    """Build SDK client with optional API URL override.

    Args:
        api_url: Optional override URL.

    Returns:
        Configured SDK client.
    """
    config = QuillConfig.from_env()
    if api_url:
        config = replace(config, api_url=normalize_api_url(api_url))
    return QuillClient(config)
