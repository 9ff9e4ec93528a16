"""Publish command wiring for Quill CLI."""

from __future__ import annotations

import argparse
import sys
from typing import Any

from core.constants import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_JQ_FILTER,
    DEFAULT_MAX_IN_FLIGHT_BATCHES,
    PUBLISH_SUCCESS_MESSAGE,
)
from core.types import PublishOptions, RunStatus
from store.client_sdk import QuillClient


def add_publish_command(subparsers: Any) -> None:
    """Register publish subcommand."""
    parser = subparsers.add_parser(
        "publish",
        help="Publish statements from newline-delimited JSON read from a file or stdin",
    )
    parser.add_argument("namespace", help="Namespace to publish statements into")
    parser.add_argument("schema_reference", help="Object id of the target self-describing schema")
    parser.add_argument("source", nargs="?", help="Input file or s3://bucket/key, stdin if omitted")
    parser.add_argument(
        "--id-filter",
        required=True,
        help="jq filter producing the record identifier, applied after --jq-filter",
    )
    parser.add_argument(
        "--jq-filter",
        default=DEFAULT_JQ_FILTER,
        help="jq filter used to pre-process each input record",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=DEFAULT_BATCH_SIZE,
        help="Records per store/publish call pair",
    )
    parser.add_argument(
        "--compound",
        type=int,
        help="Publish compound statements of this many records",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Only extract ids and print them",
    )
    parser.add_argument(
        "--skip-schema-validation",
        action="store_true",
        help="Do not validate records against the schema; use only for pre-validated input",
    )
    parser.add_argument(
        "--max-in-flight",
        type=int,
        default=DEFAULT_MAX_IN_FLIGHT_BATCHES,
        help="Maximum number of batches published concurrently",
    )


def run_publish_command(client: QuillClient, args: argparse.Namespace) -> int:
    """Handle publish command.

    Args:
        client: SDK client.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    options = PublishOptions(
        namespace=args.namespace,
        schema_reference=args.schema_reference,
        id_filter=args.id_filter,
        jq_filter=args.jq_filter,
        source_uri=args.source,
        batch_size=args.batch_size,
        compound=args.compound,
        dry_run=args.dry_run,
        skip_schema_validation=args.skip_schema_validation,
        max_in_flight=args.max_in_flight,
    )
    outcome = client.publish(options)
    for failure in outcome.errors:
        print(f"Error publishing statements: {failure.message}", file=sys.stderr)
    if outcome.status is RunStatus.INPUT_READ_FAILED:
        print(f"Error reading from input: {outcome.input_error}", file=sys.stderr)
    if not outcome.succeeded:
        return 1
    if not options.dry_run:
        print(PUBLISH_SUCCESS_MESSAGE)
    return 0
