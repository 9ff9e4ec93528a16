"""Batch result reporting.

This module slices correlated batch results into compound groups and
prints one human-readable entry per published statement id.
"""

from __future__ import annotations

import json

from core.types import BatchResult, ReportEntry, ReportMember


def build_report_entries(result: BatchResult) -> list[ReportEntry]:
    """Group a batch result by statement id.

    Group ``g`` covers statements ``[g * k, g * k + k)`` where ``k`` is the
    compound size; the publisher guarantees groups were formed that way.

    Args:
        result: Correlated batch result.

    Returns:
        One entry per statement id in group order.
    """
    size = result.compound_size
    entries: list[ReportEntry] = []
    for group_index, statement_id in enumerate(result.statement_ids):
        start = group_index * size
        addresses = result.content_addresses[start : start + size]
        statements = result.statements[start : start + size]
        members = tuple(
            ReportMember(object=address, refs=statement.refs, tags=statement.tags)
            for address, statement in zip(addresses, statements)
        )
        entries.append(ReportEntry(statement_id=statement_id, members=members))
    return entries


def format_report_entry(entry: ReportEntry) -> str:
    """Render one report entry as text."""
    members = [
        {"object": member.object, "refs": list(member.refs), "tags": list(member.tags)}
        for member in entry.members
    ]
    return f"\nstatement id: {entry.statement_id}\n{json.dumps(members, indent=2)}"


def print_batch_results(result: BatchResult) -> None:
    """Print every report entry of a batch result."""
    for entry in build_report_entries(result):
        print(format_report_entry(entry))


def format_dry_run_line(refs: tuple[str, ...], tags: tuple[str, ...]) -> str:
    """Render the dry-run line for one record."""
    return f"refs: {json.dumps(list(refs))}, tags: {json.dumps(list(tags))}"
