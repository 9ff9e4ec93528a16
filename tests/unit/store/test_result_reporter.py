"""Unit tests for batch result reporting."""

from __future__ import annotations

import math

import pytest

from core.types import BatchResult, StoredStatement
from store.result_reporter import (
    build_report_entries,
    format_dry_run_line,
    format_report_entry,
    print_batch_results,
)


def _result(count: int, compound_size: int) -> BatchResult:
    addresses = tuple(f"addr-{index}" for index in range(count))
    statements = tuple(
        StoredStatement(object=address, refs=(f"r{index}",)) for index, address in enumerate(addresses)
    )
    ids = tuple(f"stmt-{group}" for group in range(math.ceil(count / compound_size)))
    return BatchResult(addresses, ids, statements, compound_size)


@pytest.mark.parametrize(("count", "compound_size"), [(1, 1), (5, 2), (6, 3), (4, 5)])
def test_build_report_entries_slices_consecutive_groups(count: int, compound_size: int) -> None:
    """Group g should hold statements [g*k, min((g+1)*k, N))."""
    entries = build_report_entries(_result(count, compound_size))

    assert len(entries) == math.ceil(count / compound_size)
    for group, entry in enumerate(entries):
        expected = [f"r{index}" for index in range(group * compound_size, min((group + 1) * compound_size, count))]
        assert [member.refs[0] for member in entry.members] == expected


def test_build_report_entries_pairs_members_with_addresses() -> None:
    entries = build_report_entries(_result(3, 2))

    assert [member.object for member in entries[1].members] == ["addr-2"]


def test_format_report_entry_renders_members() -> None:
    entry = build_report_entries(_result(1, 1))[0]

    text = format_report_entry(entry)

    assert text.startswith("\nstatement id: stmt-0\n") and '"object": "addr-0"' in text


def test_print_batch_results_prints_every_group(capsys) -> None:
    print_batch_results(_result(4, 2))

    assert capsys.readouterr().out.count("statement id:") == 2


def test_format_dry_run_line() -> None:
    assert format_dry_run_line(("a",), ()) == 'refs: ["a"], tags: []'
