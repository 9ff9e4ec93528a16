"""jq filter composition.

This module combines the user content filter with the identifier
filter into one program that yields an ``{id, object}`` pair.
"""

from __future__ import annotations

from core.constants import COMPOSED_ID_FIELD, COMPOSED_OBJECT_FIELD


def compose_jq_filters(content_filter: str, id_filter: str) -> str:
    """Compose content and identifier filters into one jq program.

    The identifier filter runs on the content filter's output and is
    stringified; a null identifier stays null so it can be rejected.

    Args:
        content_filter: Filter applied to each input record.
        id_filter: Filter extracting the identifier from the filtered record.

    Returns:
        Composed jq program text.
    """
    return (
        f"{content_filter} as $output | "
        f"{{{COMPOSED_ID_FIELD}: ($output | {id_filter} | if . == null then null else tostring end), "
        f"{COMPOSED_OBJECT_FIELD}: $output}}"
    )
