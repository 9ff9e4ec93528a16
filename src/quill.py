"""Public SDK surface for Quill.

This module provides a stable import path for SDK users.
It re-exports the primary client and typed option models.
"""

from __future__ import annotations

from core.config import QuillConfig
from core.types import PublishOptions, RunOutcome, RunStatus, UploadOutcome
from store.client_sdk import QuillClient
from transforms.filter_composer import compose_jq_filters

__all__ = [
    "PublishOptions",
    "QuillClient",
    "QuillConfig",
    "RunOutcome",
    "RunStatus",
    "UploadOutcome",
    "compose_jq_filters",
]
