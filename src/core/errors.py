"""Quill exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Data-quality errors abort a run while batch errors stay isolated
to the batch that raised them.
"""

from __future__ import annotations


class QuillError(Exception):
    """Base exception for all Quill failures."""


class QuillConfigError(QuillError):
    """Raised for invalid runtime configuration or publish options."""


class QuillIngestError(QuillError):
    """Raised when an input source cannot be opened."""


class QuillRetrievalError(QuillError):
    """Raised when the target schema cannot be fetched or parsed."""


class QuillSchemaFormatError(QuillRetrievalError):
    """Raised when a fetched document is not a self-describing schema."""


class QuillDataQualityError(QuillError):
    """Raised for records that fail transform, identifier or schema checks."""


class QuillRemoteError(QuillError):
    """Raised for transport, status, or decoding failures of the remote node."""


class QuillBatchError(QuillError):
    """Raised when storing or publishing one batch fails."""


class QuillDependencyError(QuillError):
    """Raised when an optional runtime dependency is missing."""
