"""Core constants used across Quill modules.

This module centralizes non-domain-specific constants.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

DEFAULT_API_URL = "http://localhost:9002"
DEFAULT_REQUEST_TIMEOUT_SECONDS = 30.0
DEFAULT_BATCH_SIZE = 1000
DEFAULT_COMPOUND_SIZE = 1
DEFAULT_MAX_IN_FLIGHT_BATCHES = 8
DEFAULT_JQ_FILTER = "."
DEFAULT_LOG_LEVEL = "INFO"
LOG_LEVEL_ENV_VAR = "QUILL_LOG_LEVEL"
STDIN_SOURCE_NAME = "standard input"
STDIN_SOURCE_URI = "-"
SCHEMA_REF_FIELD = "schemaRef"
SCHEMA_DATA_FIELD = "data"
SCHEMA_SELF_FIELD = "self"
SCHEMA_DESCRIPTOR_FIELDS = ("vendor", "name", "format", "version")
COMPOSED_ID_FIELD = "id"
COMPOSED_OBJECT_FIELD = "object"
NDJSON_CONTENT_TYPE = "application/x-ndjson"
PUBLISH_SUCCESS_MESSAGE = "All statements published successfully"
