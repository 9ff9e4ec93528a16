"""Runtime configuration model for Quill.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os

from core.constants import DEFAULT_API_URL, DEFAULT_REQUEST_TIMEOUT_SECONDS
from core.errors import QuillConfigError
from core.types import PublishOptions


@dataclass(frozen=True)
class QuillConfig:
    """Validated runtime configuration.

    Attributes:
        api_url: Base URL of the remote node HTTP API.
        request_timeout: Timeout in seconds for each remote call.
        s3_region: Optional default AWS region for S3 input sources.
        s3_profile: Optional AWS profile for boto3 session initialization.
    """

    api_url: str
    request_timeout: float
    s3_region: str | None
    s3_profile: str | None

    @classmethod
    def from_env(cls) -> "QuillConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            QuillConfigError: If environment values are invalid.
        """
        api_url = normalize_api_url(os.getenv("QUILL_API_URL", DEFAULT_API_URL))
        timeout_value = os.getenv("QUILL_REQUEST_TIMEOUT", str(DEFAULT_REQUEST_TIMEOUT_SECONDS))
        return cls(
            api_url=api_url,
            request_timeout=_parse_request_timeout(timeout_value),
            s3_region=os.getenv("QUILL_S3_REGION"),
            s3_profile=os.getenv("QUILL_S3_PROFILE"),
        )


def normalize_api_url(raw_value: str) -> str:
    """Validate the remote API URL value.

    Args:
        raw_value: Raw string from environment or a CLI override.

    Returns:
        URL without a trailing slash.

    Raises:
        QuillConfigError: If value is not an http(s) URL.
    """
    if not raw_value.startswith(("http://", "https://")):
        raise QuillConfigError(
            f"Invalid QUILL_API_URL value '{raw_value}': expected an http:// or https:// URL."
        )
    return raw_value.rstrip("/")


def _parse_request_timeout(raw_value: str) -> float:
    """Parse the request timeout environment value.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Positive timeout in seconds.

    Raises:
        QuillConfigError: If value is not a positive number.
    """
    try:
        timeout = float(raw_value)
    except ValueError as error:
        raise QuillConfigError(
            "Invalid QUILL_REQUEST_TIMEOUT value: "
            f"expected number of seconds, got '{raw_value}'."
        ) from error
    if timeout <= 0:
        raise QuillConfigError(
            f"Invalid QUILL_REQUEST_TIMEOUT value: expected a positive number, got {timeout}."
        )
    return timeout


def validate_publish_options(options: PublishOptions) -> None:
    """Validate per-run publish options.

    Args:
        options: Publish options from the CLI or SDK.

    Raises:
        QuillConfigError: If any option is out of range.
    """
    if not options.namespace:
        raise QuillConfigError("Publish namespace must not be empty.")
    if not options.schema_reference:
        raise QuillConfigError("Schema reference must not be empty.")
    if not options.id_filter.strip():
        raise QuillConfigError("An id filter is required to extract record identifiers.")
    if options.batch_size < 1:
        raise QuillConfigError(f"Batch size must be at least 1, got {options.batch_size}.")
    if options.compound is not None and options.compound < 1:
        raise QuillConfigError(f"Compound size must be at least 1, got {options.compound}.")
    if options.max_in_flight < 1:
        raise QuillConfigError(f"max_in_flight must be at least 1, got {options.max_in_flight}.")
