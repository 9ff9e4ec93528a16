"""Self-describing schema checks.

This module validates fetched schema documents, validates record
payloads against them, and tags payloads with their schema reference.
"""

from __future__ import annotations

import json
from typing import Any, Mapping

from jsonschema import validators
from jsonschema.exceptions import SchemaError, best_match

from core.constants import (
    SCHEMA_DATA_FIELD,
    SCHEMA_DESCRIPTOR_FIELDS,
    SCHEMA_REF_FIELD,
    SCHEMA_SELF_FIELD,
)
from core.errors import QuillDataQualityError, QuillSchemaFormatError
from core.types import (
    SchemaDescriptor,
    SelfDescribingObject,
    SelfDescribingSchema,
    ValidationResult,
)


def validate_self_describing_schema(reference: str, document: Any) -> SelfDescribingSchema:
    """Check that a fetched document is a well-formed self-describing schema.

    Args:
        reference: Object id the document was fetched by.
        document: Decoded schema document.

    Returns:
        Validated schema.

    Raises:
        QuillSchemaFormatError: If the descriptor or JSON Schema is invalid.
    """
    if not isinstance(document, Mapping):
        raise QuillSchemaFormatError(
            f"Schema with object id {reference} is not a valid self-describing schema: "
            "expected a JSON object."
        )
    descriptor = _parse_descriptor(reference, document.get(SCHEMA_SELF_FIELD))
    validator_cls = validators.validator_for(document)
    try:
        validator_cls.check_schema(document)
    except SchemaError as error:
        raise QuillSchemaFormatError(
            f"Schema with object id {reference} is not a valid self-describing schema: "
            f"{error.message}"
        ) from error
    return SelfDescribingSchema(reference=reference, descriptor=descriptor, document=document)


def _parse_descriptor(reference: str, raw_descriptor: Any) -> SchemaDescriptor:
    """Parse the ``self`` block of a schema document."""
    if not isinstance(raw_descriptor, Mapping):
        raise QuillSchemaFormatError(
            f"Schema with object id {reference} is not a valid self-describing schema: "
            f"missing '{SCHEMA_SELF_FIELD}' descriptor."
        )
    missing = [
        name
        for name in SCHEMA_DESCRIPTOR_FIELDS
        if not isinstance(raw_descriptor.get(name), str) or not raw_descriptor.get(name)
    ]
    if missing:
        raise QuillSchemaFormatError(
            f"Schema with object id {reference} is not a valid self-describing schema: "
            f"descriptor fields {missing} must be non-empty strings."
        )
    return SchemaDescriptor(
        vendor=raw_descriptor["vendor"],
        name=raw_descriptor["name"],
        format=raw_descriptor["format"],
        version=raw_descriptor["version"],
    )


class SchemaValidator:
    """Reusable payload validator bound to one schema."""

    def __init__(self, schema: SelfDescribingSchema) -> None:
        self._schema = schema
        validator_cls = validators.validator_for(schema.document)
        self._validator = validator_cls(schema.document)

    def validate(self, payload: Any) -> ValidationResult:
        """Validate one payload.

        Args:
            payload: Decoded JSON payload.

        Returns:
            Success flag and best-match error message.
        """
        error = best_match(self._validator.iter_errors(payload))
        if error is None:
            return ValidationResult(success=True)
        return ValidationResult(success=False, error=error.message)

    def check(self, payload: Any) -> None:
        """Validate one payload and raise on failure.

        Raises:
            QuillDataQualityError: If the payload does not conform.
        """
        result = self.validate(payload)
        if not result.success:
            raise QuillDataQualityError(
                f"Record failed validation: {result.error}. "
                f"Failed object: {json.dumps(payload, indent=2)}"
            )


def validate(schema: SelfDescribingSchema, payload: Any) -> ValidationResult:
    """Validate one payload against a schema."""
    return SchemaValidator(schema).validate(payload)


def is_self_describing(obj: Any) -> bool:
    """Return whether an object already carries a schema reference."""
    return isinstance(obj, Mapping) and SCHEMA_REF_FIELD in obj


def to_self_describing(obj: Any, schema_reference: str) -> SelfDescribingObject:
    """Tag an object with the run's schema reference.

    Args:
        obj: Raw or already self-describing object.
        schema_reference: Target schema object id for the run.

    Returns:
        Self-describing object whose ``data`` is the record payload.

    Raises:
        QuillDataQualityError: If the object references a different schema
            or carries a schema reference without data.
    """
    if not is_self_describing(obj):
        return SelfDescribingObject(schema_ref=schema_reference, data=obj)
    ref = obj[SCHEMA_REF_FIELD]
    if ref != schema_reference:
        raise QuillDataQualityError(
            f"Record contains reference to a different schema ({ref}) "
            f"than the one specified {schema_reference}"
        )
    if SCHEMA_DATA_FIELD not in obj:
        raise QuillDataQualityError(
            f"Record references schema {ref} but has no '{SCHEMA_DATA_FIELD}' field. "
            f"Failed object: {json.dumps(obj, indent=2)}"
        )
    return SelfDescribingObject(schema_ref=schema_reference, data=obj[SCHEMA_DATA_FIELD])
