"""Record transforms.

This module composes jq filters, extracts record identifiers, and
validates payloads against self-describing schemas.
"""
