"""Schema Package - JSON Schema Loading and Validation.

Loads the JSON schemas used to validate incoming Micropub requests once at
import time and exposes them as module-level constants.

Available Schemas:
    MF2_DOCUMENT_SCHEMA: JSON Schema for microformats2 JSON documents
        ({"type": [...], "properties": {...}}) received by the Micropub
        endpoint. Based on JSON Schema Draft 7.

Usage Patterns:
    # Direct import (most common):
    from schema import MF2_DOCUMENT_SCHEMA
    validate(instance=payload, schema=MF2_DOCUMENT_SCHEMA)

    # Function-based access (for dynamic use):
    from schema import get_mf2_document_schema
    schema = get_mf2_document_schema()

Error Handling:
    If schema files are missing or contain invalid JSON, the import
    fails with a message pointing to the expected file location.
"""
from .schema import MF2_DOCUMENT_SCHEMA, get_mf2_document_schema

__all__ = ["MF2_DOCUMENT_SCHEMA", "get_mf2_document_schema"]
