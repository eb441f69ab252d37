"""
Centralized JSON Schema Loading Module.

Loads the JSON schema files that live next to this module once, at import
time, and exposes them as module-level constants.

File Location:
    Schemas are expected to be in the same directory as this module
    (src/schema/). The path is resolved using __file__ so it works
    regardless of the current working directory.

Error Handling:
    - FileNotFoundError: Schema file doesn't exist at expected path
    - json.JSONDecodeError: Schema file contains invalid JSON syntax
"""
import json
from pathlib import Path
from typing import Dict, Any

SCHEMA_DIR = Path(__file__).parent


def _load_schema(schema_filename: str) -> Dict[str, Any]:
    """
    Load a JSON schema file from the schema directory.

    Args:
        schema_filename: Name of the JSON schema file (e.g., "mf2_document_schema.json")

    Returns:
        Parsed JSON schema as a dictionary, ready for use with jsonschema library

    Raises:
        FileNotFoundError: If the schema file doesn't exist at the expected location.
        json.JSONDecodeError: If the schema file exists but contains invalid JSON.
            The message names the file that failed.

    Example:
        >>> schema = _load_schema("mf2_document_schema.json")
        >>> schema["$schema"]
        "http://json-schema.org/draft-07/schema#"
    """
    schema_path = SCHEMA_DIR / schema_filename

    if not schema_path.exists():
        raise FileNotFoundError(
            f"Schema file not found: {schema_path}. "
            f"Expected location: {SCHEMA_DIR}"
        )

    try:
        with open(schema_path, "r") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise json.JSONDecodeError(
            f"Invalid JSON in schema file {schema_filename}: {e.msg}",
            e.doc,
            e.pos
        ) from e


# Microformats2 document schema (Draft 7)
# Requires a non-empty list of h-* root types and a properties mapping whose
# values are lists of strings or objects
MF2_DOCUMENT_SCHEMA = _load_schema("mf2_document_schema.json")


def get_mf2_document_schema() -> Dict[str, Any]:
    """
    Get the microformats2 document JSON schema.

    Most code should use the direct import:
        from schema import MF2_DOCUMENT_SCHEMA

    The returned schema is the same object as the MF2_DOCUMENT_SCHEMA
    constant, so there's no additional I/O.

    Example:
        >>> schema = get_mf2_document_schema()
        >>> schema["required"]
        ['type', 'properties']
    """
    return MF2_DOCUMENT_SCHEMA
