"""Micropub core package.

Classification and rendering of microformats2 documents received by a
Micropub endpoint. Every function here is pure: it reads an immutable
MicroformatDocument and returns a value, with no I/O.

Key Components:
    MicroformatDocument: Parsed request body (from_json / from_form)
    has_property, is_property_valid_url: Property access
    get_content_and_type: Plaintext vs. embedded HTML content
    classify: Post type discovery
    render: HTML body rendering
    select_template: Post type -> page template
    process_document: All of the above for one request

Usage:
    >>> from micropub import MicroformatDocument, MicropubConfig, process_document
    >>> doc = MicroformatDocument.from_json(payload)
    >>> post = process_document(doc, MicropubConfig())
"""
from micropub.document import (
    Html,
    MicroformatDocument,
    MicroformatValidationError,
    Nested,
    PlainText,
    PropertyValue,
    Structured,
    ValidationError,
)
from micropub.properties import (
    ContentAndType,
    ContentKind,
    get_content_and_type,
    has_property,
    is_property_valid_url,
)
from micropub.post_types import PostType, classify, derive_title
from micropub.render import render
from micropub.templates import MicropubConfig, select_template
from micropub.processor import NewPost, process_document

__all__ = [
    "Html",
    "MicroformatDocument",
    "MicroformatValidationError",
    "Nested",
    "PlainText",
    "PropertyValue",
    "Structured",
    "ValidationError",
    "ContentAndType",
    "ContentKind",
    "get_content_and_type",
    "has_property",
    "is_property_valid_url",
    "PostType",
    "classify",
    "derive_title",
    "render",
    "MicropubConfig",
    "select_template",
    "NewPost",
    "process_document",
]
