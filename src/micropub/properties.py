"""
Property access helpers for microformats2 documents.

Only the first value of a property is consulted here. Absent properties are
a normal result, never an error.

Usage:
    >>> from micropub.properties import has_property, is_property_valid_url
    >>> has_property(doc, "in-reply-to")
    True
    >>> is_property_valid_url(doc, "in-reply-to")
    False
"""
import logging
import re
from dataclasses import dataclass
from enum import Enum
from html.parser import HTMLParser
from typing import Optional
from urllib.parse import urlparse

from micropub.document import (
    Html,
    MicroformatDocument,
    Nested,
    PlainText,
    PropertyValue,
    Structured,
    ValidationError,
)


logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")


class ContentKind(str, Enum):
    PLAINTEXT = "plaintext"
    HTML = "html"


@dataclass(frozen=True)
class ContentAndType:
    """Resolved content of a property.

    Attributes:
        kind: ContentKind.HTML when the value was an object with an html field,
              ContentKind.PLAINTEXT otherwise
        value: The plain string or the embedded HTML
    """
    kind: ContentKind
    value: str


class TextExtractor(HTMLParser):
    """HTML parser collecting the text nodes of a fragment."""

    def __init__(self):
        super().__init__(convert_charrefs=True)
        self.parts = []

    def handle_data(self, data):
        self.parts.append(data)

    def text(self) -> str:
        return "".join(self.parts)


def has_property(doc: MicroformatDocument, name: str) -> bool:
    """Return True if the property exists and holds at least one value."""
    return len(doc.values(name)) > 0


def is_valid_url(url: str) -> bool:
    """Return True for an absolute URL with both a scheme and a host."""
    try:
        parsed = urlparse(url.strip())
    except ValueError:
        return False
    return bool(parsed.scheme and parsed.netloc and parsed.hostname)


def is_property_valid_url(doc: MicroformatDocument, name: str) -> bool:
    """Check whether the first value of a property is an absolute URL.

    Non-string values (objects, nested mf2 items) are treated as invalid.

    Example:
        >>> doc = MicroformatDocument.from_json(
        ...     {"type": ["h-entry"], "properties": {"in-reply-to": ["invalid url"]}}
        ... )
        >>> is_property_valid_url(doc, "in-reply-to")
        False
    """
    if not has_property(doc, name):
        return False

    value = doc.first(name)
    if not isinstance(value, PlainText):
        return False

    return is_valid_url(value.value)


def get_content_and_type(doc: MicroformatDocument, name: str) -> ContentAndType:
    """Resolve a property into plaintext or embedded HTML.

    Args:
        doc: The document to read from
        name: Property name, usually "content"

    Returns:
        ContentAndType; an absent property yields empty plaintext

    Raises:
        ValidationError: If the first value is a nested mf2 object or an
            object without an html field
    """
    value = doc.first(name)

    if value is None:
        return ContentAndType(ContentKind.PLAINTEXT, "")
    if isinstance(value, PlainText):
        return ContentAndType(ContentKind.PLAINTEXT, value.value)
    if isinstance(value, Html):
        return ContentAndType(ContentKind.HTML, value.html)
    if isinstance(value, (Nested, Structured)):
        raise ValidationError(
            f"Property '{name}' must be a string or an object with an 'html' field"
        )
    raise ValidationError(f"Property '{name}' has an unknown value type: {type(value).__name__}")


def html_to_text(fragment: str) -> str:
    """Return the text content of an HTML fragment."""
    extractor = TextExtractor()
    extractor.feed(fragment)
    extractor.close()
    return extractor.text()


def get_plaintext(doc: MicroformatDocument, name: str) -> str:
    """Return the text of a property, stripping tags from embedded HTML.

    Shapes the content resolver rejects raise ValidationError.
    """
    content = get_content_and_type(doc, name)
    if content.kind is ContentKind.PLAINTEXT:
        return content.value
    return html_to_text(content.value)


def normalize_whitespace(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def get_url(value: Optional[PropertyValue]) -> Optional[str]:
    """Return the URL carried by a property value, if it is a valid one.

    Plain strings are used as-is; nested citations (h-cite) use their first
    url property; structured objects use their "value" field.
    """
    url = None
    if isinstance(value, PlainText):
        url = value.value
    elif isinstance(value, Nested):
        nested_url = value.document.first("url")
        if isinstance(nested_url, PlainText):
            url = nested_url.value
    elif isinstance(value, Structured):
        candidate = value.get("value")
        if isinstance(candidate, str):
            url = candidate

    if url is None or not is_valid_url(url):
        return None
    return url.strip()
