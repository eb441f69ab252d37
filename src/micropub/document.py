"""
Microformats2 document model.

A Micropub create request arrives either as microformats2 JSON
({"type": ["h-entry"], "properties": {...}}) or as a form-encoded body
(h=entry&content=...). Both are converted into an immutable
MicroformatDocument whose property values are one of four explicit
variants:

    PlainText   a bare string ("lorem ipsum", "https://example.com/")
    Html        an object carrying embedded HTML ({"html": "<b>hi</b>"})
    Nested      another mf2 object ({"type": ["h-cite"], "properties": {...}})
    Structured  any other object ({"value": "https://...", "alt": "..."})

Usage:
    >>> from micropub.document import MicroformatDocument
    >>> doc = MicroformatDocument.from_json(
    ...     {"type": ["h-entry"], "properties": {"content": ["lorem ipsum"]}}
    ... )
    >>> doc.first("content")
    PlainText(value='lorem ipsum')
"""
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Union

from jsonschema import Draft7Validator
from jsonschema.exceptions import best_match

from schema import MF2_DOCUMENT_SCHEMA


logger = logging.getLogger(__name__)

# Form keys that carry request metadata rather than post properties
_RESERVED_FORM_KEYS = ("access_token", "h", "action", "url")

validator = Draft7Validator(MF2_DOCUMENT_SCHEMA)


class ValidationError(Exception):
    """Raised when a Micropub request carries a value of an unusable shape."""


class MicroformatValidationError(ValidationError):
    """Raised when a request body is not a valid microformats2 document."""


@dataclass(frozen=True)
class PlainText:
    value: str


@dataclass(frozen=True)
class Html:
    html: str


@dataclass(frozen=True)
class Nested:
    document: "MicroformatDocument"


@dataclass(frozen=True)
class Structured:
    """A JSON object that is neither embedded HTML nor an mf2 object."""
    fields: Mapping[str, Any]

    def get(self, key: str, default: Any = None) -> Any:
        return self.fields.get(key, default)


PropertyValue = Union[PlainText, Html, Nested, Structured]


@dataclass(frozen=True)
class MicroformatDocument:
    """An immutable microformats2 object.

    Attributes:
        types: Ordered root types, e.g. ("h-entry",)
        properties: Property name -> non-empty tuple of PropertyValue.
            Absent properties are not present in the mapping.
    """
    types: Tuple[str, ...]
    properties: Mapping[str, Tuple[PropertyValue, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @property
    def primary_type(self) -> str:
        """First root type, or "h-entry" when the document has none."""
        return self.types[0] if self.types else "h-entry"

    def values(self, name: str) -> Tuple[PropertyValue, ...]:
        return self.properties.get(name, ())

    def first(self, name: str) -> Optional[PropertyValue]:
        values = self.values(name)
        return values[0] if values else None

    @classmethod
    def create(
        cls,
        types: Iterable[str],
        properties: Mapping[str, Iterable[PropertyValue]],
    ) -> "MicroformatDocument":
        """Build a document from already-typed values, dropping empty properties."""
        frozen = {
            name: tuple(values)
            for name, values in properties.items()
        }
        return cls(
            types=tuple(types),
            properties=MappingProxyType({k: v for k, v in frozen.items() if v}),
        )

    @classmethod
    def from_json(cls, payload: Any) -> "MicroformatDocument":
        """Validate a decoded JSON body and convert it to a document.

        Args:
            payload: Decoded JSON request body

        Returns:
            MicroformatDocument with every value converted to a PropertyValue

        Raises:
            MicroformatValidationError: If the payload does not match the
                microformats2 document schema

        Example:
            >>> doc = MicroformatDocument.from_json({
            ...     "type": ["h-entry"],
            ...     "properties": {"content": [{"html": "<b>hi</b>"}]},
            ... })
            >>> doc.first("content")
            Html(html='<b>hi</b>')
        """
        error = best_match(validator.iter_errors(payload))
        if error is not None:
            path = ".".join(str(p) for p in error.absolute_path) or "root"
            raise MicroformatValidationError(f"Invalid microformats2 document at {path}: {error.message}")

        return _document_from_mapping(payload)

    @classmethod
    def from_form(cls, form: Any) -> "MicroformatDocument":
        """Convert a form-encoded Micropub request to a document.

        ``h=entry`` becomes the root type ``h-entry``; ``category[]`` style
        keys are folded to ``category``; ``access_token`` and ``mp-*``
        command keys are dropped. Every value is plain text.

        Args:
            form: A werkzeug MultiDict or a plain mapping of key -> str or list

        Raises:
            MicroformatValidationError: If the ``h`` value is missing or empty
        """
        h = _form_values(form, "h")
        if not h or not h[0].strip():
            raise MicroformatValidationError("Form-encoded request is missing the 'h' parameter")

        properties: Dict[str, list] = {}
        for key in form.keys():
            name = key[:-2] if key.endswith("[]") else key
            if name in _RESERVED_FORM_KEYS or name.startswith("mp-"):
                continue
            values = [PlainText(v) for v in _form_values(form, key) if v != ""]
            if values:
                properties.setdefault(name, []).extend(values)

        return cls.create([f"h-{h[0].strip()}"], properties)


def _form_values(form: Any, key: str) -> list:
    if hasattr(form, "getlist"):
        return list(form.getlist(key))
    value = form.get(key)
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _document_from_mapping(data: Mapping[str, Any]) -> MicroformatDocument:
    # Nested objects are only shallowly covered by the schema
    types = data.get("type", [])
    if not isinstance(types, list) or not all(isinstance(t, str) for t in types):
        raise MicroformatValidationError(f"Invalid microformats2 type list: {types!r}")

    raw_properties = data.get("properties", {})
    if not isinstance(raw_properties, dict):
        raise MicroformatValidationError("Microformats2 properties must be an object")

    properties = {}
    for name, values in raw_properties.items():
        if not isinstance(values, list):
            raise MicroformatValidationError(f"Property '{name}' must be a list of values")
        properties[name] = [_convert_value(v) for v in values]

    return MicroformatDocument.create(types, properties)


def _convert_value(raw: Any) -> PropertyValue:
    if isinstance(raw, str):
        return PlainText(raw)
    if isinstance(raw, dict):
        if "html" in raw:
            if not isinstance(raw["html"], str):
                raise MicroformatValidationError("The html field of a value must be a string")
            # {"html": "", "value": "text"} carries its content as plain text
            fallback = raw.get("value")
            if not raw["html"].strip() and isinstance(fallback, str) and fallback.strip():
                return PlainText(fallback)
            return Html(raw["html"])
        if "type" in raw and "properties" in raw:
            return Nested(_document_from_mapping(raw))
        return Structured(MappingProxyType(dict(raw)))
    raise MicroformatValidationError(f"Unsupported property value: {raw!r}")
