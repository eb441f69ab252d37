"""
Post type discovery.

Implements the IndieWeb post-type-discovery algorithm as an ordered list of
(predicate, PostType) rules. The first rule whose predicate matches decides
the type; NOTE is the catch-all, so classification never fails.

References:
    - Post Type Discovery: https://www.w3.org/TR/post-type-discovery/

Usage:
    >>> from micropub.post_types import classify, PostType
    >>> classify(doc)
    <PostType.REPLY: 'reply'>
"""
import logging
from enum import Enum
from typing import Callable, List, Tuple

from micropub.document import MicroformatDocument, PlainText, ValidationError
from micropub.properties import get_plaintext, has_property, normalize_whitespace


logger = logging.getLogger(__name__)

# Maximum length of a title derived from post content
MAX_TITLE_LENGTH = 60


class PostType(str, Enum):
    NOTE = "note"
    ARTICLE = "article"
    REPLY = "reply"
    LIKE = "like"
    RSVP = "rsvp"
    BOOKMARK = "bookmark"
    REPOST = "repost"
    PHOTO = "photo"
    VIDEO = "video"


Rule = Tuple[Callable[[MicroformatDocument], bool], PostType]


def _present(name: str) -> Callable[[MicroformatDocument], bool]:
    def predicate(doc: MicroformatDocument) -> bool:
        return has_property(doc, name)
    predicate.__name__ = f"has_{name.replace('-', '_')}"
    return predicate


def has_rsvp(doc: MicroformatDocument) -> bool:
    value = doc.first("rsvp")
    return isinstance(value, PlainText) and bool(value.value.strip())


def _content_text(doc: MicroformatDocument) -> str:
    try:
        return get_plaintext(doc, "content")
    except ValidationError as e:
        # Unreadable content never blocks classification
        logger.debug(f"Ignoring content during classification: {e}")
        return ""


def has_distinct_title(doc: MicroformatDocument) -> bool:
    """Return True if the document's name is a real title.

    A name that the normalized content text starts with was generated from
    the content (as many feed readers do) and does not make an article.
    """
    value = doc.first("name")
    if not isinstance(value, PlainText):
        return False

    name = normalize_whitespace(value.value)
    if not name:
        return False

    content = normalize_whitespace(_content_text(doc))
    if not content:
        return True

    return not content.startswith(name)


RULES: List[Rule] = [
    (has_rsvp, PostType.RSVP),
    (_present("in-reply-to"), PostType.REPLY),
    (_present("like-of"), PostType.LIKE),
    (_present("repost-of"), PostType.REPOST),
    (_present("bookmark-of"), PostType.BOOKMARK),
    (_present("photo"), PostType.PHOTO),
    (_present("video"), PostType.VIDEO),
    (has_distinct_title, PostType.ARTICLE),
]


def classify(doc: MicroformatDocument) -> PostType:
    """Return the post type of a document.

    Args:
        doc: The microformats2 document to classify

    Returns:
        The PostType of the first matching rule, or PostType.NOTE

    Example:
        >>> doc = MicroformatDocument.from_json({
        ...     "type": ["h-entry"],
        ...     "properties": {"in-reply-to": ["invalid url"], "content": ["hi"]},
        ... })
        >>> classify(doc)
        <PostType.REPLY: 'reply'>
    """
    for predicate, post_type in RULES:
        if predicate(doc):
            logger.debug(f"Post type {post_type.value} matched by {predicate.__name__}")
            return post_type
    return PostType.NOTE


def trim_to_words(text: str, max_length: int) -> str:
    """Trim text to max_length, cutting at word boundaries and adding ellipsis.

    Args:
        text: Text to trim
        max_length: Maximum length for the trimmed text

    Returns:
        Trimmed text with ellipsis if needed
    """
    if len(text) <= max_length:
        return text

    # Reserve 3 characters for ellipsis
    max_length -= 3

    trimmed = text[:max_length]
    last_space = trimmed.rfind(' ')

    if last_space > 0:
        return trimmed[:last_space] + "..."
    else:
        return trimmed + "..."


def derive_title(doc: MicroformatDocument, post_type: PostType) -> str:
    """Pick a page title for the content store.

    Uses the name property when present, otherwise the start of the content
    text, otherwise the post type itself (e.g. "like").
    """
    name = doc.first("name")
    if isinstance(name, PlainText) and normalize_whitespace(name.value):
        return normalize_whitespace(name.value)

    content = normalize_whitespace(_content_text(doc))
    if content:
        return trim_to_words(content, MAX_TITLE_LENGTH)

    return post_type.value
