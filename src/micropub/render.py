"""
Rendering of microformats2 documents into a post body.

The body is a concatenation of HTML fragments in a fixed order:

    1. context line (in-reply-to, like-of, repost-of, bookmark-of)
    2. content
    3. photos and videos
    4. RSVP response
    5. syndication links

Every fragment starts with a line break and carries microformats2 class
names (u-in-reply-to, p-content, e-content, u-photo, p-rsvp, u-syndication)
so the stored page re-parses as the same h-entry. Rendering is a pure
function of its inputs.

Usage:
    >>> from micropub.render import render
    >>> render(doc, PostType.NOTE, wrap_root=False)
    '\\n<p class="p-content">lorem ipsum</p>'
"""
import html
import logging
from typing import Callable, Dict, List, Tuple

from micropub.document import MicroformatDocument, Nested, PlainText, Structured
from micropub.post_types import PostType
from micropub.properties import ContentKind, get_content_and_type, get_url


logger = logging.getLogger(__name__)

# Post type -> (property holding the target URL, lead-in text)
CONTEXT_PROPERTIES: Dict[PostType, Tuple[str, str]] = {
    PostType.REPLY: ("in-reply-to", "In reply to"),
    PostType.RSVP: ("in-reply-to", "In reply to"),
    PostType.LIKE: ("like-of", "Liked"),
    PostType.REPOST: ("repost-of", "Reposted"),
    PostType.BOOKMARK: ("bookmark-of", "Bookmarked"),
}

SYNDICATION_LEAD_IN = "Also posted on"
RSVP_LEAD_IN = "RSVP"


def _escape(text: str) -> str:
    return html.escape(text, quote=True)


def render_context(doc: MicroformatDocument, post_type: PostType) -> str:
    """Render the linked reference line for replies, likes, reposts and bookmarks.

    Returns an empty string when the post type has no context or the target
    is not a valid absolute URL.
    """
    if post_type not in CONTEXT_PROPERTIES:
        return ""

    name, lead_in = CONTEXT_PROPERTIES[post_type]
    value = doc.first(name)
    url = get_url(value)
    if url is None:
        if value is not None:
            logger.debug(f"Omitting {name} context: no valid URL")
        return ""

    link_text = url
    if isinstance(value, Nested):
        cite_name = value.document.first("name")
        if isinstance(cite_name, PlainText) and cite_name.value.strip():
            link_text = cite_name.value.strip()

    return (
        f'\n<p class="{name}">{lead_in} '
        f'<a class="u-{name}" href="{_escape(url)}">{_escape(link_text)}</a></p>'
    )


def render_content(doc: MicroformatDocument, post_type: PostType) -> str:
    """Render the content property.

    Plaintext is escaped and wrapped in a p-content paragraph, with line
    breaks kept as <br>. Embedded HTML is inserted verbatim in an e-content
    container.

    Raises:
        ValidationError: If the content value has an unsupported shape
    """
    content = get_content_and_type(doc, "content")
    if not content.value.strip():
        return ""

    if content.kind is ContentKind.HTML:
        return f'\n<div class="e-content">{content.value}</div>'

    lines = content.value.strip().splitlines()
    text = "<br>\n".join(_escape(line) for line in lines)
    return f'\n<p class="p-content">{text}</p>'


def _media_items(doc: MicroformatDocument, name: str) -> List[tuple]:
    items = []
    for value in doc.values(name):
        url = get_url(value)
        if url is None:
            logger.debug(f"Skipping {name} value without a valid URL")
            continue
        alt = ""
        if isinstance(value, Structured) and isinstance(value.get("alt"), str):
            alt = value.get("alt")
        items.append((url, alt))
    return items


def render_media(doc: MicroformatDocument, post_type: PostType) -> str:
    """Render photo and video properties as u-photo / u-video elements."""
    fragments = []

    photos = _media_items(doc, "photo")
    if photos:
        images = "".join(
            f'<img class="u-photo" src="{_escape(url)}" alt="{_escape(alt)}">'
            for url, alt in photos
        )
        fragments.append(f'\n<p class="photo">{images}</p>')

    for url, _ in _media_items(doc, "video"):
        fragments.append(f'\n<video class="u-video" src="{_escape(url)}" controls></video>')

    return "".join(fragments)


def render_rsvp(doc: MicroformatDocument, post_type: PostType) -> str:
    """Render the RSVP response for rsvp posts (yes, no, maybe, interested)."""
    if post_type is not PostType.RSVP:
        return ""

    value = doc.first("rsvp")
    if not isinstance(value, PlainText) or not value.value.strip():
        return ""

    response = _escape(value.value.strip())
    return f'\n<p class="rsvp">{RSVP_LEAD_IN} <data class="p-rsvp" value="{response}">{response}</data></p>'


def render_syndication(doc: MicroformatDocument, post_type: PostType) -> str:
    """Render syndication links, skipping values that are not valid URLs."""
    links = []
    for value in doc.values("syndication"):
        url = get_url(value)
        if url is None:
            continue
        escaped = _escape(url)
        links.append(f'<a class="u-syndication" href="{escaped}">{escaped}</a>')

    if not links:
        return ""
    return f'\n<p class="syndication">{SYNDICATION_LEAD_IN} {", ".join(links)}</p>'


FRAGMENT_RENDERERS: List[Callable[[MicroformatDocument, PostType], str]] = [
    render_context,
    render_content,
    render_media,
    render_rsvp,
    render_syndication,
]


def wrap_root_element(body: str, root_type: str) -> str:
    """Enclose a body in a div carrying the microformat root class."""
    return f'<div class="{_escape(root_type)}">{body}\n</div>'


def render(doc: MicroformatDocument, post_type: PostType, wrap_root: bool = False) -> str:
    """Render a document into the post body.

    Args:
        doc: The microformats2 document
        post_type: Post type from classify(), selects context and RSVP fragments
        wrap_root: Enclose the fragments in <div class="h-entry">...</div>

    Returns:
        The rendered body. Identical inputs always give identical output.

    Raises:
        ValidationError: If the content property has an unsupported shape.
            No partial body is returned.

    Example:
        >>> doc = MicroformatDocument.from_json(
        ...     {"type": ["h-entry"], "properties": {"content": ["lorem ipsum"]}}
        ... )
        >>> render(doc, PostType.NOTE)
        '\\n<p class="p-content">lorem ipsum</p>'
    """
    body = "".join(renderer(doc, post_type) for renderer in FRAGMENT_RENDERERS)

    if wrap_root:
        body = wrap_root_element(body, doc.primary_type)

    return body
