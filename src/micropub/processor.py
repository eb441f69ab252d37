"""
Micropub create pipeline.

Ties the core steps together for one request:

    MicroformatDocument -> classify() -> select_template() -> render()

and returns the values the content store needs to create the page.
"""
import logging
from dataclasses import dataclass

from micropub.document import MicroformatDocument
from micropub.post_types import PostType, classify, derive_title
from micropub.render import render
from micropub.templates import MicropubConfig, select_template


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NewPost:
    """A processed post, ready to be handed to a ContentStore.

    Attributes:
        post_type: Discovered post type
        template: Page template identifier
        body: Rendered HTML body
        title: Page title derived from name or content
        published: Whether the page should be created published
    """
    post_type: PostType
    template: str
    body: str
    title: str
    published: bool


def process_document(doc: MicroformatDocument, config: MicropubConfig) -> NewPost:
    """Classify and render a document using the given settings.

    Raises:
        ValidationError: If a property has an unsupported shape
    """
    post_type = classify(doc)
    template = select_template(post_type, config)
    body = render(doc, post_type, wrap_root=config.wrap_microformat_element)

    logger.debug(f"Processed {doc.primary_type}: type={post_type.value}, template={template}")

    return NewPost(
        post_type=post_type,
        template=template,
        body=body,
        title=derive_title(doc, post_type),
        published=config.publish_posts,
    )
