"""
Micropub module settings and page template selection.

Settings are read once from the "micropub" section of config.yml into an
immutable MicropubConfig that is passed to the template selector and the
renderer at call time.

Configuration (config.yml):
    micropub:
      default_template: basic-page
      templates:
        note: note-page
        article: article-page
      publish_posts: false
      wrap_microformat_element: true
      verbose_logging: false
"""
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from config import DEFAULT_TEMPLATE
from micropub.post_types import PostType


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MicropubConfig:
    """Immutable Micropub settings.

    Attributes:
        default_template: Template used when a post type has no override
        templates: PostType -> template override
        publish_posts: Create posts published instead of as drafts
        wrap_microformat_element: Wrap bodies in <div class="h-entry">
        verbose_logging: Log each request payload and resulting post
        token_endpoint: External IndieAuth token endpoint, if any
        token_file: Docker secret holding a static access token
    """
    default_template: str = DEFAULT_TEMPLATE
    templates: Mapping[PostType, str] = field(default_factory=lambda: MappingProxyType({}))
    publish_posts: bool = False
    wrap_microformat_element: bool = True
    verbose_logging: bool = False
    token_endpoint: Optional[str] = None
    token_file: Optional[str] = None

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "MicropubConfig":
        """Build settings from the main configuration dictionary.

        Unknown post type names under "templates" are ignored with a warning.
        A blank default_template falls back to "basic-page".

        Example:
            >>> settings = MicropubConfig.from_config(load_config())
            >>> settings.default_template
            'basic-page'
        """
        section = config.get("micropub", {}) or {}

        default_template = (section.get("default_template") or "").strip()
        if not default_template:
            logger.warning(f"No default template configured, using '{DEFAULT_TEMPLATE}'")
            default_template = DEFAULT_TEMPLATE

        templates = {}
        for name, template in (section.get("templates") or {}).items():
            try:
                post_type = PostType(name)
            except ValueError:
                logger.warning(f"Ignoring template for unknown post type '{name}'")
                continue
            if isinstance(template, str) and template.strip():
                templates[post_type] = template.strip()

        return cls(
            default_template=default_template,
            templates=MappingProxyType(templates),
            publish_posts=bool(section.get("publish_posts", False)),
            wrap_microformat_element=bool(section.get("wrap_microformat_element", True)),
            verbose_logging=bool(section.get("verbose_logging", False)),
            token_endpoint=section.get("token_endpoint") or None,
            token_file=section.get("token_file") or None,
        )


def select_template(post_type: PostType, config: MicropubConfig) -> str:
    """Return the template configured for a post type, or the default."""
    template = config.templates.get(post_type)
    if template and template.strip():
        return template
    return config.default_template
