"""
Pytest configuration and shared fixtures for all tests.

Provides:
- mf2(): build a MicroformatDocument from a properties dict
- micropub_config: configuration dictionary without authentication
- RecordingStore: in-memory ContentStore capturing created posts
"""

import pytest

from micropub import MicroformatDocument
from micropub.processor import NewPost
from store import ContentStore


def mf2(properties=None, types=("h-entry",)):
    """Build a validated document from a properties dict."""
    return MicroformatDocument.from_json({
        "type": list(types),
        "properties": properties or {},
    })


class RecordingStore(ContentStore):
    """ContentStore that keeps created posts in a list."""

    def __init__(self, base_url="https://blog.example.com"):
        self.base_url = base_url
        self.posts = []

    def create_post(self, post: NewPost) -> str:
        self.posts.append(post)
        return f"{self.base_url}/posts/{len(self.posts)}"


@pytest.fixture
def micropub_config():
    """Configuration with no token verifier and no root wrapping."""
    return {
        "cors": {"enabled": False, "origins": []},
        "micropub": {
            "default_template": "basic-page",
            "templates": {"article": "article-page"},
            "publish_posts": True,
            "wrap_microformat_element": False,
            "verbose_logging": False,
        },
    }


@pytest.fixture
def recording_store():
    return RecordingStore()
