"""
Content store interface.

The Micropub endpoint does not persist posts itself; it hands each processed
post to a ContentStore, which creates the page and returns its URL.
"""
from abc import ABC, abstractmethod

from micropub.processor import NewPost


class ContentStoreError(Exception):
    """Raised when a store cannot create a post."""


class ContentStore(ABC):
    """Abstract base class for content stores.

    Example:
        >>> class MyStore(ContentStore):
        ...     def create_post(self, post):
        ...         return "https://example.com/my-post"
    """

    @abstractmethod
    def create_post(self, post: NewPost) -> str:
        """Persist a post and return its public URL.

        Args:
            post: Processed post with template, body, title and publish flag

        Returns:
            Absolute URL of the created page

        Raises:
            ContentStoreError: If the post could not be stored
        """
