"""SQLite-backed content store for Micropub posts."""

import logging
import os
import re
import sqlite3
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from micropub.processor import NewPost
from store.base import ContentStore, ContentStoreError

logger = logging.getLogger(__name__)

_SLUG_INVALID = re.compile(r"[^a-z0-9]+")
MAX_SLUG_LENGTH = 80
SLUG_ATTEMPTS = 5


def slugify(text: str) -> str:
    """Lowercase ASCII slug of a title, e.g. "Hello, World!" -> "hello-world"."""
    slug = _SLUG_INVALID.sub("-", text.lower()).strip("-")
    return slug[:MAX_SLUG_LENGTH].rstrip("-")


class SQLiteContentStore(ContentStore):
    """Persistent post storage backed by SQLite."""

    def __init__(self, storage_path: str, base_url: str):
        self.storage_path = storage_path
        self.base_url = base_url.rstrip("/")
        os.makedirs(self.storage_path, mode=0o755, exist_ok=True)
        self.db_path = os.path.join(self.storage_path, "posts.db")
        self._ensure_schema()

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "SQLiteContentStore":
        storage = config.get("storage", {}) or {}
        return cls(
            storage.get("path", "./data/posts"),
            storage.get("base_url", "http://localhost:5000"),
        )

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS posts (
                        slug TEXT PRIMARY KEY,
                        post_type TEXT NOT NULL,
                        template TEXT NOT NULL,
                        title TEXT NOT NULL,
                        body TEXT NOT NULL,
                        published INTEGER NOT NULL,
                        created_at TEXT NOT NULL
                    )
                    """
                )
                conn.execute(
                    "CREATE INDEX IF NOT EXISTS idx_posts_created_at "
                    "ON posts(created_at)"
                )
        except sqlite3.Error as e:
            logger.error(f"Failed to initialize posts database {self.db_path}: {e}")

    def _unique_slug(self, conn: sqlite3.Connection, title: str, post_type: str) -> str:
        base = slugify(title) or post_type
        slug = base
        suffix = 2
        while conn.execute("SELECT 1 FROM posts WHERE slug = ?", (slug,)).fetchone():
            slug = f"{base}-{suffix}"
            suffix += 1
        return slug

    def url_for(self, slug: str) -> str:
        return f"{self.base_url}/{slug}"

    def create_post(self, post: NewPost) -> str:
        created_at = datetime.now(timezone.utc).isoformat()
        slug = None
        for attempt in range(1, SLUG_ATTEMPTS + 1):
            try:
                with self._connect() as conn:
                    slug = self._unique_slug(conn, post.title, post.post_type.value)
                    conn.execute(
                        """
                        INSERT INTO posts (slug, post_type, template, title, body, published, created_at)
                        VALUES (?, ?, ?, ?, ?, ?, ?)
                        """,
                        (
                            slug,
                            post.post_type.value,
                            post.template,
                            post.title,
                            post.body,
                            int(post.published),
                            created_at,
                        ),
                    )
                break
            except sqlite3.IntegrityError as e:
                # Another worker took the slug between SELECT and INSERT
                logger.warning(f"Slug '{slug}' taken concurrently (attempt {attempt}/{SLUG_ATTEMPTS}): {e}")
            except sqlite3.Error as e:
                logger.error(f"Failed to store {post.post_type.value} post '{post.title}': {e}")
                raise ContentStoreError(f"Could not store post: {e}") from e
        else:
            logger.error(f"Gave up storing {post.post_type.value} post '{post.title}' after {SLUG_ATTEMPTS} slug collisions")
            raise ContentStoreError(f"Could not find a free slug for '{post.title}'")

        url = self.url_for(slug)
        status = "published" if post.published else "draft"
        logger.info(f"Stored {post.post_type.value} post as {status}: {url}")
        return url

    def get_post(self, slug: str) -> Optional[Dict[str, Any]]:
        """Return a stored post by slug, or None."""
        try:
            with self._connect() as conn:
                row = conn.execute(
                    "SELECT * FROM posts WHERE slug = ?",
                    (slug,),
                ).fetchone()
                if row:
                    record = dict(row)
                    record["published"] = bool(record["published"])
                    return record
        except sqlite3.Error as e:
            logger.error(f"Failed to read post {slug} from SQLite: {e}")

        return None
