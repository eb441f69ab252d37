"""
Unit Tests for Post Type Discovery.

Each rule is tested in isolation with a minimal document, and rule order is
pinned with documents that match two rules at once.

Running Tests:
    $ pytest tests/test_post_types.py -v
"""
import pytest

from conftest import mf2
from micropub import PostType, classify, derive_title
from micropub.post_types import RULES, has_distinct_title, trim_to_words


class TestRuleOrder:
    """The rule chain is evaluated strictly in order."""

    def test_rule_sequence(self):
        assert [post_type for _, post_type in RULES] == [
            PostType.RSVP,
            PostType.REPLY,
            PostType.LIKE,
            PostType.REPOST,
            PostType.BOOKMARK,
            PostType.PHOTO,
            PostType.VIDEO,
            PostType.ARTICLE,
        ]

    @pytest.mark.parametrize("properties, expected", [
        ({"rsvp": ["yes"]}, PostType.RSVP),
        ({"in-reply-to": ["https://example.com/post"]}, PostType.REPLY),
        ({"like-of": ["https://example.com/post"]}, PostType.LIKE),
        ({"repost-of": ["https://example.com/post"]}, PostType.REPOST),
        ({"bookmark-of": ["https://example.com/post"]}, PostType.BOOKMARK),
        ({"photo": ["https://example.com/a.jpg"]}, PostType.PHOTO),
        ({"video": ["https://example.com/a.mp4"]}, PostType.VIDEO),
        ({"name": ["A Title"], "content": ["Body text"]}, PostType.ARTICLE),
        ({"content": ["Just a note"]}, PostType.NOTE),
    ])
    def test_each_rule_in_isolation(self, properties, expected):
        assert classify(mf2(properties)) is expected

    @pytest.mark.parametrize("properties, expected", [
        ({"rsvp": ["yes"], "in-reply-to": ["https://example.com/event"]}, PostType.RSVP),
        ({"in-reply-to": ["https://a.example/"], "like-of": ["https://b.example/"]}, PostType.REPLY),
        ({"like-of": ["https://a.example/"], "repost-of": ["https://b.example/"]}, PostType.LIKE),
        ({"repost-of": ["https://a.example/"], "bookmark-of": ["https://b.example/"]}, PostType.REPOST),
        ({"bookmark-of": ["https://a.example/"], "photo": ["https://b.example/a.jpg"]}, PostType.BOOKMARK),
        ({"photo": ["https://a.example/a.jpg"], "video": ["https://b.example/a.mp4"]}, PostType.PHOTO),
        ({"video": ["https://a.example/a.mp4"], "name": ["Title"], "content": ["Body"]}, PostType.VIDEO),
    ])
    def test_earlier_rule_wins(self, properties, expected):
        assert classify(mf2(properties)) is expected

    def test_many_photos_do_not_outrank_a_reply(self):
        doc = mf2({
            "in-reply-to": ["https://example.com/"],
            "photo": ["https://example.com/1.jpg", "https://example.com/2.jpg", "https://example.com/3.jpg"],
        })
        assert classify(doc) is PostType.REPLY


class TestClassify:
    """Behavioural checks for classify()."""

    def test_plain_note(self):
        assert classify(mf2({"content": ["lorem ipsum"]})) is PostType.NOTE

    def test_empty_document_is_note(self):
        assert classify(mf2({})) is PostType.NOTE

    def test_reply_with_invalid_url(self):
        doc = mf2({"in-reply-to": ["invalid url"], "content": ["lorem ipsum"]})
        assert classify(doc) is PostType.REPLY

    def test_empty_rsvp_falls_through(self):
        doc = mf2({"rsvp": [""], "in-reply-to": ["https://example.com/event"]})
        assert classify(doc) is PostType.REPLY

    def test_classification_is_repeatable(self):
        doc = mf2({"like-of": ["https://example.com/"]})
        assert classify(doc) is classify(doc)


class TestArticleTitle:
    """Test suite for the distinct-title heuristic."""

    def test_title_differs_from_content(self):
        doc = mf2({"name": ["My Trip"], "content": ["We went to the mountains."]})
        assert has_distinct_title(doc) is True
        assert classify(doc) is PostType.ARTICLE

    def test_title_is_content_prefix(self):
        doc = mf2({"name": ["lorem ipsum"], "content": ["lorem ipsum dolor sit amet"]})
        assert classify(doc) is PostType.NOTE

    def test_title_equals_content(self):
        doc = mf2({"name": ["lorem ipsum"], "content": ["lorem ipsum"]})
        assert classify(doc) is PostType.NOTE

    def test_whitespace_is_normalized(self):
        doc = mf2({"name": ["  lorem\n ipsum "], "content": ["lorem   ipsum dolor"]})
        assert classify(doc) is PostType.NOTE

    def test_html_content_compared_as_text(self):
        doc = mf2({"name": ["lorem ipsum"], "content": [{"html": "<p>lorem <b>ipsum</b> dolor</p>"}]})
        assert classify(doc) is PostType.NOTE

    def test_name_without_content(self):
        assert classify(mf2({"name": ["Standalone Title"]})) is PostType.ARTICLE

    def test_blank_name(self):
        doc = mf2({"name": ["   "], "content": ["lorem ipsum"]})
        assert classify(doc) is PostType.NOTE

    def test_unreadable_content_does_not_fail(self):
        doc = mf2({"name": ["Title"], "content": [{"value": "no html"}]})
        assert classify(doc) is PostType.ARTICLE


class TestDeriveTitle:
    """Test suite for derive_title() and trim_to_words()."""

    def test_uses_name(self):
        doc = mf2({"name": ["  My   Trip "], "content": ["Body"]})
        assert derive_title(doc, PostType.ARTICLE) == "My Trip"

    def test_uses_content(self):
        doc = mf2({"content": ["lorem ipsum"]})
        assert derive_title(doc, PostType.NOTE) == "lorem ipsum"

    def test_trims_long_content(self):
        text = "word " * 30
        title = derive_title(mf2({"content": [text]}), PostType.NOTE)
        assert len(title) <= 60
        assert title.endswith("...")

    def test_falls_back_to_post_type(self):
        doc = mf2({"like-of": ["https://example.com/"]})
        assert derive_title(doc, PostType.LIKE) == "like"

    def test_trim_to_words(self):
        assert trim_to_words("short", 10) == "short"
        assert trim_to_words("one two three four", 12) == "one two..."
        assert trim_to_words("abcdefghijklmnop", 10) == "abcdefg..."
