import os
import sys

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest

from wp2md.extractors.post_accumulator import PostAccumulator
from wp2md.models.options import FilteringOptions
from wp2md.utils.errors import StreamFailureError


def make_accumulator(**options):
    posts = []
    acc = PostAccumulator(FilteringOptions(**options), lambda post, decision: posts.append((post, decision)))
    return acc, posts


def element(acc, name, text=None, cdata=None, attrs=None):
    acc.open(name, attrs or {})
    if text is not None:
        acc.text(text)
    if cdata is not None:
        acc.cdata(cdata)
    acc.close(name)


def minimal_item(acc, title="Hello", body="<p>Body</p>"):
    acc.open("item", {})
    element(acc, "title", text=title)
    element(acc, "content:encoded", cdata=body)
    acc.close("item")


def test_complete_item_is_emitted_with_decision():
    acc, posts = make_accumulator()
    minimal_item(acc)
    assert len(posts) == 1
    post, decision = posts[0]
    assert post.title == "Hello"
    assert post.html_body == "<p>Body</p>"
    assert decision.accept is True
    assert acc.processed == 1


def test_cdata_fragments_are_concatenated():
    acc, posts = make_accumulator()
    acc.open("item", {})
    element(acc, "title", text="Split")
    acc.open("content:encoded", {})
    acc.cdata("<p>One")
    acc.cdata(" two</p>")
    acc.close("content:encoded")
    acc.close("item")
    assert posts[0][0].html_body == "<p>One two</p>"


def test_categories_and_tags_routed_by_domain():
    acc, posts = make_accumulator()
    acc.open("item", {})
    element(acc, "title", text="Terms")
    element(acc, "content:encoded", cdata="<p>x</p>")
    element(acc, "category", cdata="News", attrs={"domain": "category", "nicename": "news"})
    element(acc, "category", cdata="Python", attrs={"domain": "post_tag", "nicename": "python"})
    element(acc, "category", cdata="Main", attrs={"domain": "nav_menu", "nicename": "main"})
    acc.close("item")
    post = posts[0][0]
    assert post.categories == ["News"]
    assert post.tags == ["Python"]


def test_category_cdata_overwrites_text():
    acc, posts = make_accumulator()
    acc.open("item", {})
    element(acc, "title", text="Terms")
    element(acc, "content:encoded", cdata="<p>x</p>")
    element(acc, "category", text="Plain", cdata="Rich", attrs={"domain": "category"})
    acc.close("item")
    assert posts[0][0].categories == ["Rich"]


def test_channel_level_elements_are_ignored():
    acc, posts = make_accumulator()
    element(acc, "title", text="Blog title")
    element(acc, "category", cdata="Channel", attrs={"domain": "category"})
    minimal_item(acc, title="Post")
    assert posts[0][0].title == "Post"
    assert posts[0][0].categories == []
    assert acc.stray_closes == 0


def test_postmeta_committed_when_key_and_value_present():
    acc, posts = make_accumulator()
    acc.open("item", {})
    element(acc, "title", text="Meta")
    element(acc, "content:encoded", cdata="<p>x</p>")
    acc.open("wp:postmeta", {})
    element(acc, "wp:meta_key", cdata="_thumbnail_id")
    element(acc, "wp:meta_value", cdata="42")
    acc.close("wp:postmeta")
    acc.open("wp:postmeta", {})
    element(acc, "wp:meta_key", cdata="_no_value")
    acc.close("wp:postmeta")
    acc.close("item")
    assert posts[0][0].custom_fields == {"_thumbnail_id": "42"}


def test_meta_elements_do_not_leak_into_post_fields():
    acc, posts = make_accumulator()
    acc.open("item", {})
    acc.open("wp:postmeta", {})
    element(acc, "wp:meta_key", cdata="title")
    element(acc, "title", text="Not the title")
    element(acc, "wp:meta_value", cdata="v")
    acc.close("wp:postmeta")
    element(acc, "title", text="Real title")
    element(acc, "content:encoded", cdata="<p>x</p>")
    acc.close("item")
    assert posts[0][0].title == "Real title"


def test_stray_closes_are_ignored():
    acc, posts = make_accumulator()
    acc.close("item")
    acc.open("item", {})
    acc.close("title")
    element(acc, "title", text="Still fine")
    element(acc, "content:encoded", cdata="<p>x</p>")
    acc.close("item")
    assert acc.processed == 1
    assert posts[0][0].title == "Still fine"
    assert acc.stray_closes == 2


def test_incomplete_item_is_counted_but_not_emitted():
    acc, posts = make_accumulator()
    acc.open("item", {})
    element(acc, "title", text="No body")
    acc.close("item")
    acc.open("item", {})
    element(acc, "content:encoded", cdata="<p>No title</p>")
    acc.close("item")
    assert posts == []
    assert acc.processed == 2


def test_first_non_empty_scalar_wins():
    acc, posts = make_accumulator()
    acc.open("item", {})
    element(acc, "title", text="First")
    element(acc, "title", text="Second")
    element(acc, "pubDate", text="Mon, 15 Jan 2024 10:00:00 +0000")
    element(acc, "wp:post_date", cdata="2024-01-15 10:00:00")
    element(acc, "wp:post_name", cdata="")
    element(acc, "wp:post_name", cdata="first")
    element(acc, "content:encoded", cdata="<p>x</p>")
    acc.close("item")
    post = posts[0][0]
    assert post.title == "First"
    assert post.published_at == "Mon, 15 Jan 2024 10:00:00 +0000"
    assert post.slug_hint == "first"


def test_scalar_fields_are_mapped():
    acc, posts = make_accumulator()
    acc.open("item", {})
    element(acc, "title", text="Mapped")
    element(acc, "link", text="https://example.com/mapped")
    element(acc, "dc:creator", cdata="admin")
    element(acc, "wp:post_id", text="10")
    element(acc, "wp:status", cdata="publish")
    element(acc, "wp:post_type", cdata="page")
    element(acc, "excerpt:encoded", cdata="Short summary")
    element(acc, "content:encoded", cdata="<p>x</p>")
    acc.close("item")
    post = posts[0][0]
    assert post.permalink == "https://example.com/mapped"
    assert post.author == "admin"
    assert post.source_id == "10"
    assert post.status == "publish"
    assert post.post_type == "page"
    assert post.excerpt == "Short summary"


def test_plain_content_used_when_encoded_is_missing():
    acc, posts = make_accumulator()
    acc.open("item", {})
    element(acc, "title", text="Fallback")
    element(acc, "content", text="Plain body")
    acc.close("item")
    post = posts[0][0]
    assert post.html_body == ""
    assert post.body == "Plain body"


def test_unclosed_item_is_discarded():
    acc, posts = make_accumulator()
    acc.open("item", {})
    element(acc, "title", text="Lost")
    element(acc, "content:encoded", cdata="<p>x</p>")
    minimal_item(acc, title="Kept")
    assert [p.title for p, _ in posts] == ["Kept"]
    assert acc.discarded == 1
    assert acc.processed == 1


def test_end_discards_open_item():
    acc, posts = make_accumulator()
    acc.open("item", {})
    element(acc, "title", text="Truncated")
    acc.end()
    assert posts == []
    assert acc.discarded == 1
    assert acc.finished is True


def test_rejected_posts_are_still_reported_with_reason():
    acc, posts = make_accumulator(filter_enabled=True)
    acc.open("item", {})
    element(acc, "title", text="Tiny")
    element(acc, "wp:status", cdata="draft")
    element(acc, "content:encoded", cdata="<p>Too short.</p>")
    acc.close("item")
    post, decision = posts[0]
    assert decision.accept is False
    assert decision.skip_reason.startswith("low-value content")


def test_progress_callback_receives_processed_count():
    seen = []
    acc = PostAccumulator(FilteringOptions(), lambda p, d: None, on_progress=seen.append)
    minimal_item(acc)
    acc.open("item", {})
    acc.close("item")
    assert seen == [1, 2]


def test_error_raises_stream_failure_and_resets():
    acc, posts = make_accumulator()
    acc.open("item", {})
    with pytest.raises(StreamFailureError):
        acc.error(ValueError("boom"))
    assert acc.post is None
    assert acc.tracker.inside_item is False
