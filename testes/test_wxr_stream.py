import gzip
import io
import os
import sys

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest

from wp2md.extractors.post_accumulator import PostAccumulator
from wp2md.extractors.wxr_stream import count_items, feed_wxr, iter_wxr_events, open_export
from wp2md.models.options import FilteringOptions
from wp2md.utils.errors import StreamFailureError

FIXTURE = os.path.join(os.path.dirname(os.path.abspath(__file__)), "fixtures", "sample-export.xml")

SMALL = (
    b"<rss><channel><item><title> Hello \n  World </title>"
    b"<content:encoded><![CDATA[<p> keep  this </p>]]></content:encoded>"
    b"</item></channel></rss>"
)

SMALL_EVENTS = [
    ("open", "rss", {}),
    ("open", "channel", {}),
    ("open", "item", {}),
    ("open", "title", {}),
    ("text", "Hello World"),
    ("close", "title"),
    ("open", "content:encoded", {}),
    ("cdata", "<p> keep  this </p>"),
    ("close", "content:encoded"),
    ("close", "item"),
    ("close", "channel"),
    ("close", "rss"),
    ("end",),
]


def read_fixture():
    with open(FIXTURE, "rb") as f:
        return f.read()


def test_events_trim_text_and_keep_cdata_verbatim():
    assert list(iter_wxr_events(io.BytesIO(SMALL))) == SMALL_EVENTS


def test_events_do_not_depend_on_chunk_boundaries():
    assert list(iter_wxr_events(io.BytesIO(SMALL), chunk_size=7)) == SMALL_EVENTS


def test_attributes_are_delivered_with_open_event():
    xml = b'<item><category domain="post_tag" nicename="py"><![CDATA[Python]]></category></item>'
    events = list(iter_wxr_events(io.BytesIO(xml)))
    assert events[1] == ("open", "category", {"domain": "post_tag", "nicename": "py"})
    assert events[2] == ("cdata", "Python")


def test_malformed_xml_raises_stream_failure():
    with pytest.raises(StreamFailureError):
        list(iter_wxr_events(io.BytesIO(b"<rss><channel><item></channel></rss>")))


def test_truncated_xml_raises_stream_failure():
    with pytest.raises(StreamFailureError):
        list(iter_wxr_events(io.BytesIO(b"<rss><channel><item><title>cut")))


def test_count_items_plain_and_gzip(tmp_path):
    assert count_items(FIXTURE) == 4

    gz_path = tmp_path / "export.xml.gz"
    gz_path.write_bytes(gzip.compress(read_fixture()))
    assert count_items(str(gz_path)) == 4


def test_gzip_detected_by_magic_bytes(tmp_path):
    path = tmp_path / "export.xml"
    path.write_bytes(gzip.compress(read_fixture()))
    with open_export(str(path)) as stream:
        assert stream.read(5) == b"<?xml"


def test_corrupt_gzip_raises_stream_failure(tmp_path):
    path = tmp_path / "broken.xml.gz"
    path.write_bytes(b"this is not gzip data")
    with pytest.raises(StreamFailureError):
        count_items(str(path))


def test_missing_file_raises_stream_failure(tmp_path):
    with pytest.raises(StreamFailureError):
        open_export(str(tmp_path / "missing.xml"))


def test_feed_wxr_drives_accumulator():
    posts = []
    acc = PostAccumulator(FilteringOptions(), lambda post, decision: posts.append(post))
    with open_export(FIXTURE) as stream:
        feed_wxr(stream, acc)

    assert acc.finished is True
    assert acc.processed == 4
    assert [p.title for p in posts] == ["Hello World", "Draft Thoughts", "Tag: Example"]

    hello = posts[0]
    assert hello.slug_hint == "hello-world"
    assert hello.author == "admin"
    assert hello.categories == ["News"]
    assert hello.tags == ["Python"]
    assert hello.custom_fields == {"_thumbnail_id": "7"}
    assert hello.html_body.startswith("<h2>Welcome</h2>")


def test_feed_wxr_reports_failure_to_handler():
    acc = PostAccumulator(FilteringOptions(), lambda post, decision: None)
    with pytest.raises(StreamFailureError):
        feed_wxr(io.BytesIO(b"<rss><item><title>x</item></rss>"), acc)
    assert acc.post is None
    assert acc.finished is False
