"""
Reconstruction of WordPress posts from a stream of structural XML events.

:class:`PostAccumulator` is the handler a token source drives.  It implements
the incremental callback contract ``open``/``text``/``cdata``/``close``/
``end``/``error`` and rebuilds one :class:`~wp2md.models.post.RawPostRecord`
per ``<item>``.  When an item closes, complete records are passed through the
filtering decision engine and handed, with the decision, to the caller's
``on_post`` callback.

The accumulator owns all of its state, so a fresh instance is needed per
stream and instances can be driven by hand in tests::

    acc = PostAccumulator(FilteringOptions(), on_post=lambda post, d: ...)
    acc.open("item", {})
    acc.open("title", {})
    acc.text("Hello")
    acc.close("title")
    acc.close("item")
"""

from __future__ import annotations

from typing import Callable, Dict, Optional

from wp2md.filters.decision import decide
from wp2md.models.options import FilteringOptions
from wp2md.models.post import RawPostRecord
from wp2md.models.quality import FilterDecision
from wp2md.utils.errors import StreamFailureError

from .tag_tracker import CATEGORY, ITEM, POST_META, TagPathTracker

META_KEY = "wp:meta_key"
META_VALUE = "wp:meta_value"

# Element name -> record attribute for fields where the first non-empty value wins.
SCALAR_FIELDS: Dict[str, str] = {
    "title": "title",
    "excerpt:encoded": "excerpt",
    "pubDate": "published_at",
    "wp:post_date": "published_at",
    "wp:status": "status",
    "wp:post_type": "post_type",
    "wp:post_name": "slug_hint",
    "dc:creator": "author",
    "link": "permalink",
    "wp:post_id": "source_id",
}

# Body fields concatenate every fragment delivered for them.
BODY_FIELDS: Dict[str, str] = {
    "content:encoded": "html_body",
    "content": "fallback_body",
}

PostCallback = Callable[[RawPostRecord, FilterDecision], None]


class PostAccumulator:
    def __init__(
        self,
        options: FilteringOptions,
        on_post: PostCallback,
        *,
        on_progress: Optional[Callable[[int], None]] = None,
        tracker: Optional[TagPathTracker] = None,
    ) -> None:
        self.options = options
        self.on_post = on_post
        self.on_progress = on_progress
        self.tracker = tracker or TagPathTracker()
        self.post: Optional[RawPostRecord] = None
        self.processed = 0
        self.discarded = 0
        self.stray_closes = 0
        self.finished = False
        self._meta_key = ""
        self._meta_value = ""

    # ------------------------------------------------------------------
    # Event contract driven by the token source
    # ------------------------------------------------------------------
    def open(self, name: str, attributes: Optional[Dict[str, str]] = None) -> None:
        if name == ITEM:
            if self.post is not None:
                # Unclosed previous item: never finalized, never counted.
                self.discarded += 1
            self.post = RawPostRecord()
            self._reset_meta()
        elif name == POST_META and self.tracker.inside_item:
            self._reset_meta()
        self.tracker.open(name, attributes)

    def text(self, content: str) -> None:
        self.on_text(self.tracker.current_tag, content)

    def cdata(self, content: str) -> None:
        self.on_cdata(self.tracker.current_tag, content)

    def close(self, name: str) -> None:
        if not self.tracker.is_open(name):
            # Stray close (e.g. </item> outside any item): ignored.
            # Channel-level elements are never tracked, so they do not count.
            if name == ITEM or self.tracker.inside_item:
                self.stray_closes += 1
            return
        self.on_element_close(name)
        self.tracker.close(name)

    def end(self) -> None:
        if self.post is not None:
            self.discarded += 1
        self.post = None
        self.tracker.reset()
        self.finished = True

    def error(self, cause: BaseException) -> None:
        self.post = None
        self.tracker.reset()
        if isinstance(cause, StreamFailureError):
            raise cause
        raise StreamFailureError(f"Export stream failed: {cause}") from cause

    # ------------------------------------------------------------------
    # Record mutation
    # ------------------------------------------------------------------
    def on_text(self, tag: str, value: str) -> None:
        if self.post is None:
            return
        if self.tracker.inside_post_meta:
            self._set_meta(tag, value)
            return
        if tag == CATEGORY:
            if self.tracker.active_category is not None:
                self.tracker.active_category.name = value
            return
        self._assign(tag, value)

    def on_cdata(self, tag: str, value: str) -> None:
        if self.post is None:
            return
        if self.tracker.inside_post_meta:
            self._set_meta(tag, value)
            return
        if tag == CATEGORY:
            # CDATA needs an open category element; with none it is dropped.
            if self.tracker.active_category is not None:
                self.tracker.active_category.name = value
            return
        self._assign(tag, value)

    def on_element_close(self, tag: str) -> None:
        if self.post is None:
            return
        if tag == POST_META:
            if self._meta_key and self._meta_value:
                self.post.custom_fields[self._meta_key] = self._meta_value
            self._reset_meta()
        elif tag == CATEGORY:
            category = self.tracker.active_category
            if category is not None:
                self.post.add_term(category)
        elif tag == ITEM:
            self._finalize()

    def _assign(self, tag: str, value: str) -> None:
        body_attr = BODY_FIELDS.get(tag)
        if body_attr:
            setattr(self.post, body_attr, getattr(self.post, body_attr) + value)
            return
        attr = SCALAR_FIELDS.get(tag)
        if attr is None:
            return
        value = value.strip()
        if value and not getattr(self.post, attr):
            setattr(self.post, attr, value)

    def _set_meta(self, tag: str, value: str) -> None:
        if tag == META_KEY:
            self._meta_key = value.strip()
        elif tag == META_VALUE:
            self._meta_value = value

    def _reset_meta(self) -> None:
        self._meta_key = ""
        self._meta_value = ""

    def _finalize(self) -> None:
        post, self.post = self.post, None
        self._reset_meta()
        if post is not None and post.is_complete:
            decision = decide(post, post.body, self.options)
            self.on_post(post, decision)
        self.processed += 1
        if self.on_progress is not None:
            self.on_progress(self.processed)
