"""
Extraction of posts from WordPress WXR exports.

This subpackage turns an export byte stream into structural events
(:mod:`wp2md.extractors.wxr_stream`), tracks element nesting
(:mod:`wp2md.extractors.tag_tracker`) and rebuilds one post record per
``<item>`` (:mod:`wp2md.extractors.post_accumulator`).
"""

from .post_accumulator import PostAccumulator
from .tag_tracker import TagPathTracker
from .wxr_stream import count_items, feed_wxr, iter_wxr_events, open_export

__all__ = [
    "PostAccumulator",
    "TagPathTracker",
    "count_items",
    "feed_wxr",
    "iter_wxr_events",
    "open_export",
]
