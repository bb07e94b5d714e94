"""
Content quality signals computed from a post's HTML body.

All functions here are pure and operate on the raw HTML string with regular
expressions; no parsing into a document tree is needed for these metrics.
"""

from __future__ import annotations

import re
from typing import Optional

from wp2md.models.options import FilteringOptions
from wp2md.models.post import RawPostRecord
from wp2md.models.quality import QualityMetrics

from .system_pages import classify

# Bodies at least this long are not "just an embed", whatever they contain.
EMBED_HEAVY_MAX_LENGTH = 1000

_TAG_RE = re.compile(r"<[^>]*>")
_NON_WORD_RE = re.compile(r"[^\w\s]")
_IMG_RE = re.compile(r"<img[^>]*>", re.IGNORECASE)
_EMBED_RE = re.compile(r"<(iframe|embed|object)[^>]*>", re.IGNORECASE)


def strip_tags(html: str) -> str:
    return _TAG_RE.sub("", html or "")


def count_words(html: str) -> int:
    """Count words in ``html`` once markup and punctuation are removed.

    Every tag is replaced by a single space so words on either side of a tag
    boundary are never merged into one token.
    """
    text = _TAG_RE.sub(" ", html or "")
    text = _NON_WORD_RE.sub(" ", text)
    return len([w for w in text.split() if w])


def text_to_markup_ratio(html: str) -> float:
    """Share of the body length that is visible text, between 0 and 1."""
    if not html:
        return 0.0
    return len(strip_tags(html).strip()) / len(html)


def has_images(html: str) -> bool:
    return bool(_IMG_RE.search(html or ""))


def is_embed_heavy(html: str) -> bool:
    """True when a short body is essentially an iframe/embed/object."""
    html = html or ""
    return bool(_EMBED_RE.search(html)) and len(html) < EMBED_HEAVY_MAX_LENGTH


def analyze_quality(
    html: str, options: FilteringOptions, post: Optional[RawPostRecord] = None
) -> QualityMetrics:
    """Compute :class:`QualityMetrics` for ``html`` under ``options``.

    When ``post`` is given and classifies as a system page whose exclusion
    toggle is enabled, the result is low value regardless of the body.
    """
    word_count = count_words(html)
    ratio = text_to_markup_ratio(html)
    images = has_images(html)
    embed_heavy = is_embed_heavy(html)

    is_low_value = (
        word_count < options.min_word_count
        or ratio < options.min_text_to_markup_ratio
        or (options.exclude_embed_only_posts and embed_heavy)
        or (options.exclude_no_images and not images)
    )

    page_type = None
    if post is not None:
        check = classify(post)
        page_type = check.page_type
        if check.is_system_page and options.excludes_page_type(page_type):
            is_low_value = True

    return QualityMetrics(
        word_count=word_count,
        text_to_markup_ratio=ratio,
        has_images=images,
        has_embeds=embed_heavy,
        is_low_value=is_low_value,
        page_type=page_type,
    )
