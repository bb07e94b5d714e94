"""
Detection of system-generated listing pages in a WordPress export.

Tag/category indexes, date archives, author archives and paginated duplicates
sometimes end up exported as regular pages or posts.  :func:`classify` looks
only at a post's metadata (type, slug, title and permalink), never its body.
"""

from __future__ import annotations

import re

from wp2md.models.post import RawPostRecord
from wp2md.models.quality import SystemPageCheck

_NUMERIC_SUFFIX_RE = re.compile(r"-\d+$")
_DATED_PATH_RE = re.compile(r"/20\d\d/[01]")
_PAGE_NUMBER_TITLE_RE = re.compile(r"Page \d+", re.IGNORECASE)

NOT_A_SYSTEM_PAGE = SystemPageCheck(False, None)


def _is_tag_page(title: str, slug: str) -> bool:
    return "tag:" in title or "category:" in title or "tag-" in slug or "category-" in slug


def _is_archive_page(title: str, slug: str, link: str) -> bool:
    if "archive" in title or "archive" in slug:
        return True
    # Year-like path segment such as /2023/05
    return bool(_DATED_PATH_RE.search(link))


def _is_author_page(title: str, slug: str, link: str) -> bool:
    return "author:" in title or "author-" in slug or "/author/" in link


def _is_paginated(title: str, slug: str, link: str) -> bool:
    return (
        "/page/" in link
        or "-page-" in slug
        or bool(_NUMERIC_SUFFIX_RE.search(slug))
        or bool(_PAGE_NUMBER_TITLE_RE.search(title))
    )


def classify(post: RawPostRecord) -> SystemPageCheck:
    """Return whether ``post`` is a system page, and which kind.

    Rules are checked in order and the first match wins: tag, archive and
    author pages require ``post_type == "page"``; the paginated check applies
    to every post type.
    """
    is_page = post.post_type == "page"
    title = post.title or ""
    lowered_title = title.lower()
    slug = post.slug_hint or ""
    link = post.permalink or ""

    if is_page and _is_tag_page(lowered_title, slug):
        return SystemPageCheck(True, "tag")
    if is_page and _is_archive_page(lowered_title, slug, link):
        return SystemPageCheck(True, "archive")
    if is_page and _is_author_page(lowered_title, slug, link):
        return SystemPageCheck(True, "author")
    if _is_paginated(title, slug, link):
        return SystemPageCheck(True, "paginated")
    return NOT_A_SYSTEM_PAGE
