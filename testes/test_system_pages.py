import os
import sys

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest

from wp2md.filters.system_pages import classify
from wp2md.models.post import RawPostRecord


def make_post(post_type, slug, title, link):
    return RawPostRecord(title=title, post_type=post_type, slug_hint=slug, permalink=link)


REGULAR = make_post("post", "regular-post", "Regular Post", "https://example.com/regular-post")
TAG_PAGE = make_post("page", "tag-example", "Tag: Example", "https://example.com/tag/example")
ARCHIVE_PAGE = make_post("page", "archive-2023", "Archive: 2023", "https://example.com/2023")
AUTHOR_PAGE = make_post("page", "author-admin", "Author: Admin", "https://example.com/author/admin")
PAGINATED = make_post(
    "post", "example-post-page-2", "Example Post Page 2", "https://example.com/example-post/page/2"
)


@pytest.mark.parametrize(
    "post, page_type",
    [
        (TAG_PAGE, "tag"),
        (ARCHIVE_PAGE, "archive"),
        (AUTHOR_PAGE, "author"),
        (PAGINATED, "paginated"),
    ],
)
def test_detects_system_pages(post, page_type):
    result = classify(post)
    assert result.is_system_page is True
    assert result.page_type == page_type


def test_regular_post_is_not_a_system_page():
    result = classify(REGULAR)
    assert result.is_system_page is False
    assert result.page_type is None


def test_category_title_is_a_tag_page():
    post = make_post("page", "news", "Category: News", "https://example.com/news")
    assert classify(post).page_type == "tag"


def test_dated_permalink_is_an_archive_page():
    post = make_post("page", "may", "May", "https://example.com/2023/05/")
    assert classify(post).page_type == "archive"


def test_tag_archive_and_author_rules_only_apply_to_pages():
    post = make_post("post", "tag-example", "Tag: Example", "https://example.com/tag/example")
    assert classify(post).is_system_page is False

    post = make_post("post", "author-admin", "Author: Admin", "https://example.com/author/admin")
    assert classify(post).is_system_page is False


def test_paginated_rule_applies_to_every_type():
    page = make_post("page", "about", "About Page 3", "https://example.com/about")
    assert classify(page).page_type == "paginated"

    post = make_post("post", "top", "Top", "https://example.com/blog/page/4")
    assert classify(post).page_type == "paginated"


def test_numeric_slug_suffix_is_paginated():
    post = make_post("post", "top-10", "Top Ten", "https://example.com/top-ten")
    assert classify(post).page_type == "paginated"


def test_first_matching_rule_wins():
    # Title says tag, slug says author: tag is checked first
    post = make_post("page", "author-admin", "Tag: Admin", "https://example.com/author/admin")
    assert classify(post).page_type == "tag"


def test_missing_fields_are_treated_as_empty():
    assert classify(RawPostRecord()).is_system_page is False


def test_year_without_month_is_not_an_archive_signal():
    post = make_post("page", "about", "About", "https://example.com/2023-plans/10-goals")
    assert classify(post).is_system_page is False
