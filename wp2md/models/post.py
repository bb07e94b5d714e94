from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List


CATEGORY_DOMAIN = "category"
TAG_DOMAIN = "post_tag"


@dataclass
class CategoryInProgress:
    """Scratch value for one ``<category>`` element of an item."""

    domain: str = ""
    nicename: str = ""
    name: str = ""


@dataclass
class RawPostRecord:
    """A post being rebuilt from the export token stream.

    Scalar fields keep the first non-empty value delivered for them, except
    ``html_body`` which concatenates every fragment.  ``fallback_body`` holds
    the plain ``<content>`` element, used only when ``content:encoded`` never
    arrived.
    """

    title: str = ""
    html_body: str = ""
    fallback_body: str = ""
    excerpt: str = ""
    published_at: str = ""
    status: str = ""
    post_type: str = ""
    slug_hint: str = ""
    author: str = ""
    permalink: str = ""
    source_id: str = ""
    categories: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    custom_fields: Dict[str, str] = field(default_factory=dict)

    @property
    def body(self) -> str:
        return self.html_body or self.fallback_body

    @property
    def is_complete(self) -> bool:
        return bool(self.title) and bool(self.body)

    @property
    def effective_status(self) -> str:
        return self.status or "publish"

    @property
    def effective_type(self) -> str:
        return self.post_type or "post"

    def add_term(self, category: CategoryInProgress) -> bool:
        """Route a finished category element by its domain.

        Returns ``False`` when the domain is neither a category nor a tag and
        the element was dropped.
        """
        if category.domain == CATEGORY_DOMAIN:
            self.categories.append(category.name)
        elif category.domain == TAG_DOMAIN:
            self.tags.append(category.name)
        else:
            return False
        return True
