from __future__ import annotations

import re

_WS_RE = re.compile(r"\s+")
_NON_SLUG_RE = re.compile(r"[^\w\-]+")
_DASHES_RE = re.compile(r"--+")
_NON_ALNUM_RE = re.compile(r"[^a-z0-9]", re.IGNORECASE)


def slugify(text: str) -> str:
    """Build a URL slug from a post title when the export has none."""
    slug = str(text or "").lower().strip()
    slug = _WS_RE.sub("-", slug)
    slug = slug.replace("&", "-and-")
    slug = _NON_SLUG_RE.sub("", slug)
    return _DASHES_RE.sub("-", slug)


def safe_filename(slug: str) -> str:
    """Lowercase ``slug`` with every non-alphanumeric character turned into ``-``."""
    return _NON_ALNUM_RE.sub("-", slug or "").lower()
