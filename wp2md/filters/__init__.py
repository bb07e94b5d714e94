"""
Content quality filtering for extracted posts.

* :mod:`wp2md.filters.quality` – body metrics (words, ratio, images, embeds)
* :mod:`wp2md.filters.system_pages` – tag/archive/author/paginated detection
* :mod:`wp2md.filters.decision` – the accept/reject decision with skip reason
"""

from .decision import decide
from .quality import (
    analyze_quality,
    count_words,
    has_images,
    is_embed_heavy,
    text_to_markup_ratio,
)
from .system_pages import classify

__all__ = [
    "analyze_quality",
    "classify",
    "count_words",
    "decide",
    "has_images",
    "is_embed_heavy",
    "text_to_markup_ratio",
]
