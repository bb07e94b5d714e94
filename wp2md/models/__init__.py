"""
Data models shared by the extraction, filtering and storage layers.

Mutable records rebuilt from the token stream are plain dataclasses; options,
metrics and stored rows are pydantic models so they are validated on entry.
"""

from .conversion import Conversion, MarkdownPost
from .options import ConversionOptions, FilteringOptions, load_conversion_options
from .post import CategoryInProgress, RawPostRecord
from .quality import FilterDecision, QualityMetrics, SystemPageCheck

__all__ = [
    "CategoryInProgress",
    "Conversion",
    "ConversionOptions",
    "FilterDecision",
    "FilteringOptions",
    "MarkdownPost",
    "QualityMetrics",
    "RawPostRecord",
    "SystemPageCheck",
    "load_conversion_options",
]
