from __future__ import annotations

from typing import Literal, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field


PageType = Literal["tag", "archive", "author", "paginated"]


class SystemPageCheck(NamedTuple):
    is_system_page: bool
    page_type: Optional[PageType]


class QualityMetrics(BaseModel):
    model_config = ConfigDict(frozen=True)

    word_count: int = Field(..., ge=0)
    text_to_markup_ratio: float = Field(..., ge=0.0, le=1.0)
    has_images: bool
    has_embeds: bool
    is_low_value: bool
    page_type: Optional[PageType] = None


class FilterDecision(BaseModel):
    """Outcome of :func:`wp2md.filters.decision.decide` for one post."""

    model_config = ConfigDict(frozen=True)

    accept: bool
    metrics: Optional[QualityMetrics] = None
    skip_reason: Optional[str] = None
