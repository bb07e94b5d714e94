from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


ConversionStatus = Literal["processing", "completed", "failed"]


class Conversion(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    filename: str
    status: ConversionStatus = "processing"
    total_posts: int = Field(0, alias="totalPosts")
    processed_posts: int = Field(0, alias="processedPosts")
    options: dict[str, Any] = Field(default_factory=dict)
    created_at: str = Field(..., alias="createdAt")

    @property
    def percentage(self) -> int:
        if self.total_posts <= 0:
            return 0
        return round(self.processed_posts / self.total_posts * 100)

    def progress(self) -> dict[str, Any]:
        """Snapshot in the shape polled by the web client."""
        return {
            "status": self.status,
            "processed": self.processed_posts,
            "total": self.total_posts,
            "percentage": self.percentage,
        }


class MarkdownPost(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    conversion_id: int = Field(..., alias="conversionId")
    title: str = Field(..., min_length=1)
    slug: str
    content: str
    date: str
    metadata: dict[str, Any] = Field(default_factory=dict)
