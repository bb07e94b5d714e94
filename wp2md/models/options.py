from __future__ import annotations

from typing import Any, Mapping, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from wp2md.utils.errors import ConfigurationError


class FilteringOptions(BaseModel):
    """Thresholds and toggles used by the filtering decision engine.

    Both the snake_case field names and the camelCase names used by the
    web client (``filterLowValueContent``, ``minTextToHtmlRatio`` ...) are
    accepted on input.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    filter_enabled: bool = Field(
        False, validation_alias=AliasChoices("filter_enabled", "filterEnabled", "filterLowValueContent")
    )
    min_word_count: int = Field(700, ge=0, validation_alias=AliasChoices("min_word_count", "minWordCount"))
    min_text_to_markup_ratio: float = Field(
        0.5,
        ge=0.0,
        le=1.0,
        validation_alias=AliasChoices(
            "min_text_to_markup_ratio", "minTextToMarkupRatio", "minTextToHtmlRatio"
        ),
    )
    exclude_embed_only_posts: bool = Field(
        True, validation_alias=AliasChoices("exclude_embed_only_posts", "excludeEmbedOnlyPosts")
    )
    exclude_draft_posts: bool = Field(
        True, validation_alias=AliasChoices("exclude_draft_posts", "excludeDraftPosts")
    )
    exclude_no_images: bool = Field(
        False, validation_alias=AliasChoices("exclude_no_images", "excludeNoImages")
    )
    exclude_tag_pages: bool = Field(
        True, validation_alias=AliasChoices("exclude_tag_pages", "excludeTagPages")
    )
    exclude_archive_pages: bool = Field(
        True, validation_alias=AliasChoices("exclude_archive_pages", "excludeArchivePages")
    )
    exclude_author_pages: bool = Field(
        True, validation_alias=AliasChoices("exclude_author_pages", "excludeAuthorPages")
    )
    exclude_paginated_pages: bool = Field(
        True, validation_alias=AliasChoices("exclude_paginated_pages", "excludePaginatedPages")
    )

    def excludes_page_type(self, page_type: Optional[str]) -> bool:
        """Whether the per-type exclusion toggle for ``page_type`` is on."""
        return {
            "tag": self.exclude_tag_pages,
            "archive": self.exclude_archive_pages,
            "author": self.exclude_author_pages,
            "paginated": self.exclude_paginated_pages,
        }.get(page_type or "", False)


class ConversionOptions(FilteringOptions):
    """Full option set of a conversion run: filtering plus rendering/packaging."""

    preserve_images: bool = Field(
        True, validation_alias=AliasChoices("preserve_images", "preserveImages")
    )
    process_shortcodes: bool = Field(
        True, validation_alias=AliasChoices("process_shortcodes", "processShortcodes")
    )
    include_metadata: bool = Field(
        True, validation_alias=AliasChoices("include_metadata", "includeMetadata")
    )
    split_files: bool = Field(True, validation_alias=AliasChoices("split_files", "splitFiles"))


def load_conversion_options(data: Optional[Mapping[str, Any]] = None) -> ConversionOptions:
    """Validate raw option values, raising :class:`ConfigurationError` on bad input."""
    try:
        return ConversionOptions.model_validate(dict(data or {}))
    except ValidationError as e:
        raise ConfigurationError(f"Invalid conversion options: {e}") from e
