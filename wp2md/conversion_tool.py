"""
High-level orchestration of the WordPress → Markdown conversion.

This module defines a :class:`WordPressConversionTool` class that ties
together the extractors, filters, parsers, storage and utilities into a
complete pipeline.  It counts the items of a WXR export, streams the export
through the post accumulator, converts accepted posts to Markdown, stores
them, records progress and final status, writes skip/accept reports and
packages the result as a ZIP of Markdown files.

Configuration is supplied via a JSON file path or directly as a
dictionary.  Everything lives under the ``conversion`` key: ``options``
(filtering and rendering options, validated before any file is read),
``database`` (DuckDB path, ``":memory:"`` by default), ``output_dir`` and
``reports_dir``.
"""

from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

import duckdb

from wp2md.extractors.post_accumulator import PostAccumulator
from wp2md.extractors.wxr_stream import count_items, feed_wxr, open_export
from wp2md.models.options import ConversionOptions, load_conversion_options
from wp2md.models.post import RawPostRecord
from wp2md.models.quality import FilterDecision
from wp2md.parsers.markdown import convert_html_to_markdown
from wp2md.storage.repository import ConversionRepository
from wp2md.utils.archive import write_markdown_archive
from wp2md.utils.errors import (
    ConversionNotFoundError,
    StreamFailureError,
    report_ok,
    report_skip,
    skip_code,
)
from wp2md.utils.slugs import slugify

# Progress is written to storage every this many finished items.
PROGRESS_INTERVAL = 5


def post_metadata(post: RawPostRecord, decision: FilterDecision) -> Dict[str, Any]:
    """Metadata stored alongside a converted post."""
    metadata: Dict[str, Any] = {
        "author": post.author,
        "categories": list(post.categories),
        "tags": list(post.tags),
        "status": post.effective_status,
        "type": post.effective_type,
        "custom_fields": dict(post.custom_fields),
        "excerpt": post.excerpt,
    }
    if decision.metrics is not None:
        metadata["content_quality"] = {
            "word_count": decision.metrics.word_count,
            "text_to_markup_ratio": decision.metrics.text_to_markup_ratio,
            "has_images": decision.metrics.has_images,
            "has_embeds": decision.metrics.has_embeds,
        }
    return metadata


class WordPressConversionTool:
    """
    Encapsulates all state and behavior required to convert WordPress
    exports to Markdown.  This class is responsible for reading
    configuration, driving the streaming extraction, applying the content
    filters and storing the results.  Skipped and accepted posts are
    recorded using the :mod:`wp2md.utils.errors` module.
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        *,
        config_file: Optional[str] = None,
        repository: Optional[ConversionRepository] = None,
    ) -> None:
        if config_file and os.path.exists(config_file):
            with open(config_file, "r", encoding="utf-8") as f:
                config = json.load(f)
        elif config is None:
            config = {}

        config.setdefault("conversion", {})
        config["conversion"].setdefault("options", {})
        config["conversion"].setdefault("database", os.getenv("WP2MD_DATABASE", ":memory:"))
        config["conversion"].setdefault("output_dir", "output")
        config["conversion"].setdefault("reports_dir", os.path.join("reports", "conversion"))

        self.config = config
        # Invalid options must fail here, before any export is opened.
        self.options: ConversionOptions = load_conversion_options(config["conversion"]["options"])
        self.reports_dir: str = config["conversion"]["reports_dir"]
        self.output_dir: str = config["conversion"]["output_dir"]
        self.repository = repository or ConversionRepository(config["conversion"]["database"])

    def log_message(self, message: str, level: str = "INFO") -> None:
        print(f"[{level}] {message}")
        os.makedirs(self.reports_dir, exist_ok=True)
        with open(os.path.join(self.reports_dir, "conversion.log"), "a", encoding="utf-8") as f:
            f.write(f"{level}: {message}\n")

    def convert_file(
        self,
        path: str,
        *,
        filename: Optional[str] = None,
        options: Optional[Mapping[str, Any]] = None,
    ) -> int:
        """
        Convert one export file and return the id of its conversion record.

        The export is read twice: a first pass counts the items so progress
        has a denominator, the second pass extracts, filters, converts and
        stores the posts.  Any error raised while reading or converting marks
        the conversion ``failed`` and is re-raised.

        :param path: Path to a ``.xml`` or ``.xml.gz`` WordPress export.
        :param filename: Name recorded for the conversion (defaults to the
            basename of ``path``).
        :param options: Per-run option overrides, validated before reading.
        """
        run_options = self.options
        if options is not None:
            override = load_conversion_options(options)
            run_options = self.options.model_copy(update=override.model_dump(exclude_unset=True))
        filename = filename or os.path.basename(path)
        conversion_id = self.repository.create_conversion(filename, run_options)
        self.log_message(f"Starting conversion {conversion_id} of {filename}")

        try:
            total = count_items(path)
            self.repository.update_progress(conversion_id, 0, total)
            self.log_message(f"Found {total} items in {filename}", level="DEBUG")

            def on_post(post: RawPostRecord, decision: FilterDecision) -> None:
                self._handle_post(conversion_id, post, decision, run_options)

            def on_progress(processed: int) -> None:
                if processed % PROGRESS_INTERVAL == 0:
                    self.repository.update_progress(conversion_id, processed, total)

            accumulator = PostAccumulator(run_options, on_post, on_progress=on_progress)
            with open_export(path) as stream:
                feed_wxr(stream, accumulator)
            if accumulator.discarded or accumulator.stray_closes:
                self.log_message(
                    f"Malformed nesting in {filename}: {accumulator.discarded} unfinished items discarded, "
                    f"{accumulator.stray_closes} stray closing tags ignored",
                    level="DEBUG",
                )
            self.repository.update_progress(conversion_id, accumulator.processed, total)
            self.repository.update_status(conversion_id, "completed")
        except StreamFailureError as e:
            self.log_message(f"Conversion {conversion_id} failed: {e}", level="ERROR")
            self.repository.update_status(conversion_id, "failed")
            raise
        except Exception as e:
            self.log_message(
                f"Conversion {conversion_id} aborted by {type(e).__name__}: {e}", level="ERROR"
            )
            self.repository.update_status(conversion_id, "failed")
            raise

        stored = len(self.repository.list_posts(conversion_id))
        self.log_message(
            f"Conversion {conversion_id} completed: {accumulator.processed} items processed, "
            f"{stored} posts converted"
        )
        return conversion_id

    def _handle_post(
        self,
        conversion_id: int,
        post: RawPostRecord,
        decision: FilterDecision,
        options: ConversionOptions,
    ) -> None:
        if not decision.accept:
            reason = decision.skip_reason or ""
            report_skip(skip_code(reason), post, reason, report_dir=self.reports_dir)
            return

        markdown = convert_html_to_markdown(
            post.body,
            preserve_images=options.preserve_images,
            process_shortcodes=options.process_shortcodes,
        )
        try:
            post_id = self.repository.create_post(
                conversion_id,
                title=post.title,
                slug=post.slug_hint or slugify(post.title),
                content=markdown,
                date=post.published_at or datetime.now(timezone.utc).isoformat(),
                metadata=post_metadata(post, decision),
            )
        except duckdb.Error as e:
            self.log_message(f"Error storing post '{post.title}': {e}", level="ERROR")
            return
        report_ok("CONVERTED", post, {"post_id": post_id}, report_dir=self.reports_dir)

    def progress(self, conversion_id: int) -> Dict[str, Any]:
        conversion = self.repository.get_conversion(conversion_id)
        if conversion is None:
            raise ConversionNotFoundError(f"Conversion with id {conversion_id} not found")
        return conversion.progress()

    def export_archive(self, conversion_id: int, out_dir: Optional[str] = None) -> str:
        """Write the ZIP of Markdown files for ``conversion_id`` and return its path."""
        conversion = self.repository.get_conversion(conversion_id)
        if conversion is None:
            raise ConversionNotFoundError(f"Conversion with id {conversion_id} not found")
        posts = self.repository.list_posts(conversion_id)
        path = write_markdown_archive(conversion, posts, out_dir=out_dir or self.output_dir)
        self.log_message(f"Archive with {len(posts)} posts written to {path}")
        return path
