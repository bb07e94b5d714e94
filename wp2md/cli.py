"""
Command line entry point for the WordPress → Markdown converter.

Usage:
  wp2md docs/export.xml --filter --min-words 300 --output output/

Without export paths, every ``.xml`` and ``.xml.gz`` file found in ``docs/``
is converted.
"""

from __future__ import annotations

import argparse
import glob
import json
import os
from typing import Any, Dict, List, Optional

from wp2md.conversion_tool import WordPressConversionTool
from wp2md.utils.errors import ConfigurationError, StreamFailureError

CONFIG_FILE = "config/conversion_config.json"
DOCS_PATH = "docs/"


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Convert WordPress WXR exports into Markdown files."
    )
    parser.add_argument("exports", nargs="*", help="WXR export files (.xml or .xml.gz)")
    parser.add_argument("--config", default=CONFIG_FILE, help="JSON configuration file")
    parser.add_argument("--database", help="DuckDB file for conversions (default: in memory)")
    parser.add_argument("--output", help="Directory for the generated ZIP archives")
    parser.add_argument("--filter", action="store_true", help="Enable low-value content filtering")
    parser.add_argument("--min-words", type=int, help="Minimum word count when filtering")
    parser.add_argument("--min-ratio", type=float, help="Minimum text/markup ratio when filtering")
    parser.add_argument("--keep-drafts", action="store_true", help="Do not skip draft posts")
    parser.add_argument("--no-archive", action="store_true", help="Do not write ZIP archives")
    return parser.parse_args(argv)


def _option_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    if args.filter:
        overrides["filter_enabled"] = True
    if args.min_words is not None:
        overrides["min_word_count"] = args.min_words
    if args.min_ratio is not None:
        overrides["min_text_to_markup_ratio"] = args.min_ratio
    if args.keep_drafts:
        overrides["exclude_draft_posts"] = False
    return overrides


def discover_exports(docs_path: str = DOCS_PATH) -> List[str]:
    found = glob.glob(os.path.join(docs_path, "*.xml")) + glob.glob(os.path.join(docs_path, "*.xml.gz"))
    return sorted(found)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    config: Dict[str, Any] = {}
    if os.path.exists(args.config):
        with open(args.config, "r", encoding="utf-8") as f:
            config = json.load(f)
    conversion = config.setdefault("conversion", {})
    conversion.setdefault("options", {}).update(_option_overrides(args))
    if args.database:
        conversion["database"] = args.database
    if args.output:
        conversion["output_dir"] = args.output

    try:
        tool = WordPressConversionTool(config)
    except ConfigurationError as e:
        print(f"[ERROR] {e}")
        return 2

    exports = args.exports or discover_exports()
    tool.log_message(f"Discovered export files: {exports}", level="DEBUG")
    if not exports:
        tool.log_message(
            f"No WordPress export files (.xml or .xml.gz) found in '{DOCS_PATH}' directory.",
            level="ERROR",
        )
        return 1

    failures = 0
    for path in exports:
        try:
            conversion_id = tool.convert_file(path)
        except StreamFailureError:
            failures += 1
            continue
        if not args.no_archive:
            tool.export_archive(conversion_id)

    tool.log_message("Conversion process finished.")
    return 1 if failures else 0
