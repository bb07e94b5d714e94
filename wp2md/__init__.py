"""
Top-level package for the WordPress → Markdown conversion utility.

This package bundles all components required to stream posts out of
WordPress WXR exports, filter out low-value and system-generated content,
convert the remaining HTML to Markdown, store the results and package them
as a ZIP archive.  Modules are split into subpackages:

* :mod:`wp2md.extractors` – token source and post reconstruction state machine
* :mod:`wp2md.filters` – content quality metrics and the filtering decision
* :mod:`wp2md.parsers` – HTML to Markdown conversion
* :mod:`wp2md.storage` – DuckDB storage of conversions and posts
* :mod:`wp2md.models` – records, options and stored rows
* :mod:`wp2md.utils` – errors, reporting, slugs and ZIP packaging

Each layer has no direct knowledge of configuration or execution strategy;
orchestration is handled in :mod:`wp2md.conversion_tool`.
"""

__version__ = "0.1.0"
