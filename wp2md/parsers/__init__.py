"""
Parsers and converters used by the conversion pipeline.

Currently this subpackage exposes ``convert_html_to_markdown`` from
:mod:`wp2md.parsers.markdown`.
"""

from .markdown import convert_html_to_markdown, is_wordpress_image

__all__ = ["convert_html_to_markdown", "is_wordpress_image"]
