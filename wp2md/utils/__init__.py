"""
Utility helpers used by the conversion tool.

This subpackage exposes the exception hierarchy, structured skip/accept
reporting and slug helpers.  The Markdown ZIP packager lives in
:mod:`wp2md.utils.archive`.
"""

from .errors import (
    EVENTS,
    ConfigurationError,
    ConversionError,
    ConversionNotFoundError,
    StreamFailureError,
    report_ok,
    report_skip,
)
from .slugs import safe_filename, slugify

__all__ = [
    "EVENTS",
    "ConfigurationError",
    "ConversionError",
    "ConversionNotFoundError",
    "StreamFailureError",
    "report_ok",
    "report_skip",
    "safe_filename",
    "slugify",
]
