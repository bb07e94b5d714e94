"""
Persistence of conversions and converted posts.

:class:`~wp2md.storage.repository.ConversionRepository` implements the
storage sink used by the conversion tool on top of DuckDB.
"""

from .repository import STATUSES, ConversionRepository

__all__ = ["STATUSES", "ConversionRepository"]
