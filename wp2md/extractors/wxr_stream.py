"""
Streaming token source for WordPress eXtended RSS (WXR) exports.

The export is read in chunks and tokenized with the standard library's expat
parser, without namespace processing so element names keep their prefixes
(``content:encoded``, ``wp:postmeta`` ...).  Text is trimmed, inner whitespace
is collapsed and empty text is dropped; CDATA sections are delivered
verbatim, one event per section.

Files are transparently gunzipped when their name ends in ``.gz`` or their
content starts with the gzip magic bytes.
"""

from __future__ import annotations

import gzip
import os
import re
import zlib
from typing import Any, BinaryIO, Dict, Iterator, List, Tuple, Union
from xml.parsers import expat

from wp2md.utils.errors import StreamFailureError

DEFAULT_CHUNK_SIZE = 64 * 1024
GZIP_MAGIC = b"\x1f\x8b"

WxrEvent = Tuple[Any, ...]
PathLike = Union[str, "os.PathLike[str]"]

_WHITESPACE_RE = re.compile(r"\s+")


def open_export(path: PathLike) -> BinaryIO:
    """Open an export file for binary reading, decompressing gzip content."""
    try:
        with open(path, "rb") as probe:
            magic = probe.read(2)
    except OSError as e:
        raise StreamFailureError(f"Could not open export {path}: {e}") from e
    if os.fspath(path).endswith(".gz") or magic == GZIP_MAGIC:
        return gzip.open(path, "rb")  # type: ignore[return-value]
    return open(path, "rb")


class _EventCollector:
    """Translates expat callbacks into ``(kind, *payload)`` tuples."""

    def __init__(self) -> None:
        self.events: List[WxrEvent] = []
        self._chars: List[str] = []
        self.parser = expat.ParserCreate()
        self.parser.StartElementHandler = self._start
        self.parser.EndElementHandler = self._end
        self.parser.CharacterDataHandler = self._characters
        self.parser.StartCdataSectionHandler = self._start_cdata
        self.parser.EndCdataSectionHandler = self._end_cdata

    def _flush_text(self) -> None:
        if not self._chars:
            return
        text = _WHITESPACE_RE.sub(" ", "".join(self._chars).strip())
        self._chars = []
        if text:
            self.events.append(("text", text))

    def _start(self, name: str, attributes: Dict[str, str]) -> None:
        self._flush_text()
        self.events.append(("open", name, dict(attributes)))

    def _end(self, name: str) -> None:
        self._flush_text()
        self.events.append(("close", name))

    def _characters(self, data: str) -> None:
        self._chars.append(data)

    def _start_cdata(self) -> None:
        self._flush_text()

    def _end_cdata(self) -> None:
        self.events.append(("cdata", "".join(self._chars)))
        self._chars = []

    def drain(self) -> List[WxrEvent]:
        events, self.events = self.events, []
        return events


def iter_wxr_events(stream: BinaryIO, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[WxrEvent]:
    """Yield structural events from ``stream`` in document order.

    Events are ``("open", name, attributes)``, ``("text", content)``,
    ``("cdata", content)`` and ``("close", name)``, followed by a final
    ``("end",)``.  Unreadable, truncated or malformed input raises
    :class:`StreamFailureError`.
    """
    collector = _EventCollector()
    try:
        while True:
            chunk = stream.read(chunk_size)
            if not chunk:
                break
            collector.parser.Parse(chunk, False)
            yield from collector.drain()
        collector.parser.Parse(b"", True)
    except expat.ExpatError as e:
        raise StreamFailureError(f"Invalid XML in export: {e}") from e
    except (OSError, EOFError, zlib.error) as e:
        raise StreamFailureError(f"Could not read export stream: {e}") from e
    yield from collector.drain()
    yield ("end",)


def feed_wxr(stream: BinaryIO, handler: Any, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
    """Drive ``handler`` (``open``/``text``/``cdata``/``close``/``end``/``error``) from ``stream``."""
    try:
        for kind, *payload in iter_wxr_events(stream, chunk_size):
            getattr(handler, kind)(*payload)
    except StreamFailureError as e:
        handler.error(e)
        raise


def count_items(path: PathLike) -> int:
    """Count ``<item>`` elements in an export, as an independent first pass."""
    count = 0
    with open_export(path) as stream:
        for event in iter_wxr_events(stream):
            if event[0] == "open" and event[1] == "item":
                count += 1
    return count
