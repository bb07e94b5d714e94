"""
Errors raised by the conversion pipeline and the per-post decision reports.

Every post the filters look at leaves one line in a report: rejected posts
go to ``skipped.jsonl`` with the reason produced by
:func:`wp2md.filters.decision.decide`, converted posts go to
``accepted.jsonl`` with the id they were stored under.  Both files live in
the conversion's reports directory and are only ever appended to, so a
run can be audited line by line after it finished.  Entries carry an event
code (see ``EVENTS``), the post slug and title.
"""

from __future__ import annotations

import json
import os
from typing import Any, Dict, Optional


class ConversionError(Exception):
    """Base class for every error raised while converting an export."""


class StreamFailureError(ConversionError):
    """The underlying byte source could not be read or parsed."""


class ConfigurationError(ConversionError):
    """Invalid conversion options, detected before any stream is opened."""


class ConversionNotFoundError(ConversionError):
    """Lookup of a conversion id that the repository does not know."""


# Mapping of event codes used throughout the conversion to descriptive messages.
EVENTS: Dict[str, str] = {
    "LOW_VALUE": "Skipped low-value content",
    "SYSTEM_PAGE": "Skipped system-generated page",
    "DRAFT": "Skipped draft post",
    "CONVERTED": "Post converted to Markdown",
}

_DEFAULT_REPORT_DIR = os.path.join("reports", "conversion")


def _write_jsonl(path: str, data: Dict[str, Any]) -> None:
    """Append ``data`` as a JSON object followed by a newline to ``path``."""
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "a", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False)
        f.write("\n")


def _entry(code: str, post: Any) -> Dict[str, Any]:
    return {
        "code": code,
        "message": EVENTS.get(code, code),
        "slug": getattr(post, "slug_hint", None) or None,
        "title": getattr(post, "title", None),
    }


def skip_code(reason: str) -> str:
    """Return the event code matching a skip reason from the decision engine."""
    if reason.startswith("system-generated"):
        return "SYSTEM_PAGE"
    if reason == "draft post":
        return "DRAFT"
    return "LOW_VALUE"


def report_skip(
    code: str, post: Any, reason: str, *, report_dir: str = _DEFAULT_REPORT_DIR
) -> None:
    """Log a skipped ``post``.

    Parameters
    ----------
    code:
        A key identifying the type of skip.  If ``code`` is present in
        :data:`EVENTS` its value will be used as the message.
    post:
        The :class:`~wp2md.models.post.RawPostRecord` that was rejected.  Only
        its slug hint and title are written.
    reason:
        The skip reason produced by :func:`wp2md.filters.decision.decide`.
    """
    entry = _entry(code, post)
    entry["reason"] = reason
    print(f"[SKIP] {entry['message']} - {entry['title'] or ''} ({reason})")
    _write_jsonl(os.path.join(report_dir, "skipped.jsonl"), entry)


def report_ok(
    code: str,
    post: Any,
    extra: Optional[Dict[str, Any]] = None,
    *,
    report_dir: str = _DEFAULT_REPORT_DIR,
) -> None:
    """Log a successful event for ``post``.

    Parameters
    ----------
    code:
        A key identifying the type of event.
    post:
        The post record associated with the event.
    extra:
        Optional dictionary of additional fields to merge into the log entry.
    """
    entry = _entry(code, post)
    if extra:
        entry.update(extra)
    print(f"[OK] {entry['message']} - {entry['title'] or ''}")
    _write_jsonl(os.path.join(report_dir, "accepted.jsonl"), entry)
