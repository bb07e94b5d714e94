"""
Packaging of converted posts into a downloadable ZIP of Markdown files.

:func:`build_markdown_archive` returns the archive as bytes, one ``.md`` file
per stored post, optionally prefixed with YAML-style front matter built from
the post's title, date and metadata.  :func:`write_markdown_archive` writes the
same archive to disk next to the other conversion outputs.
"""

from __future__ import annotations

import io
import os
import zipfile
from typing import Iterable, List, Set

from wp2md.models.conversion import Conversion, MarkdownPost

from .slugs import safe_filename


def _quote(value: str) -> str:
    escaped = str(value).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def render_post_file(post: MarkdownPost, *, include_metadata: bool = True) -> str:
    """Return the Markdown file content for ``post``.

    Only string and list metadata values are written to the front matter;
    nested mappings such as custom fields are left out.
    """
    content = ""
    if include_metadata:
        lines: List[str] = ["---", f"title: {_quote(post.title)}", f"date: {_quote(post.date)}"]
        for key, value in post.metadata.items():
            if isinstance(value, str):
                lines.append(f"{key}: {_quote(value)}")
            elif isinstance(value, list):
                lines.append(f"{key}: [{', '.join(_quote(v) for v in value)}]")
        lines.append("---")
        content = "\n".join(lines) + "\n\n"
    return content + post.content


def post_filename(post: MarkdownPost, *, split_files: bool = True) -> str:
    if split_files:
        return f"{safe_filename(post.slug)}.md"
    return f"posts/{post.id}.md"


def archive_filename(conversion: Conversion) -> str:
    """``export.xml`` / ``export.xml.gz`` → ``export.md.zip``."""
    name = conversion.filename
    for suffix in (".gz", ".xml"):
        if name.lower().endswith(suffix):
            name = name[: -len(suffix)]
    return f"{name}.md.zip"


def build_markdown_archive(conversion: Conversion, posts: Iterable[MarkdownPost]) -> bytes:
    """Zip every post of ``conversion`` using the conversion's stored options."""
    options = conversion.options or {}
    split_files = bool(options.get("split_files", True))
    include_metadata = bool(options.get("include_metadata", True))

    buffer = io.BytesIO()
    seen: Set[str] = set()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for post in posts:
            filename = post_filename(post, split_files=split_files)
            if filename in seen:
                # Two posts with the same slug: keep both
                filename = f"{filename[:-3]}-{post.id}.md"
            seen.add(filename)
            zf.writestr(filename, render_post_file(post, include_metadata=include_metadata))
    return buffer.getvalue()


def write_markdown_archive(
    conversion: Conversion, posts: Iterable[MarkdownPost], *, out_dir: str = "output"
) -> str:
    """Write the archive for ``conversion`` under ``out_dir`` and return its path."""
    os.makedirs(out_dir or ".", exist_ok=True)
    out_path = os.path.join(out_dir, archive_filename(conversion))
    with open(out_path, "wb") as f:
        f.write(build_markdown_archive(conversion, posts))
    return out_path
