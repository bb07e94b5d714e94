"""
DuckDB-backed storage for conversions and their Markdown posts.

The repository is in-memory by default (``":memory:"``); pass a file path to
keep conversions between runs.  Options and post metadata are stored as JSON
text.  No transactional guarantees are made beyond what a single DuckDB
statement provides.
"""

from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Union

import duckdb
from pydantic import BaseModel

from wp2md.models.conversion import Conversion, MarkdownPost
from wp2md.utils.errors import ConversionNotFoundError

STATUSES = ("processing", "completed", "failed")

_SCHEMA = [
    "CREATE SEQUENCE IF NOT EXISTS conversions_id_seq START 1",
    "CREATE SEQUENCE IF NOT EXISTS markdown_posts_id_seq START 1",
    """
    CREATE TABLE IF NOT EXISTS conversions (
        id INTEGER PRIMARY KEY DEFAULT nextval('conversions_id_seq'),
        filename VARCHAR NOT NULL,
        status VARCHAR NOT NULL DEFAULT 'processing',
        total_posts INTEGER DEFAULT 0,
        processed_posts INTEGER DEFAULT 0,
        options VARCHAR NOT NULL,
        created_at VARCHAR NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS markdown_posts (
        id INTEGER PRIMARY KEY DEFAULT nextval('markdown_posts_id_seq'),
        conversion_id INTEGER NOT NULL,
        title VARCHAR NOT NULL,
        slug VARCHAR NOT NULL,
        content VARCHAR NOT NULL,
        date VARCHAR NOT NULL,
        metadata VARCHAR NOT NULL
    )
    """,
]

_CONVERSION_COLUMNS = "id, filename, status, total_posts, processed_posts, options, created_at"
_POST_COLUMNS = "id, conversion_id, title, slug, content, date, metadata"


class ConversionRepository:
    """Storage sink used by the conversion tool.

    Usage example::

        with ConversionRepository() as repo:
            cid = repo.create_conversion("export.xml", {"split_files": True})
            repo.update_progress(cid, 0, 12)
            repo.create_post(cid, title="Hello", slug="hello", content="# Hi",
                             date="2024-01-01", metadata={})
            repo.update_status(cid, "completed")
    """

    def __init__(self, database: str = ":memory:") -> None:
        if database != ":memory:":
            os.makedirs(os.path.dirname(database) or ".", exist_ok=True)
        self.database = database
        self.con = duckdb.connect(database=database, read_only=False)
        for statement in _SCHEMA:
            self.con.execute(statement)

    def close(self) -> None:
        self.con.close()

    def __enter__(self) -> "ConversionRepository":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # --- conversions ---------------------------------------------------

    def create_conversion(
        self, filename: str, options: Union[Mapping[str, Any], BaseModel, None] = None
    ) -> int:
        if isinstance(options, BaseModel):
            options = options.model_dump()
        row = self.con.execute(
            "INSERT INTO conversions (filename, status, total_posts, processed_posts, options, created_at) "
            "VALUES (?, 'processing', 0, 0, ?, ?) RETURNING id",
            [filename, json.dumps(dict(options or {})), datetime.now(timezone.utc).isoformat()],
        ).fetchone()
        return int(row[0])

    def get_conversion(self, conversion_id: int) -> Optional[Conversion]:
        row = self.con.execute(
            f"SELECT {_CONVERSION_COLUMNS} FROM conversions WHERE id = ?", [conversion_id]
        ).fetchone()
        if row is None:
            return None
        return Conversion(
            id=row[0],
            filename=row[1],
            status=row[2],
            total_posts=row[3] or 0,
            processed_posts=row[4] or 0,
            options=json.loads(row[5]),
            created_at=row[6],
        )

    def _require(self, conversion_id: int) -> None:
        if self.get_conversion(conversion_id) is None:
            raise ConversionNotFoundError(f"Conversion with id {conversion_id} not found")

    def update_progress(self, conversion_id: int, processed: int, total: int) -> None:
        self._require(conversion_id)
        self.con.execute(
            "UPDATE conversions SET processed_posts = ?, total_posts = ? WHERE id = ?",
            [processed, total, conversion_id],
        )

    def update_status(self, conversion_id: int, status: str) -> None:
        if status not in STATUSES:
            raise ValueError(f"Unknown conversion status: {status!r}")
        self._require(conversion_id)
        self.con.execute("UPDATE conversions SET status = ? WHERE id = ?", [status, conversion_id])

    # --- posts ---------------------------------------------------------

    def create_post(
        self,
        conversion_id: int,
        *,
        title: str,
        slug: str,
        content: str,
        date: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> int:
        self._require(conversion_id)
        row = self.con.execute(
            "INSERT INTO markdown_posts (conversion_id, title, slug, content, date, metadata) "
            "VALUES (?, ?, ?, ?, ?, ?) RETURNING id",
            [conversion_id, title, slug, content, date, json.dumps(metadata or {}, ensure_ascii=False)],
        ).fetchone()
        return int(row[0])

    def list_posts(self, conversion_id: int) -> List[MarkdownPost]:
        rows = self.con.execute(
            f"SELECT {_POST_COLUMNS} FROM markdown_posts WHERE conversion_id = ? ORDER BY id",
            [conversion_id],
        ).fetchall()
        return [self._to_post(r) for r in rows]

    def get_post(self, post_id: int) -> Optional[MarkdownPost]:
        row = self.con.execute(
            f"SELECT {_POST_COLUMNS} FROM markdown_posts WHERE id = ?", [post_id]
        ).fetchone()
        return self._to_post(row) if row is not None else None

    @staticmethod
    def _to_post(row: Any) -> MarkdownPost:
        return MarkdownPost(
            id=row[0],
            conversion_id=row[1],
            title=row[2],
            slug=row[3],
            content=row[4],
            date=row[5],
            metadata=json.loads(row[6]),
        )
