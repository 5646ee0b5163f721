"""GardenDB — table views over scanned documents and link-check results.

Uses DuckDB (in-memory) as a query engine over the notes' frontmatter
properties, body text, tags, links and broken links. Returns :mod:`polars`
DataFrames.

Usage::

    db = GardenDB(scan.documents, report)

    # Free-form SQL
    df = db.query("SELECT identity, title FROM documents WHERE 'python' = ANY(tags)")

    # Pre-built views
    table  = db.table_view(filter_tag="python", order_by="title")
    broken = db.broken_links_view()

    # Schema introspection
    keys = db.frontmatter_keys()
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Iterable

import duckdb
import polars as pl

if TYPE_CHECKING:
    from garden.document import Document
    from garden.validate import ValidationReport


class GardenDB:
    """In-memory DuckDB database over document metadata and broken links."""

    def __init__(
        self,
        documents: Iterable["Document"],
        report: "ValidationReport | None" = None,
    ) -> None:
        self.conn: duckdb.DuckDBPyConnection = duckdb.connect(":memory:")
        self.refresh(documents, report)

    # ------------------------------------------------------------------
    # Build / refresh
    # ------------------------------------------------------------------

    def refresh(
        self,
        documents: Iterable["Document"],
        report: "ValidationReport | None" = None,
    ) -> None:
        """(Re-)populate the database (call after every scan)."""
        self._create_schema()
        self._load_documents(list(documents))
        if report is not None:
            self._load_broken_links(report)

    def _create_schema(self) -> None:
        self.conn.execute("""
            CREATE OR REPLACE TABLE documents (
                identity    VARCHAR PRIMARY KEY,
                title       VARCHAR,
                body        TEXT,
                tags        VARCHAR[],
                links       VARCHAR[],
                digest      VARCHAR,
                frontmatter JSON
            )
        """)
        self.conn.execute("""
            CREATE OR REPLACE TABLE broken_links (
                source_file VARCHAR,
                target_slug VARCHAR
            )
        """)

    def _load_documents(self, documents: list["Document"]) -> None:
        rows = [
            (
                doc.identity,
                doc.title,
                doc.body,
                doc.tags,
                doc.links,
                doc.digest,
                json.dumps(doc.to_dict()["frontmatter"]),
            )
            for doc in documents
        ]
        if rows:
            self.conn.executemany("INSERT OR REPLACE INTO documents VALUES (?,?,?,?,?,?,?)", rows)

    def _load_broken_links(self, report: "ValidationReport") -> None:
        rows = [(b.source_file, b.target_slug) for b in report.broken_links]
        if rows:
            self.conn.executemany("INSERT INTO broken_links VALUES (?,?)", rows)

    # ------------------------------------------------------------------
    # Query
    # ------------------------------------------------------------------

    def query(self, sql: str) -> pl.DataFrame:
        """Run a raw SQL query and return a Polars DataFrame."""
        return self.conn.execute(sql).pl()

    # ------------------------------------------------------------------
    # Pre-built views
    # ------------------------------------------------------------------

    def table_view(
        self,
        *,
        filter_tag: str | None = None,
        search: str | None = None,
        columns: list[str] | None = None,
        order_by: str = "title",
    ) -> pl.DataFrame:
        """Return documents as a Polars DataFrame, optionally filtered.

        Parameters
        ----------
        filter_tag:
            Only include documents carrying this (expanded) tag.
        search:
            Case-insensitive substring filter on title or body.
        columns:
            Which columns to include. Defaults to ``identity, title, tags, links``.
        order_by:
            Column name to sort by.
        """
        cols = ", ".join(columns) if columns else "identity, title, tags, links"
        where_clauses: list[str] = []
        params: list[str] = []

        if filter_tag:
            where_clauses.append("list_contains(tags, ?)")
            params.append(filter_tag)
        if search:
            where_clauses.append("(title ILIKE ? OR body ILIKE ?)")
            params.extend([f"%{search}%", f"%{search}%"])

        where = f"WHERE {' AND '.join(where_clauses)}" if where_clauses else ""
        safe_order = order_by.replace(";", "").replace("'", "")
        sql = f"SELECT {cols} FROM documents {where} ORDER BY {safe_order}"
        return self.conn.execute(sql, params).pl()

    def broken_links_view(self) -> pl.DataFrame:
        """Broken links joined with the title of the note holding them."""
        return self.conn.execute(
            """
            SELECT b.source_file, d.title AS source_title, b.target_slug
            FROM broken_links b
            LEFT JOIN documents d ON d.identity = b.source_file
            ORDER BY b.source_file, b.target_slug
            """
        ).pl()

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def frontmatter_keys(self) -> list[str]:
        """Return all frontmatter property names present across all documents."""
        rows = self.conn.execute(
            "SELECT DISTINCT unnest(json_keys(frontmatter)) AS k FROM documents ORDER BY k"
        ).fetchall()
        return [r[0] for r in rows]

    def tag_counts(self) -> pl.DataFrame:
        """Return a tag → count table sorted by frequency."""
        return self.conn.execute(
            """
            SELECT tag, COUNT(*) AS note_count
            FROM (SELECT unnest(tags) AS tag FROM documents)
            GROUP BY tag
            ORDER BY note_count DESC, tag
            """
        ).pl()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        self.conn.close()

    def __enter__(self) -> "GardenDB":
        return self

    def __exit__(self, *_: object) -> None:
        self.close()
