from typing import Any

import psycopg
from psycopg import sql
from psycopg.rows import dict_row

from intake.database.models import DocumentRecord, NewDocument

_COLUMNS = """
    id, name, type, size, status, ocr_processed, ai_analyzed,
    content, url, drive_id, created_at, updated_at
"""


def _to_record(row: dict[str, Any]) -> DocumentRecord:
    return DocumentRecord(
        id=row["id"],
        name=row["name"],
        type=row["type"],
        size=row["size"],
        status=row["status"],
        ocr_processed=row["ocr_processed"],
        ai_analyzed=row["ai_analyzed"],
        content=row["content"],
        url=row["url"],
        drive_id=row["drive_id"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class DocumentRepository:
    """Database operations for the documents table."""

    def find_by_id(self, conn: psycopg.Connection[Any], document_id: int) -> DocumentRecord | None:
        with conn.cursor(row_factory=dict_row) as cur:
            cur.execute(
                f"SELECT {_COLUMNS} FROM documents WHERE id = %s",
                (document_id,),
            )
            row = cur.fetchone()
        return _to_record(row) if row is not None else None

    def list_recent(
        self,
        conn: psycopg.Connection[Any],
        limit: int | None = None,
    ) -> list[DocumentRecord]:
        """Documents newest first; all of them when ``limit`` is None."""
        with conn.cursor(row_factory=dict_row) as cur:
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM documents
                ORDER BY created_at DESC, id DESC
                LIMIT %s
                """,
                (limit,),
            )
            rows = cur.fetchall()
        return [_to_record(row) for row in rows]

    def search(self, conn: psycopg.Connection[Any], query: str) -> list[DocumentRecord]:
        pattern = f"%{query}%"
        with conn.cursor(row_factory=dict_row) as cur:
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM documents
                WHERE name ILIKE %s OR content ILIKE %s
                ORDER BY created_at DESC, id DESC
                """,
                (pattern, pattern),
            )
            rows = cur.fetchall()
        return [_to_record(row) for row in rows]

    def insert(self, conn: psycopg.Connection[Any], document: NewDocument) -> DocumentRecord:
        with conn.cursor(row_factory=dict_row) as cur:
            cur.execute(
                f"""
                INSERT INTO documents (name, type, size, status, url, drive_id)
                VALUES (%s, %s, %s, %s, %s, %s)
                RETURNING {_COLUMNS}
                """,
                (
                    document.name,
                    document.type,
                    document.size,
                    document.status,
                    document.url,
                    document.drive_id,
                ),
            )
            row = cur.fetchone()
        assert row is not None
        return _to_record(row)

    def update(
        self,
        conn: psycopg.Connection[Any],
        document_id: int,
        changes: dict[str, object],
    ) -> DocumentRecord | None:
        """Apply column changes; returns None when the document does not exist."""
        assignments = [
            sql.SQL("{} = %s").format(sql.Identifier(column)) for column in changes
        ]
        assignments.append(sql.SQL("updated_at = NOW()"))
        query = sql.SQL("UPDATE documents SET {} WHERE id = %s RETURNING {}").format(
            sql.SQL(", ").join(assignments),
            sql.SQL(_COLUMNS),
        )
        with conn.cursor(row_factory=dict_row) as cur:
            cur.execute(query, (*changes.values(), document_id))
            row = cur.fetchone()
        return _to_record(row) if row is not None else None

    def delete(self, conn: psycopg.Connection[Any], document_id: int) -> bool:
        with conn.cursor() as cur:
            cur.execute("DELETE FROM documents WHERE id = %s", (document_id,))
            return cur.rowcount > 0

    def update_status_where(
        self,
        conn: psycopg.Connection[Any],
        status: str,
        new_status: str,
    ) -> int:
        with conn.cursor() as cur:
            cur.execute(
                """
                UPDATE documents
                SET status = %s, updated_at = NOW()
                WHERE status = %s
                """,
                (new_status, status),
            )
            return cur.rowcount

    def totals(self, conn: psycopg.Connection[Any]) -> tuple[int, int, int]:
        """Return (document count, OCR-processed count, total bytes)."""
        with conn.cursor() as cur:
            cur.execute(
                """
                SELECT COUNT(*),
                       COUNT(*) FILTER (WHERE ocr_processed),
                       COALESCE(SUM(size), 0)
                FROM documents
                """
            )
            row = cur.fetchone()
        assert row is not None
        return int(row[0]), int(row[1]), int(row[2])
