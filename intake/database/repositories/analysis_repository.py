from typing import Any

import psycopg
from psycopg.rows import dict_row

from intake.database.models import AnalysisRecord, NewAnalysis


def _to_record(row: dict[str, Any]) -> AnalysisRecord:
    return AnalysisRecord(
        id=row["id"],
        document_id=row["document_id"],
        title=row["title"],
        content=row["content"],
        model=row["model"],
        created_at=row["created_at"],
    )


class AnalysisRepository:
    """Database operations for the analyses table."""

    def find_by_id(self, conn: psycopg.Connection[Any], analysis_id: int) -> AnalysisRecord | None:
        with conn.cursor(row_factory=dict_row) as cur:
            cur.execute(
                """
                SELECT id, document_id, title, content, model, created_at
                FROM analyses
                WHERE id = %s
                """,
                (analysis_id,),
            )
            row = cur.fetchone()
        return _to_record(row) if row is not None else None

    def list_for_document(
        self,
        conn: psycopg.Connection[Any],
        document_id: int,
    ) -> list[AnalysisRecord]:
        with conn.cursor(row_factory=dict_row) as cur:
            cur.execute(
                """
                SELECT id, document_id, title, content, model, created_at
                FROM analyses
                WHERE document_id = %s
                ORDER BY created_at DESC, id DESC
                """,
                (document_id,),
            )
            rows = cur.fetchall()
        return [_to_record(row) for row in rows]

    def list_recent(self, conn: psycopg.Connection[Any], limit: int) -> list[AnalysisRecord]:
        with conn.cursor(row_factory=dict_row) as cur:
            cur.execute(
                """
                SELECT id, document_id, title, content, model, created_at
                FROM analyses
                ORDER BY created_at DESC, id DESC
                LIMIT %s
                """,
                (limit,),
            )
            rows = cur.fetchall()
        return [_to_record(row) for row in rows]

    def insert(self, conn: psycopg.Connection[Any], analysis: NewAnalysis) -> AnalysisRecord:
        with conn.cursor(row_factory=dict_row) as cur:
            cur.execute(
                """
                INSERT INTO analyses (document_id, title, content, model)
                VALUES (%s, %s, %s, %s)
                RETURNING id, document_id, title, content, model, created_at
                """,
                (analysis.document_id, analysis.title, analysis.content, analysis.model),
            )
            row = cur.fetchone()
        assert row is not None
        return _to_record(row)

    def delete_for_document(self, conn: psycopg.Connection[Any], document_id: int) -> int:
        with conn.cursor() as cur:
            cur.execute("DELETE FROM analyses WHERE document_id = %s", (document_id,))
            return cur.rowcount

    def count(self, conn: psycopg.Connection[Any]) -> int:
        with conn.cursor() as cur:
            cur.execute("SELECT COUNT(*) FROM analyses")
            row = cur.fetchone()
        return int(row[0]) if row is not None else 0
