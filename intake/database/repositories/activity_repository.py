from typing import Any

import psycopg
from psycopg.rows import dict_row

from intake.database.models import ActivityRecord, NewActivity


def _to_record(row: dict[str, Any]) -> ActivityRecord:
    return ActivityRecord(
        id=row["id"],
        type=row["type"],
        description=row["description"],
        document_id=row["document_id"],
        document_name=row["document_name"],
        created_at=row["created_at"],
    )


class ActivityRepository:
    """Database operations for the append-only activities table."""

    def insert(self, conn: psycopg.Connection[Any], activity: NewActivity) -> ActivityRecord:
        with conn.cursor(row_factory=dict_row) as cur:
            cur.execute(
                """
                INSERT INTO activities (type, description, document_id, document_name)
                VALUES (%s, %s, %s, %s)
                RETURNING id, type, description, document_id, document_name, created_at
                """,
                (
                    activity.type,
                    activity.description,
                    activity.document_id,
                    activity.document_name,
                ),
            )
            row = cur.fetchone()
        assert row is not None
        return _to_record(row)

    def list_recent(self, conn: psycopg.Connection[Any], limit: int) -> list[ActivityRecord]:
        with conn.cursor(row_factory=dict_row) as cur:
            cur.execute(
                """
                SELECT id, type, description, document_id, document_name, created_at
                FROM activities
                ORDER BY created_at DESC, id DESC
                LIMIT %s
                """,
                (limit,),
            )
            rows = cur.fetchall()
        return [_to_record(row) for row in rows]

    def list_for_document(
        self,
        conn: psycopg.Connection[Any],
        document_id: int,
    ) -> list[ActivityRecord]:
        with conn.cursor(row_factory=dict_row) as cur:
            cur.execute(
                """
                SELECT id, type, description, document_id, document_name, created_at
                FROM activities
                WHERE document_id = %s
                ORDER BY created_at, id
                """,
                (document_id,),
            )
            rows = cur.fetchall()
        return [_to_record(row) for row in rows]

    def delete_for_document(self, conn: psycopg.Connection[Any], document_id: int) -> int:
        with conn.cursor() as cur:
            cur.execute("DELETE FROM activities WHERE document_id = %s", (document_id,))
            return cur.rowcount
