from typing import Any

import psycopg
from psycopg.rows import dict_row

from intake.database.models import ServiceConnectionRecord


def _to_record(row: dict[str, Any]) -> ServiceConnectionRecord:
    return ServiceConnectionRecord(
        id=row["id"],
        type=row["type"],
        name=row["name"],
        status=row["status"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class ServiceConnectionRepository:
    """Database operations for the service_connections table."""

    def list_all(self, conn: psycopg.Connection[Any]) -> list[ServiceConnectionRecord]:
        with conn.cursor(row_factory=dict_row) as cur:
            cur.execute(
                """
                SELECT id, type, name, status, created_at, updated_at
                FROM service_connections
                ORDER BY id
                """
            )
            rows = cur.fetchall()
        return [_to_record(row) for row in rows]

    def find_by_type(
        self,
        conn: psycopg.Connection[Any],
        connection_type: str,
    ) -> ServiceConnectionRecord | None:
        with conn.cursor(row_factory=dict_row) as cur:
            cur.execute(
                """
                SELECT id, type, name, status, created_at, updated_at
                FROM service_connections
                WHERE type = %s
                """,
                (connection_type,),
            )
            row = cur.fetchone()
        return _to_record(row) if row is not None else None

    def insert(
        self,
        conn: psycopg.Connection[Any],
        connection_type: str,
        name: str,
        status: str,
    ) -> ServiceConnectionRecord:
        with conn.cursor(row_factory=dict_row) as cur:
            cur.execute(
                """
                INSERT INTO service_connections (type, name, status)
                VALUES (%s, %s, %s)
                RETURNING id, type, name, status, created_at, updated_at
                """,
                (connection_type, name, status),
            )
            row = cur.fetchone()
        assert row is not None
        return _to_record(row)

    def update_status(
        self,
        conn: psycopg.Connection[Any],
        connection_id: int,
        status: str,
    ) -> ServiceConnectionRecord | None:
        with conn.cursor(row_factory=dict_row) as cur:
            cur.execute(
                """
                UPDATE service_connections
                SET status = %s, updated_at = NOW()
                WHERE id = %s
                RETURNING id, type, name, status, created_at, updated_at
                """,
                (status, connection_id),
            )
            row = cur.fetchone()
        return _to_record(row) if row is not None else None
