from typing import Any

import psycopg
from psycopg import sql

from resume_analyzer.database.connection import get_connection
from resume_analyzer.ports.base import BaseKeyValueStore
from resume_analyzer.ports.result import ServiceResult


def glob_to_like(pattern: str) -> str:
    """Translate a ``*`` glob into a LIKE pattern using ``\\`` as escape."""
    escaped = pattern.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return escaped.replace("*", "%")


class PostgresKeyValueStore(BaseKeyValueStore):
    """Key-value store on a single PostgreSQL table."""

    def __init__(self, table: str = "kv_entries") -> None:
        self._table = sql.Identifier(table)

    async def ensure_schema(self) -> None:
        async with get_connection() as conn:
            await conn.execute(
                sql.SQL(
                    """
                    CREATE TABLE IF NOT EXISTS {table} (
                        key TEXT PRIMARY KEY,
                        value TEXT NOT NULL,
                        updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
                    )
                    """
                ).format(table=self._table)
            )

    async def get(self, key: str) -> ServiceResult[str]:
        try:
            row = await self._fetchone(
                sql.SQL("SELECT value FROM {table} WHERE key = %s"),
                (key,),
            )
        except psycopg.Error as exc:
            return ServiceResult.fail(f"Key-value get failed: {exc}")
        return ServiceResult.ok(row[0] if row is not None else None)

    async def set(self, key: str, value: str) -> ServiceResult[bool]:
        try:
            async with get_connection() as conn:
                await conn.execute(
                    sql.SQL(
                        """
                        INSERT INTO {table} (key, value, updated_at)
                        VALUES (%s, %s, NOW())
                        ON CONFLICT (key)
                        DO UPDATE SET value = EXCLUDED.value, updated_at = NOW()
                        """
                    ).format(table=self._table),
                    (key, value),
                )
        except psycopg.Error as exc:
            return ServiceResult.fail(f"Key-value set failed: {exc}")
        return ServiceResult.ok(True)

    async def delete(self, key: str) -> ServiceResult[bool]:
        try:
            async with get_connection() as conn:
                cur = await conn.execute(
                    sql.SQL("DELETE FROM {table} WHERE key = %s").format(table=self._table),
                    (key,),
                )
                deleted = cur.rowcount > 0
        except psycopg.Error as exc:
            return ServiceResult.fail(f"Key-value delete failed: {exc}")
        return ServiceResult.ok(deleted)

    async def flush(self) -> ServiceResult[bool]:
        try:
            async with get_connection() as conn:
                await conn.execute(sql.SQL("DELETE FROM {table}").format(table=self._table))
        except psycopg.Error as exc:
            return ServiceResult.fail(f"Key-value flush failed: {exc}")
        return ServiceResult.ok(True)

    async def list(self, pattern: str, return_values: bool = False) -> ServiceResult[list[str]]:
        column = "value" if return_values else "key"
        try:
            async with get_connection() as conn:
                cur = await conn.execute(
                    sql.SQL(
                        "SELECT {column} FROM {table} WHERE key LIKE %s ESCAPE '\\' ORDER BY key"
                    ).format(column=sql.Identifier(column), table=self._table),
                    (glob_to_like(pattern),),
                )
                rows = await cur.fetchall()
        except psycopg.Error as exc:
            return ServiceResult.fail(f"Key-value list failed: {exc}")
        return ServiceResult.ok([row[0] for row in rows])

    async def _fetchone(self, query: sql.SQL, params: tuple[Any, ...]) -> tuple[Any, ...] | None:
        async with get_connection() as conn:
            cur = await conn.execute(query.format(table=self._table), params)
            return await cur.fetchone()
