"""
Posts persistence (raw SQL).

Every function runs exactly one autocommitted statement.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

from core.db import Database
from core.errors import StoreFailure

POST_COLUMNS = "id, titulo, contenido, usuario_id, created_at"

# Columns a client may change after creation, in SET-clause order.
UPDATABLE_COLUMNS = ("titulo", "contenido")


@dataclass(frozen=True)
class FieldUpdate:
    column: str
    value: Any


def build_update_statement(post_id: int, updates: Sequence[FieldUpdate]) -> tuple[str, list[Any]]:
    """
    Build `UPDATE posts SET ...` for exactly the columns in `updates`.

    Each column gets the next positional placeholder ($1, $2, ...) in the
    same pass that appends its value, so placeholder index and parameter
    position cannot drift. The row id is bound to the last placeholder.
    """
    if not updates:
        raise ValueError("At least one field update is required.")

    assignments: list[str] = []
    params: list[Any] = []
    for update in updates:
        if update.column not in UPDATABLE_COLUMNS:
            raise ValueError(f"Column '{update.column}' cannot be updated.")
        params.append(update.value)
        assignments.append(f"{update.column} = ${len(params)}")

    params.append(post_id)
    sql = (
        f"UPDATE posts SET {', '.join(assignments)} "
        f"WHERE id = ${len(params)} "
        f"RETURNING {POST_COLUMNS}"
    )
    return sql, params


async def list_posts(db: Database) -> list[dict]:
    return await db.fetch_all(
        f"""
        SELECT {POST_COLUMNS}
        FROM posts
        ORDER BY created_at DESC
        """
    )


async def get_post(db: Database, post_id: int) -> dict | None:
    return await db.fetch_one(
        f"""
        SELECT {POST_COLUMNS}
        FROM posts
        WHERE id = $1
        """,
        post_id,
    )


async def insert_post(db: Database, *, titulo: str, contenido: str, usuario_id: int) -> dict:
    row = await db.fetch_one(
        f"""
        INSERT INTO posts (titulo, contenido, usuario_id)
        VALUES ($1, $2, $3)
        RETURNING {POST_COLUMNS}
        """,
        titulo,
        contenido,
        usuario_id,
    )
    if row is None:
        raise StoreFailure("Failed to insert post.")
    return row


async def update_post(db: Database, post_id: int, updates: Sequence[FieldUpdate]) -> dict | None:
    sql, params = build_update_statement(post_id, updates)
    return await db.fetch_one(sql, *params)


async def delete_post(db: Database, post_id: int) -> int | None:
    row = await db.fetch_one(
        """
        DELETE FROM posts
        WHERE id = $1
        RETURNING id
        """,
        post_id,
    )
    return int(row["id"]) if row is not None else None
