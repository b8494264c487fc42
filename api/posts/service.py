"""
Posts business logic.

Functions here raise `core.errors` types only; turning them into HTTP
responses is the job of the handlers installed in `main.py`.
"""

from __future__ import annotations

import logging

from core.db import Database
from core.errors import NotFound, ValidationFailed

from . import repository, schemas

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Post no encontrado"
CREATE_REQUIRED_MESSAGE = "titulo, contenido y usuario_id son obligatorios"
NOTHING_TO_UPDATE_MESSAGE = "Nada que actualizar (titulo o contenido)"


def _to_post_response(row: dict) -> schemas.PostResponse:
    return schemas.PostResponse(
        id=int(row["id"]),
        titulo=str(row["titulo"]),
        contenido=str(row["contenido"]),
        usuario_id=int(row["usuario_id"]),
        created_at=row["created_at"],
    )


def missing_create_fields(payload: schemas.CreatePostRequest) -> list[str]:
    # Empty string and 0 count as missing, same as an omitted field.
    return [
        name
        for name in ("titulo", "contenido", "usuario_id")
        if not getattr(payload, name)
    ]


def collect_field_updates(payload: schemas.UpdatePostRequest) -> list[repository.FieldUpdate]:
    """
    Ordered (column, value) pairs for the fields that should change.

    A field that is omitted, null or "" is left alone.
    """
    updates: list[repository.FieldUpdate] = []
    for column in repository.UPDATABLE_COLUMNS:
        value = getattr(payload, column)
        if value:
            updates.append(repository.FieldUpdate(column=column, value=value))
    return updates


async def list_posts(db: Database) -> list[schemas.PostResponse]:
    rows = await repository.list_posts(db)
    return [_to_post_response(row) for row in rows]


async def get_post(db: Database, post_id: int) -> schemas.PostResponse:
    row = await repository.get_post(db, post_id)
    if row is None:
        raise NotFound(NOT_FOUND_MESSAGE)
    return _to_post_response(row)


async def create_post(db: Database, payload: schemas.CreatePostRequest) -> schemas.PostResponse:
    missing = missing_create_fields(payload)
    if missing:
        raise ValidationFailed(CREATE_REQUIRED_MESSAGE, fields=missing)

    row = await repository.insert_post(
        db,
        titulo=payload.titulo,
        contenido=payload.contenido,
        usuario_id=payload.usuario_id,
    )
    logger.info("post_created id=%s usuario_id=%s", row["id"], row["usuario_id"])
    return _to_post_response(row)


async def update_post(
    db: Database,
    post_id: int,
    payload: schemas.UpdatePostRequest,
) -> schemas.PostResponse:
    updates = collect_field_updates(payload)
    if not updates:
        raise ValidationFailed(NOTHING_TO_UPDATE_MESSAGE, fields=list(repository.UPDATABLE_COLUMNS))

    row = await repository.update_post(db, post_id, updates)
    if row is None:
        raise NotFound(NOT_FOUND_MESSAGE)
    logger.info(
        "post_updated id=%s columns=%s",
        post_id,
        ",".join(u.column for u in updates),
    )
    return _to_post_response(row)


async def delete_post(db: Database, post_id: int) -> schemas.DeletePostResponse:
    deleted_id = await repository.delete_post(db, post_id)
    if deleted_id is None:
        raise NotFound(NOT_FOUND_MESSAGE)
    logger.info("post_deleted id=%s", deleted_id)
    return schemas.DeletePostResponse(ok=True, id=deleted_id)
