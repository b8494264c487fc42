"""
Posts API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Body, Depends, Path, status

from core.db import Database, get_database

from . import schemas, service

router = APIRouter()

# posts.id is SERIAL (int4); larger values cannot be bound as a parameter.
MAX_POST_ID = 2**31 - 1

# Generic 500 body per endpoint; the cause is only logged.
STORE_FAILURE_MESSAGES = {
    "list_posts": "Error al listar posts",
    "get_post": "Error al obtener post",
    "create_post": "Error al crear post",
    "update_post": "Error al actualizar post",
    "delete_post": "Error al eliminar post",
}


@router.get("/posts", response_model=list[schemas.PostResponse])
async def list_posts(db: Database = Depends(get_database)) -> list[schemas.PostResponse]:
    """
    All posts, newest first.
    """
    return await service.list_posts(db)


@router.get("/posts/{post_id}", response_model=schemas.PostResponse)
async def get_post(
    post_id: int = Path(..., ge=1, le=MAX_POST_ID),
    db: Database = Depends(get_database),
) -> schemas.PostResponse:
    return await service.get_post(db, post_id)


@router.post(
    "/posts",
    response_model=schemas.PostResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_post(
    request: schemas.CreatePostRequest,
    db: Database = Depends(get_database),
) -> schemas.PostResponse:
    return await service.create_post(db, request)


@router.put("/posts/{post_id}", response_model=schemas.PostResponse)
async def update_post(
    post_id: int = Path(..., ge=1, le=MAX_POST_ID),
    request: schemas.UpdatePostRequest | None = Body(default=None),
    db: Database = Depends(get_database),
) -> schemas.PostResponse:
    """
    Partial update: only `titulo`/`contenido` values that are sent and
    non-empty are written.
    """
    if request is None:
        # A request without a body is the same as an empty object.
        request = schemas.UpdatePostRequest()
    return await service.update_post(db, post_id, request)


@router.delete("/posts/{post_id}", response_model=schemas.DeletePostResponse)
async def delete_post(
    post_id: int = Path(..., ge=1, le=MAX_POST_ID),
    db: Database = Depends(get_database),
) -> schemas.DeletePostResponse:
    return await service.delete_post(db, post_id)
