"""
Posts API schemas (request/response models).
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, StrictInt


class CreatePostRequest(BaseModel):
    # Presence is checked by the service so a missing field is a 400 with
    # the same message whether it was omitted, null or empty.
    titulo: str | None = None
    contenido: str | None = None
    # Strict so JSON true/false is not read as 1/0.
    usuario_id: StrictInt | None = None


class UpdatePostRequest(BaseModel):
    titulo: str | None = None
    contenido: str | None = None

    def supplied(self, field: str) -> bool:
        """
        True if the client sent `field` at all, even as null or "".
        """
        return field in self.model_fields_set


class PostResponse(BaseModel):
    id: int
    titulo: str
    contenido: str
    usuario_id: int
    created_at: datetime


class DeletePostResponse(BaseModel):
    ok: bool = True
    id: int
