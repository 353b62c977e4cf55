import uuid
from typing import Any, Sequence

from pydantic import BaseModel

from blog.models.post import Post


class Page(BaseModel):
    data: list[Post]
    page: int
    per_page: int
    total: int


class Health(BaseModel):
    status: str
    database: str


class ErrorResponse(BaseModel):
    status: int
    id: uuid.UUID
    message: str


class ValidationErrorResponse(ErrorResponse):
    errors: Sequence[Any]
