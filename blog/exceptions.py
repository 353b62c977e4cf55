from typing import Any

from fastapi import HTTPException, status


class PostAlreadyExistsException(HTTPException):
    def __init__(self, detail: Any = None) -> None:
        super().__init__(status.HTTP_409_CONFLICT, detail)


class PostNotFoundException(HTTPException):
    def __init__(self, detail: Any = None) -> None:
        super().__init__(status.HTTP_404_NOT_FOUND, detail=detail)
