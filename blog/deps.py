from fastapi import Depends, Request

from blog.database import Database
from blog.repositories.post_repository import PostRepository
from blog.services.post_service import PostService


def database(request: Request) -> Database:
    return request.app.state.database


def post_service(db: Database = Depends(database)) -> PostService:
    return PostService(PostRepository(db))
