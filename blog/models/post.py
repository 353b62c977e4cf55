from enum import Enum

from pydantic import BaseModel


class PostStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class Post(BaseModel):
    id: int
    title: str
    slug: str
    content: str
    excerpt: str | None = None
    author: str
    status: PostStatus = PostStatus.DRAFT
    view_count: int = 0
    created_at: str
    updated_at: str | None = None
    published_at: str | None = None
    updated_by: str | None = None

    @property
    def is_published(self) -> bool:
        return self.published_at is not None
