from pydantic import BaseModel, ConfigDict, constr

from blog.models.post import PostStatus


class CreatePost(BaseModel):
    title: constr(strip_whitespace=True, min_length=3)
    content: constr(strip_whitespace=True, min_length=1)
    author: constr(strip_whitespace=True, min_length=1)
    excerpt: constr(strip_whitespace=True) | None = None
    status: PostStatus = PostStatus.DRAFT

    model_config = ConfigDict(extra="ignore")


class UpdatePost(BaseModel):
    title: constr(strip_whitespace=True, min_length=3) | None = None
    content: constr(strip_whitespace=True, min_length=1) | None = None
    author: constr(strip_whitespace=True, min_length=1) | None = None
    excerpt: constr(strip_whitespace=True) | None = None
    status: PostStatus | None = None
    updated_by: constr(strip_whitespace=True) | None = None

    model_config = ConfigDict(extra="ignore")
