from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from blog.models.post import PostStatus

TITLE_MIN_LENGTH = 3


class PostForm(BaseModel):
    title: str = ""
    content: str = ""
    author: str = ""
    status: str = PostStatus.DRAFT.value
    updated_by: str = ""

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    @field_validator("*", mode="before")
    @classmethod
    def none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    def field_errors(self) -> dict[str, str]:
        errors = {}
        if len(self.title) < TITLE_MIN_LENGTH:
            errors["title"] = f"Title must be at least {TITLE_MIN_LENGTH} characters"
        if not self.content:
            errors["content"] = "Content is required"
        if not self.author:
            errors["author"] = "Author is required"
        if self.status not in {s.value for s in PostStatus}:
            errors["status"] = "Status is not valid"
        return errors

    def create_payload(self) -> dict[str, Any]:
        return self.model_dump(include={"title", "content", "author", "status"})

    def update_payload(self) -> dict[str, Any]:
        payload = self.create_payload()
        if self.updated_by:
            payload["updated_by"] = self.updated_by
        return payload
