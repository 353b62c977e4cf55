from typing import Any

from aws_lambda_powertools import Logger
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from blog.exceptions import PostAlreadyExistsException, PostNotFoundException
from blog.models.post import Post, PostStatus
from blog.models.response import Page
from blog.repositories.post_repository import SQLITE_MAX_INTEGER, PostRepository
from blog.schemas.post_schema import CreatePost, UpdatePost
from blog.utils import derive_excerpt, make_slug, utc_now

DEFAULT_PER_PAGE = 10
MAX_PER_PAGE = 100


class PostService:
    ERROR_POST_EXISTS = "There is already a post with this slug"
    ERROR_POST_NOT_FOUND = "The requested post was not found"

    def __init__(self, repository: PostRepository):
        self._logger = Logger(utc=True)
        self._repo = repository

    async def _unique_slug(self, title: str, post_id: int | None = None) -> str:
        base = make_slug(title)
        slug, suffix = base, 1
        while await self._repo.slug_exists(slug, exclude_id=post_id):
            suffix += 1
            slug = f"{base}-{suffix}"
        return slug

    async def _count_view(self, post_id: int):
        try:
            await self._repo.increment_view_count(post_id)
        except SQLAlchemyError as exc:
            self._logger.warning(f"Failed to count view {post_id=}", exc_info=exc)

    def _ensure_storable_id(self, post_id: int):
        if not -SQLITE_MAX_INTEGER - 1 <= post_id <= SQLITE_MAX_INTEGER:
            self._logger.warning(f"Post id out of range: {post_id=}")
            raise PostNotFoundException(self.ERROR_POST_NOT_FOUND)

    async def get_post_by_id(self, post_id: int, count_view: bool = True) -> Post:
        self._ensure_storable_id(post_id)
        if count_view:
            await self._count_view(post_id)
        item = await self._repo.get_post_by_id(post_id)
        if item is None:
            self._logger.warning(f"Post not found: {post_id=}")
            raise PostNotFoundException(self.ERROR_POST_NOT_FOUND)
        return Post(**item)

    async def get_post_by_slug(self, slug: str) -> Post:
        item = await self._repo.get_post_by_slug(slug)
        if item is None:
            self._logger.warning(f"Post not found: {slug=}")
            raise PostNotFoundException(self.ERROR_POST_NOT_FOUND)
        await self._count_view(item["id"])
        item = await self._repo.get_post_by_slug(slug) or item
        return Post(**item)

    async def get_posts(
        self,
        page: int = 1,
        per_page: int = DEFAULT_PER_PAGE,
        status: PostStatus | None = None,
    ) -> Page:
        page = max(page, 1)
        per_page = min(max(per_page, 1), MAX_PER_PAGE)
        status_value = status.value if status else None
        offset = min((page - 1) * per_page, SQLITE_MAX_INTEGER)
        items = await self._repo.get_posts(
            limit=per_page, offset=offset, status=status_value
        )
        total = await self._repo.count_posts(status_value)
        return Page(
            data=[Post(**item) for item in items],
            page=page,
            per_page=per_page,
            total=total,
        )

    async def create_post(self, create_post: CreatePost) -> Post:
        data = create_post.model_dump(mode="json")
        now = utc_now()
        data.update(
            {
                "slug": await self._unique_slug(data["title"]),
                "excerpt": data.get("excerpt") or derive_excerpt(data["content"]),
                "view_count": 0,
                "created_at": now,
                "updated_at": None,
                "published_at": now
                if data["status"] == PostStatus.PUBLISHED.value
                else None,
                "updated_by": None,
            }
        )
        try:
            item = await self._repo.create_post(data)
        except IntegrityError:
            self._logger.warning(f"Slug is already taken {data['slug']=}")
            raise PostAlreadyExistsException(self.ERROR_POST_EXISTS)
        self._logger.info(f"Post created: {item['id']=} {item['slug']=}")
        return Post(**item)

    async def update_post(self, post_id: int, update_post: UpdatePost) -> Post:
        self._ensure_storable_id(post_id)
        item = await self._repo.get_post_by_id(post_id)
        if item is None:
            self._logger.warning(f"Post not found: {post_id=}")
            raise PostNotFoundException(self.ERROR_POST_NOT_FOUND)
        post = Post(**item)

        data: dict[str, Any] = update_post.model_dump(
            mode="json", exclude_unset=True, exclude_none=True
        )
        if data.get("title", post.title) != post.title:
            data["slug"] = await self._unique_slug(data["title"], post_id=post_id)
        content_changed = data.get("content", post.content) != post.content
        if not data.get("excerpt") and (content_changed or "excerpt" in data):
            data["excerpt"] = derive_excerpt(data.get("content", post.content))
        if data.get("status") == PostStatus.PUBLISHED.value and not post.is_published:
            data["published_at"] = utc_now()
        data["updated_at"] = utc_now()

        try:
            item = await self._repo.update_post(post_id, data)
        except IntegrityError:
            self._logger.warning(f"Slug is already taken {data.get('slug')=}")
            raise PostAlreadyExistsException(self.ERROR_POST_EXISTS)
        if item is None:
            self._logger.warning(f"Post disappeared during update: {post_id=}")
            raise PostNotFoundException(self.ERROR_POST_NOT_FOUND)
        self._logger.info(f"Post updated: {post_id=} fields={sorted(data)}")
        return Post(**item)

    async def delete_post(self, post_id: int):
        self._ensure_storable_id(post_id)
        if not await self._repo.delete_post(post_id):
            self._logger.warning(f"Post not found: {post_id=}")
            raise PostNotFoundException(self.ERROR_POST_NOT_FOUND)
        self._logger.info(f"Post deleted: {post_id=}")
