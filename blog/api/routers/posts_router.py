from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse

from blog.deps import post_service
from blog.models.post import Post, PostStatus
from blog.models.response import Page
from blog.schemas.post_schema import CreatePost, UpdatePost
from blog.services.post_service import DEFAULT_PER_PAGE, PostService

router = APIRouter()


@router.get("", response_model=Page, status_code=status.HTTP_200_OK)
async def get_posts(
    page: int = 1,
    per_page: int = DEFAULT_PER_PAGE,
    post_status: PostStatus | None = Query(default=None, alias="status"),
    service: PostService = Depends(post_service),
) -> Page:
    return await service.get_posts(page, per_page, post_status)


@router.post("", response_model=Post, status_code=status.HTTP_201_CREATED)
async def create_post(
    create_model: CreatePost, service: PostService = Depends(post_service)
) -> JSONResponse:
    post = await service.create_post(create_model)
    return JSONResponse(
        content=post.model_dump(mode="json"),
        status_code=status.HTTP_201_CREATED,
        headers={"Location": f"/api/posts/{post.id}"},
    )


@router.get("/slug/{slug}", status_code=status.HTTP_200_OK)
async def get_post_by_slug(
    slug: str, service: PostService = Depends(post_service)
) -> Post:
    return await service.get_post_by_slug(slug)


@router.get("/{post_id}", status_code=status.HTTP_200_OK)
async def get_post_by_id(
    post_id: int,
    count_view: bool = True,
    service: PostService = Depends(post_service),
) -> Post:
    return await service.get_post_by_id(post_id, count_view=count_view)


@router.put("/{post_id}", status_code=status.HTTP_200_OK)
async def update_post(
    update_model: UpdatePost,
    post_id: int,
    service: PostService = Depends(post_service),
) -> Post:
    return await service.update_post(post_id, update_model)


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(post_id: int, service: PostService = Depends(post_service)):
    await service.delete_post(post_id)
