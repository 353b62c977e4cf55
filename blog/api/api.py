from fastapi import APIRouter

from blog.api.routers import health_router, posts_router

router = APIRouter()
router.include_router(health_router.router, tags=["health"])
router.include_router(posts_router.router, prefix="/api/posts", tags=["posts"])
