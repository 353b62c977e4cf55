from contextlib import asynccontextmanager

import uvicorn
from aws_lambda_powertools import Logger
from fastapi import FastAPI
from fastapi.middleware.gzip import GZipMiddleware

from blog import __version__
from blog.frontend import routes
from blog.frontend.api_client import PostsApiClient
from blog.middlewares import CorrelationIdMiddleware, RequestLoggingMiddleware
from blog.settings import Settings

logger = Logger(utc=True)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        client = PostsApiClient(settings.api_url, timeout=settings.api_timeout)
        app.state.api_client = client
        logger.info(f"Blog frontend started {settings.api_url=}")
        try:
            yield
        finally:
            await client.aclose()

    app = FastAPI(
        debug=settings.debug,
        title="BlogFrontend",
        version=__version__,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = settings
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationIdMiddleware)
    app.add_middleware(GZipMiddleware)
    app.include_router(routes.router)
    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("blog.frontend.app:app", host="0.0.0.0", port=3000, reload=True)
