import uuid
from contextlib import asynccontextmanager

import uvicorn
from aws_lambda_powertools import Logger
from aws_lambda_powertools.logging.logger import set_package_logger
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import UJSONResponse
from sqlalchemy.exc import SQLAlchemyError

from blog import __version__
from blog.api.api import router as api_router
from blog.database import Database
from blog.middlewares import CorrelationIdMiddleware, RequestLoggingMiddleware
from blog.models.response import ErrorResponse, ValidationErrorResponse
from blog.settings import Settings

logger = Logger(utc=True)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings()
    if settings.debug:
        set_package_logger()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        database = Database(settings)
        await database.connect()
        await database.migrate()
        app.state.database = database
        logger.info(f"Blog API started {settings.app_name=}")
        try:
            yield
        finally:
            await database.dispose()

    app = FastAPI(
        debug=settings.debug,
        title="BlogApplication",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationIdMiddleware)
    app.add_middleware(GZipMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(api_router)

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(
        request: Request, error: SQLAlchemyError
    ) -> UJSONResponse:
        error_id = uuid.uuid4()
        error_message = str(error) if settings.debug else "Internal Server Error"
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        logger.exception(f"Received database error {error_id=}")
        return UJSONResponse(
            content=jsonable_encoder(
                ErrorResponse(status=status_code, id=error_id, message=error_message)
            ),
            status_code=status_code,
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(
        request: Request, error: HTTPException
    ) -> UJSONResponse:
        error_id = uuid.uuid4()
        logger.warning(f"Received http exception {error_id=} {error.detail=}")
        return UJSONResponse(
            content=jsonable_encoder(
                ErrorResponse(
                    status=error.status_code, id=error_id, message=str(error.detail)
                )
            ),
            status_code=error.status_code,
            headers=error.headers,
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_error_handler(
        request: Request, error: RequestValidationError
    ) -> UJSONResponse:
        error_id = uuid.uuid4()
        status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
        logger.warning(f"Received request validation error {error_id=}")
        return UJSONResponse(
            content=jsonable_encoder(
                ValidationErrorResponse(
                    status=status_code,
                    id=error_id,
                    message=str(error),
                    errors=error.errors(),
                )
            ),
            status_code=status_code,
        )

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("blog.http_handler:app", host="0.0.0.0", port=3001, reload=True)
