from aws_lambda_powertools import Logger
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from blog.database import Database
from blog.deps import database
from blog.models.response import Health

logger = Logger(utc=True)

router = APIRouter()


@router.get("/", status_code=status.HTTP_200_OK)
async def root() -> dict[str, str]:
    return {"message": "Blog API Server"}


@router.get("/health", response_model=Health, status_code=status.HTTP_200_OK)
async def health(db: Database = Depends(database)) -> JSONResponse:
    try:
        await db.ping()
    except SQLAlchemyError:
        logger.exception("Health check failed to reach the database")
        return JSONResponse(
            content=Health(status="error", database="unavailable").model_dump(),
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )
    return JSONResponse(content=Health(status="ok", database="ok").model_dump())
