from typing import Any
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import text

from src.config import Settings, get_settings
from src.common.postgres import get_engine
from src.common.redis import RedisClient, get_redis_client

router = APIRouter()


@router.get(
    "/healthcheck",
    tags=["Healthcheck"],
    status_code=status.HTTP_200_OK,
    responses={
        200: {
            "description": "Healthcheck status",
            "content": {
                "application/json": {
                    "example": {
                        "api": {"status": "ok"},
                        "redis": {"status": "ok"},
                        "postgres": {"status": "ok"},
                    }
                }
            },
        },
        503: {
            "description": "Service unavailable",
            "content": {
                "application/json": {
                    "example": {
                        "api": {"status": "ok"},
                        "redis": {"status": "error", "message": "Connection error"},
                        "postgres": {
                            "status": "error",
                            "message": "Connection error or unexpected result",
                        },
                    }
                }
            },
        },
    },
)
def healthcheck(
    settings: Settings = Depends(get_settings),
    redis_client: RedisClient = Depends(get_redis_client),
) -> JSONResponse:
    health_status: dict[str, Any] = {
        "api": {"status": "ok"},
        "redis": {"status": "ok"},
        "postgres": {"status": "ok"},
    }
    has_error = False

    # Sessions always live in Redis
    try:
        redis_client.ping()
    except Exception as e:
        health_status["redis"].update({"status": "error", "message": str(e)})
        has_error = True

    if (
        settings.TASK_STORE_BACKEND == "postgres"
        or settings.USER_STORE_BACKEND == "postgres"
    ):
        try:
            with get_engine(settings.POSTGRES_URL).connect() as connection:
                result = connection.execute(text("SELECT 1")).scalar()
                if result != 1:
                    raise Exception("Postgres health check failed")
        except Exception as e:
            health_status["postgres"].update({"status": "error", "message": str(e)})
            has_error = True
    else:
        del health_status["postgres"]

    if has_error:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=health_status
        )

    return JSONResponse(status_code=status.HTTP_200_OK, content=health_status)
