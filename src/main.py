import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Depends
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from redis.exceptions import ConnectionError
from sqlalchemy.exc import OperationalError

from src.common.api_key import get_api_key
from src.common.exceptions import (
    AuthenticationException,
    KnownException,
    ResourceAlreadyExistsException,
    ResourceNotFoundException,
    authentication_exception_handler,
    database_exception_handler,
    known_exception_handler,
    resource_already_exists_handler,
    resource_not_found_handler,
    unexpected_exception_handler,
    redis_connection_exception_handler,
    validation_exception_handler,
    service_unavailable_response,
    internal_error_response,
    validation_error_response,
)
from src.common.opentelemetry import setup_opentelemetry
from src.common.redis import create_redis_client
from src.config import get_settings
from src.tasks.router import router as tasks_router
from src.users.router import router as users_router
from src.healthcheck.router import router as health_router

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.redis_client = create_redis_client(settings.REDIS_URL)
    logger.info(
        "Using %s task store and %s user store",
        settings.TASK_STORE_BACKEND,
        settings.USER_STORE_BACKEND,
    )
    yield
    app.state.redis_client.close()


app = FastAPI(
    title=settings.API_NAME,
    summary=settings.API_SUMMARY,
    dependencies=[Depends(get_api_key)],
    lifespan=lifespan,
    responses={
        **service_unavailable_response,
        **internal_error_response,
        **validation_error_response,
    },
    version=settings.APP_VERSION,
)

if settings.OTEL_ENABLED:
    setup_opentelemetry(settings.OTEL_SERVICE_NAME, app)

if settings.CORS_ENABLED:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.exception_handler(RequestValidationError)(validation_exception_handler)
app.exception_handler(ResourceNotFoundException)(resource_not_found_handler)
app.exception_handler(ResourceAlreadyExistsException)(resource_already_exists_handler)
app.exception_handler(AuthenticationException)(authentication_exception_handler)
app.exception_handler(KnownException)(known_exception_handler)
app.exception_handler(ConnectionError)(redis_connection_exception_handler)
app.exception_handler(OperationalError)(database_exception_handler)
app.exception_handler(Exception)(unexpected_exception_handler)


app.include_router(health_router)
app.include_router(users_router)
app.include_router(tasks_router)
