from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from http import HTTPStatus

import sentry_sdk
import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response

from shortlink.app.core.config import settings
from shortlink.app.core.logging import configure_logging
from shortlink.app.schemas.error import APIValidationError, CommonHTTPError
from shortlink.app.services.client import LinkServiceClient
from shortlink.app.web.router import router, templates
from shortlink.app.web.sessions import WorkspaceRegistry


logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    configure_logging()
    logger.info("Starting link client", api_base_url=settings.API_BASE_URL)
    async with LinkServiceClient(settings.API_BASE_URL) as client:
        app.state.link_client = client
        yield


if settings.SENTRY_DSN:
    logger.info("Initializing Sentry")
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        send_default_pii=False,
        environment="dev" if settings.DEBUG else "production",
        debug=settings.DEBUG,
    )

app = FastAPI(
    debug=settings.DEBUG,
    title=settings.PROJECT_NAME,
    description="Create, list and delete your short links.",
    openapi_url=None,
    docs_url=None,
    redoc_url=None,
    lifespan=lifespan,
    license_info={
        "name": "GNU General Public License v3.0",
        "url": "https://www.gnu.org/licenses/gpl-3.0.en.html",
    },
)

app.state.workspaces = WorkspaceRegistry()

app.include_router(router)

if settings.USE_CORRELATION_ID:
    from shortlink.app.middlewares.correlation import CorrelationMiddleware

    app.add_middleware(CorrelationMiddleware)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> Response:
    if exc.status_code == HTTPStatus.NOT_FOUND:
        return templates.TemplateResponse(
            request=request,
            name="404.html",
            context={"project_name": settings.PROJECT_NAME, "detail": exc.detail},
            status_code=HTTPStatus.NOT_FOUND,
        )

    return JSONResponse(
        content=CommonHTTPError(message=str(exc.detail)).model_dump(exclude_none=True),
        status_code=exc.status_code,
        headers=exc.headers,
    )


@app.exception_handler(RequestValidationError)
async def custom_validation_exception_handler(
    _: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    return JSONResponse(
        content=APIValidationError.from_pydantic(exc).model_dump(exclude_none=True),
        status_code=HTTPStatus.UNPROCESSABLE_ENTITY,
    )


def run() -> None:
    import uvicorn  # noqa: PLC0415

    uvicorn.run(
        "shortlink.app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_config=None,
    )
