import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from studio.core.cache import cache_manager
from studio.core.config import get_settings
from studio.core.database_init import init_database_schema
from studio.core.logging import configure_logging
from studio.core.middleware import RequestContextMiddleware
from studio.routers import get_api_router
from studio.services.bootstrap import ensure_default_admin


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging()

    logger = logging.getLogger("studio.validation")

    app = FastAPI(title=settings.PROJECT_NAME)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS or ["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(RequestContextMiddleware)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.warning(
            "Validation error on %s %s detail=%s",
            request.method,
            request.url.path,
            exc.errors(),
        )
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": jsonable_encoder(exc.errors())},
        )

    app.include_router(get_api_router(), prefix=settings.API_V1_PREFIX)

    @app.on_event("startup")
    def startup_event():
        init_database_schema()
        cache_manager.init_backend()
        ensure_default_admin()

    return app


app = create_app()
