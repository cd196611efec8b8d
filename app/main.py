from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import health, quotations
from app.core.config import get_settings
from app.core.errors import register_error_handlers
from app.core.logging_config import setup_logging


def create_app() -> FastAPI:
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL, json_logs=settings.LOG_JSON)
    app = FastAPI(title="Quotation Maker", version="0.1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    # Routers
    app.include_router(health.router, prefix=settings.API_PREFIX, tags=["health"])
    app.include_router(
        quotations.router, prefix=f"{settings.API_PREFIX}/quotations", tags=["quotations"]
    )

    return app


app = create_app()
