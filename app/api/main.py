import logging

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.middleware.cors import CORSMiddleware

from app import metrics
from app.api.rate_limit import limiter
from app.api.routes_catalog import router as catalog_router
from app.api.routes_health import router as health_router
from app.api.routes_metrics import router as metrics_router
from app.core.config import settings
from app.core.errors import register_error_handlers
from app.core.logger import init_logging
from app.core.monitoring import init_monitoring

logger = logging.getLogger(__name__)


async def _rate_limit_handler(request, exc: RateLimitExceeded):
    metrics.rate_limited(request.url.path)
    logger.warning("Rate limit exceeded path=%s limit=%s", request.url.path, exc.detail)
    return JSONResponse(status_code=429, content={"success": False, "message": "Too many requests"})


def create_app() -> FastAPI:
    init_logging()
    init_monitoring()

    is_production = settings.ENV.lower() == "prod"
    app = FastAPI(
        title=settings.APP_NAME,
        version="1.0.0",
        description="Product catalog management with inventory tracking and reporting.",
        debug=False,
        docs_url=None if is_production else "/docs",
        redoc_url=None if is_production else "/redoc",
        openapi_url=None if is_production else "/openapi.json",
    )
    app.state.limiter = limiter
    app.add_middleware(SlowAPIMiddleware)
    app.add_exception_handler(RateLimitExceeded, _rate_limit_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOW_ORIGINS,
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=settings.CORS_ALLOW_METHODS,
        allow_headers=settings.CORS_ALLOW_HEADERS,
    )
    register_error_handlers(app)

    app.include_router(catalog_router, prefix="/api")
    app.include_router(metrics_router, tags=["metrics"])
    app.include_router(health_router)

    @app.get("/", include_in_schema=False)
    def root() -> dict[str, str]:
        return {"message": "Product Catalog API. Visit /docs for documentation."}

    logger.info("Application created env=%s", settings.ENV)
    return app


app = create_app()
