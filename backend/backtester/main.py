from fastapi import FastAPI

from backtester import __version__
from backtester.api.health import router as health_router
from backtester.api.v1.router import api_router
from backtester.config import get_settings
from backtester.observability.logging_config import setup_logging, get_logger
from backtester.observability.metrics import setup_metrics

settings = get_settings()

setup_logging(
    log_level=settings.log_level,
    log_format="json" if settings.is_production else settings.log_format,
    environment=settings.app_env,
)

logger = get_logger(__name__)

app = FastAPI(
    title="Backtester",
    version=__version__,
    docs_url="/docs" if not settings.is_production else None,
    redoc_url="/redoc" if not settings.is_production else None,
)

setup_metrics(app, enabled=settings.metrics_enabled)

app.include_router(health_router)
app.include_router(api_router, prefix="/api/v1")

logger.info(
    "Backtester API started",
    extra={"environment": settings.app_env, "version": __version__},
)


@app.get("/")
async def root():
    return {"message": "Backtester API", "docs": "/docs"}
