"""
Prometheus metrics collection for the backtester.

Provides:
- Backtest run metrics (count, duration)
- Signal and trade counters
- HTTP request metrics for the API
- /metrics endpoint for Prometheus scraping
"""

import time
from typing import Callable

from fastapi import FastAPI, Request, Response
from prometheus_client import (
    Counter, Histogram,
    generate_latest, REGISTRY, CONTENT_TYPE_LATEST
)
from starlette.middleware.base import BaseHTTPMiddleware


# ============================================================================
# Metrics Definitions
# ============================================================================

# Backtest Metrics
backtests_completed_total = Counter(
    'backtester_backtests_completed_total',
    'Total backtests completed',
    ['status']
)

backtest_duration_seconds = Histogram(
    'backtester_backtest_duration_seconds',
    'Backtest run duration in seconds',
    buckets=(0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0, 10.0)
)

# Trading Metrics
signals_generated_total = Counter(
    'backtester_signals_generated_total',
    'Total signals generated',
    ['strategy', 'signal_type']
)

trades_executed_total = Counter(
    'backtester_trades_executed_total',
    'Total simulated trades executed',
    ['side']
)

trades_skipped_total = Counter(
    'backtester_trades_skipped_total',
    'Signals that did not result in a trade',
    ['reason']
)

# HTTP Metrics
http_requests_total = Counter(
    'backtester_http_requests_total',
    'Total HTTP requests',
    ['method', 'endpoint', 'status']
)

http_request_duration_seconds = Histogram(
    'backtester_http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint'],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0)
)


# ============================================================================
# Metrics Middleware
# ============================================================================

class MetricsMiddleware(BaseHTTPMiddleware):
    """Middleware to collect HTTP request metrics."""

    EXCLUDE_PATHS = {"/metrics", "/health", "/favicon.ico"}

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path in self.EXCLUDE_PATHS:
            return await call_next(request)

        path = request.url.path
        method = request.method
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
            status = response.status_code
        except Exception:
            status = 500
            raise
        finally:
            duration = time.perf_counter() - start_time
            http_requests_total.labels(method=method, endpoint=path, status=status).inc()
            http_request_duration_seconds.labels(method=method, endpoint=path).observe(duration)

        return response


# ============================================================================
# Setup Function
# ============================================================================

def setup_metrics(app: FastAPI, enabled: bool = True) -> None:
    """Setup Prometheus metrics collection.

    Args:
        app: FastAPI application instance
        enabled: Mount middleware and /metrics only when True
    """
    if not enabled:
        return

    app.add_middleware(MetricsMiddleware)

    @app.get("/metrics", include_in_schema=False)
    async def metrics_endpoint() -> Response:
        """Prometheus metrics endpoint."""
        return Response(
            content=generate_latest(REGISTRY),
            media_type=CONTENT_TYPE_LATEST
        )


# ============================================================================
# Helper Functions
# ============================================================================

def record_backtest(status: str, duration: float) -> None:
    """Record a finished backtest run."""
    backtests_completed_total.labels(status=status).inc()
    backtest_duration_seconds.observe(duration)


def record_signal(strategy: str, signal_type: str) -> None:
    """Record a generated signal."""
    signals_generated_total.labels(strategy=strategy, signal_type=signal_type).inc()


def record_trade(side: str) -> None:
    """Record an executed trade."""
    trades_executed_total.labels(side=side).inc()


def record_skip(reason: str) -> None:
    """Record a signal that was skipped."""
    trades_skipped_total.labels(reason=reason).inc()
