"""
Global pytest configuration and fixtures for backtester tests.
"""
from datetime import date, timedelta
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from backtester.models.market_data import PriceBar


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as unit test (fast, no dependencies)"
    )
    config.addinivalue_line(
        "markers", "api: mark test as exercising the HTTP layer"
    )


@pytest.fixture
def make_bars():
    """Build consecutive daily bars from closing prices.

    Open, high and low equal the close, which always satisfies the OHLC rules.
    """
    def _make_bars(closes, start: date = date(2024, 1, 1)) -> list[PriceBar]:
        bars = []
        for i, close in enumerate(closes):
            price = Decimal(str(close))
            bars.append(PriceBar(
                date=start + timedelta(days=i),
                open=price,
                high=price,
                low=price,
                close=price,
            ))
        return bars

    return _make_bars


@pytest_asyncio.fixture
async def client():
    from backtester.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
