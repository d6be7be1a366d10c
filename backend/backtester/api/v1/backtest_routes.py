"""
API routes for backtesting.

Runs are computed per request and returned directly; nothing is stored.
"""

from datetime import date
from decimal import Decimal
from typing import Any

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field, field_validator

from backtester.backtest.comparison import compare_strategies
from backtester.backtest.engine import BacktestEngine
from backtester.backtest.performance import calculate_metrics
from backtester.exceptions import BacktestError
from backtester.models.market_data import PriceBar
from backtester.models.signal import TradeAction
from backtester.strategies.strategy_manager import StrategyManager

router = APIRouter(prefix="/backtest", tags=["backtest"])


# ============================================================================
# Pydantic Schemas
# ============================================================================

class PriceBarIn(BaseModel):
    """One daily OHLC bar."""
    date: date
    open: Decimal
    high: Decimal
    low: Decimal
    close: Decimal


class StrategySpec(BaseModel):
    """Strategy registry key plus constructor parameters."""
    strategy_name: str = Field(..., description="Registry key of the strategy")
    strategy_params: dict[str, Any] = Field(default_factory=dict, description="Strategy parameters")

    @field_validator("strategy_name")
    @classmethod
    def validate_strategy_name(cls, v: str) -> str:
        """Validate that the strategy exists."""
        available = StrategyManager.list_strategies()
        if v not in available:
            raise ValueError(f"Unknown strategy: {v}. Available: {available}")
        return v


class BacktestRequest(StrategySpec):
    """Request schema for running a backtest."""
    initial_cash: Decimal = Field(default=Decimal("10000"), gt=0, description="Starting capital")
    commission_per_trade: Decimal = Field(default=Decimal("0"), ge=0, description="Flat fee per trade")
    bars: list[PriceBarIn] = Field(..., min_length=1, description="Daily bars, oldest first")


class CompareRequest(BaseModel):
    """Request schema for comparing strategies."""
    strategies: list[StrategySpec] = Field(..., min_length=1)
    initial_cash: Decimal = Field(default=Decimal("10000"), gt=0)
    commission_per_trade: Decimal = Field(default=Decimal("0"), ge=0)
    bars: list[PriceBarIn] = Field(..., min_length=1)


class MetricsResponse(BaseModel):
    """Performance metrics in API response."""
    initial_value: Decimal
    final_value: Decimal
    total_return: Decimal
    total_profit: Decimal
    total_trades: int
    total_commissions: Decimal
    winning_trades: int
    losing_trades: int
    win_rate: Decimal
    average_win: Decimal
    average_loss: Decimal
    profit_factor: Decimal
    trading_days: int
    start_date: date
    end_date: date
    max_drawdown: Decimal


class TradeResponse(BaseModel):
    """Single executed trade."""
    date: date
    action: TradeAction
    price_per_share: Decimal
    share_count: int
    commission: Decimal
    total_cost: Decimal


class SnapshotResponse(BaseModel):
    """Single equity curve point."""
    date: date
    cash: Decimal
    shares_owned: int
    total_value: Decimal
    market_price: Decimal


class BacktestResponse(BaseModel):
    """Response schema for backtest results."""
    strategy_name: str
    initial_value: Decimal
    final_value: Decimal
    start_date: date
    end_date: date
    metrics: MetricsResponse
    trades: list[TradeResponse]
    equity_curve: list[SnapshotResponse]


class ComparisonRowResponse(BaseModel):
    strategy_name: str
    total_return: Decimal
    max_drawdown: Decimal
    win_rate: Decimal
    profit_factor: Decimal
    total_trades: int


# ============================================================================
# Helpers
# ============================================================================

def _to_series(bars: list[PriceBarIn]) -> list[PriceBar]:
    return [PriceBar(**bar.model_dump()) for bar in bars]


def _bad_request(error: BacktestError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))


# ============================================================================
# API Endpoints
# ============================================================================

@router.get("/strategies", response_model=list[str])
async def list_available_strategies() -> list[str]:
    """
    List available strategies for backtesting.

    Returns the registry keys accepted by /run and /compare.
    """
    return StrategyManager.list_strategies()


@router.post("/run", response_model=BacktestResponse)
async def run_backtest(request: BacktestRequest) -> BacktestResponse:
    """
    Run a backtest on the supplied bars.

    Invalid bars, strategy parameters or an unordered series are reported
    as 400 errors.
    """
    try:
        strategy = StrategyManager.create_strategy(request.strategy_name, request.strategy_params)
        engine = BacktestEngine(strategy, request.initial_cash, request.commission_per_trade)
        result = engine.run(_to_series(request.bars))
    except BacktestError as e:
        raise _bad_request(e) from e

    payload = result.to_dict()
    payload["metrics"] = calculate_metrics(result).to_dict()
    return BacktestResponse(**payload)


@router.post("/compare", response_model=list[ComparisonRowResponse])
async def compare(request: CompareRequest) -> list[ComparisonRowResponse]:
    """
    Compare several strategies over the same bars.

    Rows are ordered by total return, best first.
    """
    try:
        strategies = [
            StrategyManager.create_strategy(spec.strategy_name, spec.strategy_params)
            for spec in request.strategies
        ]
        rows = compare_strategies(
            strategies,
            _to_series(request.bars),
            request.initial_cash,
            request.commission_per_trade,
        )
    except BacktestError as e:
        raise _bad_request(e) from e

    return [ComparisonRowResponse(**row.to_dict()) for row in rows]
