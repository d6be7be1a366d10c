from fastapi import APIRouter

from backtester.api.v1 import backtest_routes

api_router = APIRouter()
api_router.include_router(backtest_routes.router)
