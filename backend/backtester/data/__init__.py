from backtester.data.csv_loader import load_prices, price_range

__all__ = ["load_prices", "price_range"]
