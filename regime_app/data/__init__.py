"""
Price data module.

Normalizes raw ticks into PricePoints and keeps the bounded per-symbol
PriceSeries the indicators read from.
"""
