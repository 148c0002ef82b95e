"""
Regime App - Market Regime Classification and Risk Gating Engine

Ingests per-symbol price ticks, derives technical indicators, classifies the
market regime and decides whether a proposed order is allowed and how large
its position should be.
"""

__version__ = "0.1.0"
__author__ = "Regime App Team"
