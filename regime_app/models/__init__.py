"""
Data models module.

Indicator snapshots, regime states, order proposals and risk decisions.
"""
