"""
Utility functions module.

Time Semantics:
- Market timestamps from price ticks are ALWAYS authoritative
- Wall-clock time is only used as a fallback
- Indicator and regime timestamps use the newest tick's market time
"""
