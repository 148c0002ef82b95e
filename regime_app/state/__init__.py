"""
Per-symbol pipeline state module.

Tracks each symbol through EMPTY → WARMING → READY and holds the
single-slot indicator snapshot and regime for the symbol.
"""
