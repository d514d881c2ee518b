"""
Spendy - Source Package

A personal finance ledger: dated income/expense entries tagged with a
category, browsed by calendar month, with aggregated totals.

DESIGN PRINCIPLES:
1. Ledger and categories are the only persisted state
2. Month views are recomputed on every read, never cached
3. Validation failures block the action and mutate nothing
4. Save failures are logged, never rolled back
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Spendy Team"
