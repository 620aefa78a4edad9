"""
SpendMate - Source Package

A personal expense tracker: log purchases, keep them inside a budget,
and see where the money goes.

DESIGN PRINCIPLES:
1. The record store is the single writer
2. Every mutation is persisted immediately
3. AI features are optional helpers, never required
4. Bad saved data resets to defaults instead of crashing
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "SpendMate Team"
