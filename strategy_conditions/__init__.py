"""
strategy_conditions

Entry/exit condition trees for trading strategies: nested ALL/ANY groups
of factor comparisons, edited by path and stored as canonical JSON.
"""

__version__ = "0.1.0"
