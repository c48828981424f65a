"""
Trading bounded context — domain layer.

This module contains all domain logic for the paper-trading simulator:
- Spot trades and futures positions
- Margin, liquidation and PnL arithmetic
- Performance statistics
- Portfolio value curve
"""
