"""
Application layer for the trading bounded context.

Spot simulator trades, futures positions, capital movements and
performance reports. Use cases coordinate domain entities and ports.
No framework or infrastructure imports allowed.
"""
