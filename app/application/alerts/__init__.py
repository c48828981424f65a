"""
Application layer for the alerts bounded context.

Price alert management and the periodic alert processor.
"""
