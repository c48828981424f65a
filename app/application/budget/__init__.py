"""Application layer for the budget bounded context."""
