"""Infrastructure adapters for the budget bounded context."""
