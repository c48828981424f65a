"""Infrastructure adapters for the ranking bounded context."""
