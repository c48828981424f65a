"""HTTP interface of the ranking bounded context."""
