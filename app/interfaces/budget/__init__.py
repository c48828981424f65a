"""HTTP interface of the budget bounded context."""
