"""HTTP interface of the accounts bounded context."""
