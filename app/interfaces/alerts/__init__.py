"""HTTP interface of the alerts bounded context."""
