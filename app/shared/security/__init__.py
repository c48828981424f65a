"""Security helpers: headers middleware, rate limiting, password hashing."""
