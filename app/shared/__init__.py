"""
Shared module package.

Cross-cutting concerns used by every bounded context: error mapping,
security middleware, rate limiting, password hashing and logging.
"""
