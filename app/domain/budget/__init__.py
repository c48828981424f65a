"""
Budget bounded context — domain layer.

Yearly budget planning by category and month.
"""
