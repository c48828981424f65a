"""
Accounts bounded context — domain layer.

Users, login sessions, subscription status and the access rules
that gate premium features.
"""
