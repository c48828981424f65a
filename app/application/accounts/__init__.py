"""
Application layer for the accounts bounded context.

Registration, login sessions, profile settings and subscriptions.
"""
