"""
Application layer for the ranking bounded context.

Live leaderboard, monthly ranking close and the hall of fame.
"""
