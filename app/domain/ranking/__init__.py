"""
Ranking bounded context — domain layer.

Live leaderboard by period and market, and the monthly ranking
snapshot that feeds the hall of fame.
"""
