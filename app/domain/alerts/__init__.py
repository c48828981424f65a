"""
Alerts bounded context — domain layer.

Price alerts armed by users and the rules that trigger them.
"""
