"""
Indicators and the decision rules built on them.
"""
