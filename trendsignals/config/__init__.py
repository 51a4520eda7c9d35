"""
Settings and per-pair metadata.
"""
