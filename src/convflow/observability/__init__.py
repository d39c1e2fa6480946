"""
Logging helpers.
"""
