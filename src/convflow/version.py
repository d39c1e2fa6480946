"""
Central version constant for convflow.
"""

__version__ = "0.1.0"
