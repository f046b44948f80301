"""
Central version constant for protoclass.
"""

__version__ = "0.3.0"
