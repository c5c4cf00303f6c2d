"""
Time tracking and capacity accounting service.
"""

__version__ = "1.0.0"
