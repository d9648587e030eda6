"""
StudySplit
==========
Splits articles and videos into short study segments.
"""

__version__ = "1.0.0"
