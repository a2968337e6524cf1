"""
Debatica
========

AI-assisted writing tools for debate students: rebuttals, card cutting,
extemp prep, speech critique and more, served over a streaming HTTP API.
"""

__version__ = "0.1.0"
