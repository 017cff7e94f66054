"""
orgchart - An organization chart editor core.

This package provides tools for importing flat organizational records from
delimited text, editing them as a tree, and exporting them back.
"""

__version__ = "0.1.0"
