"""
obsfilter

Filtered CSV exports of observation data held in a graph store.
"""

__version__ = "1.0.0"
