"""
Marina - Boat Inventory Manager

An interactive inventory manager for the boats kept at a marina.
Records live in a flat comma-delimited file that is loaded at start
and written back on exit.

DESIGN PRINCIPLES:
1. The in-memory registry is the single source of truth during a session
2. Bad input is rejected as a whole, never half-applied
3. Every significant action is auditable
4. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Marina Tools Team"
