"""
Expense Tracker - Source Package

A small single-user expense tracker: record spending by category,
amount, date and memo, list it newest-first with a running total,
delete entries you no longer want.

DESIGN PRINCIPLES:
1. The whole list is read, changed and written as one unit
2. Corrupt storage degrades to an empty list, never a crash
3. Invalid input is rejected before anything is written
4. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Expense Tracker Team"
