"""
Finance Tracker - Source Package

A password-gated dashboard for recording income and expense transactions
and issuing simple internal invoices, for one operator or a small team.

DESIGN PRINCIPLES:
1. The in-memory collection is the source of truth for a session
2. Derived views are pure functions of records and the period filter
3. The storage backend is chosen once and is swappable
4. Failures stay local to the operation that caused them
"""

__version__ = "1.0.0"
__author__ = "Finance Tracker Team"
