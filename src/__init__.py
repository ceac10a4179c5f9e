"""
Expense Manager - Source Package

A personal expense tracker that keeps every transaction on the local device.

DESIGN PRINCIPLES:
1. Validate at the boundary, store what was confirmed
2. Storage failures never crash the app
3. Statistics are pure functions of the transaction list
4. Every mutation is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Expense Manager Team"
