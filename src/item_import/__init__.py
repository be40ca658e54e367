"""CSV item import tool.

Bulk-imports catalog items from a CSV file into the procurement database:
file check -> tokenize -> normalize -> match + validate -> commit -> reconcile.
"""

__version__ = "0.1.0"
