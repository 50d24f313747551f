"""Calendar Ledger.

Reconciles timed calendar events into a spreadsheet log, one row per event
per local day, while leaving user-owned columns alone.
"""

__version__ = "0.1.0"
