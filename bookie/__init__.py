"""
bookie - Reports on a plain-text ledger of dated transactions.

This package provides functionality to:
- Read a ledger with one transaction per line (date, account, amount, description)
- Select transactions by account and by (partial) date range
- Keep the selected transactions sorted by account and date
- Report them itemized, per account, per date and as a grand total

Ledger line format:
- Date: up to 8 characters, YYYYMMDD recommended
- Account: up to 3 characters
- Amount: decimal number (negative for debits)
- Description: rest of the line
"""

__version__ = "0.4.0"

from .entries import (
    Transaction,
    EntryFilter,
    EntryStore,
    parse_line,
    load_entries
)
from .reports import (
    list_details,
    list_by_account,
    list_by_date,
    list_total,
    totals_by_account,
    totals_by_date,
    grand_total,
    generate_report,
    save_entries
)

__all__ = [
    'Transaction',
    'EntryFilter',
    'EntryStore',
    'parse_line',
    'load_entries',
    'list_details',
    'list_by_account',
    'list_by_date',
    'list_total',
    'totals_by_account',
    'totals_by_date',
    'grand_total',
    'generate_report',
    'save_entries'
]
