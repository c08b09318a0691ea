"""
Reports over an EntryStore.

Four sections can be produced, always in this order:

- details: every transaction, grouped by account, with a total per account
- by account: one total per account
- by date: one total per date, all accounts together
- total: the grand total

Every section is a single forward pass over the store. Because the store is
sorted by account, an account group ends exactly where the account of the
next entry differs from the current one. The by-date section cannot rely on
that and builds its own list of dates while it scans.

Sums are kept in single precision, like the amounts themselves.
"""

import csv
import logging
import pathlib

import numpy as np

logger = logging.getLogger(__name__)

def format_amount(amount):
    """Format an amount with two decimals and a radix point, 7 wide."""
    return f"{float(amount):7.2F}"

def format_entry(entry):
    return f"{entry.date:>8} {format_amount(entry.amount)} {entry.description:<58}"

def format_total(amount):
    return f"total    {format_amount(amount)}"

def list_details(store):
    """
    Itemized listing of the store.

    For each account: a header line with the account, one line per
    transaction (date, amount, description), a total line and an empty line.

    Args:
        store (EntryStore): Loaded transactions

    Returns:
        list: Report lines, empty when the store is empty
    """
    lines = []
    account = None
    subtotal = np.float32(0.0)

    for entry in store:
        if entry.account != account:
            if account is not None:
                lines.extend([format_total(subtotal), ''])
            account = entry.account
            lines.append(f"{account:<3}")
            subtotal = np.float32(0.0)

        subtotal += entry.amount
        lines.append(format_entry(entry))

    if account is not None:
        lines.extend([format_total(subtotal), ''])

    return lines

def totals_by_account(store):
    """
    Total amount per account.

    Args:
        store (EntryStore): Loaded transactions

    Returns:
        list: (account, total) tuples in account order
    """
    totals = []
    account = None
    subtotal = np.float32(0.0)

    for entry in store:
        if entry.account != account:
            if account is not None:
                totals.append((account, subtotal))
            account = entry.account
            subtotal = np.float32(0.0)
        subtotal += entry.amount

    if account is not None:
        totals.append((account, subtotal))

    return totals

def list_by_account(store):
    return [f"{account:<3}      {format_amount(total)}"
            for account, total in totals_by_account(store)]

def _find_date(dates, date):
    # Lower bound: first position whose date is not less than ``date``
    lo, hi = 0, len(dates)
    while lo < hi:
        mid = (lo + hi) // 2
        if dates[mid] < date:
            lo = mid + 1
        else:
            hi = mid
    return lo

def totals_by_date(store):
    """
    Total amount per date, across all accounts.

    The store is ordered by account first, so dates come in runs that restart
    for every account. A date after the last one seen is appended; any other
    date is looked up and either added to an existing total or inserted in
    place.

    Args:
        store (EntryStore): Loaded transactions

    Returns:
        list: (date, total) tuples in date order, one per distinct date
    """
    dates = []
    totals = []

    for entry in store:
        if not dates or entry.date > dates[-1]:
            index = len(dates)
        else:
            index = _find_date(dates, entry.date)
            if dates[index] == entry.date:
                totals[index] += entry.amount
                continue

        try:
            dates.insert(index, entry.date)
        except MemoryError:
            logger.debug(f"Out of memory while summarizing {entry.date}, skipping it")
            continue
        try:
            totals.insert(index, np.float32(entry.amount))
        except MemoryError:
            del dates[index]
            logger.debug(f"Out of memory while summarizing {entry.date}, skipping it")

    return list(zip(dates, totals))

def list_by_date(store):
    return [f"{date:>8} {format_amount(total)}"
            for date, total in totals_by_date(store)]

def grand_total(store):
    total = np.float32(0.0)
    for entry in store:
        total += entry.amount
    return total

def list_total(store):
    return [format_total(grand_total(store))]

def generate_report(store, details=False, by_account=False, by_date=False, total=False):
    """
    Build the requested report sections.

    Args:
        store (EntryStore): Loaded transactions
        details (bool): Itemized listing
        by_account (bool): Totals per account
        by_date (bool): Totals per date
        total (bool): Grand total

    Returns:
        list: Report lines. Sections appear in the order details, by account,
        by date, total, whatever order they were requested in. When no section
        is requested the itemized listing is produced.
    """
    if not (details or by_account or by_date or total):
        details = True

    lines = []
    if details:
        lines.extend(list_details(store))
    if by_account:
        lines.extend(list_by_account(store))
    if by_date:
        lines.extend(list_by_date(store))
    if total:
        lines.extend(list_total(store))

    logger.debug(f"Generated {len(lines)} report lines from {len(store)} transactions")
    return lines

def save_entries(store, output_path):
    """Save the loaded transactions to a CSV file.

    Args:
        store (EntryStore): Loaded transactions
        output_path (str or pathlib.Path): Output file or directory

    Returns:
        pathlib.Path: The file written
    """
    output_path = pathlib.Path(output_path)
    if output_path.is_dir() or not output_path.suffix:
        output_path = output_path / "entries.csv"

    output_path.parent.mkdir(parents=True, exist_ok=True)

    logger.info(f"Writing {len(store)} transactions to {output_path}")
    store.to_frame().to_csv(output_path, index=False, quoting=csv.QUOTE_NONNUMERIC)
    return output_path
