"""
Ledger entries and the ordered entry store.

A ledger is a plain-text file with one transaction per line:

    <date> <account> <amount> <description>

- date: up to 8 characters, compared as text (use YYYYMMDD so that text order
  is chronological order)
- account: up to 3 characters
- amount: decimal number (hexadecimal with a 0x prefix also works), negative
  for debits
- description: the rest of the line

Lines starting with '#' are comments. Lines that do not scan as a transaction
are skipped without complaint.

Accepted transactions are kept in an EntryStore, sorted by (account, date).
Entries with the same account and date keep the order in which they were read,
so the reports can detect account groups by comparing neighbours.
"""

import logging
import re
from dataclasses import dataclass, field

import numpy as np
import pandas as pd

from bookie.utils import MAX_LINE_LENGTH, read_lines

logger = logging.getLogger(__name__)

MAX_ACCOUNT_LENGTH = 3
MAX_DATE_LENGTH = 8
MAX_DESCRIPTION_LENGTH = 79

# Column names used when the store is exported as a DataFrame
FRAME_COLUMNS = ['Account', 'Date', 'Description', 'Amount']

# Whitespace as the C locale defines it; other Unicode spaces are text
WHITESPACE = ' \t\n\v\f\r'

_AMOUNT_PATTERN = re.compile(
    r'[ \t\n\v\f\r]*'
    r'((?P<sign>[+-]?)'
    r'(?:(?P<hex>0x(?:[0-9a-f]+\.?[0-9a-f]*|\.[0-9a-f]+)(?:p[+-]?[0-9]+)?)'
    r'|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:e[+-]?[0-9]+)?|inf(?:inity)?|nan))'
    r'[ \t\n\v\f\r]*',
    re.IGNORECASE
)


@dataclass(frozen=True)
class Transaction:
    """One parsed ledger line.

    The amount is stored as a single precision float, like the totals the
    reports accumulate from it.
    """

    account: str
    date: str
    description: str = ''
    amount: np.float32 = field(default_factory=np.float32)

    def __post_init__(self):
        if not self.account or len(self.account) > MAX_ACCOUNT_LENGTH:
            raise ValueError(f"Invalid account: {self.account!r}")
        if not self.date or len(self.date) > MAX_DATE_LENGTH:
            raise ValueError(f"Invalid date: {self.date!r}")
        object.__setattr__(self, 'description', self.description[:MAX_DESCRIPTION_LENGTH])
        object.__setattr__(self, 'amount', np.float32(self.amount))

    @property
    def key(self):
        return (self.account, self.date)

    def inverted(self):
        """Return a copy of this transaction with the sign of the amount flipped."""
        return Transaction(self.account, self.date, self.description, -self.amount)


def _scan_token(line, pos, width):
    """Skip whitespace, then take up to ``width`` non-whitespace characters.

    Returns the token (empty when nothing could be taken) and the position
    just after it.
    """
    while pos < len(line) and line[pos] in WHITESPACE:
        pos += 1
    end = pos
    while end < len(line) and end - pos < width and line[end] not in WHITESPACE:
        end += 1
    return line[pos:end], end


def parse_line(line, invert_amounts=False):
    """
    Parse one ledger line into a Transaction.

    Args:
        line (str): Raw line, without its line terminator
        invert_amounts (bool): Flip the sign of the parsed amount

    Returns:
        Transaction or None: None for empty lines, comments and lines that do
        not start with a date, an account and an amount

    Notes:
        - Tokens are taken the way scanf("%8s %3s %f") takes them: a date token
          longer than 8 characters spills over into the account token
        - The description is stripped of trailing whitespace (including a
          leftover carriage return) and cut to 79 characters
    """
    if not line or line.startswith('#'):
        return None

    date, pos = _scan_token(line, 0, MAX_DATE_LENGTH)
    if not date:
        return None
    account, pos = _scan_token(line, pos, MAX_ACCOUNT_LENGTH)
    if not account:
        return None
    match = _AMOUNT_PATTERN.match(line, pos)
    if match is None:
        return None

    if match.group('hex'):
        value = float.fromhex(match.group('hex'))
        if match.group('sign') == '-':
            value = -value
    else:
        value = float(match.group(1))
    amount = np.float32(value)
    if invert_amounts:
        amount = -amount

    description = line[match.end():].rstrip(WHITESPACE)
    return Transaction(account, date, description, amount)


@dataclass
class EntryFilter:
    """Selection applied to every parsed transaction before it is stored.

    Empty fields are not applied. Date bounds are inclusive and compare only as
    many characters as the bound has, so '2020' selects the whole year.
    """

    account: str = ''
    from_date: str = ''
    to_date: str = ''

    def __post_init__(self):
        self.account = (self.account or '')[:MAX_ACCOUNT_LENGTH]
        self.from_date = (self.from_date or '')[:MAX_DATE_LENGTH]
        self.to_date = (self.to_date or '')[:MAX_DATE_LENGTH]

    @classmethod
    def on_date(cls, date, account=''):
        """Filter for transactions on a single (possibly partial) date."""
        return cls(account=account, from_date=date, to_date=date)

    def __bool__(self):
        return bool(self.account or self.from_date or self.to_date)

    def matches(self, entry: Transaction) -> bool:
        if self.account and self.account != entry.account:
            return False
        if self.from_date and self.from_date > entry.date[:len(self.from_date)]:
            return False
        if self.to_date and self.to_date < entry.date[:len(self.to_date)]:
            return False
        return True


class EntryStore:
    """Transactions sorted by (account, date).

    The store only grows: entries are added one at a time with insert() while
    a ledger is loaded and are read in order afterwards.
    """

    def __init__(self, entries=(), max_entries=None):
        self._entries = []
        self.max_entries = max_entries
        for entry in entries:
            self.insert(entry)

    def __len__(self):
        return len(self._entries)

    def __bool__(self):
        return bool(self._entries)

    def __iter__(self):
        return iter(self._entries)

    def __getitem__(self, index):
        return self._entries[index]

    def __repr__(self):
        return f"EntryStore({len(self._entries)} entries)"

    def _insertion_point(self, key):
        # Upper bound: past every entry with an equal key
        lo, hi = 0, len(self._entries)
        while lo < hi:
            mid = (lo + hi) // 2
            if key < self._entries[mid].key:
                hi = mid
            else:
                lo = mid + 1
        return lo

    def insert(self, entry: Transaction) -> bool:
        """
        Insert a transaction, keeping the store sorted.

        Args:
            entry (Transaction): Transaction to store

        Returns:
            bool: False if the entry was declined because the store is full or
            could not grow; the stored entries are left as they were
        """
        if self.max_entries is not None and len(self._entries) >= self.max_entries:
            logger.debug(f"Store is full ({self.max_entries} entries), dropping {entry.key}")
            return False
        index = self._insertion_point(entry.key)
        try:
            self._entries.insert(index, entry)
        except MemoryError:
            logger.debug(f"Out of memory while storing {entry.key}, dropping it")
            return False
        return True

    def is_sorted(self):
        return all(a.key <= b.key for a, b in zip(self._entries, self._entries[1:]))

    def to_frame(self) -> pd.DataFrame:
        """Return the stored entries, in order, as a DataFrame."""
        frame = pd.DataFrame(
            [(e.account, e.date, e.description, e.amount) for e in self._entries],
            columns=FRAME_COLUMNS
        )
        frame['Amount'] = frame['Amount'].astype(np.float32)
        return frame


def load_entries(stream, entry_filter=None, invert_amounts=False, store=None):
    """
    Read a ledger and store the transactions that pass the filter.

    Args:
        stream: Text stream to read from, or None for no input
        entry_filter (EntryFilter, optional): Selection to apply
        invert_amounts (bool): Flip the sign of every amount before filtering
        store (EntryStore, optional): Store to add to. A new one is created
            when not given

    Returns:
        EntryStore: The store holding the accepted transactions

    Side Effects:
        - Logs a warning for every line longer than MAX_LINE_LENGTH; the
          truncated line is still parsed
    """
    if store is None:
        store = EntryStore()
    if stream is None:
        logger.debug("No input, nothing to load")
        return store

    accepted = 0
    for line_number, line, length in read_lines(stream, MAX_LINE_LENGTH):
        if length > MAX_LINE_LENGTH:
            logger.warning(
                f"the line at {line_number} is longer ({length}) than we can "
                f"handle ({MAX_LINE_LENGTH}) and has been truncated"
            )

        entry = parse_line(line, invert_amounts=invert_amounts)
        if entry is None:
            logger.debug(f"Skipping line {line_number}: not a transaction")
            continue
        if entry_filter and not entry_filter.matches(entry):
            logger.debug(f"Skipping line {line_number}: filtered out")
            continue
        if store.insert(entry):
            accepted += 1

    logger.info(f"Loaded {accepted} transactions ({len(store)} in store)")
    return store
