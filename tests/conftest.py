import logging

import pytest

from bookie.entries import EntryStore, Transaction, load_entries

# The three-line ledger used throughout the report tests
scenario_ledger = (
    "20230101 ABC 100.00 groceries\n"
    "20230102 ABC 50.00 rent\n"
    "20230101 XYZ 20.00 coffee\n"
)

mixed_ledger = (
    "# date   acc amount description\n"
    "20191231 42 -10.00 before the range\n"
    "20200101 42 25.50 first day\n"
    "20200615 7 12.25 other account\n"
    "\n"
    "not a transaction at all\n"
    "20200615 42 -4.75 mid year\r\n"
    "20201231 42 100.00 last day\n"
    "20210101 7 1.00 after the range\n"
    "20210101 42 2.50\n"
)

@pytest.fixture
def scenario_text():
    return scenario_ledger

@pytest.fixture
def mixed_text():
    return mixed_ledger

@pytest.fixture
def scenario_file(tmp_path):
    """Scenario ledger written to a file"""
    path = tmp_path / "ledger.txt"
    path.write_text(scenario_ledger)
    return path

@pytest.fixture
def scenario_store():
    """Store loaded from the scenario ledger"""
    return load_entries(scenario_ledger.splitlines(keepends=True))

@pytest.fixture
def make_entry():
    """Helper fixture to build transactions with defaults"""
    def _make_entry(account='ABC', date='20230101', amount=0.0, description=''):
        return Transaction(account, date, description, amount)
    return _make_entry

@pytest.fixture
def empty_store():
    return EntryStore()

@pytest.fixture
def restore_logging():
    """Undo changes made to the root logger by setup_logging()"""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
