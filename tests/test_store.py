import random

import numpy as np
import pandas as pd

from bookie.entries import EntryStore, FRAME_COLUMNS

class _NoRoomList(list):
    """List that cannot grow any more"""

    def insert(self, index, item):
        raise MemoryError

class TestEntryStore:
    """Test suite for the sorted entry store"""

    def test_starts_empty(self, empty_store):
        assert len(empty_store) == 0
        assert not empty_store
        assert list(empty_store) == []
        assert empty_store.is_sorted()

    def test_sorted_by_account_then_date(self, make_entry):
        store = EntryStore()
        for account, date in [('XYZ', '20230101'), ('ABC', '20230102'),
                              ('ABC', '20230101'), ('AB', '20230301'),
                              ('XYZ', '20221231')]:
            assert store.insert(make_entry(account=account, date=date))

        assert [e.key for e in store] == [
            ('AB', '20230301'),
            ('ABC', '20230101'),
            ('ABC', '20230102'),
            ('XYZ', '20221231'),
            ('XYZ', '20230101'),
        ]

    def test_sort_invariant_random_inserts(self, make_entry):
        """Test that any insertion order leaves the store sorted"""
        rng = random.Random(20230101)
        store = EntryStore()
        for _ in range(500):
            store.insert(make_entry(
                account=rng.choice(['1', '42', '7', 'ABC', 'ab']),
                date=f"2023{rng.randint(1, 12):02d}{rng.randint(1, 28):02d}",
                amount=rng.randint(-1000, 1000) / 4
            ))

        assert len(store) == 500
        assert store.is_sorted()
        for previous, current in zip(store, store[1:]):
            assert previous.key <= current.key

    def test_equal_keys_keep_insertion_order(self, make_entry):
        """Test that entries with the same account and date stay first in, first out"""
        store = EntryStore()
        store.insert(make_entry(date='20230105', description='later'))
        for i in range(5):
            store.insert(make_entry(description=f'same {i}'))
            store.insert(make_entry(account='XYZ', description=f'other {i}'))
        store.insert(make_entry(date='20221231', description='earlier'))

        abc = [e.description for e in store if e.account == 'ABC']
        assert abc == ['earlier', 'same 0', 'same 1', 'same 2', 'same 3', 'same 4', 'later']
        xyz = [e.description for e in store if e.account == 'XYZ']
        assert xyz == [f'other {i}' for i in range(5)]

    def test_built_from_iterable(self, make_entry):
        store = EntryStore([make_entry(account='XYZ'), make_entry(account='ABC')])
        assert [e.account for e in store] == ['ABC', 'XYZ']
        assert store[0].account == 'ABC'
        assert repr(store) == 'EntryStore(2 entries)'

    def test_full_store_declines(self, make_entry):
        """Test that a store at its limit drops new entries and keeps the old ones"""
        store = EntryStore(max_entries=2)
        assert store.insert(make_entry(account='XYZ'))
        assert store.insert(make_entry(account='DEF'))
        assert not store.insert(make_entry(account='ABC'))
        assert [e.account for e in store] == ['DEF', 'XYZ']

    def test_out_of_memory_declines(self, make_entry):
        store = EntryStore([make_entry(account='XYZ', amount=1.0)])
        store._entries = _NoRoomList(store._entries)

        assert not store.insert(make_entry(account='ABC'))
        assert len(store) == 1
        assert store[0].account == 'XYZ'
        assert store[0].amount == np.float32(1.0)


class TestToFrame:
    """Test suite for the DataFrame view of the store"""

    def test_columns_and_order(self, scenario_store):
        frame = scenario_store.to_frame()
        assert frame.columns.tolist() == FRAME_COLUMNS
        assert frame['Account'].tolist() == ['ABC', 'ABC', 'XYZ']
        assert frame['Date'].tolist() == ['20230101', '20230102', '20230101']
        assert frame['Description'].tolist() == ['groceries', 'rent', 'coffee']
        assert frame['Amount'].dtype == np.float32
        assert frame['Amount'].tolist() == [100.0, 50.0, 20.0]

    def test_empty_store(self, empty_store):
        frame = empty_store.to_frame()
        assert isinstance(frame, pd.DataFrame)
        assert frame.empty
        assert frame.columns.tolist() == FRAME_COLUMNS
