"""Tests for the snapshot codec and storage backends."""

import asyncio
import json
import threading

import pytest
from datetime import datetime, timezone
from decimal import Decimal

from pigcoin.models.finance import Goal, GoalType, Installment, Transaction, TransactionType
from pigcoin.services.storage import (
    InMemoryStorage,
    JsonFileStorage,
    SnapshotDecodeError,
    StorageReadError,
    StorageWriteError,
    decode_goals,
    decode_transactions,
    encode_goals,
    encode_transactions,
    safe_filename,
)


LEGACY_GOALS = """[
  {
    "id": "1717000000000",
    "name": "Trip",
    "totalValue": 10,
    "currentValue": 3,
    "type": "grid",
    "installments": [
      {"number": 1, "value": 1, "paid": true},
      {"number": 2, "value": 2, "paid": true},
      {"number": 3, "value": 3, "paid": false},
      {"number": 4, "value": 4, "paid": false}
    ],
    "createdAt": "2024-05-01T10:00:00.000Z"
  }
]"""

LEGACY_TRANSACTIONS = """[
  {"id": "a1", "name": "Salary", "value": 500, "type": "income",
   "date": "2024-05-01T10:00:00.000Z"},
  {"id": "a2", "name": "Coffee", "value": 3.5, "type": "expense",
   "date": "2024-05-02T08:15:00.000Z"}
]"""


@pytest.fixture
def goal():
    return Goal(
        name="Trip",
        total_value=Decimal("12.50"),
        current_value=Decimal("1"),
        type=GoalType.GRID,
        installments=(
            Installment(number=1, value=Decimal("1"), paid=True),
            Installment(number=2, value=Decimal("11.50")),
        ),
        created_at=datetime(2024, 5, 1, tzinfo=timezone.utc),
    )


class TestCodec:
    """Tests for encoding and decoding snapshots."""
    
    def test_goal_round_trip(self, goal):
        assert decode_goals(encode_goals([goal])) == [goal]
    
    def test_transaction_round_trip(self):
        t = Transaction(name="Rent", value=Decimal("900.10"), type=TransactionType.EXPENSE)
        assert decode_transactions(encode_transactions([t])) == [t]
    
    def test_camel_case_and_string_amounts(self, goal):
        stored = json.loads(encode_goals([goal]))[0]
        assert stored["totalValue"] == "12.50"
        assert stored["currentValue"] == "1"
        assert stored["installments"][0] == {"number": 1, "value": "1", "paid": True}
    
    def test_legacy_goal_snapshot(self):
        [legacy] = decode_goals(LEGACY_GOALS)
        assert legacy.id == "1717000000000"
        assert legacy.total_value == Decimal("10")
        assert legacy.current_value == legacy.paid_total
        assert legacy.created_at == datetime(2024, 5, 1, 10, tzinfo=timezone.utc)
    
    def test_legacy_transaction_snapshot(self):
        transactions = decode_transactions(LEGACY_TRANSACTIONS)
        assert [t.value for t in transactions] == [Decimal("500"), Decimal("3.5")]
        assert transactions[1].type == TransactionType.EXPENSE
    
    @pytest.mark.parametrize("blob", [None, ""])
    def test_nothing_stored(self, blob):
        assert decode_goals(blob) == []
        assert decode_transactions(blob) == []
    
    @pytest.mark.parametrize("blob", [
        "not json",
        "{}",
        '[{"name": "x"}]',
        '[{"name": "x", "value": -1, "type": "expense"}]',
    ])
    def test_malformed(self, blob):
        with pytest.raises(SnapshotDecodeError):
            decode_transactions(blob)
    
    def test_decode_error_is_read_error(self):
        with pytest.raises(StorageReadError):
            decode_goals("[1, 2]")


class TestSafeFilename:
    
    @pytest.mark.parametrize("key,expected", [
        ("@pigcoin_goals", "pigcoin_goals"),
        ("@pigcoin_transactions", "pigcoin_transactions"),
        ("a b/c", "a_bc"),
        ("@@@", "data"),
    ])
    def test_safe_filename(self, key, expected):
        assert safe_filename(key) == expected


class TestInMemoryStorage:
    
    def test_save_load_delete(self):
        storage = InMemoryStorage()
        assert asyncio.run(storage.load("k")) is None
        assert asyncio.run(storage.save("k", "[]")) is True
        assert asyncio.run(storage.load("k")) == "[]"
        assert storage.keys() == ["k"]
        assert asyncio.run(storage.delete("k")) is True
        assert asyncio.run(storage.delete("k")) is False


class TestJsonFileStorage:
    """Tests for the file-per-key backend."""
    
    def test_missing_key(self, tmp_path):
        storage = JsonFileStorage(tmp_path)
        assert asyncio.run(storage.load("@pigcoin_goals")) is None
    
    def test_save_and_load(self, tmp_path):
        storage = JsonFileStorage(tmp_path / "nested")
        asyncio.run(storage.save("@pigcoin_goals", '["é"]'))
        path = tmp_path / "nested" / "pigcoin_goals.json"
        assert path.read_text(encoding="utf-8") == '["é"]'
        assert asyncio.run(storage.load("@pigcoin_goals")) == '["é"]'
    
    def test_save_replaces_and_leaves_no_temp_files(self, tmp_path):
        storage = JsonFileStorage(tmp_path)
        asyncio.run(storage.save("k", "first"))
        asyncio.run(storage.save("k", "second"))
        assert asyncio.run(storage.load("k")) == "second"
        assert [p.name for p in tmp_path.iterdir()] == ["k.json"]
    
    def test_delete(self, tmp_path):
        storage = JsonFileStorage(tmp_path)
        asyncio.run(storage.save("k", "x"))
        assert asyncio.run(storage.delete("k")) is True
        assert asyncio.run(storage.delete("k")) is False
        assert not storage.path_for("k").exists()
    
    def test_file_io_runs_off_the_event_loop(self, tmp_path):
        storage = JsonFileStorage(tmp_path)
        threads = []
        
        def recording(method):
            def wrapper(*args):
                threads.append(threading.get_ident())
                return method(*args)
            return wrapper
        
        storage._write_file = recording(storage._write_file)
        storage._read_file = recording(storage._read_file)
        
        async def scenario():
            loop_thread = threading.get_ident()
            await asyncio.gather(storage.save("a", "1"), storage.save("b", "2"))
            loaded = await asyncio.gather(storage.load("a"), storage.load("b"))
            return loop_thread, loaded
        
        loop_thread, loaded = asyncio.run(scenario())
        assert loaded == ["1", "2"]
        assert len(threads) == 4
        assert loop_thread not in threads
    
    def test_unwritable_directory(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        storage = JsonFileStorage(blocker)
        with pytest.raises(StorageWriteError):
            asyncio.run(storage.save("k", "x"))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
