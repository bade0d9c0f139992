"""
Tests for storage backends and transaction support
"""

import pytest

from token_ledger.storage import (
    InMemoryStorage, SQLiteStorage, StorageInterface, create_storage
)


# Test data
test_data = {
    "account": "0xabc",
    "amount": "1000000000000000000000000"
}


@pytest.fixture(params=["memory", "sqlite"])
def storage(request, tmp_path):
    if request.param == "memory":
        backend = InMemoryStorage()
    else:
        backend = SQLiteStorage(tmp_path / "storage.db")
    yield backend
    backend.close()


class TestStorageBackends:
    """Behavior shared by every backend"""

    def test_basic_operations(self, storage):
        """Test basic CRUD operations"""
        storage.save("balances", "0xabc", test_data)
        assert storage.load("balances", "0xabc") == test_data

        assert storage.exists("balances", "0xabc")
        assert not storage.exists("balances", "missing")
        assert storage.load("balances", "missing") is None

        storage.save("balances", "0xdef", {"account": "0xdef", "amount": "5"})
        assert len(storage.load_all("balances")) == 2
        assert storage.count("balances") == 2

        results = storage.find("balances", {"account": "0xdef"})
        assert len(results) == 1
        assert results[0]["amount"] == "5"

        assert storage.delete("balances", "0xabc")
        assert not storage.delete("balances", "0xabc")
        assert storage.count("balances") == 1

        storage.clear_table("balances")
        assert storage.count("balances") == 0

    def test_update_keeps_insertion_order(self, storage):
        """Test that rewriting a record does not move it to the end"""
        storage.save("events", "1", {"n": 1})
        storage.save("events", "2", {"n": 2})
        storage.save("events", "1", {"n": 10})

        assert [r["n"] for r in storage.load_all("events")] == [10, 2]

    def test_atomic_commit(self, storage):
        """Test that writes in a successful atomic block persist"""
        with storage.atomic():
            storage.save("balances", "a", {"amount": "1"})
            storage.save("balances", "b", {"amount": "2"})

        assert storage.count("balances") == 2

    def test_atomic_rollback(self, storage):
        """Test that a failing atomic block leaves no partial writes"""
        storage.save("balances", "a", {"amount": "1"})

        with pytest.raises(RuntimeError):
            with storage.atomic():
                storage.save("balances", "a", {"amount": "0"})
                storage.save("balances", "b", {"amount": "1"})
                storage.delete("balances", "a")
                raise RuntimeError("fail mid-transfer")

        assert storage.load("balances", "a") == {"amount": "1"}
        assert storage.load("balances", "b") is None
        assert storage.count("balances") == 1

    def test_table_created_in_rolled_back_block_is_usable(self, storage):
        """Test writing to a table whose first use was rolled back"""
        with pytest.raises(RuntimeError):
            with storage.atomic():
                storage.save("balances", "a", {"amount": "1"})
                raise RuntimeError("abort")

        assert storage.count("balances") == 0
        storage.save("balances", "a", {"amount": "2"})
        assert storage.load("balances", "a") == {"amount": "2"}

        with storage.atomic():
            storage.save("allowances", "x", {"amount": "3"})
        storage.save("allowances", "y", {"amount": "4"})
        assert storage.count("allowances") == 2

    def test_loaded_records_are_copies(self, storage):
        """Test that callers cannot mutate stored records in place"""
        storage.save("balances", "a", {"amount": "1"})
        record = storage.load("balances", "a")
        record["amount"] = "999"

        assert storage.load("balances", "a") == {"amount": "1"}


class TestInMemoryStorage:
    """In-memory specifics"""

    def test_rollback_of_cleared_table(self):
        """Test that clear_table is undone by rollback"""
        storage = InMemoryStorage()
        storage.save("t", "a", {"v": 1})
        storage.save("t", "b", {"v": 2})

        with pytest.raises(RuntimeError):
            with storage.atomic():
                storage.clear_table("t")
                raise RuntimeError("abort")

        assert storage.count("t") == 2

    def test_get_all_data(self):
        """Test debugging snapshot"""
        storage = InMemoryStorage()
        storage.save("t", "a", {"v": 1})
        assert storage.get_all_data() == {"t": {"a": {"v": 1}}}


class TestSQLiteStorage:
    """SQLite specifics"""

    def test_persists_across_connections(self, tmp_path):
        """Test data survives reopening the database file"""
        db_path = tmp_path / "ledger.db"
        storage = SQLiteStorage(db_path)
        storage.save("balances", "a", {"amount": "42"})
        storage.close()

        reopened = SQLiteStorage(db_path)
        assert reopened.load("balances", "a") == {"amount": "42"}
        reopened.close()

    def test_rollback_is_not_persisted(self, tmp_path):
        """Test that rolled back writes never reach disk"""
        db_path = tmp_path / "ledger.db"
        storage = SQLiteStorage(db_path)
        storage.save("balances", "a", {"amount": "1"})

        with pytest.raises(RuntimeError):
            with storage.atomic():
                storage.save("balances", "a", {"amount": "2"})
                raise RuntimeError("abort")
        storage.close()

        reopened = SQLiteStorage(db_path)
        assert reopened.load("balances", "a") == {"amount": "1"}
        reopened.close()


class TestCreateStorage:
    """Test storage URL handling"""

    def test_memory(self):
        assert isinstance(create_storage("memory://"), InMemoryStorage)

    def test_sqlite(self, tmp_path):
        storage = create_storage(f"sqlite:///{tmp_path / 'x.db'}")
        assert isinstance(storage, SQLiteStorage)
        assert isinstance(storage, StorageInterface)
        storage.close()

    def test_sqlite_memory(self):
        storage = create_storage("sqlite://:memory:")
        assert isinstance(storage, SQLiteStorage)
        storage.close()

    def test_unsupported(self):
        with pytest.raises(ValueError, match="Unsupported"):
            create_storage("postgresql://localhost/ledger")
