"""
Test suite for audit module

Tests hash-chained audit trail, tamper detection, integrity verification,
and audit event logging for ledger operations.
"""

import pytest
from datetime import datetime, timezone

from token_ledger.storage import InMemoryStorage, SQLiteStorage
from token_ledger.audit import AuditTrail, AuditEvent, AuditEventType


class TestAuditEvent:
    """Test AuditEvent functionality"""

    def test_metadata_serialization(self):
        """Test that token amounts are stored as exact strings"""
        now = datetime.now(timezone.utc)

        event = AuditEvent(
            id="AUDIT001",
            created_at=now,
            updated_at=now,
            event_type=AuditEventType.TOKENS_TRANSFERRED,
            entity_type="account",
            entity_id="0xabc",
            previous_hash="",
            current_hash="",
            metadata={
                "amount": 10 ** 24,
                "allowance_remaining": None,
                "ok": True,
                "nested": {"burn": 5, "accounts": ["a", "b"]},
                "when": now
            }
        )

        assert event.metadata["amount"] == "1000000000000000000000000"
        assert event.metadata["allowance_remaining"] is None
        assert event.metadata["ok"] is True
        assert event.metadata["nested"] == {"burn": "5", "accounts": ["a", "b"]}
        assert event.metadata["when"] == now.isoformat()

    def test_hash_calculation(self):
        """Test deterministic hashing and verification"""
        now = datetime.now(timezone.utc)
        event = AuditEvent(
            id="AUDIT002",
            created_at=now,
            updated_at=now,
            event_type=AuditEventType.ALLOWANCE_CHANGED,
            entity_type="allowance",
            entity_id='["a", "b"]',
            previous_hash="",
            current_hash="",
            metadata={"amount": 1},
            sequence=1,
            caller="a"
        )
        event.current_hash = event.calculate_hash()

        assert len(event.current_hash) == 64
        assert event.verify_hash()

        event.metadata["amount"] = "2"
        assert not event.verify_hash()

    def test_dict_round_trip(self):
        """Test storage serialization keeps the hash valid"""
        now = datetime.now(timezone.utc)
        event = AuditEvent(
            id="AUDIT003",
            created_at=now,
            updated_at=now,
            event_type=AuditEventType.LEDGER_INITIALIZED,
            entity_type="ledger",
            entity_id="token",
            previous_hash="",
            current_hash="",
            metadata={"initial_supply": 10 ** 24},
            sequence=1
        )
        event.current_hash = event.calculate_hash()

        restored = AuditEvent.from_dict(event.to_dict())

        assert restored.event_type == AuditEventType.LEDGER_INITIALIZED
        assert restored.created_at == now
        assert restored.verify_hash()


class TestAuditTrail:
    """Test AuditTrail functionality"""

    def setup_method(self):
        """Set up test fixtures"""
        self.storage = InMemoryStorage()
        self.audit_trail = AuditTrail(self.storage)

    def test_chaining(self):
        """Test that each event links to its predecessor"""
        first = self.audit_trail.log_event(
            AuditEventType.LEDGER_INITIALIZED, "ledger", "token", {"owner": "a"}, caller="a"
        )
        second = self.audit_trail.log_event(
            AuditEventType.TOKENS_TRANSFERRED, "account", "a", {"amount": 100}, caller="a"
        )

        assert first.previous_hash == ""
        assert second.previous_hash == first.current_hash
        assert (first.sequence, second.sequence) == (1, 2)
        assert self.audit_trail.get_latest_hash() == second.current_hash
        assert self.audit_trail.count_events() == 2

    def test_queries(self):
        """Test lookup by entity, type and id"""
        self.audit_trail.log_event(AuditEventType.TOKENS_TRANSFERRED, "account", "a", {"amount": 1})
        self.audit_trail.log_event(AuditEventType.TOKENS_TRANSFERRED, "account", "b", {"amount": 2})
        rejected = self.audit_trail.log_event(AuditEventType.OPERATION_REJECTED, "account", "a", {})

        for_a = self.audit_trail.get_events_for_entity("account", "a")
        assert [e.event_type for e in for_a] == [
            AuditEventType.TOKENS_TRANSFERRED, AuditEventType.OPERATION_REJECTED
        ]
        assert len(self.audit_trail.get_events_for_entity("account", "a", limit=1)) == 1

        transfers = self.audit_trail.get_events_by_type(AuditEventType.TOKENS_TRANSFERRED)
        assert [e.entity_id for e in transfers] == ["a", "b"]

        assert len(self.audit_trail.get_all_events()) == 3
        assert self.audit_trail.get_all_events(limit=1)[0].id == rejected.id
        assert self.audit_trail.get_event_by_id(rejected.id).id == rejected.id
        assert self.audit_trail.get_event_by_id("missing") is None

    def test_integrity_valid(self):
        """Test verification of an untouched chain"""
        for i in range(5):
            self.audit_trail.log_event(AuditEventType.TOKENS_TRANSFERRED, "account", "a", {"amount": i})

        result = self.audit_trail.verify_integrity()

        assert result['valid']
        assert result['total_events'] == 5
        assert result['hash_errors'] == []
        assert result['chain_breaks'] == []

    def test_integrity_empty(self):
        """Test verification with no events"""
        result = self.audit_trail.verify_integrity()
        assert result['valid']
        assert result['total_events'] == 0

    def test_detects_tampering(self):
        """Test that editing a stored event is detected"""
        self.audit_trail.log_event(AuditEventType.TOKENS_TRANSFERRED, "account", "a", {"amount": 100})
        event = self.audit_trail.log_event(AuditEventType.TOKENS_TRANSFERRED, "account", "a", {"amount": 5})

        data = self.storage.load("audit_events", event.id)
        data["metadata"]["amount"] = "5000"
        self.storage.save("audit_events", event.id, data)

        result = self.audit_trail.verify_integrity()
        assert not result['valid']
        assert result['hash_errors'][0]['event_id'] == event.id

    def test_detects_deleted_event(self):
        """Test that removing an event breaks the chain"""
        self.audit_trail.log_event(AuditEventType.TOKENS_TRANSFERRED, "account", "a", {})
        middle = self.audit_trail.log_event(AuditEventType.TOKENS_TRANSFERRED, "account", "a", {})
        self.audit_trail.log_event(AuditEventType.TOKENS_TRANSFERRED, "account", "a", {})

        self.storage.delete("audit_events", middle.id)

        result = self.audit_trail.verify_integrity()
        assert not result['valid']
        assert len(result['chain_breaks']) == 1

    def test_resync_after_rollback(self):
        """Test that the chain head follows a storage rollback"""
        kept = self.audit_trail.log_event(AuditEventType.TOKENS_TRANSFERRED, "account", "a", {})

        with pytest.raises(RuntimeError):
            with self.storage.atomic():
                self.audit_trail.log_event(AuditEventType.TOKENS_TRANSFERRED, "account", "a", {})
                raise RuntimeError("abort")

        self.audit_trail.resync()
        assert self.audit_trail.get_latest_hash() == kept.current_hash

        self.audit_trail.log_event(AuditEventType.TOKENS_TRANSFERRED, "account", "a", {})
        assert self.audit_trail.verify_integrity()['valid']

    def test_continues_chain_after_reopen(self, tmp_path):
        """Test that a new AuditTrail picks up the stored chain head"""
        db_path = tmp_path / "audit.db"
        storage = SQLiteStorage(db_path)
        trail = AuditTrail(storage)
        last = trail.log_event(AuditEventType.TOKENS_TRANSFERRED, "account", "a", {})
        storage.close()

        reopened_storage = SQLiteStorage(db_path)
        reopened = AuditTrail(reopened_storage)
        nxt = reopened.log_event(AuditEventType.TOKENS_TRANSFERRED, "account", "a", {})

        assert nxt.previous_hash == last.current_hash
        assert nxt.sequence == 2
        assert reopened.verify_integrity()['valid']
        reopened_storage.close()
