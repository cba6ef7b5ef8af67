"""Tests for store.py - Key-value storage and record history."""

import json
import logging
import pytest

from retrocalc.config import CalcConfig
from retrocalc.evaluator import calculate
from retrocalc.models import CalculationRecord
from retrocalc.store import LocalStorage, RecordStore, get_record_store


def make_record(expression: str, at: float) -> CalculationRecord:
    result, steps = calculate(expression)
    return CalculationRecord.create(expression, steps, result, clock=lambda: at)


@pytest.fixture
def storage(tmp_path):
    return LocalStorage(tmp_path / ".retrocalc" / "storage.json")


@pytest.fixture
def store(storage):
    return RecordStore(storage)


class TestLocalStorage:
    """Tests for LocalStorage."""

    def test_get_missing(self, storage):
        assert storage.get_item("nope") is None

    def test_set_and_get(self, storage):
        storage.set_item("a", "1")
        assert storage.get_item("a") == "1"
        assert storage.path.exists()

    def test_set_preserves_other_keys(self, storage):
        storage.set_item("a", "1")
        storage.set_item("b", "2")
        assert sorted(storage.keys()) == ["a", "b"]

    def test_remove(self, storage):
        storage.set_item("a", "1")
        storage.remove_item("a")
        assert storage.get_item("a") is None

    def test_remove_missing_is_noop(self, storage):
        storage.remove_item("a")
        assert not storage.path.exists()

    def test_unreadable_file_reads_empty(self, storage, caplog):
        storage.path.parent.mkdir(parents=True)
        storage.path.write_text("{not json")
        with caplog.at_level(logging.WARNING):
            assert storage.get_item("a") is None
        assert "unreadable" in caplog.text

    def test_non_object_file_reads_empty(self, storage):
        storage.path.parent.mkdir(parents=True)
        storage.path.write_text("[1, 2]")
        assert storage.keys() == []

    def test_no_temp_files_left(self, storage):
        storage.set_item("a", "1")
        assert [p.name for p in storage.path.parent.iterdir()] == ["storage.json"]


class TestRecordStoreLoad:
    """Tests for RecordStore reads."""

    def test_load_recent_empty(self, store):
        """Test an empty store loads nothing."""
        assert store.load_recent() == []

    def test_load_recent_most_recent_first(self, store):
        """Test 11 appends load back as the newest 10, newest first."""
        for i in range(11):
            store.append(make_record(f"{i}+0", at=1000 + i))

        recent = store.load_recent(10)
        assert len(recent) == 10
        assert [r.expression for r in recent] == [f"{i}+0" for i in range(10, 0, -1)]

    def test_load_recent_fewer_than_n(self, store):
        store.append(make_record("1+1", at=1))
        store.append(make_record("2+2", at=2))
        assert [r.expression for r in store.load_recent(10)] == ["2+2", "1+1"]

    def test_load_recent_zero(self, store):
        store.append(make_record("1+1", at=1))
        assert store.load_recent(0) == []

    def test_corrupt_value_reads_empty(self, store, storage, caplog):
        """Test a corrupt stored value fails soft."""
        storage.set_item("calculationHistory", "{broken")
        with caplog.at_level(logging.WARNING):
            assert store.load_recent() == []
        assert "Could not load history" in caplog.text

    def test_non_array_value_reads_empty(self, store, storage):
        storage.set_item("calculationHistory", json.dumps({"id": 1}))
        assert store.load_all() == []

    def test_malformed_entry_skipped(self, store, storage):
        good = make_record("1+1", at=1).to_dict()
        storage.set_item("calculationHistory", json.dumps([{"expression": "x"}, good]))
        assert [r.expression for r in store.load_all()] == ["1+1"]

    def test_out_of_range_timestamp_skipped(self, store, storage):
        """Test an unrepresentable timestamp does not break loading."""
        bad = make_record("1+1", at=1).to_dict()
        bad["timestamp"] = 1e30
        storage.set_item("calculationHistory", json.dumps([bad]))
        assert store.load_recent() == []

    def test_infinite_id_skipped(self, store, storage):
        """Test an Infinity id is skipped while good entries still load."""
        good = json.dumps(make_record("2+2", at=2).to_dict())
        raw = '[{"id": Infinity, "expression": "1+1", "steps": [], "result": 2}, ' + good + "]"
        storage.set_item("calculationHistory", raw)
        assert [r.expression for r in store.load_recent()] == ["2+2"]

    def test_round_trip(self, store):
        """Test an appended record loads back identical."""
        record = make_record("3+5*2", at=1700000000.5)
        store.append(record)
        loaded = store.load_recent(1)[0]
        assert loaded.expression == record.expression
        assert loaded.result == record.result
        assert loaded.steps == record.steps
        assert loaded.timestamp == record.timestamp
        assert loaded == record


class TestRecordStoreAppend:
    """Tests for RecordStore writes."""

    def test_append_keeps_previous_records(self, store, storage):
        """Test appending never changes earlier entries."""
        store.append(make_record("1+1", at=1))
        before = json.loads(storage.get_item("calculationHistory"))
        store.append(make_record("2+2", at=2))
        after = json.loads(storage.get_item("calculationHistory"))
        assert after[:1] == before
        assert len(after) == 2

    def test_rewrite_is_byte_stable(self, store, storage):
        """Test reading and rewriting leaves stored bytes unchanged."""
        store.append(make_record("1+1", at=1))
        store.append(make_record("7/2", at=2))
        raw = storage.get_item("calculationHistory")
        store.load_recent()
        storage.set_item("calculationHistory", json.dumps(json.loads(raw)))
        assert storage.get_item("calculationHistory") == raw

    def test_write_is_unbounded_by_default(self, store):
        for i in range(15):
            store.append(make_record(f"{i}+1", at=i))
        assert len(store.load_all()) == 15

    def test_max_stored_caps_on_write(self, storage):
        store = RecordStore(storage, max_stored=3)
        for i in range(5):
            store.append(make_record(f"{i}+1", at=i))
        assert [r.expression for r in store.load_all()] == ["2+1", "3+1", "4+1"]

    def test_append_over_corrupt_value(self, store, storage, caplog):
        """Test a corrupt value is moved aside and history restarts."""
        storage.set_item("calculationHistory", "{broken")
        with caplog.at_level(logging.WARNING):
            store.append(make_record("1+1", at=1))
        assert storage.get_item("calculationHistory.corrupt") == "{broken"
        assert [r.expression for r in store.load_all()] == ["1+1"]
        assert "starting fresh" in caplog.text

    def test_write_failure_is_logged(self, tmp_path, caplog):
        """Test an unwritable storage path does not raise."""
        store = RecordStore(LocalStorage(tmp_path))
        with caplog.at_level(logging.ERROR):
            assert store.append(make_record("1+1", at=1)) is False
        assert "Could not save record" in caplog.text

    def test_append_returns_true(self, store):
        assert store.append(make_record("1+1", at=1)) is True

    def test_custom_key(self, storage):
        store = RecordStore(storage, key="other")
        store.append(make_record("1+1", at=1))
        assert storage.get_item("other") is not None
        assert storage.get_item("calculationHistory") is None

    def test_clear(self, store):
        store.append(make_record("1+1", at=1))
        store.clear()
        assert store.load_recent() == []


class TestGetRecordStore:
    """Tests for the factory."""

    def test_uses_config(self, tmp_path):
        config = CalcConfig(project_path=str(tmp_path), storage_key="k", max_stored=5)
        store = get_record_store(config)
        assert store.key == "k"
        assert store.max_stored == 5
        assert store.storage.path == tmp_path.resolve() / ".retrocalc" / "storage.json"
