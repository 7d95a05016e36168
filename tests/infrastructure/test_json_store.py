import json
from datetime import date
from pathlib import Path
from unittest.mock import patch

import pytest

from deutschme.domain.models import (
    ActivityEntry,
    CardIdentity,
    Level,
    ReviewRecord,
    SessionState,
)
from deutschme.infrastructure.adapters.json_store import JsonFileStateStore


@pytest.fixture
def state_file(tmp_path: Path) -> Path:
    return tmp_path / "state" / "state.json"


@pytest.fixture
def rich_state() -> SessionState:
    return SessionState(
        current_level=Level.A2,
        total_xp=71,
        review_store={
            CardIdentity(Level.A1, "Danke"): ReviewRecord(2.36, 15, 3, 1_700_000_000_000),
            CardIdentity(Level.A2, "nächste Woche"): ReviewRecord(2.5, 1, 1, 1_700_086_400_000),
        },
        activity_history=(
            ActivityEntry(date(2026, 10, 17), 21),
            ActivityEntry(date(2026, 10, 18), 50),
        ),
        exam_results={Level.A1: 67},
        display_name="Alex",
        dark_mode=True,
    )


def test_missing_file_loads_nothing(state_file):
    assert JsonFileStateStore(state_file).load() is None


def test_round_trip(state_file, rich_state):
    store = JsonFileStateStore(state_file)

    result = store.save(rich_state)

    assert result.ok is True
    assert result.error is None
    assert store.load() == rich_state


def test_document_uses_storage_key_and_legacy_field_names(state_file, rich_state):
    JsonFileStateStore(state_file).save(rich_state)

    doc = json.loads(state_file.read_text(encoding="utf-8"))
    stored = doc["deutschme_state_v1"]

    assert stored["level"] == "A2"
    assert stored["xp"] == 71
    assert stored["review"]["A1|Danke"] == {
        "ef": 2.36,
        "interval": 15,
        "reps": 3,
        "due": 1_700_000_000_000,
    }
    assert stored["history"][0] == {"date": "2026-10-17", "xp": 21}
    assert stored["examResults"] == {"A1": 67}
    assert stored["name"] == "Alex"
    assert stored["dark"] is True


def test_reads_document_written_by_web_app(state_file):
    state_file.parent.mkdir(parents=True)
    state_file.write_text(
        json.dumps(
            {
                "deutschme_state_v1": {
                    "level": "B1",
                    "streak": 0,
                    "xp": 11,
                    "review": {"B1|obwohl": {"ef": 2.5, "interval": 1, "reps": 1, "due": 5}},
                    "history": [{"date": "2026-10-18", "xp": 11}],
                    "name": "Студент",
                    "examResults": {},
                    "dark": False,
                }
            }
        ),
        encoding="utf-8",
    )

    state = JsonFileStateStore(state_file).load()

    assert state.current_level == Level.B1
    assert state.review_store[CardIdentity(Level.B1, "obwohl")] == ReviewRecord(2.5, 1, 1, 5)
    assert state.activity_history == (ActivityEntry(date(2026, 10, 18), 11),)


@pytest.mark.parametrize(
    "content",
    [
        "{not json",
        "[]",
        '{"deutschme_state_v1": "nope"}',
        '{"deutschme_state_v1": {"xp": -5}}',
        '{"deutschme_state_v1": {"level": "C2"}}',
        '{"deutschme_state_v1": {"review": {"A1|Danke": {"ef": 0.9}}}}',
    ],
)
def test_corrupt_document_loads_nothing(state_file, content):
    state_file.parent.mkdir(parents=True)
    state_file.write_text(content, encoding="utf-8")
    assert JsonFileStateStore(state_file).load() is None


def test_other_key_loads_nothing(state_file, rich_state):
    JsonFileStateStore(state_file, storage_key="other").save(rich_state)
    assert JsonFileStateStore(state_file).load() is None


def test_save_keeps_other_keys(state_file, rich_state):
    JsonFileStateStore(state_file, storage_key="other").save(SessionState())
    JsonFileStateStore(state_file).save(rich_state)

    doc = json.loads(state_file.read_text(encoding="utf-8"))
    assert set(doc) == {"other", "deutschme_state_v1"}


def test_malformed_card_key_dropped(state_file):
    state_file.parent.mkdir(parents=True)
    state_file.write_text(
        json.dumps({"deutschme_state_v1": {"review": {"no-separator": {}, "A1|Bitte": {}}}}),
        encoding="utf-8",
    )

    state = JsonFileStateStore(state_file).load()

    assert list(state.review_store) == [CardIdentity(Level.A1, "Bitte")]


def test_save_failure_is_reported_not_raised(state_file, rich_state):
    with patch("os.replace", side_effect=OSError("read-only file system")):
        result = JsonFileStateStore(state_file).save(rich_state)

    assert result.ok is False
    assert "read-only" in result.error
    assert not state_file.exists()
    assert list(state_file.parent.iterdir()) == []


def test_unreachable_directory_loads_nothing(state_file):
    with patch.object(Path, "exists", side_effect=PermissionError("permission denied")):
        assert JsonFileStateStore(state_file).load() is None
