from deutschme.application.review_store import (
    card_identities,
    due_cards,
    next_due_card,
    record_for,
    upsert,
)
from deutschme.domain.models import CardIdentity, Level, ReviewRecord

NOW = 1_700_000_000_000


def test_all_cards_due_without_records(a1_content):
    due = due_cards({}, a1_content, NOW)
    assert [c.front for c in due] == ["Guten Morgen", "Danke", "Bitte", "Wasser"]
    assert all(c.level == Level.A1 for c in due)


def test_future_cards_excluded_and_order_kept(a1_content):
    store = {
        CardIdentity(Level.A1, "Guten Morgen"): ReviewRecord(interval=1, repetitions=1, due_at=NOW + 1),
        CardIdentity(Level.A1, "Bitte"): ReviewRecord(interval=1, repetitions=1, due_at=NOW),
        CardIdentity(Level.A1, "Wasser"): ReviewRecord(interval=1, repetitions=1, due_at=NOW - 1),
    }

    due = due_cards(store, a1_content, NOW)

    assert [c.front for c in due] == ["Danke", "Bitte", "Wasser"]


def test_record_without_due_time_is_due(a1_content):
    store = {CardIdentity(Level.A1, "Guten Morgen"): ReviewRecord()}
    assert next_due_card(store, a1_content, NOW) == CardIdentity(Level.A1, "Guten Morgen")


def test_records_of_other_levels_ignored(a1_content):
    store = {CardIdentity(Level.A2, "Danke"): ReviewRecord(due_at=NOW + 10)}
    assert CardIdentity(Level.A1, "Danke") in due_cards(store, a1_content, NOW)


def test_next_due_card_none_when_all_scheduled(a1_content):
    store = {c: ReviewRecord(due_at=NOW + 1) for c in card_identities(a1_content)}
    assert next_due_card(store, a1_content, NOW) is None


def test_upsert_overwrites_whole_record():
    key = CardIdentity(Level.A1, "Danke")
    original = {key: ReviewRecord(ease_factor=2.0, interval=6, repetitions=2, due_at=5)}

    updated = upsert(original, key, ReviewRecord(interval=1))

    assert updated[key] == ReviewRecord(interval=1)
    assert original[key].interval == 6


def test_record_for_defaults():
    assert record_for({}, CardIdentity(Level.B1, "obwohl")) == ReviewRecord(
        ease_factor=2.5, interval=0, repetitions=0, due_at=None
    )
