"""Queries and updates over the CardIdentity -> ReviewRecord mapping."""

from collections.abc import Mapping

from deutschme.domain.curriculum import LevelContent
from deutschme.domain.models import CardIdentity, ReviewRecord


def card_identities(content: LevelContent) -> list[CardIdentity]:
    """All cards of a level, in curriculum order."""
    return [CardIdentity(level=content.level, front=v.front) for v in content.vocab]


def is_due(record: ReviewRecord | None, now: int) -> bool:
    return record is None or record.due_at is None or record.due_at <= now


def due_cards(
    review_store: Mapping[CardIdentity, ReviewRecord],
    content: LevelContent,
    now: int,
) -> list[CardIdentity]:
    """
    Cards of the level that have never been reviewed or whose due time has come.

    Order follows the vocabulary list; no shuffling.
    """
    return [
        identity
        for identity in card_identities(content)
        if is_due(review_store.get(identity), now)
    ]


def next_due_card(
    review_store: Mapping[CardIdentity, ReviewRecord],
    content: LevelContent,
    now: int,
) -> CardIdentity | None:
    due = due_cards(review_store, content, now)
    return due[0] if due else None


def record_for(
    review_store: Mapping[CardIdentity, ReviewRecord], identity: CardIdentity
) -> ReviewRecord:
    """Stored record, or the default record for a card never graded."""
    return review_store.get(identity) or ReviewRecord()


def upsert(
    review_store: Mapping[CardIdentity, ReviewRecord],
    identity: CardIdentity,
    record: ReviewRecord,
) -> dict[CardIdentity, ReviewRecord]:
    """Return a new mapping with ``record`` stored whole under ``identity``."""
    updated = dict(review_store)
    updated[identity] = record
    return updated
