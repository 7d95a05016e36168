"""
JSON State Store: infrastructure adapter for a single JSON document on disk.

The file holds an object keyed by the storage key, so several apps (or
versions) can share one document. The value keeps the field names of the
original web app's localStorage entry.
"""

import datetime as dt
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from deutschme.domain.constants import (
    DEFAULT_DISPLAY_NAME,
    DEFAULT_EASE_FACTOR,
    MIN_EASE_FACTOR,
    STORAGE_KEY,
)
from deutschme.domain.errors import InvalidInput
from deutschme.domain.models import (
    ActivityEntry,
    CardIdentity,
    Level,
    ReviewRecord,
    SessionState,
)
from deutschme.domain.ports import PersistResult, StateStore

logger = logging.getLogger(__name__)


class StoredReview(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    ease_factor: float = Field(default=DEFAULT_EASE_FACTOR, alias="ef", ge=MIN_EASE_FACTOR)
    interval: int = Field(default=0, ge=0)
    repetitions: int = Field(default=0, alias="reps", ge=0)
    due_at: int | None = Field(default=None, alias="due")


class StoredActivity(BaseModel):
    date: dt.date
    xp: int = Field(ge=0)


class StoredState(BaseModel):
    """Wire shape of the persisted SessionState."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    current_level: Level = Field(default=Level.A1, alias="level")
    total_xp: int = Field(default=0, alias="xp", ge=0)
    review: dict[str, StoredReview] = Field(default_factory=dict)
    history: list[StoredActivity] = Field(default_factory=list)
    exam_results: dict[Level, Annotated[int, Field(ge=0, le=100)]] = Field(
        default_factory=dict, alias="examResults"
    )
    display_name: str = Field(default=DEFAULT_DISPLAY_NAME, alias="name")
    dark_mode: bool = Field(default=False, alias="dark")

    @classmethod
    def from_domain(cls, state: SessionState) -> "StoredState":
        return cls(
            current_level=state.current_level,
            total_xp=state.total_xp,
            review={
                identity.key: StoredReview(
                    ease_factor=r.ease_factor,
                    interval=r.interval,
                    repetitions=r.repetitions,
                    due_at=r.due_at,
                )
                for identity, r in state.review_store.items()
            },
            history=[StoredActivity(date=e.date, xp=e.xp) for e in state.activity_history],
            exam_results=dict(state.exam_results),
            display_name=state.display_name,
            dark_mode=state.dark_mode,
        )

    def to_domain(self) -> SessionState:
        reviews: dict[CardIdentity, ReviewRecord] = {}
        for key, r in self.review.items():
            try:
                identity = CardIdentity.from_key(key)
            except InvalidInput as e:
                logger.warning(f"Dropping review entry: {e}")
                continue
            reviews[identity] = ReviewRecord(
                ease_factor=r.ease_factor,
                interval=r.interval,
                repetitions=r.repetitions,
                due_at=r.due_at,
            )

        return SessionState(
            current_level=self.current_level,
            total_xp=self.total_xp,
            review_store=reviews,
            activity_history=tuple(ActivityEntry(date=h.date, xp=h.xp) for h in self.history),
            exam_results=dict(self.exam_results),
            display_name=self.display_name,
            dark_mode=self.dark_mode,
        )


class JsonFileStateStore(StateStore):
    """
    Stores the SessionState as JSON in a single file.

    Loading never raises: a missing file, malformed JSON or an unexpected
    shape all read as "nothing stored".
    """

    def __init__(self, path: Path, storage_key: str = STORAGE_KEY):
        self.path = path
        self.storage_key = storage_key

    def _read_document(self) -> dict[str, Any] | None:
        try:
            if not self.path.exists():
                return None
            doc = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning(f"Could not read {self.path}: {e}")
            return None
        if not isinstance(doc, dict):
            logger.warning(f"Ignoring {self.path}: top level is not an object")
            return None
        return doc

    def load(self) -> SessionState | None:
        doc = self._read_document()
        if doc is None:
            return None

        raw = doc.get(self.storage_key)
        if raw is None:
            return None

        try:
            return StoredState.model_validate(raw).to_domain()
        except ValidationError as e:
            logger.warning(f"Ignoring malformed state under '{self.storage_key}': {e}")
            return None

    def save(self, state: SessionState) -> PersistResult:
        try:
            doc = self._read_document() or {}
            doc[self.storage_key] = StoredState.from_domain(state).model_dump(
                mode="json", by_alias=True
            )
            payload = json.dumps(doc, ensure_ascii=False, indent=2)

            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(payload)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except (OSError, TypeError, ValueError) as e:
            return PersistResult(ok=False, error=str(e))

        return PersistResult(ok=True)
