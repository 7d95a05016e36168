"""
Session service: application layer orchestrator.

Owns the learner's current SessionState. Each learner action is one pure
update of the aggregate followed by a write-through save of the whole
document. The in-memory state stays authoritative when a save fails.
"""

import logging
import random
import threading
from collections.abc import Callable, Mapping
from dataclasses import replace
from typing import Any

from deutschme.application import ledger, review_store
from deutschme.application.grader import grade
from deutschme.application.quiz import make_quiz
from deutschme.application.scheduler import schedule, validate_quality
from deutschme.domain.constants import (
    PASSING_QUALITY,
    SPEECH_LANGUAGE,
    WEEKLY_XP_GOAL,
    XP_CARD_FAIL,
    XP_CARD_PASS,
    XP_EXAM_BONUS,
    XP_LISTENING_CORRECT,
    XP_LISTENING_WRONG,
    XP_QUIZ_CORRECT,
    XP_QUIZ_WRONG,
    XP_WORD_ORDER_CORRECT,
    XP_WORD_ORDER_WRONG,
)
from deutschme.domain.curriculum import (
    Curriculum,
    ExamItem,
    LevelContent,
    ListeningTask,
    VocabEntry,
    WordOrder,
)
from deutschme.domain.errors import InvalidInput
from deutschme.domain.models import (
    CardIdentity,
    ChartPoint,
    Level,
    ProgressSummary,
    ReviewRecord,
    SessionState,
)
from deutschme.domain.ports import Clock, PersistResult, Speaker, StateStore

logger = logging.getLogger(__name__)


class SessionService:
    """
    Application service for one learner session.

    Follows Dependency Inversion: storage, time and speech come in as ports.
    """

    def __init__(
        self,
        store: StateStore,
        curriculum: Curriculum,
        clock: Clock,
        speaker: Speaker | None = None,
        rng: random.Random | None = None,
        weekly_xp_goal: int = WEEKLY_XP_GOAL,
    ):
        """
        Args:
            store: Persistence port for the aggregate.
            curriculum: Read-only content for every level.
            clock: Source of "now" and "today".
            speaker: Optional TTS port; speech is skipped without one.
            rng: Random source for quiz generation.
            weekly_xp_goal: XP block size for the goal progress bar.
        """
        self._store = store
        self._curriculum = curriculum
        self._clock = clock
        self._speaker = speaker
        self._rng = rng or random.Random()
        self._weekly_xp_goal = weekly_xp_goal
        self._lock = threading.Lock()
        self._state = SessionState()
        self.last_persist: PersistResult | None = None

    @classmethod
    def open(
        cls, store: StateStore, curriculum: Curriculum, clock: Clock, **kwargs: Any
    ) -> "SessionService":
        """Create a service and load (or default) the persisted state."""
        service = cls(store, curriculum, clock, **kwargs)
        service.load()
        return service

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def load(self) -> SessionState:
        loaded = self._store.load()
        if loaded is None:
            logger.info("No saved progress found, starting with defaults")
            loaded = SessionState()
        with self._lock:
            self._state = loaded
        return loaded

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def content(self) -> LevelContent:
        return self._curriculum.for_level(self._state.current_level)

    def _commit(self, update: Callable[[SessionState], SessionState]) -> SessionState:
        with self._lock:
            new_state = update(self._state)
            self._state = new_state
            result = self._store.save(new_state)
            self.last_persist = result
        if not result.ok:
            logger.warning(f"Could not save progress, keeping it in memory: {result.error}")
        return new_state

    def _award(self, state: SessionState, amount: int) -> SessionState:
        return ledger.add_xp(state, amount, self._clock.today())

    # ------------------------------------------------------------------
    # Flashcards
    # ------------------------------------------------------------------

    def due_cards(self) -> list[CardIdentity]:
        return review_store.due_cards(self._state.review_store, self.content, self._clock.now_ms())

    def next_due_card(self) -> CardIdentity | None:
        return review_store.next_due_card(
            self._state.review_store, self.content, self._clock.now_ms()
        )

    def vocab_entry(self, identity: CardIdentity) -> VocabEntry | None:
        content = self._curriculum.for_level(identity.level)
        return next((v for v in content.vocab if v.front == identity.front), None)

    def grade_card(self, identity: CardIdentity, quality: int) -> ReviewRecord:
        """
        Record a flashcard review and award XP.

        Raises:
            InvalidInput: If ``quality`` is outside 0-4.
        """
        validate_quality(quality)
        now = self._clock.now_ms()

        def update(state: SessionState) -> SessionState:
            current = review_store.record_for(state.review_store, identity)
            updated = schedule(current, quality, now=now)
            state = replace(
                state, review_store=review_store.upsert(state.review_store, identity, updated)
            )
            return self._award(state, XP_CARD_PASS if quality >= PASSING_QUALITY else XP_CARD_FAIL)

        new_state = self._commit(update)
        logger.debug(f"Graded {identity.key} q={quality}")
        return new_state.review_store[identity]

    # ------------------------------------------------------------------
    # Listening and word order practice
    # ------------------------------------------------------------------

    def listening_task(self, index: int) -> ListeningTask:
        tasks = self.content.listening
        if not 0 <= index < len(tasks):
            raise InvalidInput(f"No listening task #{index} for level {self.content.level.value}")
        return tasks[index]

    def answer_listening(self, index: int, choice: int) -> bool:
        task = self.listening_task(index)
        ok = choice == task.correct_index
        self._commit(
            lambda s: self._award(s, XP_LISTENING_CORRECT if ok else XP_LISTENING_WRONG)
        )
        return ok

    def word_order_task(self) -> WordOrder | None:
        return self.content.first_word_order()

    def check_word_order(self, answer: str | list[str]) -> bool:
        """Practice the level's word-order item; a level without one expects an empty answer."""
        task = self.word_order_task() or WordOrder(prompt="", parts=(), expected="")
        ok = task.is_correct(answer)
        self._commit(
            lambda s: self._award(s, XP_WORD_ORDER_CORRECT if ok else XP_WORD_ORDER_WRONG)
        )
        return ok

    # ------------------------------------------------------------------
    # Quiz and exam
    # ------------------------------------------------------------------

    def make_quiz(self) -> list[ExamItem]:
        return make_quiz(self.content, rng=self._rng)

    def answer_quiz_item(self, item: ExamItem, answer: Any) -> bool:
        ok = item.is_correct(answer)
        self._commit(lambda s: self._award(s, XP_QUIZ_CORRECT if ok else XP_QUIZ_WRONG))
        return ok

    def exam_pool(self) -> tuple[ExamItem, ...]:
        return self.content.exam

    def submit_exam(self, answers: Mapping[int, Any]) -> int:
        """
        Grade the current level's exam, record the result and award the bonus.

        The bonus is fixed and does not depend on the score.
        """
        level = self._state.current_level
        percent = grade(self.exam_pool(), answers)

        def update(state: SessionState) -> SessionState:
            results = {**state.exam_results, level: percent}
            return self._award(replace(state, exam_results=results), XP_EXAM_BONUS)

        self._commit(update)
        logger.info(f"Exam {level.value}: {percent}%")
        return percent

    # ------------------------------------------------------------------
    # Preferences
    # ------------------------------------------------------------------

    def set_level(self, level: Level | str) -> SessionState:
        parsed = Level.parse(level)
        return self._commit(lambda s: replace(s, current_level=parsed))

    def set_display_name(self, name: str) -> SessionState:
        return self._commit(lambda s: replace(s, display_name=name))

    def set_dark_mode(self, enabled: bool) -> SessionState:
        return self._commit(lambda s: replace(s, dark_mode=enabled))

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def summary(self) -> ProgressSummary:
        state = self._state
        return ProgressSummary(
            level=state.current_level,
            display_name=state.display_name,
            total_xp=state.total_xp,
            streak=ledger.current_streak(state.activity_history, self._clock.today()),
            due_count=len(self.due_cards()),
            exam_percent=state.exam_results.get(state.current_level),
            weekly_goal_percent=ledger.weekly_goal_progress(
                state.total_xp, self._weekly_xp_goal
            ),
        )

    def chart(self) -> list[ChartPoint]:
        return ledger.chart_series(self._state.activity_history, self._clock.today())

    def speak(self, text: str, language_tag: str = SPEECH_LANGUAGE) -> None:
        if self._speaker is not None:
            self._speaker.speak(text, language_tag)
