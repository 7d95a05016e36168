# Domain Package
from .curriculum import (
    Curriculum,
    ExamItem,
    FillBlank,
    GrammarRule,
    LevelContent,
    ListeningTask,
    MultipleChoice,
    VocabEntry,
    WordOrder,
)
from .errors import CurriculumError, InvalidInput
from .models import (
    ActivityEntry,
    CardIdentity,
    ChartPoint,
    Level,
    ProgressSummary,
    ReviewRecord,
    SessionState,
)
from .ports import Clock, PersistResult, Speaker, StateStore

__all__ = [
    "ActivityEntry",
    "CardIdentity",
    "ChartPoint",
    "Clock",
    "Curriculum",
    "CurriculumError",
    "ExamItem",
    "FillBlank",
    "GrammarRule",
    "InvalidInput",
    "Level",
    "LevelContent",
    "ListeningTask",
    "MultipleChoice",
    "PersistResult",
    "ProgressSummary",
    "ReviewRecord",
    "SessionState",
    "Speaker",
    "StateStore",
    "VocabEntry",
    "WordOrder",
]
