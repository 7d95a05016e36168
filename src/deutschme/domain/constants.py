"""Centralized constants for deutschme.

All magic numbers and configuration defaults live here so every layer
imports from a single source of truth.
"""

# ---------- Persistence ----------
STORAGE_KEY = "deutschme_state_v1"
DEFAULT_DISPLAY_NAME = "Студент"

# ---------- SM-2 light ----------
DEFAULT_EASE_FACTOR = 2.5
MIN_EASE_FACTOR = 1.3
MIN_QUALITY = 0
MAX_QUALITY = 4
PASSING_QUALITY = 3
FIRST_INTERVAL = 1  # days
SECOND_INTERVAL = 6  # days
DAY_MS = 24 * 60 * 60 * 1000

# ---------- XP awards ----------
XP_CARD_PASS = 8
XP_CARD_FAIL = 3
XP_LISTENING_CORRECT = 10
XP_LISTENING_WRONG = 2
XP_WORD_ORDER_CORRECT = 12
XP_WORD_ORDER_WRONG = 4
XP_QUIZ_CORRECT = 6
XP_QUIZ_WRONG = 2
XP_EXAM_BONUS = 50

# ---------- Progress ----------
WEEKLY_XP_GOAL = 150

# ---------- Quiz ----------
QUIZ_MAX_VOCAB_ITEMS = 5
QUIZ_DISTRACTORS = 2

# ---------- Speech ----------
SPEECH_LANGUAGE = "de-DE"
SPEECH_RATE = 0.95
