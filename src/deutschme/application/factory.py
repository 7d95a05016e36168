"""
Session Factory
Centralizes the wiring of adapters into a SessionService.
"""

import random

from deutschme.application.config import AppConfig
from deutschme.application.session import SessionService
from deutschme.domain.ports import Speaker
from deutschme.infrastructure.adapters.clock import SystemClock
from deutschme.infrastructure.adapters.json_store import JsonFileStateStore
from deutschme.infrastructure.adapters.speech import NullSpeaker, SubprocessSpeaker
from deutschme.infrastructure.curriculum_loader import load_curriculum


def get_speaker(config: AppConfig) -> Speaker:
    if not config.speech_enabled:
        return NullSpeaker()
    return SubprocessSpeaker(command=config.speech_command, rate=config.speech_rate)


def get_session(config: AppConfig, rng: random.Random | None = None) -> SessionService:
    """
    Returns a SessionService with persisted state loaded (or defaulted).
    """
    return SessionService.open(
        JsonFileStateStore(config.state_path, storage_key=config.storage_key),
        load_curriculum(config.curriculum_path),
        SystemClock(),
        speaker=get_speaker(config),
        rng=rng,
        weekly_xp_goal=config.weekly_xp_goal,
    )
