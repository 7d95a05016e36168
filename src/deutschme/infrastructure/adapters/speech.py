"""
Text-to-speech adapters.

Speech is a side channel: nothing here returns a result or raises.
"""

import logging
import shlex
import shutil
import subprocess
import sys
import threading

from deutschme.domain.constants import SPEECH_RATE
from deutschme.domain.ports import Speaker

logger = logging.getLogger(__name__)

# espeak's default speed in words per minute
BASE_WPM = 175

# macOS say voices by language subtag
SAY_VOICES = {"de": "Anna", "en": "Samantha", "ru": "Milena"}


class NullSpeaker(Speaker):
    """Used when speech is disabled or no engine is installed."""

    def speak(self, text: str, language_tag: str) -> None:
        logger.debug(f"Speech disabled, skipping: {text!r}")


class SubprocessSpeaker(Speaker):
    """
    Speaks through an external TTS program (espeak-ng, espeak or macOS say).

    Only one utterance plays at a time: a new call terminates the previous
    process before starting.

    A configured command receives only the text; choosing its voice is
    part of the command line.
    """

    def __init__(self, command: str | None = None, rate: float = SPEECH_RATE):
        self.command = command
        self.rate = rate
        self._proc: subprocess.Popen | None = None
        self._lock = threading.Lock()

    def build_argv(self, text: str, language_tag: str) -> list[str] | None:
        wpm = str(int(BASE_WPM * self.rate))
        voice = language_tag.split("-")[0].lower()

        if self.command:
            return [*shlex.split(self.command), text]

        for engine in ("espeak-ng", "espeak"):
            path = shutil.which(engine)
            if path:
                return [path, "-v", voice, "-s", wpm, text]

        if sys.platform == "darwin":
            path = shutil.which("say")
            if path:
                say_voice = SAY_VOICES.get(voice)
                if say_voice:
                    return [path, "-v", say_voice, "-r", wpm, text]
                return [path, "-r", wpm, text]

        return None

    def cancel(self) -> None:
        with self._lock:
            self._cancel_locked()

    def _cancel_locked(self) -> None:
        if self._proc is not None and self._proc.poll() is None:
            self._proc.terminate()
        self._proc = None

    def speak(self, text: str, language_tag: str) -> None:
        argv = self.build_argv(text, language_tag)
        if argv is None:
            logger.debug("No TTS engine found (tried espeak-ng, espeak, say)")
            return

        with self._lock:
            self._cancel_locked()
            try:
                self._proc = subprocess.Popen(
                    argv, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL
                )
            except OSError as e:
                logger.debug(f"TTS failed for {argv[0]}: {e}")
