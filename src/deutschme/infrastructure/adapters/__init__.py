# Infrastructure Adapters Package
from .clock import SystemClock
from .json_store import JsonFileStateStore
from .speech import NullSpeaker, SubprocessSpeaker

__all__ = ["SystemClock", "JsonFileStateStore", "NullSpeaker", "SubprocessSpeaker"]
