"""
Application Interfaces (Ports)

Abstract interfaces that define contracts between the application
layer and infrastructure adapters.
"""

from local_music_player.application.interfaces.audio_engine import (
    AudioEngine,
    EngineEnded,
    EngineError,
    EngineLoaded,
    EngineMessage,
    EngineProgress,
)

__all__ = [
    "AudioEngine",
    "EngineMessage",
    "EngineLoaded",
    "EngineProgress",
    "EngineEnded",
    "EngineError",
]
