"""Port interface for the audio playback primitive."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Literal

from pydantic import BaseModel, ConfigDict

from local_music_player.domain.shared.types import (
    DurationSeconds,
    NonEmptyStr,
    NonNegativeInt,
    PositionSeconds,
)


class EngineMessage(BaseModel):
    """Notification posted by an engine. ``generation`` names the load it belongs to."""

    model_config = ConfigDict(frozen=True)

    generation: NonNegativeInt


class EngineLoaded(EngineMessage):
    kind: Literal["loaded"] = "loaded"
    duration: DurationSeconds = 0.0


class EngineProgress(EngineMessage):
    kind: Literal["progress"] = "progress"
    position: PositionSeconds


class EngineEnded(EngineMessage):
    kind: Literal["ended"] = "ended"


class EngineError(EngineMessage):
    kind: Literal["error"] = "error"
    code: NonEmptyStr = "PLAYBACK_ERROR"
    message: str = ""


EngineEventSink = Callable[[EngineMessage], None]


class AudioEngine(ABC):
    """Interface for decoding and outputting one local audio file at a time.

    Commands are awaited by the session. Asynchronous notifications (progress,
    end of track, errors after playback started) are delivered through the
    sink registered with :meth:`set_event_sink`, tagged with the generation
    passed to the :meth:`load` that produced them.
    """

    @abstractmethod
    async def load(self, file_path: str, *, generation: int) -> float:
        """Open ``file_path`` and return its duration in seconds (0 when unknown).

        Raises:
            LoadError: The file could not be opened or decoded.
        """
        ...

    @abstractmethod
    async def play(self) -> None:
        """Start or resume output of the loaded media.

        Raises:
            PlaybackError: Output could not be started.
        """
        ...

    @abstractmethod
    async def pause(self) -> None:
        ...

    @abstractmethod
    async def stop(self) -> None:
        """Stop output and rewind to the start."""
        ...

    @abstractmethod
    async def seek(self, seconds: float) -> None:
        ...

    @abstractmethod
    async def set_volume(self, level: float) -> None:
        """Set output volume in [0, 1]."""
        ...

    @abstractmethod
    def set_event_sink(self, sink: EngineEventSink | None) -> None:
        """Register the callback receiving engine notifications."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release all native resources."""
        ...
