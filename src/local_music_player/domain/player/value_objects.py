"""Immutable value objects for the player bounded context."""

from __future__ import annotations

from enum import Enum, StrEnum


class PlaybackMode(StrEnum):
    """Policy governing next/previous track selection."""

    SEQUENTIAL = "sequential"
    SHUFFLE = "shuffle"
    REPEAT_ONE = "repeat-one"
    REPEAT_ALL = "repeat-all"


class TransportState(Enum):
    """Transport state with enforced transitions.

    State transitions:
    - IDLE -> LOADING (load a track)
    - LOADING -> STOPPED (engine loaded it) | ERROR (engine failed) | LOADING (superseded)
    - STOPPED <-> PLAYING <-> PAUSED
    - any loaded state -> LOADING (a new track is requested)
    - ERROR -> LOADING (only a new load leaves ERROR)
    - Any -> IDLE (queue cleared or current track replaced without loading)
    """

    IDLE = "idle"
    LOADING = "loading"
    STOPPED = "stopped"
    PLAYING = "playing"
    PAUSED = "paused"
    ERROR = "error"

    def can_transition_to(self, target: TransportState) -> bool:
        """Check if transition to target state is valid."""
        valid_transitions = {
            TransportState.IDLE: {TransportState.LOADING, TransportState.IDLE},
            TransportState.LOADING: {
                TransportState.LOADING,
                TransportState.STOPPED,
                TransportState.ERROR,
                TransportState.IDLE,
            },
            TransportState.STOPPED: {
                TransportState.PLAYING,
                TransportState.STOPPED,
                TransportState.LOADING,
                TransportState.ERROR,
                TransportState.IDLE,
            },
            TransportState.PLAYING: {
                TransportState.PAUSED,
                TransportState.STOPPED,
                TransportState.LOADING,
                TransportState.ERROR,
                TransportState.IDLE,
            },
            TransportState.PAUSED: {
                TransportState.PLAYING,
                TransportState.STOPPED,
                TransportState.LOADING,
                TransportState.ERROR,
                TransportState.IDLE,
            },
            TransportState.ERROR: {TransportState.LOADING, TransportState.IDLE},
        }
        return target in valid_transitions.get(self, set())

    @property
    def has_media(self) -> bool:
        """True when the engine holds a successfully loaded track."""
        return self in {TransportState.STOPPED, TransportState.PLAYING, TransportState.PAUSED}

    @property
    def is_playing(self) -> bool:
        return self == TransportState.PLAYING

    @property
    def is_loading(self) -> bool:
        return self == TransportState.LOADING


class LoadOutcome(Enum):
    """Result of asking the engine to load (and optionally play) a track."""

    READY = "ready"
    FAILED = "failed"
    SUPERSEDED = "superseded"


class AdvanceReason(StrEnum):
    """Why the session moved to another track."""

    USER_REQUEST = "user_request"
    TRACK_ENDED = "track_ended"
    AUTO_SKIP = "auto_skip"
    QUEUE_EDIT = "queue_edit"
    RESTORE = "restore"
