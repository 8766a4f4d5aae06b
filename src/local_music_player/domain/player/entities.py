"""Core domain entities for the player bounded context."""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict, Field

from local_music_player.domain.player.snapshot import SessionSnapshot
from local_music_player.domain.player.value_objects import PlaybackMode, TransportState
from local_music_player.domain.shared.constants import PlaybackConstants
from local_music_player.domain.shared.exceptions import InvalidOperationError, ValidationError
from local_music_player.domain.shared.messages import ErrorMessages
from local_music_player.domain.shared.types import (
    DurationSeconds,
    FilePathStr,
    NonNegativeInt,
    PositionSeconds,
    PositiveInt,
    QueueIndex,
    TrackIdStr,
    TrackTitleStr,
    UnitInterval,
)


class Track(BaseModel):
    """Immutable metadata record for a local audio file, owned by the catalog."""

    model_config = ConfigDict(frozen=True)

    id: TrackIdStr
    file_path: FilePathStr
    title: TrackTitleStr
    artist: str = ""
    album: str = ""
    album_artist: str | None = None
    year: PositiveInt | None = None
    genre: str | None = None
    duration_seconds: DurationSeconds = 0.0
    track_number: PositiveInt | None = None
    disc_number: PositiveInt | None = None
    format: str = ""
    bitrate: NonNegativeInt | None = None
    sample_rate: NonNegativeInt | None = None

    @property
    def duration_formatted(self) -> str:
        """Format duration as MM:SS or HH:MM:SS."""
        if not self.duration_seconds:
            return "Unknown"

        hours, remainder = divmod(int(self.duration_seconds), 3600)
        minutes, seconds = divmod(remainder, 60)

        if hours > 0:
            return f"{hours}:{minutes:02d}:{seconds:02d}"
        return f"{minutes}:{seconds:02d}"

    @property
    def display_title(self) -> str:
        """Get "Artist - Title" when the artist is known."""
        if self.artist:
            return f"{self.artist} - {self.title}"
        return self.title


class PlaybackSession(BaseModel):
    """Aggregate root holding the queue, the current-track pointer and transport state.

    Every mutation keeps ``current_index`` pointing at the same logical track, or
    at ``-1`` exactly when the queue is empty. Invalid arguments raise
    ``ValidationError``; the application layer turns those into silent no-ops.
    """

    queue: list[Track] = Field(default_factory=list)
    current_index: QueueIndex = PlaybackConstants.NO_INDEX
    mode: PlaybackMode = PlaybackMode.SEQUENTIAL
    position: PositionSeconds = 0.0
    duration: DurationSeconds = 0.0
    volume: UnitInterval = 1.0
    state: TransportState = TransportState.IDLE
    last_error: str | None = None

    # Incremented by every load; completions from older loads are stale
    load_generation: NonNegativeInt = 0

    @property
    def current_track(self) -> Track | None:
        if 0 <= self.current_index < len(self.queue):
            return self.queue[self.current_index]
        return None

    @property
    def queue_length(self) -> int:
        return len(self.queue)

    @property
    def is_playing(self) -> bool:
        return self.state.is_playing and self.current_track is not None

    @property
    def is_loading(self) -> bool:
        return self.state.is_loading

    @property
    def has_media(self) -> bool:
        return self.state.has_media and self.current_track is not None

    def index_of(self, track_id: str) -> int:
        """Return the queue position of ``track_id`` or -1."""
        for index, track in enumerate(self.queue):
            if track.id == track_id:
                return index
        return PlaybackConstants.NO_INDEX

    def _require_index(self, index: int, field: str = "index") -> None:
        if not 0 <= index < len(self.queue):
            raise ValidationError(
                ErrorMessages.INDEX_OUT_OF_RANGE.format(index=index, length=len(self.queue)),
                field=field,
            )

    # === Queue mutations ===

    def replace_queue(self, tracks: Iterable[Track], start_index: int = 0) -> Track | None:
        """Replace the queue wholesale and select ``start_index`` (clamped)."""
        self.queue = list(tracks)
        if not self.queue:
            self.current_index = PlaybackConstants.NO_INDEX
            return None

        self.current_index = max(0, min(start_index, len(self.queue) - 1))
        return self.current_track

    def append(self, track: Track) -> int:
        """Append ``track`` and return its position.

        A track appended to an empty queue becomes current.
        """
        if self.index_of(track.id) >= 0:
            raise ValidationError(
                ErrorMessages.DUPLICATE_TRACK.format(track_id=track.id), field="track"
            )

        was_empty = not self.queue
        self.queue.append(track)
        if was_empty:
            self.current_index = 0
        return len(self.queue) - 1

    def insert_next(self, track: Track) -> int:
        """Place ``track`` right after the current one and return its position.

        A track already queued elsewhere is moved rather than duplicated.
        """
        if not self.queue:
            self.queue.append(track)
            self.current_index = 0
            return 0

        existing = self.index_of(track.id)
        if existing == self.current_index:
            raise ValidationError(
                ErrorMessages.DUPLICATE_TRACK.format(track_id=track.id), field="track"
            )

        if existing >= 0:
            self.queue.pop(existing)
            if existing < self.current_index:
                self.current_index -= 1

        insert_at = self.current_index + 1
        self.queue.insert(insert_at, track)
        return insert_at

    def remove_at(self, index: int) -> Track:
        """Remove and return the track at ``index``, rebasing the current pointer."""
        self._require_index(index)

        removed = self.queue.pop(index)
        if not self.queue:
            self.current_index = PlaybackConstants.NO_INDEX
        elif index == self.current_index:
            # The following track slides into place; past the end, fall back to the last.
            if index >= len(self.queue):
                self.current_index = len(self.queue) - 1
        elif index < self.current_index:
            self.current_index -= 1
        return removed

    def move(self, from_index: int, to_index: int) -> None:
        """Move one entry, keeping ``current_index`` on the same logical track."""
        self._require_index(from_index, field="from_index")
        self._require_index(to_index, field="to_index")
        if from_index == to_index:
            raise ValidationError(
                ErrorMessages.SAME_POSITION.format(index=from_index), field="to_index"
            )

        track = self.queue.pop(from_index)
        self.queue.insert(to_index, track)

        current = self.current_index
        if from_index == current:
            self.current_index = to_index
        elif from_index < current <= to_index:
            self.current_index = current - 1
        elif to_index <= current < from_index:
            self.current_index = current + 1

    def clear_queue(self) -> int:
        """Clear all tracks and return the count removed."""
        count = len(self.queue)
        self.queue.clear()
        self.current_index = PlaybackConstants.NO_INDEX
        return count

    def select(self, index: int) -> Track:
        """Point the session at ``index`` without touching transport state."""
        self._require_index(index)
        self.current_index = index
        return self.queue[index]

    # === Transport ===

    def transition_to(self, new_state: TransportState) -> None:
        """Transition to a new transport state."""
        if not self.state.can_transition_to(new_state):
            raise InvalidOperationError(
                operation=f"transition to {new_state.value}",
                current_state=self.state.value,
                message=ErrorMessages.INVALID_TRANSITION.format(
                    current=self.state.value, target=new_state.value
                ),
            )
        self.state = new_state

    def begin_load(self) -> int:
        """Enter LOADING for the current track and return the new load generation."""
        self.transition_to(TransportState.LOADING)
        self.load_generation += 1
        self.position = 0.0
        self.duration = 0.0
        self.last_error = None
        return self.load_generation

    def is_current_generation(self, generation: int) -> bool:
        return generation == self.load_generation

    def abandon_load(self) -> None:
        """Invalidate any in-flight load so its completion is ignored."""
        self.load_generation += 1

    def mark_loaded(self, duration: float) -> None:
        self.transition_to(TransportState.STOPPED)
        self.duration = max(0.0, duration)
        self.position = self.clamp_position(self.position)

    def mark_failed(self, message: str) -> None:
        self.transition_to(TransportState.ERROR)
        self.last_error = message

    def unload(self) -> None:
        """Forget the loaded media; the current track (if any) stays selected.

        Bumps the load generation so late engine messages for the released
        media are treated as stale.
        """
        self.abandon_load()
        self.transition_to(TransportState.IDLE)
        self.position = 0.0
        self.duration = 0.0

    def clamp_position(self, seconds: float) -> float:
        """Clamp into [0, duration]; an unknown duration leaves the top unbounded."""
        seconds = max(0.0, seconds)
        if self.duration > 0:
            return min(seconds, self.duration)
        return seconds

    def seek_to(self, seconds: float) -> float:
        self.position = self.clamp_position(seconds)
        return self.position

    def set_volume(self, level: float) -> float:
        self.volume = max(PlaybackConstants.MIN_VOLUME, min(PlaybackConstants.MAX_VOLUME, level))
        return self.volume

    # === Persistence ===

    def snapshot(self) -> SessionSnapshot:
        """Capture the persistable part of the session by value."""
        current = self.current_track
        return SessionSnapshot(
            current_track_id=current.id if current else None,
            position=self.position,
            is_playing=self.is_playing,
            volume=self.volume,
            mode=self.mode,
            queue_track_ids=tuple(track.id for track in self.queue),
            queue_index=self.current_index,
        )

    def restore(
        self,
        *,
        queue: list[Track],
        current_index: int,
        mode: PlaybackMode,
        volume: float,
        position: float,
    ) -> None:
        """Rehydrate from resolved snapshot data. Never resumes as playing."""
        if self.state.is_loading:
            self.abandon_load()
        self.queue = list(queue)
        self.current_index = current_index if self.queue else PlaybackConstants.NO_INDEX
        self.mode = mode
        self.set_volume(volume)
        self.state = TransportState.IDLE
        self.duration = 0.0
        self.position = max(0.0, position) if self.queue else 0.0
        self.last_error = None
