"""Player Session Service - drives the audio engine from the playback session aggregate."""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Iterable
from typing import TYPE_CHECKING

from ...domain.player.entities import PlaybackSession, Track
from ...domain.player.events import (
    PlaybackFailed,
    PlaybackModeChanged,
    PositionUpdated,
    QueueChanged,
    QueueExhausted,
    SessionRestored,
    TrackChanged,
    TransportStateChanged,
    VolumeChanged,
)
from ...domain.player.services import PlaybackModeService
from ...domain.player.snapshot import SessionSnapshot
from ...domain.player.value_objects import (
    AdvanceReason,
    LoadOutcome,
    PlaybackMode,
    TransportState,
)
from ...domain.shared.constants import PlaybackConstants
from ...domain.shared.events import EventBus
from ...domain.shared.exceptions import DomainError, LoadError, ValidationError
from ...domain.shared.messages import ErrorMessages, LogTemplates
from ..interfaces.audio_engine import (
    EngineEnded,
    EngineError,
    EngineLoaded,
    EngineMessage,
    EngineProgress,
)

if TYPE_CHECKING:
    from ...domain.player.repository import TrackCatalog
    from ..interfaces.audio_engine import AudioEngine

logger = logging.getLogger(__name__)


class PlayerSession:
    """The single playback session of the player.

    Owns the ``PlaybackSession`` aggregate, issues engine commands when the
    playing target changes, and publishes observer events on ``events``.
    Engine notifications are queued through :meth:`post_engine_event` and
    handled in order by the event pump (or by :meth:`drain`).
    """

    def __init__(
        self,
        *,
        engine: AudioEngine,
        catalog: TrackCatalog,
        event_bus: EventBus | None = None,
        restart_threshold_seconds: float = PlaybackConstants.RESTART_THRESHOLD_SECONDS,
        load_timeout_seconds: float = PlaybackConstants.DEFAULT_LOAD_TIMEOUT_SECONDS,
        initial_volume: float = PlaybackConstants.MAX_VOLUME,
        initial_mode: PlaybackMode = PlaybackMode.SEQUENTIAL,
        rng: random.Random | None = None,
    ) -> None:
        self._engine = engine
        self._catalog = catalog
        self.events = event_bus or EventBus()
        self._restart_threshold = restart_threshold_seconds
        self._load_timeout = load_timeout_seconds
        self._rng = rng

        self._session = PlaybackSession(mode=initial_mode)
        self._session.set_volume(initial_volume)

        self._inbox: asyncio.Queue[EngineMessage] = asyncio.Queue()
        self._pump_task: asyncio.Task | None = None
        self._last_failure: DomainError | None = None

        self._engine.set_event_sink(self.post_engine_event)

    # === Read-only view ===

    @property
    def session(self) -> PlaybackSession:
        return self._session

    @property
    def queue(self) -> tuple[Track, ...]:
        return tuple(self._session.queue)

    @property
    def current_index(self) -> int:
        return self._session.current_index

    @property
    def current_track(self) -> Track | None:
        return self._session.current_track

    @property
    def position(self) -> float:
        return self._session.position

    @property
    def duration(self) -> float:
        return self._session.duration

    @property
    def volume(self) -> float:
        return self._session.volume

    @property
    def is_playing(self) -> bool:
        return self._session.is_playing

    @property
    def is_loading(self) -> bool:
        return self._session.is_loading

    @property
    def last_error(self) -> str | None:
        return self._session.last_error

    @property
    def state(self) -> TransportState:
        return self._session.state

    @property
    def mode(self) -> PlaybackMode:
        return self._session.mode

    @mode.setter
    def mode(self, value: PlaybackMode | str) -> None:
        # Use set_mode() to also notify subscribers.
        self._session.mode = PlaybackMode(value)

    # === Transport commands ===

    async def play(self, track: Track | None = None) -> bool:
        """Start or resume playback.

        With ``track``, jump to it in the queue (or replace the queue with it
        when absent). Failures in this path are reported but not auto-skipped.
        """
        if track is not None:
            return await self._play_track(track)

        session = self._session
        if session.current_track is None:
            return False

        if session.state is TransportState.PLAYING:
            return True

        if session.state in (TransportState.STOPPED, TransportState.PAUSED):
            return await self._start_output()

        outcome = await self._load_and_play(autoplay=True)
        if outcome is LoadOutcome.FAILED:
            await self._report_failure(will_retry=False)
        return outcome is LoadOutcome.READY

    async def pause(self) -> bool:
        if self._session.state is not TransportState.PLAYING:
            return False

        await self._engine.pause()
        previous = self._session.state
        self._session.transition_to(TransportState.PAUSED)
        logger.info(LogTemplates.PLAYBACK_PAUSED)
        await self._publish_state(previous)
        return True

    async def stop(self) -> None:
        """Stop output and rewind.

        A pending load is abandoned and the session returns to IDLE. IDLE and
        ERROR are left as they are; only a new load (``play()`` or a track
        change) leaves ERROR.
        """
        await self._stop_transport()

    async def next(self) -> bool:
        """Advance according to the playback mode, skipping unplayable tracks."""
        return await self._advance(AdvanceReason.USER_REQUEST)

    async def previous(self) -> bool:
        """Restart the current track, or step back when near its start."""
        session = self._session
        if session.current_track is None:
            return False

        if session.position > self._restart_threshold:
            await self._restart_current()
            return True

        target = PlaybackModeService.previous_index(
            session.current_index, session.queue_length, session.mode, self._rng
        )
        if target is None:
            await self._restart_current()
            return True

        session.select(target)
        await self._publish_track_changed(AdvanceReason.USER_REQUEST)
        outcome = await self._load_and_play(autoplay=True)
        if outcome is LoadOutcome.FAILED:
            await self._report_failure(will_retry=False)
        return outcome is LoadOutcome.READY

    async def seek(self, seconds: float) -> float | None:
        """Move the playhead, clamped into [0, duration].

        The position is updated before the engine confirms. Returns the
        clamped position, or None when nothing can be sought.
        """
        session = self._session
        if session.current_track is None or session.is_loading:
            return None

        position = session.seek_to(seconds)
        if session.has_media:
            await self._engine.seek(position)
        await self.events.publish(PositionUpdated(position=position, duration=session.duration))
        return position

    async def set_volume(self, level: float) -> float:
        volume = self._session.set_volume(level)
        await self._engine.set_volume(volume)
        await self.events.publish(VolumeChanged(volume=volume))
        return volume

    async def set_mode(self, mode: PlaybackMode | str) -> PlaybackMode | None:
        try:
            new_mode = PlaybackMode(mode)
        except ValueError as e:
            logger.debug(LogTemplates.QUEUE_MUTATION_IGNORED, "set_mode", e)
            return None

        self._session.mode = new_mode
        logger.info(LogTemplates.PLAYBACK_MODE_CHANGED, new_mode.value)
        await self.events.publish(PlaybackModeChanged(mode=new_mode))
        return new_mode

    async def clear_error(self) -> None:
        self._session.last_error = None

    # === Queue commands ===

    async def set_queue(self, tracks: Iterable[Track], start_index: int = 0) -> bool:
        """Replace the queue and start playing from ``start_index`` (clamped)."""
        tracks = list(tracks)
        if not tracks:
            await self.clear_queue()
            return False

        self._session.replace_queue(tracks, start_index)
        logger.info(LogTemplates.QUEUE_REPLACED, len(tracks), self._session.current_index)
        await self._publish_queue_changed()
        await self._publish_track_changed(AdvanceReason.USER_REQUEST)

        outcome = await self._load_and_play(autoplay=True)
        if outcome is LoadOutcome.FAILED:
            await self._report_failure(will_retry=False)
        return outcome is LoadOutcome.READY

    async def add_to_queue(self, track: Track) -> bool:
        """Append ``track``. Returns False (queue unchanged) for a duplicate id."""
        was_empty = self._session.queue_length == 0
        try:
            position = self._session.append(track)
        except ValidationError as e:
            logger.debug(LogTemplates.QUEUE_MUTATION_IGNORED, "add_to_queue", e.message)
            return False

        logger.info(LogTemplates.QUEUE_ENQUEUED, track.id, position)
        await self._publish_queue_changed()
        if was_empty:
            await self._publish_track_changed(AdvanceReason.QUEUE_EDIT)
        return True

    async def insert_next(self, track: Track) -> int | None:
        """Queue ``track`` right after the current one; returns its new position."""
        was_empty = self._session.queue_length == 0
        try:
            position = self._session.insert_next(track)
        except ValidationError as e:
            logger.debug(LogTemplates.QUEUE_MUTATION_IGNORED, "insert_next", e.message)
            return None

        logger.info(LogTemplates.QUEUE_INSERTED_NEXT, track.id, position)
        await self._publish_queue_changed()
        if was_empty:
            await self._publish_track_changed(AdvanceReason.QUEUE_EDIT)
        return position

    async def remove_at(self, index: int) -> Track | None:
        """Remove the entry at ``index``; out-of-range indices are ignored."""
        session = self._session
        was_current = index == session.current_index
        was_playing = session.is_playing

        try:
            removed = session.remove_at(index)
        except ValidationError as e:
            logger.debug(LogTemplates.QUEUE_MUTATION_IGNORED, "remove_at", e.message)
            return None

        logger.info(LogTemplates.QUEUE_REMOVED, removed.id, index)
        await self._publish_queue_changed()

        if session.queue_length == 0:
            await self._release_media()
            await self._publish_track_changed(AdvanceReason.QUEUE_EDIT)
        elif was_current:
            await self._publish_track_changed(AdvanceReason.QUEUE_EDIT)
            if was_playing:
                outcome = await self._load_and_play(autoplay=True)
                if outcome is LoadOutcome.FAILED:
                    await self._report_failure(will_retry=False)
            else:
                await self._release_media()
        return removed

    async def reorder(self, from_index: int, to_index: int) -> bool:
        """Move one entry without interrupting playback."""
        try:
            self._session.move(from_index, to_index)
        except ValidationError as e:
            logger.debug(LogTemplates.QUEUE_MUTATION_IGNORED, "reorder", e.message)
            return False

        logger.debug(LogTemplates.QUEUE_MOVED, from_index, to_index)
        await self._publish_queue_changed()
        return True

    async def clear_queue(self) -> int:
        await self._release_media()
        count = self._session.clear_queue()
        logger.info(LogTemplates.QUEUE_CLEARED, count)
        await self._publish_queue_changed()
        await self._publish_track_changed(AdvanceReason.QUEUE_EDIT)
        return count

    # === Snapshot ===

    def get_snapshot(self) -> SessionSnapshot:
        return self._session.snapshot()

    async def restore(self, snapshot: SessionSnapshot) -> None:
        """Rehydrate from ``snapshot``, dropping ids the catalog no longer knows.

        The current track is preloaded and positioned but never played. A
        preload failure leaves the session idle.
        """
        tracks: list[Track] = []
        dropped = 0
        for track_id in snapshot.queue_track_ids:
            track = self._catalog.lookup(track_id)
            if track is None:
                dropped += 1
                continue
            tracks.append(track)

        current_index = PlaybackConstants.NO_INDEX
        if snapshot.current_track_id is not None:
            current_index = next(
                (i for i, t in enumerate(tracks) if t.id == snapshot.current_track_id),
                PlaybackConstants.NO_INDEX,
            )
            if current_index < 0:
                current = self._catalog.lookup(snapshot.current_track_id)
                if current is not None:
                    current_index = max(0, min(snapshot.queue_index, len(tracks)))
                    tracks.insert(current_index, current)

        if tracks and current_index < 0:
            current_index = max(0, min(snapshot.queue_index, len(tracks) - 1))

        await self._release_media()
        self._session.restore(
            queue=tracks,
            current_index=current_index,
            mode=snapshot.mode,
            volume=snapshot.volume,
            position=snapshot.position,
        )
        await self._engine.set_volume(self._session.volume)

        logger.info(
            LogTemplates.SESSION_RESTORED, len(tracks), dropped, self._session.current_index
        )
        await self._publish_queue_changed()
        await self._publish_track_changed(AdvanceReason.RESTORE)
        await self.events.publish(VolumeChanged(volume=self._session.volume))
        await self.events.publish(PlaybackModeChanged(mode=self._session.mode))

        if self._session.current_track is not None:
            await self._preload(snapshot.position)

        await self.events.publish(
            SessionRestored(
                track_count=len(tracks),
                dropped_count=dropped,
                current_index=self._session.current_index,
            )
        )

    # === Engine inbox ===

    def post_engine_event(self, message: EngineMessage) -> None:
        """Queue an engine notification. Must be called on the event loop thread."""
        self._inbox.put_nowait(message)

    def start_event_pump(self) -> None:
        if self._pump_task is not None:
            return

        self._pump_task = asyncio.create_task(self._run_pump())
        logger.debug(LogTemplates.ENGINE_PUMP_STARTED)

    async def stop_event_pump(self) -> None:
        if self._pump_task is not None:
            self._pump_task.cancel()
            try:
                await self._pump_task
            except asyncio.CancelledError:
                pass
            self._pump_task = None
            logger.debug(LogTemplates.ENGINE_PUMP_STOPPED)

    @property
    def is_pumping(self) -> bool:
        return self._pump_task is not None

    async def drain(self) -> None:
        """Handle every queued engine notification before returning."""
        if self._pump_task is not None:
            await self._inbox.join()
            return

        while not self._inbox.empty():
            await self._dispatch(self._inbox.get_nowait())

    async def _run_pump(self) -> None:
        while True:
            message = await self._inbox.get()
            await self._dispatch(message)

    async def _dispatch(self, message: EngineMessage) -> None:
        try:
            await self.handle_engine_event(message)
        except Exception:
            logger.exception(LogTemplates.ENGINE_EVENT_FAILED, type(message).__name__)
        finally:
            self._inbox.task_done()

    async def handle_engine_event(self, message: EngineMessage) -> None:
        session = self._session
        if not session.is_current_generation(message.generation):
            logger.debug(
                LogTemplates.STALE_ENGINE_EVENT,
                type(message).__name__,
                message.generation,
                session.load_generation,
            )
            return

        if isinstance(message, EngineProgress):
            if session.has_media:
                session.position = session.clamp_position(message.position)
                await self.events.publish(
                    PositionUpdated(position=session.position, duration=session.duration)
                )
        elif isinstance(message, EngineLoaded):
            if session.has_media and message.duration > 0:
                session.duration = message.duration
                session.position = session.clamp_position(session.position)
                await self.events.publish(
                    PositionUpdated(position=session.position, duration=session.duration)
                )
        elif isinstance(message, EngineEnded):
            if session.state is TransportState.PLAYING:
                await self._advance(AdvanceReason.TRACK_ENDED)
        elif isinstance(message, EngineError):
            logger.warning(LogTemplates.ENGINE_ERROR, message.code, message.message)
            # A failing load is reported by the awaiting load() call itself.
            if session.is_loading:
                return
            if session.state is TransportState.ERROR:
                session.last_error = message.message
                return
            if not session.has_media:
                logger.debug(LogTemplates.ENGINE_ERROR_IGNORED, session.state.value)
                return
            previous = session.state
            session.mark_failed(message.message)
            await self._publish_state(previous)
            current = session.current_track
            await self.events.publish(
                PlaybackFailed(
                    track_id=current.id if current else None,
                    code=message.code,
                    message=message.message,
                )
            )

    # === Internals ===

    async def _play_track(self, track: Track) -> bool:
        index = self._session.index_of(track.id)
        if index >= 0:
            self._session.select(index)
        else:
            self._session.replace_queue([track])
            logger.info(LogTemplates.QUEUE_REPLACED, 1, 0)
            await self._publish_queue_changed()

        await self._publish_track_changed(AdvanceReason.USER_REQUEST)
        outcome = await self._load_and_play(autoplay=True)
        if outcome is LoadOutcome.FAILED:
            await self._report_failure(will_retry=False)
        return outcome is LoadOutcome.READY

    async def _advance(self, reason: AdvanceReason) -> bool:
        """Shared path for user skips and track ends.

        Unplayable targets are skipped unless the mode is repeat-one. The
        number of attempts is bounded by the queue length.
        """
        session = self._session
        budget = max(1, session.queue_length)
        attempts = 0

        while True:
            if session.queue_length == 0:
                return False

            target = PlaybackModeService.next_index(
                session.current_index, session.queue_length, session.mode, self._rng
            )
            if target is None:
                await self._exhaust()
                return False

            attempts += 1
            can_retry = session.mode is not PlaybackMode.REPEAT_ONE and attempts < budget

            session.select(target)
            await self._publish_track_changed(reason if attempts == 1 else AdvanceReason.AUTO_SKIP)

            outcome = await self._load_and_play(autoplay=True)
            if outcome is not LoadOutcome.FAILED:
                return outcome is LoadOutcome.READY

            await self._report_failure(will_retry=can_retry)
            if not can_retry:
                if session.mode is not PlaybackMode.REPEAT_ONE:
                    logger.warning(LogTemplates.AUTO_SKIP_EXHAUSTED, attempts)
                return False

            logger.warning(LogTemplates.AUTO_SKIP, attempts, budget)

    async def _load_and_play(
        self, *, autoplay: bool, start_at: float = 0.0
    ) -> LoadOutcome:
        """Load the current track and optionally start output.

        A result belonging to a load that has since been superseded is
        discarded and reported as ``SUPERSEDED``.
        """
        session = self._session
        track = session.current_track
        if track is None:
            return LoadOutcome.FAILED

        previous = session.state
        generation = session.begin_load()
        self._last_failure = None
        logger.info(LogTemplates.TRACK_LOADING, track.file_path, generation)
        await self._publish_state(previous)

        error: DomainError | None = None
        duration = 0.0
        try:
            duration = await asyncio.wait_for(
                self._engine.load(track.file_path, generation=generation),
                timeout=self._load_timeout,
            )
        except TimeoutError:
            error = LoadError(
                ErrorMessages.LOAD_TIMED_OUT.format(
                    timeout=self._load_timeout, path=track.file_path
                ),
                file_path=track.file_path,
            )
        except DomainError as e:
            error = e

        if not session.is_current_generation(generation):
            logger.debug(LogTemplates.STALE_LOAD_IGNORED, generation, session.load_generation)
            return LoadOutcome.SUPERSEDED

        if error is not None:
            logger.warning(LogTemplates.TRACK_LOAD_FAILED, track.file_path, error.message)
            await self._fail(error)
            return LoadOutcome.FAILED

        session.mark_loaded(duration or track.duration_seconds)
        logger.debug(LogTemplates.TRACK_LOADED, track.file_path, session.duration)
        await self._publish_state(TransportState.LOADING)

        if start_at > 0:
            position = session.seek_to(start_at)
            await self._engine.seek(position)
            await self.events.publish(
                PositionUpdated(position=position, duration=session.duration)
            )

        if not autoplay:
            return LoadOutcome.READY

        if not await self._start_output(generation=generation):
            if not session.is_current_generation(generation):
                return LoadOutcome.SUPERSEDED
            return LoadOutcome.FAILED
        return LoadOutcome.READY

    async def _start_output(self, *, generation: int | None = None) -> bool:
        """Move a loaded track to PLAYING. Failures leave the session in ERROR."""
        session = self._session
        track = session.current_track
        try:
            await self._engine.play()
        except DomainError as e:
            if generation is not None and not session.is_current_generation(generation):
                return False
            logger.warning(
                LogTemplates.TRACK_PLAY_FAILED, track.file_path if track else None, e.message
            )
            await self._fail(e)
            if generation is None:
                await self._report_failure(will_retry=False)
            return False

        if generation is not None and not session.is_current_generation(generation):
            return False

        previous = session.state
        session.transition_to(TransportState.PLAYING)
        logger.info(LogTemplates.TRACK_STARTED, track.display_title if track else None)
        await self._publish_state(previous)
        return True

    async def _fail(self, error: DomainError) -> None:
        previous = self._session.state
        self._session.mark_failed(error.message)
        self._last_failure = error
        await self._publish_state(previous)

    async def _report_failure(self, *, will_retry: bool) -> None:
        error = self._last_failure
        if error is None:
            return

        current = self._session.current_track
        await self.events.publish(
            PlaybackFailed(
                track_id=current.id if current else None,
                code=error.code,
                message=error.message,
                will_retry=will_retry,
            )
        )

    async def _preload(self, position: float) -> None:
        session = self._session
        track = session.current_track
        outcome = await self._load_and_play(autoplay=False, start_at=position)
        if outcome is not LoadOutcome.FAILED:
            return

        logger.warning(
            LogTemplates.RESTORE_PRELOAD_FAILED,
            track.file_path if track else None,
            session.last_error,
        )
        previous = session.state
        session.unload()
        session.last_error = None
        session.position = max(0.0, position)
        await self._publish_state(previous)

    async def _restart_current(self) -> None:
        session = self._session
        if session.has_media:
            await self._engine.seek(0.0)
        session.position = 0.0
        await self.events.publish(PositionUpdated(position=0.0, duration=session.duration))

    async def _stop_transport(self) -> None:
        session = self._session
        previous = session.state

        if previous.is_loading:
            await self._engine.stop()
            session.unload()
        elif previous.has_media:
            await self._engine.stop()
            session.transition_to(TransportState.STOPPED)

        session.position = 0.0
        if previous is not session.state:
            logger.info(LogTemplates.PLAYBACK_STOPPED)
        await self._publish_state(previous)
        await self.events.publish(PositionUpdated(position=0.0, duration=session.duration))

    async def _release_media(self) -> None:
        """Stop the engine and return to IDLE, keeping the queue as is."""
        session = self._session
        previous = session.state
        if previous.has_media or previous.is_loading:
            await self._engine.stop()
        session.unload()
        await self._publish_state(previous)

    async def _exhaust(self) -> None:
        last = self._session.current_track
        logger.info(LogTemplates.QUEUE_EXHAUSTED)
        await self._stop_transport()
        await self.events.publish(QueueExhausted(last_track_id=last.id if last else None))

    async def _publish_state(self, previous: TransportState) -> None:
        current = self._session.state
        if previous is not current:
            await self.events.publish(TransportStateChanged(previous=previous, current=current))

    async def _publish_queue_changed(self) -> None:
        await self.events.publish(
            QueueChanged(
                length=self._session.queue_length,
                current_index=self._session.current_index,
            )
        )

    async def _publish_track_changed(self, reason: AdvanceReason) -> None:
        await self.events.publish(
            TrackChanged.from_track(
                self._session.current_track, self._session.current_index, reason
            )
        )
