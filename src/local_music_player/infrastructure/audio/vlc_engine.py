"""Audio engine backed by libVLC through python-vlc."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from local_music_player.application.interfaces.audio_engine import (
    AudioEngine,
    EngineEnded,
    EngineError,
    EngineEventSink,
    EngineLoaded,
    EngineMessage,
    EngineProgress,
)
from local_music_player.domain.shared.constants import PlaybackConstants
from local_music_player.domain.shared.exceptions import LoadError, PlaybackError
from local_music_player.domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from ...config.settings import AudioSettings

logger = logging.getLogger(__name__)


class VlcAudioEngine(AudioEngine):
    """Plays one local file at a time through a libVLC media player.

    libVLC fires its events on its own threads; they are marshalled onto the
    event loop with ``call_soon_threadsafe`` before reaching the sink.
    """

    def __init__(self, settings: AudioSettings | None = None) -> None:
        # Imported here so the package stays importable without libVLC installed.
        import vlc

        self._vlc = vlc
        self._vlc_args: tuple[str, ...] = tuple(settings.vlc_args) if settings else ()
        self._progress_interval = (
            settings.progress_interval_seconds
            if settings
            else PlaybackConstants.DEFAULT_PROGRESS_INTERVAL_SECONDS
        )

        self._instance = vlc.Instance(*self._vlc_args)
        self._player = self._instance.media_player_new()

        self._sink: EngineEventSink | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._generation = 0
        self._duration = 0.0
        self._progress_task: asyncio.Task | None = None

        events = self._player.event_manager()
        events.event_attach(vlc.EventType.MediaPlayerEndReached, self._on_end_reached)
        events.event_attach(vlc.EventType.MediaPlayerEncounteredError, self._on_error)

        logger.info(LogTemplates.VLC_ENGINE_CREATED, self._vlc_args)

    def set_event_sink(self, sink: EngineEventSink | None) -> None:
        self._sink = sink

    async def load(self, file_path: str, *, generation: int) -> float:
        self._loop = asyncio.get_running_loop()
        await self._stop_progress()

        if not Path(file_path).is_file():
            raise LoadError(ErrorMessages.FILE_NOT_FOUND.format(path=file_path), file_path)

        media = self._instance.media_new(file_path)
        if media is None:
            raise LoadError(
                ErrorMessages.FAILED_TO_LOAD.format(reason="libVLC rejected the media"),
                file_path,
            )

        # Media.parse() blocks until metadata is read.
        await asyncio.to_thread(media.parse)

        self._player.stop()
        self._player.set_media(media)
        self._generation = generation

        duration_ms = media.get_duration()
        self._duration = duration_ms / 1000 if duration_ms and duration_ms > 0 else 0.0
        return self._duration

    async def play(self) -> None:
        if self._player.get_media() is None:
            raise PlaybackError(
                ErrorMessages.FAILED_TO_PLAY.format(reason=ErrorMessages.NO_MEDIA_LOADED)
            )

        if self._player.play() == -1:
            raise PlaybackError(
                ErrorMessages.FAILED_TO_PLAY.format(reason="libVLC refused to play")
            )

        self._start_progress()

    async def pause(self) -> None:
        await self._stop_progress()
        self._player.set_pause(1)

    async def stop(self) -> None:
        await self._stop_progress()
        self._player.stop()

    async def seek(self, seconds: float) -> None:
        self._player.set_time(int(max(0.0, seconds) * 1000))

    async def set_volume(self, level: float) -> None:
        level = max(PlaybackConstants.MIN_VOLUME, min(PlaybackConstants.MAX_VOLUME, level))
        self._player.audio_set_volume(round(level * 100))

    async def close(self) -> None:
        await self._stop_progress()
        self._player.stop()
        self._player.release()
        self._instance.release()
        self._sink = None
        logger.info(LogTemplates.VLC_ENGINE_CLOSED)

    # === Progress polling ===

    def _start_progress(self) -> None:
        if self._progress_task is None:
            self._progress_task = asyncio.create_task(self._poll_progress())

    async def _stop_progress(self) -> None:
        if self._progress_task is not None:
            self._progress_task.cancel()
            try:
                await self._progress_task
            except asyncio.CancelledError:
                pass
            self._progress_task = None

    async def _poll_progress(self) -> None:
        while True:
            await asyncio.sleep(self._progress_interval)

            # Some containers only report their length once decoding starts.
            if self._duration <= 0:
                length_ms = self._player.get_length()
                if length_ms and length_ms > 0:
                    self._duration = length_ms / 1000
                    self._emit(EngineLoaded(generation=self._generation, duration=self._duration))

            time_ms = self._player.get_time()
            if time_ms is not None and time_ms >= 0:
                self._emit(EngineProgress(generation=self._generation, position=time_ms / 1000))

    # === libVLC callbacks (run on libVLC threads) ===

    def _on_end_reached(self, event: Any) -> None:
        self._emit_threadsafe(EngineEnded(generation=self._generation))

    def _on_error(self, event: Any) -> None:
        self._emit_threadsafe(
            EngineError(
                generation=self._generation,
                code="PLAYBACK_ERROR",
                message=ErrorMessages.FAILED_TO_PLAY.format(reason="libVLC reported an error"),
            )
        )

    def _emit(self, message: EngineMessage) -> None:
        if self._sink is not None:
            self._sink(message)

    def _emit_threadsafe(self, message: EngineMessage) -> None:
        loop = self._loop
        if loop is None or loop.is_closed():
            return
        loop.call_soon_threadsafe(self._emit, message)
