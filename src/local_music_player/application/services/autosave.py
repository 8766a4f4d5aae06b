"""Periodic saving of the playback snapshot."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from ...domain.player.events import SnapshotSaved
from ...domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from ...config.settings import PersistenceSettings
    from ...domain.player.repository import SnapshotRepository
    from .player_session import PlayerSession

logger = logging.getLogger(__name__)


class SnapshotAutosaver:
    """Saves the session snapshot every ``autosave_interval_seconds`` and on stop.

    Saves are best-effort: failures are logged and the next save simply
    overwrites whatever was stored.
    """

    def __init__(
        self,
        *,
        player: PlayerSession,
        snapshot_repository: SnapshotRepository,
        settings: PersistenceSettings,
    ) -> None:
        self._player = player
        self._snapshot_repo = snapshot_repository
        self._settings = settings
        self._running = False
        self._task: asyncio.Task | None = None

    def start(self) -> None:
        if self._running:
            logger.warning(LogTemplates.AUTOSAVE_ALREADY_RUNNING)
            return

        self._running = True
        self._task = asyncio.create_task(self._run_loop())
        logger.info(LogTemplates.AUTOSAVE_STARTED, self._settings.autosave_interval_seconds)

    async def stop(self, *, final_save: bool = True) -> None:
        was_running = self._running
        self._running = False

        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        if was_running and final_save:
            await self.save_now()

        logger.info(LogTemplates.AUTOSAVE_STOPPED)

    async def _run_loop(self) -> None:
        interval_seconds = self._settings.autosave_interval_seconds

        while self._running:
            try:
                await asyncio.sleep(interval_seconds)
            except asyncio.CancelledError:
                break

            await self.save_now()

    async def save_now(self) -> bool:
        """Persist the current snapshot. Returns False if the save failed."""
        snapshot = self._player.get_snapshot()
        try:
            await self._snapshot_repo.save(snapshot)
        except Exception as e:
            logger.error(LogTemplates.SNAPSHOT_SAVE_FAILED, e)
            return False

        logger.debug(LogTemplates.SNAPSHOT_SAVED, len(snapshot.queue_track_ids))
        await self._player.events.publish(
            SnapshotSaved(track_count=len(snapshot.queue_track_ids))
        )
        return True

    @property
    def is_running(self) -> bool:
        return self._running
