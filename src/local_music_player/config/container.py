"""Dependency Injection Container

Manages the application's dependency graph, providing lazy initialization
and lifecycle management for the database, repositories, catalog, audio
engine, playback session and background jobs. Components are created
on-demand and cached for reuse.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from ..application.interfaces.audio_engine import AudioEngine
    from ..application.services.autosave import SnapshotAutosaver
    from ..application.services.player_session import PlayerSession
    from ..domain.player.repository import SnapshotRepository
    from ..domain.shared.events import EventBus
    from ..infrastructure.catalog.in_memory import InMemoryTrackCatalog
    from ..infrastructure.persistence.database import Database
    from ..infrastructure.persistence.repositories.library_repository import (
        SQLiteLibraryRepository,
    )
    from .settings import Settings


@dataclass
class Container:
    """Dependency injection container.

    Components are lazily initialized when first accessed. ``initialize()``
    brings the player up from its last snapshot; ``shutdown()`` saves and
    releases everything.
    """

    settings: Settings

    # Persistence layer
    _database: Database | None = None
    _library_repository: SQLiteLibraryRepository | None = None
    _snapshot_repository: SnapshotRepository | None = None

    # Infrastructure adapters
    _catalog: InMemoryTrackCatalog | None = None
    _audio_engine: AudioEngine | None = None

    # Application services
    _event_bus: EventBus | None = None
    _player: PlayerSession | None = None

    # Background jobs
    _autosaver: SnapshotAutosaver | None = None

    # === Database ===

    @property
    def database(self) -> Database:
        """Get the database connection manager."""
        if self._database is None:
            from ..infrastructure.persistence.database import Database

            self._database = Database(self.settings.database.url, settings=self.settings.database)
        return self._database

    # === Repositories ===

    @property
    def library_repository(self) -> SQLiteLibraryRepository:
        """Get the library repository."""
        if self._library_repository is None:
            from ..infrastructure.persistence.repositories.library_repository import (
                SQLiteLibraryRepository,
            )

            self._library_repository = SQLiteLibraryRepository(self.database)
        return self._library_repository

    @property
    def snapshot_repository(self) -> SnapshotRepository:
        """Get the snapshot repository."""
        if self._snapshot_repository is None:
            from ..infrastructure.persistence.repositories.snapshot_repository import (
                SQLiteSnapshotRepository,
            )

            self._snapshot_repository = SQLiteSnapshotRepository(self.database)
        return self._snapshot_repository

    # === Infrastructure Adapters ===

    @property
    def catalog(self) -> InMemoryTrackCatalog:
        """Get the track catalog."""
        if self._catalog is None:
            from ..infrastructure.catalog.in_memory import InMemoryTrackCatalog

            self._catalog = InMemoryTrackCatalog()
        return self._catalog

    @property
    def audio_engine(self) -> AudioEngine:
        """Get the audio engine."""
        if self._audio_engine is None:
            from ..infrastructure.audio.vlc_engine import VlcAudioEngine

            self._audio_engine = VlcAudioEngine(self.settings.audio)
        return self._audio_engine

    # === Application Services ===

    @property
    def event_bus(self) -> EventBus:
        """Get the event bus the player publishes on."""
        if self._event_bus is None:
            from ..domain.shared.events import EventBus

            self._event_bus = EventBus()
        return self._event_bus

    @property
    def player(self) -> PlayerSession:
        """Get the playback session."""
        if self._player is None:
            from ..application.services.player_session import PlayerSession

            player_settings = self.settings.player
            self._player = PlayerSession(
                engine=self.audio_engine,
                catalog=self.catalog,
                event_bus=self.event_bus,
                restart_threshold_seconds=player_settings.restart_threshold_seconds,
                load_timeout_seconds=player_settings.load_timeout_seconds,
                initial_volume=player_settings.default_volume,
                initial_mode=player_settings.default_mode,
            )
        return self._player

    # === Background Jobs ===

    @property
    def autosaver(self) -> SnapshotAutosaver:
        """Get the snapshot autosaver."""
        if self._autosaver is None:
            from ..application.services.autosave import SnapshotAutosaver

            self._autosaver = SnapshotAutosaver(
                player=self.player,
                snapshot_repository=self.snapshot_repository,
                settings=self.settings.persistence,
            )
        return self._autosaver

    # === Lifecycle ===

    async def initialize(self) -> None:
        """Open storage, restore the last session and start background work."""
        await self.database.initialize()
        await self.library_repository.load_catalog(self.catalog)

        player = self.player
        player.start_event_pump()
        await player.restore(await self.snapshot_repository.load())

        if self.settings.persistence.autosave_enabled:
            self.autosaver.start()

    async def shutdown(self) -> None:
        """Save a final snapshot and release all resources."""
        try:
            if self._autosaver is not None and self._autosaver.is_running:
                await self._autosaver.stop()
            elif self._player is not None and self._database is not None:
                await self.autosaver.save_now()
        except Exception as exc:
            logger.warning("Failed saving final snapshot: %r", exc)

        if self._player is not None:
            await self._player.stop_event_pump()

        if self._audio_engine is not None:
            try:
                await self._audio_engine.close()
            except Exception as exc:
                logger.warning("Failed closing audio engine: %r", exc)

        if self._database is not None:
            await self._database.close()


def create_container(settings: Settings) -> Container:
    """Create a new dependency injection container."""
    return Container(settings)
