import asyncio
import random

import pytest
import pytest_asyncio

from local_music_player.application.interfaces.audio_engine import AudioEngine, EngineMessage
from local_music_player.domain.player.entities import Track
from local_music_player.domain.shared.exceptions import LoadError, PlaybackError

# ============================================================================
# Audio Engine Double
# ============================================================================


class FakeAudioEngine(AudioEngine):
    """Scriptable in-process engine.

    Paths listed in ``failing_loads`` / ``failing_plays`` raise, ``durations``
    overrides the reported length, and setting ``load_gate`` holds every
    load until the event is set.
    """

    def __init__(self) -> None:
        self.sink = None
        self.calls: list[tuple] = []
        self.durations: dict[str, float] = {}
        self.failing_loads: set[str] = set()
        self.failing_plays: set[str] = set()
        self.load_gate: asyncio.Event | None = None
        self.loaded_path: str | None = None
        self.generation = 0
        self.volume: float | None = None
        self.closed = False

    def set_event_sink(self, sink) -> None:
        self.sink = sink

    async def load(self, file_path: str, *, generation: int) -> float:
        self.calls.append(("load", file_path))
        if self.load_gate is not None:
            await self.load_gate.wait()
        if file_path in self.failing_loads:
            raise LoadError(f"cannot open {file_path}", file_path)
        self.loaded_path = file_path
        self.generation = generation
        return self.durations.get(file_path, 180.0)

    async def play(self) -> None:
        self.calls.append(("play", self.loaded_path))
        if self.loaded_path in self.failing_plays:
            raise PlaybackError(f"cannot play {self.loaded_path}", self.loaded_path)

    async def pause(self) -> None:
        self.calls.append(("pause",))

    async def stop(self) -> None:
        self.calls.append(("stop",))

    async def seek(self, seconds: float) -> None:
        self.calls.append(("seek", seconds))

    async def set_volume(self, level: float) -> None:
        self.calls.append(("set_volume", level))
        self.volume = level

    async def close(self) -> None:
        self.closed = True

    def emit(self, message: EngineMessage) -> None:
        self.sink(message)

    @property
    def loads(self) -> list[str]:
        return [call[1] for call in self.calls if call[0] == "load"]

    @property
    def commands(self) -> list[str]:
        return [call[0] for call in self.calls]


# ============================================================================
# Domain Fixtures
# ============================================================================


@pytest.fixture
def make_track():
    """Factory for catalog tracks stored under /music/<id>.mp3."""

    def _make(track_id: str, duration: float = 180.0, **kwargs) -> Track:
        return Track(
            id=track_id,
            file_path=f"/music/{track_id}.mp3",
            title=kwargs.pop("title", f"Track {track_id.upper()}"),
            duration_seconds=duration,
            **kwargs,
        )

    return _make


@pytest.fixture
def tracks(make_track):
    """Three tracks: a, b, c."""
    return [make_track("a"), make_track("b"), make_track("c")]


@pytest.fixture
def catalog(tracks, make_track):
    """Catalog holding a, b, c and an unqueued track d."""
    from local_music_player.infrastructure.catalog.in_memory import InMemoryTrackCatalog

    return InMemoryTrackCatalog([*tracks, make_track("d")])


@pytest.fixture
def engine():
    return FakeAudioEngine()


@pytest.fixture
def player(engine, catalog):
    """Player session wired to the fake engine with a seeded shuffle."""
    from local_music_player.application.services.player_session import PlayerSession

    return PlayerSession(engine=engine, catalog=catalog, rng=random.Random(1234))


@pytest.fixture
def recorded_events(player):
    """Collect every event the player publishes, in order."""
    from local_music_player.domain.player import events as player_events

    received: list = []

    async def record(event) -> None:
        received.append(event)

    for event_type in (
        player_events.TrackChanged,
        player_events.TransportStateChanged,
        player_events.QueueChanged,
        player_events.PositionUpdated,
        player_events.VolumeChanged,
        player_events.PlaybackModeChanged,
        player_events.PlaybackFailed,
        player_events.QueueExhausted,
        player_events.SessionRestored,
        player_events.SnapshotSaved,
    ):
        player.events.subscribe(event_type, record)
    return received


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest_asyncio.fixture
async def in_memory_database():
    """Create an in-memory SQLite database for testing."""
    from local_music_player.infrastructure.persistence.database import Database

    db = Database(":memory:")
    await db.initialize()
    yield db
    await db.close()


@pytest_asyncio.fixture
async def snapshot_repository(in_memory_database):
    """Create a snapshot repository with in-memory database."""
    from local_music_player.infrastructure.persistence.repositories.snapshot_repository import (
        SQLiteSnapshotRepository,
    )

    return SQLiteSnapshotRepository(in_memory_database)


@pytest_asyncio.fixture
async def library_repository(in_memory_database):
    """Create a library repository with in-memory database."""
    from local_music_player.infrastructure.persistence.repositories.library_repository import (
        SQLiteLibraryRepository,
    )

    return SQLiteLibraryRepository(in_memory_database)
