"""
Player Domain Repository Interfaces

Abstract base classes for the collaborators the playback session reads
tracks from and writes snapshots to. Implementations live in the
infrastructure layer.
"""

from abc import ABC, abstractmethod

from local_music_player.domain.player.entities import Track
from local_music_player.domain.player.snapshot import SessionSnapshot


class TrackCatalog(ABC):
    """Read-only index resolving track ids to Track values."""

    @abstractmethod
    def lookup(self, track_id: str) -> Track | None:
        """Resolve a track id.

        Args:
            track_id: The catalog identifier.

        Returns:
            The track if known, None otherwise.
        """
        ...


class SnapshotRepository(ABC):
    """Abstract repository for the persisted playback snapshot.

    Only the most recent snapshot is kept; saving replaces it.
    """

    @abstractmethod
    async def save(self, snapshot: SessionSnapshot) -> None:
        """Persist a snapshot, replacing any previous one.

        Args:
            snapshot: The snapshot to save.
        """
        ...

    @abstractmethod
    async def load(self) -> SessionSnapshot:
        """Load the persisted snapshot.

        Returns:
            The stored snapshot, or the default snapshot when nothing usable
            is stored. Never raises.
        """
        ...
