"""SQLite repository implementations."""

from local_music_player.infrastructure.persistence.repositories.library_repository import (
    SQLiteLibraryRepository,
)
from local_music_player.infrastructure.persistence.repositories.snapshot_repository import (
    SQLiteSnapshotRepository,
)

__all__ = [
    "SQLiteLibraryRepository",
    "SQLiteSnapshotRepository",
]
