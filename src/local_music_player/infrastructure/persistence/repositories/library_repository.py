"""SQLite storage for the track library that backs the catalog."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from local_music_player.domain.player.entities import Track
from local_music_player.domain.shared.constants import DatabaseTables
from local_music_player.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from ...catalog.in_memory import InMemoryTrackCatalog
    from ..database import Database

logger = logging.getLogger(__name__)

_COLUMNS = (
    "id",
    "file_path",
    "title",
    "artist",
    "album",
    "album_artist",
    "year",
    "genre",
    "duration_seconds",
    "track_number",
    "disc_number",
    "format",
    "bitrate",
    "sample_rate",
)


class SQLiteLibraryRepository:
    """Persists Track records written by the folder scanner."""

    def __init__(self, database: Database) -> None:
        self._db = database

    async def save_tracks(self, tracks: Iterable[Track]) -> int:
        """Insert or update tracks, keyed by id. Returns the number written."""
        placeholders = ", ".join("?" for _ in _COLUMNS)
        updates = ",\n                    ".join(
            f"{column} = excluded.{column}" for column in _COLUMNS if column != "id"
        )
        sql = f"""
            INSERT INTO {DatabaseTables.LIBRARY_TRACKS} ({", ".join(_COLUMNS)})
            VALUES ({placeholders})
            ON CONFLICT(id) DO UPDATE SET
                    {updates}
        """

        count = 0
        async with self._db.transaction() as conn:
            for track in tracks:
                await conn.execute(sql, self._track_to_params(track))
                count += 1

        logger.debug(LogTemplates.LIBRARY_TRACKS_SAVED, count)
        return count

    async def remove_track(self, track_id: str) -> bool:
        if await self.get(track_id) is None:
            return False

        await self._db.execute(
            f"DELETE FROM {DatabaseTables.LIBRARY_TRACKS} WHERE id = ?",
            (track_id,),
        )
        return True

    async def get(self, track_id: str) -> Track | None:
        row = await self._db.fetch_one(
            f"SELECT * FROM {DatabaseTables.LIBRARY_TRACKS} WHERE id = ?",
            (track_id,),
        )
        return self._row_to_track(row) if row else None

    async def get_all(self) -> list[Track]:
        rows = await self._db.fetch_all(
            f"""
            SELECT * FROM {DatabaseTables.LIBRARY_TRACKS}
            ORDER BY artist, album, disc_number, track_number, title
            """
        )
        return [self._row_to_track(row) for row in rows]

    async def load_catalog(self, catalog: InMemoryTrackCatalog) -> int:
        """Replace the catalog contents with every stored track."""
        tracks = await self.get_all()
        catalog.replace_all(tracks)
        logger.info(LogTemplates.LIBRARY_LOADED, len(tracks))
        return len(tracks)

    @staticmethod
    def _track_to_params(track: Track) -> tuple[Any, ...]:
        return tuple(getattr(track, column) for column in _COLUMNS)

    @staticmethod
    def _row_to_track(row: dict[str, Any]) -> Track:
        return Track(
            id=row["id"],
            file_path=row["file_path"],
            title=row["title"],
            artist=row["artist"] or "",
            album=row["album"] or "",
            album_artist=row["album_artist"],
            year=row["year"],
            genre=row["genre"],
            duration_seconds=row["duration_seconds"] or 0.0,
            track_number=row["track_number"],
            disc_number=row["disc_number"],
            format=row["format"] or "",
            bitrate=row.get("bitrate"),
            sample_rate=row.get("sample_rate"),
        )
