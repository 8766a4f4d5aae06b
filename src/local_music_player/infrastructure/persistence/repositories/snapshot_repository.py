"""SQLite implementation of the snapshot repository."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import TYPE_CHECKING

import aiosqlite
from pydantic import ValidationError as PydanticValidationError

from local_music_player.domain.player.repository import SnapshotRepository
from local_music_player.domain.player.snapshot import SessionSnapshot
from local_music_player.domain.shared.constants import DatabaseTables
from local_music_player.domain.shared.datetime_utils import UtcDateTime
from local_music_player.domain.shared.exceptions import RestoreError
from local_music_player.domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from ..database import Database

logger = logging.getLogger(__name__)

_SNAPSHOT_ROW_ID = 1


class SQLiteSnapshotRepository(SnapshotRepository):
    """Keeps the latest snapshot as a single JSON row; each save overwrites it."""

    def __init__(self, database: Database) -> None:
        self._db = database

    async def save(self, snapshot: SessionSnapshot) -> None:
        await self._db.execute(
            f"""
            INSERT INTO {DatabaseTables.PLAYBACK_SNAPSHOTS} (id, payload, saved_at)
            VALUES (?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                payload = excluded.payload,
                saved_at = excluded.saved_at
            """,
            (_SNAPSHOT_ROW_ID, snapshot.to_json(), UtcDateTime.now().iso),
        )

    async def load(self) -> SessionSnapshot:
        try:
            row = await self._db.fetch_one(
                f"SELECT payload FROM {DatabaseTables.PLAYBACK_SNAPSHOTS} WHERE id = ?",
                (_SNAPSHOT_ROW_ID,),
            )
        except aiosqlite.Error as e:
            logger.warning(LogTemplates.SNAPSHOT_CORRUPT, e)
            return SessionSnapshot.default()

        if row is None:
            logger.info(LogTemplates.SNAPSHOT_MISSING)
            return SessionSnapshot.default()

        try:
            return self._decode(row["payload"])
        except RestoreError as e:
            logger.warning(LogTemplates.SNAPSHOT_CORRUPT, e.message)
            return SessionSnapshot.default()

    async def last_saved_at(self) -> datetime | None:
        row = await self._db.fetch_one(
            f"SELECT saved_at FROM {DatabaseTables.PLAYBACK_SNAPSHOTS} WHERE id = ?",
            (_SNAPSHOT_ROW_ID,),
        )
        if row is None:
            return None
        return UtcDateTime.from_iso(row["saved_at"]).dt

    async def clear(self) -> None:
        await self._db.execute(
            f"DELETE FROM {DatabaseTables.PLAYBACK_SNAPSHOTS} WHERE id = ?",
            (_SNAPSHOT_ROW_ID,),
        )

    @staticmethod
    def _decode(payload: str) -> SessionSnapshot:
        try:
            data = json.loads(payload)
        except (TypeError, json.JSONDecodeError) as e:
            raise RestoreError(ErrorMessages.CORRUPT_SNAPSHOT.format(reason=e)) from e

        if not isinstance(data, dict):
            raise RestoreError(
                ErrorMessages.CORRUPT_SNAPSHOT.format(reason="payload is not an object")
            )

        try:
            return SessionSnapshot.model_validate(data)
        except PydanticValidationError as e:
            raise RestoreError(
                ErrorMessages.CORRUPT_SNAPSHOT.format(reason=e.error_count())
            ) from e
