"""Application-wide constants.

Keep tunables that are not user-configurable here; configurable values live in
``config/settings.py``.
"""

from __future__ import annotations

from typing import Final


class PlaybackConstants:
    """Constants governing transport behaviour."""

    # previous() restarts the current track instead of navigating past this point
    RESTART_THRESHOLD_SECONDS: Final[float] = 3.0
    DEFAULT_LOAD_TIMEOUT_SECONDS: Final[float] = 10.0
    DEFAULT_PROGRESS_INTERVAL_SECONDS: Final[float] = 0.25
    MIN_VOLUME: Final[float] = 0.0
    MAX_VOLUME: Final[float] = 1.0
    NO_INDEX: Final[int] = -1


class SnapshotDefaults:
    """Values of the snapshot returned when nothing usable is persisted."""

    POSITION: Final[float] = 0.0
    VOLUME: Final[float] = 0.8
    MODE: Final[str] = "sequential"
    QUEUE_INDEX: Final[int] = 0


class DatabaseTables:
    """SQLite table names."""

    LIBRARY_TRACKS = "library_tracks"
    PLAYBACK_SNAPSHOTS = "playback_snapshots"


class SQLPragmas:
    """SQLite PRAGMA statements for database configuration.

    These pragmas are applied to each connection to ensure consistent behavior.
    """

    JOURNAL_MODE_WAL = "PRAGMA journal_mode=WAL"
    FOREIGN_KEYS_ON = "PRAGMA foreign_keys=ON"
    BUSY_TIMEOUT = "PRAGMA busy_timeout={timeout}"
    TABLE_INFO = "PRAGMA table_info({table})"
