"""Centralized message constants for error messages and log templates."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions and validation failures."""

    # Queue Validation Errors
    INDEX_OUT_OF_RANGE = "Index {index} is out of range for a queue of {length} tracks"
    DUPLICATE_TRACK = 'Track "{track_id}" is already in the queue'
    SAME_POSITION = "Source and destination positions are both {index}"

    # Transport Errors
    INVALID_TRANSITION = "Cannot transition from {current} to {target}"
    LOAD_TIMED_OUT = "Timed out after {timeout}s loading {path}"
    FILE_NOT_FOUND = "Audio file not found: {path}"
    FAILED_TO_LOAD = "Failed to load audio file: {reason}"
    FAILED_TO_PLAY = "Playback error: {reason}"
    NO_MEDIA_LOADED = "No media is loaded"

    # Snapshot Errors
    CORRUPT_SNAPSHOT = "Stored playback snapshot is corrupt: {reason}"

    # Time/Date Validation Errors
    TIMEZONE_REQUIRED_UTC_DATETIME = "UtcDateTime requires a timezone-aware datetime"

    # Settings Validation Errors
    INVALID_DATABASE_URL = "Database URL must start with sqlite://"
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"


class LogTemplates:
    """Log message templates for structured logging.

    Use these with logger.info(), logger.error(), etc. and pass values as parameters
    for proper log formatting and structured logging support.
    """

    # Database Lifecycle
    DATABASE_INITIALIZED = "Database initialized at %s"
    DATABASE_CLOSED = "Database manager closed"
    TABLE_MIGRATED = "Migrated table %s: added column %s"

    # Application Lifecycle
    PLAYER_STARTING = "Starting local music player (%s)"
    PLAYER_STOPPED = "Player stopped"
    PLAYER_FATAL_ERROR = "Fatal error: %s"
    PLAYER_SIGNAL_RECEIVED = "Received %s, shutting down"

    # Queue Operations
    QUEUE_REPLACED = "Queue replaced with %d tracks (start index %d)"
    QUEUE_ENQUEUED = "Queued %s at position %d"
    QUEUE_INSERTED_NEXT = "Queued %s to play next at position %d"
    QUEUE_REMOVED = "Removed %s from queue position %d"
    QUEUE_MOVED = "Moved queue entry from %d to %d"
    QUEUE_CLEARED = "Cleared %d tracks from queue"
    QUEUE_EXHAUSTED = "Reached the end of the queue, stopping"
    QUEUE_MUTATION_IGNORED = "Ignored %s: %s"

    # Transport
    TRACK_LOADING = "Loading %s (generation %d)"
    TRACK_LOADED = "Loaded %s (%.1fs)"
    TRACK_LOAD_FAILED = "Failed to load %s: %s"
    TRACK_PLAY_FAILED = "Failed to start playback of %s: %s"
    TRACK_STARTED = "Playing %s"
    STALE_LOAD_IGNORED = "Ignoring stale load result (generation %d, current %d)"
    STALE_ENGINE_EVENT = "Dropping stale %s (generation %d, current %d)"
    AUTO_SKIP = "Skipping unplayable track (attempt %d of %d)"
    AUTO_SKIP_EXHAUSTED = "Giving up after %d consecutive failed tracks"
    PLAYBACK_PAUSED = "Playback paused"
    PLAYBACK_STOPPED = "Playback stopped"
    PLAYBACK_MODE_CHANGED = "Playback mode changed to %s"
    ENGINE_ERROR = "Engine reported %s: %s"
    ENGINE_ERROR_IGNORED = "Ignoring engine error with no media loaded (state %s)"
    ENGINE_PUMP_STARTED = "Engine event pump started"
    ENGINE_PUMP_STOPPED = "Engine event pump stopped"
    ENGINE_EVENT_FAILED = "Error handling engine event %s"

    # Snapshot / Restore
    SNAPSHOT_SAVED = "Saved playback snapshot (%d tracks)"
    SNAPSHOT_SAVE_FAILED = "Failed to save playback snapshot: %s"
    SNAPSHOT_MISSING = "No playback snapshot stored, using defaults"
    SNAPSHOT_CORRUPT = "Discarding unreadable playback snapshot: %s"
    SESSION_RESTORED = "Restored session with %d tracks (%d dropped), current index %d"
    RESTORE_PRELOAD_FAILED = "Could not preload %s during restore: %s"
    AUTOSAVE_STARTED = "Autosave started (every %.0fs)"
    AUTOSAVE_STOPPED = "Autosave stopped"
    AUTOSAVE_ALREADY_RUNNING = "Autosave already running"

    # Library
    LIBRARY_LOADED = "Loaded %d tracks into the catalog"
    LIBRARY_TRACKS_SAVED = "Saved %d library tracks"

    # Audio engine
    VLC_ENGINE_CREATED = "VLC engine created with args %s"
    VLC_ENGINE_CLOSED = "VLC engine released"
