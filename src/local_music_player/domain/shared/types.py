"""Reusable Pydantic Annotated types for domain-wide validation.

Every constrained type used across the player is defined here once,
so models can simply annotate their fields::

    from local_music_player.domain.shared.types import TrackIdStr, UnitInterval

    class MyModel(BaseModel):
        track_id: TrackIdStr
        volume: UnitInterval
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated

from pydantic import BeforeValidator, Field

# ── Numeric constraints ─────────────────────────────────────────────

NonNegativeInt = Annotated[int, Field(ge=0)]
"""Integer >= 0."""

PositiveInt = Annotated[int, Field(gt=0)]
"""Integer > 0."""

UnitInterval = Annotated[float, Field(ge=0.0, le=1.0)]
"""Float in [0.0, 1.0], used for volume levels."""

PositionSeconds = Annotated[float, Field(ge=0.0)]
"""Playback position in seconds."""

DurationSeconds = Annotated[float, Field(ge=0.0, le=86_400.0)]
"""Track duration in seconds: 0 … 86 400 (24 hours). 0 means unknown."""

QueueIndex = Annotated[int, Field(ge=-1)]
"""Zero-based queue index, or -1 when nothing is selected."""


# ── String constraints ──────────────────────────────────────────────

NonEmptyStr = Annotated[str, Field(min_length=1)]
"""String with at least one character."""

TrackIdStr = Annotated[str, Field(min_length=1, max_length=255)]
"""Catalog track identifier."""

TrackTitleStr = Annotated[str, Field(min_length=1, max_length=500)]
"""Track title: 1-500 characters."""

FilePathStr = Annotated[str, Field(min_length=1)]
"""Absolute or relative path to a local audio file."""


# ── Datetime constraints ────────────────────────────────────────────

def _ensure_utc(v: datetime) -> datetime:
    """Validate that a datetime is timezone-aware and normalise to UTC."""
    if isinstance(v, str):
        v = datetime.fromisoformat(v.replace("Z", "+00:00"))
    if v.tzinfo is None:
        raise ValueError("datetime must be timezone-aware (UTC)")
    return v.astimezone(UTC)


UtcDatetimeField = Annotated[datetime, BeforeValidator(_ensure_utc)]
"""Timezone-aware datetime, normalised to UTC on input."""
