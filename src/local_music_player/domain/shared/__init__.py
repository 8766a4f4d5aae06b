"""
Shared Domain Kernel

Contains types, events and exceptions shared across the player.
"""

from local_music_player.domain.shared.events import DomainEvent, EventBus
from local_music_player.domain.shared.exceptions import (
    DomainError,
    InvalidOperationError,
    LoadError,
    PlaybackError,
    RestoreError,
    ValidationError,
)

__all__ = [
    "DomainEvent",
    "EventBus",
    "DomainError",
    "ValidationError",
    "InvalidOperationError",
    "LoadError",
    "PlaybackError",
    "RestoreError",
]
