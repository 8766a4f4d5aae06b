"""
Domain Layer

Contains pure business logic organized by bounded contexts:
- shared/: Cross-cutting types, events and exceptions
- player/: Track, queue, playback modes and transport state
"""

from local_music_player.domain.shared.exceptions import DomainError

__all__ = [
    "DomainError",
]
