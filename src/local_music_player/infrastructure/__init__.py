"""Infrastructure layer - external systems integration.

This layer contains implementations for:
- Persistence (SQLite repositories)
- Audio (python-vlc engine)
- Catalog (in-memory track index)
"""

from local_music_player.infrastructure.persistence.database import Database

__all__ = [
    "Database",
]
