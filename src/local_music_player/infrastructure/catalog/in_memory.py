"""In-memory track catalog."""

from __future__ import annotations

from collections.abc import Iterable

from local_music_player.domain.player.entities import Track
from local_music_player.domain.player.repository import TrackCatalog


class InMemoryTrackCatalog(TrackCatalog):
    """Dictionary-backed catalog, filled from the library table at startup."""

    def __init__(self, tracks: Iterable[Track] = ()) -> None:
        self._tracks: dict[str, Track] = {track.id: track for track in tracks}

    def lookup(self, track_id: str) -> Track | None:
        return self._tracks.get(track_id)

    def add(self, track: Track) -> None:
        self._tracks[track.id] = track

    def remove(self, track_id: str) -> bool:
        return self._tracks.pop(track_id, None) is not None

    def replace_all(self, tracks: Iterable[Track]) -> None:
        self._tracks = {track.id: track for track in tracks}

    def __len__(self) -> int:
        return len(self._tracks)

    def __contains__(self, track_id: object) -> bool:
        return track_id in self._tracks
