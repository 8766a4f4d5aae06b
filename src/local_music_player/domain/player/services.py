"""
Player Domain Services

Track-selection rules for each playback mode. These operate on plain
indices so they can be reused by anything that walks a queue.
"""

from __future__ import annotations

import random

from local_music_player.domain.player.value_objects import PlaybackMode


class PlaybackModeService:
    """Domain service computing the next and previous queue positions.

    Every method returns ``None`` when there is no track to move to. Pass
    ``rng`` for deterministic shuffle draws.
    """

    @classmethod
    def next_index(
        cls,
        current_index: int,
        queue_length: int,
        mode: PlaybackMode,
        rng: random.Random | None = None,
    ) -> int | None:
        """Determine the index to advance to.

        Args:
            current_index: The current queue position.
            queue_length: Number of tracks in the queue.
            mode: The active playback mode.
            rng: Optional random source; the module-level generator otherwise.

        Returns:
            The next index, or None when playback should stop.
        """
        if queue_length <= 0:
            return None

        if mode == PlaybackMode.SHUFFLE:
            return cls._shuffle_index(current_index, queue_length, rng)
        if mode == PlaybackMode.REPEAT_ONE:
            return current_index
        if mode == PlaybackMode.REPEAT_ALL:
            return (current_index + 1) % queue_length

        if current_index < queue_length - 1:
            return current_index + 1
        return None

    @classmethod
    def previous_index(
        cls,
        current_index: int,
        queue_length: int,
        mode: PlaybackMode,
        rng: random.Random | None = None,
    ) -> int | None:
        """Determine the index to step back to.

        Args:
            current_index: The current queue position.
            queue_length: Number of tracks in the queue.
            mode: The active playback mode.
            rng: Optional random source; the module-level generator otherwise.

        Returns:
            The previous index, or None when there is nothing before the current track.
        """
        if queue_length <= 0:
            return None

        if mode == PlaybackMode.SHUFFLE:
            return cls._shuffle_index(current_index, queue_length, rng)
        if mode == PlaybackMode.REPEAT_ONE:
            return current_index
        if mode == PlaybackMode.REPEAT_ALL:
            return current_index - 1 if current_index > 0 else queue_length - 1

        if current_index > 0:
            return current_index - 1
        return None

    @classmethod
    def _shuffle_index(
        cls, current_index: int, queue_length: int, rng: random.Random | None
    ) -> int:
        """Pick uniformly among every index except ``current_index``."""
        if queue_length == 1:
            return 0

        source = rng or random
        if not 0 <= current_index < queue_length:
            return source.randrange(queue_length)

        # One draw over the n-1 other slots, shifted past the current one.
        choice = source.randrange(queue_length - 1)
        if choice >= current_index:
            choice += 1
        return choice
