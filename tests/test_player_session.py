"""
Unit Tests for PlayerSession

Tests for:
- Transport commands (play, pause, stop, next, previous, seek, volume, mode)
- Queue commands and their effect on the loaded track
- Bounded auto-skip over unplayable tracks
- Load generations and superseded loads
- Engine notifications (progress, end of track, errors)
"""

import asyncio
import random

import pytest

from local_music_player.application.interfaces.audio_engine import (
    EngineEnded,
    EngineError,
    EngineLoaded,
    EngineProgress,
)
from local_music_player.application.services.player_session import PlayerSession
from local_music_player.domain.player.events import (
    PlaybackFailed,
    PlaybackModeChanged,
    QueueChanged,
    QueueExhausted,
    TrackChanged,
    TransportStateChanged,
    VolumeChanged,
)
from local_music_player.domain.player.value_objects import (
    AdvanceReason,
    PlaybackMode,
    TransportState,
)


async def _wait_until(predicate, attempts: int = 200) -> None:
    for _ in range(attempts):
        if predicate():
            return
        await asyncio.sleep(0)
    raise AssertionError("condition not reached")


async def _progress(player, engine, seconds: float) -> None:
    engine.emit(EngineProgress(generation=engine.generation, position=seconds))
    await player.drain()


def _of_type(events, event_type):
    return [e for e in events if isinstance(e, event_type)]


# =============================================================================
# Play / Pause / Stop
# =============================================================================


class TestPlay:
    """Tests for starting playback."""

    async def test_set_queue_loads_and_plays(self, player, engine, tracks):
        assert await player.set_queue(tracks) is True

        assert player.state is TransportState.PLAYING
        assert player.is_playing
        assert player.current_track.id == "a"
        assert engine.loads == ["/music/a.mp3"]
        assert engine.commands[-1] == "play"
        assert player.duration == 180.0

    async def test_play_with_empty_queue_is_noop(self, player, engine):
        assert await player.play() is False
        assert player.state is TransportState.IDLE
        assert engine.calls == []

    async def test_play_when_already_playing(self, player, engine, tracks):
        await player.set_queue(tracks)

        assert await player.play() is True
        assert engine.commands.count("play") == 1

    async def test_play_loads_idle_current_track(self, player, engine, tracks):
        """Should load the current track when nothing is loaded yet."""
        await player.add_to_queue(tracks[0])
        assert player.state is TransportState.IDLE

        assert await player.play() is True

        assert player.is_playing
        assert engine.loads == ["/music/a.mp3"]

    async def test_play_track_in_queue_jumps_to_it(self, player, engine, tracks):
        await player.set_queue(tracks)

        assert await player.play(tracks[2]) is True

        assert player.current_index == 2
        assert len(player.queue) == 3
        assert engine.loads[-1] == "/music/c.mp3"

    async def test_play_track_not_queued_replaces_queue(self, player, tracks, make_track):
        await player.set_queue(tracks)

        await player.play(make_track("z"))

        assert [t.id for t in player.queue] == ["z"]
        assert player.current_index == 0
        assert player.is_playing

    async def test_duration_falls_back_to_catalog(self, player, engine, make_track):
        """Should use the catalog duration when the engine reports none."""
        track = make_track("x", duration=95.0)
        engine.durations[track.file_path] = 0.0

        await player.set_queue([track])

        assert player.duration == 95.0

    async def test_transport_events_in_order(self, player, tracks, recorded_events):
        await player.set_queue(tracks)

        states = [e.current for e in _of_type(recorded_events, TransportStateChanged)]
        assert states == [TransportState.LOADING, TransportState.STOPPED, TransportState.PLAYING]
        assert _of_type(recorded_events, QueueChanged)[0].length == 3
        assert _of_type(recorded_events, TrackChanged)[0].track_id == "a"


class TestPause:
    """Tests for pausing and resuming."""

    async def test_pause_then_resume(self, player, engine, tracks):
        await player.set_queue(tracks)

        assert await player.pause() is True
        assert player.state is TransportState.PAUSED
        assert not player.is_playing

        assert await player.play() is True
        assert player.state is TransportState.PLAYING
        assert engine.loads == ["/music/a.mp3"]

    async def test_pause_when_not_playing(self, player, engine):
        assert await player.pause() is False
        assert "pause" not in engine.commands


class TestStop:
    """Tests for stopping."""

    async def test_stop_rewinds(self, player, engine, tracks):
        await player.set_queue(tracks)
        await _progress(player, engine, 42.0)

        await player.stop()

        assert player.state is TransportState.STOPPED
        assert player.position == 0.0
        assert player.current_index == 0
        assert engine.commands[-1] == "stop"

    async def test_play_after_stop_reuses_loaded_media(self, player, engine, tracks):
        await player.set_queue(tracks)
        await player.stop()

        assert await player.play() is True
        assert engine.loads == ["/music/a.mp3"]

    async def test_stop_keeps_error_state(self, player, engine, tracks):
        engine.failing_loads.add("/music/a.mp3")
        await player.set_queue(tracks)

        await player.stop()

        assert player.state is TransportState.ERROR
        assert player.last_error is not None

    async def test_stop_during_load_abandons_it(self, player, engine, tracks):
        """Should return to IDLE and discard the pending load's result."""
        engine.load_gate = asyncio.Event()
        task = asyncio.create_task(player.set_queue(tracks))
        await _wait_until(lambda: player.is_loading)

        await player.stop()
        assert player.state is TransportState.IDLE

        engine.load_gate.set()
        assert await task is False
        assert player.state is TransportState.IDLE
        assert "play" not in engine.commands


# =============================================================================
# Next / Previous
# =============================================================================


class TestNext:
    """Tests for next()."""

    async def test_next_advances_sequentially(self, player, engine, tracks):
        await player.set_queue(tracks)

        assert await player.next() is True

        assert player.current_index == 1
        assert player.is_playing
        assert engine.loads == ["/music/a.mp3", "/music/b.mp3"]

    async def test_next_at_end_stops(self, player, engine, tracks, recorded_events):
        """At the end of a sequential queue playback stops on the last track."""
        await player.set_queue(tracks[:2], 1)

        assert await player.next() is False

        assert player.position == 0.0
        assert not player.is_playing
        assert player.state is TransportState.STOPPED
        assert player.current_index == 1
        exhausted = _of_type(recorded_events, QueueExhausted)
        assert len(exhausted) == 1
        assert exhausted[0].last_track_id == "b"

    async def test_next_wraps_in_repeat_all(self, player, tracks):
        await player.set_mode(PlaybackMode.REPEAT_ALL)
        await player.set_queue(tracks, 2)

        await player.next()

        assert player.current_index == 0
        assert player.is_playing

    async def test_next_restarts_in_repeat_one(self, player, engine, tracks):
        await player.set_mode(PlaybackMode.REPEAT_ONE)
        await player.set_queue(tracks, 1)

        await player.next()

        assert player.current_index == 1
        assert engine.loads == ["/music/b.mp3", "/music/b.mp3"]

    async def test_shuffle_never_repeats_immediately(self, player, tracks):
        await player.set_mode(PlaybackMode.SHUFFLE)
        await player.set_queue(tracks)

        for _ in range(25):
            before = player.current_index
            await player.next()
            assert player.current_index != before
            assert 0 <= player.current_index < 3

    async def test_next_on_empty_queue(self, player, engine):
        assert await player.next() is False
        assert engine.calls == []


class TestPrevious:
    """Tests for previous()."""

    async def test_restarts_when_past_threshold(self, player, engine, tracks):
        await player.set_queue(tracks)
        await _progress(player, engine, 10.0)

        assert await player.previous() is True

        assert player.position == 0.0
        assert player.current_index == 0
        assert ("seek", 0.0) in engine.calls
        assert engine.loads == ["/music/a.mp3"]

    async def test_restarts_at_start_of_queue(self, player, engine, tracks):
        """Near the start of the first track there is nowhere to go back to."""
        await player.set_queue(tracks)
        await _progress(player, engine, 1.0)

        assert await player.previous() is True

        assert player.position == 0.0
        assert player.current_index == 0
        assert engine.loads == ["/music/a.mp3"]

    async def test_steps_back_near_start(self, player, engine, tracks):
        await player.set_queue(tracks, 2)
        await _progress(player, engine, 2.5)

        assert await player.previous() is True

        assert player.current_index == 1
        assert engine.loads[-1] == "/music/b.mp3"

    async def test_wraps_backward_in_repeat_all(self, player, tracks):
        await player.set_mode(PlaybackMode.REPEAT_ALL)
        await player.set_queue(tracks, 0)

        await player.previous()

        assert player.current_index == 2

    async def test_custom_threshold(self, engine, catalog, tracks):
        player = PlayerSession(engine=engine, catalog=catalog, restart_threshold_seconds=20.0)
        await player.set_queue(tracks, 1)
        await _progress(player, engine, 10.0)

        await player.previous()

        assert player.current_index == 0

    async def test_previous_on_empty_queue(self, player):
        assert await player.previous() is False


# =============================================================================
# Auto-skip
# =============================================================================


class TestAutoSkip:
    """Tests for skipping over tracks that fail to load or play."""

    async def test_skips_unloadable_track(self, player, engine, tracks, recorded_events):
        await player.set_queue(tracks)
        engine.failing_loads.add("/music/b.mp3")

        assert await player.next() is True

        assert player.current_track.id == "c"
        assert player.is_playing
        assert engine.loads == ["/music/a.mp3", "/music/b.mp3", "/music/c.mp3"]

        failures = _of_type(recorded_events, PlaybackFailed)
        assert len(failures) == 1
        assert failures[0].track_id == "b"
        assert failures[0].code == "LOAD_ERROR"
        assert failures[0].will_retry is True

        reasons = [e.reason for e in _of_type(recorded_events, TrackChanged)]
        assert reasons[-2:] == [AdvanceReason.USER_REQUEST, AdvanceReason.AUTO_SKIP]

    async def test_skips_track_that_fails_to_play(self, player, engine, tracks):
        await player.set_queue(tracks)
        engine.failing_plays.add("/music/b.mp3")

        assert await player.next() is True

        assert player.current_track.id == "c"

    async def test_persistent_failure_terminates_in_error(self, player, engine, tracks):
        """Should stop after one attempt per queued track when nothing can play."""
        await player.set_mode(PlaybackMode.REPEAT_ALL)
        await player.set_queue(tracks)
        engine.failing_loads.update(t.file_path for t in tracks)

        assert await player.next() is False

        assert player.state is TransportState.ERROR
        assert player.last_error is not None
        # One load for the initial track, then at most len(queue) attempts.
        assert len(engine.loads) == 1 + 3

    async def test_failures_to_end_of_sequential_queue(
        self, player, engine, tracks, recorded_events
    ):
        await player.set_queue(tracks)
        engine.failing_loads.update({"/music/b.mp3", "/music/c.mp3"})

        assert await player.next() is False

        assert player.state is TransportState.ERROR
        assert player.current_index == 2
        assert len(_of_type(recorded_events, QueueExhausted)) == 1

    async def test_no_retry_in_repeat_one(self, player, engine, tracks, recorded_events):
        await player.set_mode(PlaybackMode.REPEAT_ONE)
        engine.failing_loads.add("/music/b.mp3")
        await player.set_queue(tracks, 1)

        assert await player.next() is False

        assert player.state is TransportState.ERROR
        assert player.current_index == 1
        assert engine.loads == ["/music/b.mp3", "/music/b.mp3"]
        assert all(not e.will_retry for e in _of_type(recorded_events, PlaybackFailed))

    async def test_explicit_play_failure_is_not_skipped(self, player, engine, tracks):
        engine.failing_loads.add("/music/a.mp3")

        assert await player.set_queue(tracks) is False

        assert player.state is TransportState.ERROR
        assert player.current_index == 0
        assert engine.loads == ["/music/a.mp3"]

    async def test_new_load_leaves_error(self, player, engine, tracks):
        engine.failing_loads.add("/music/a.mp3")
        await player.set_queue(tracks)

        assert await player.next() is True

        assert player.state is TransportState.PLAYING
        assert player.last_error is None

    async def test_load_timeout_is_a_failure(self, engine, catalog, tracks):
        player = PlayerSession(engine=engine, catalog=catalog, load_timeout_seconds=0.01)
        engine.load_gate = asyncio.Event()

        assert await player.set_queue(tracks) is False

        assert player.state is TransportState.ERROR
        assert "Timed out" in player.last_error


# =============================================================================
# Load Generations
# =============================================================================


class TestLoadGenerations:
    """Tests for superseded loads and stale engine notifications."""

    async def test_newer_load_supersedes_pending_one(self, player, engine, tracks):
        engine.load_gate = asyncio.Event()
        first = asyncio.create_task(player.set_queue(tracks))
        await _wait_until(lambda: player.is_loading)

        second = asyncio.create_task(player.play(tracks[2]))
        await _wait_until(lambda: len(engine.loads) == 2)

        engine.load_gate.set()
        results = await asyncio.gather(first, second)

        assert results == [False, True]
        assert player.current_track.id == "c"
        assert player.state is TransportState.PLAYING
        assert engine.commands.count("play") == 1

    async def test_stale_notifications_are_ignored(self, player, engine, tracks):
        await player.set_queue(tracks)
        stale = engine.generation - 1

        engine.emit(EngineEnded(generation=stale))
        engine.emit(EngineProgress(generation=stale, position=99.0))
        await player.drain()

        assert player.current_index == 0
        assert player.position == 0.0
        assert player.is_playing

    async def test_error_while_loading_is_left_to_the_load(self, player, engine, tracks):
        engine.load_gate = asyncio.Event()
        task = asyncio.create_task(player.set_queue(tracks))
        await _wait_until(lambda: player.is_loading)

        engine.emit(EngineError(generation=player.session.load_generation, message="late"))
        await player.drain()
        assert player.state is TransportState.LOADING

        engine.load_gate.set()
        assert await task is True
        assert player.state is TransportState.PLAYING


# =============================================================================
# Engine Notifications
# =============================================================================


class TestEngineNotifications:
    """Tests for progress, end of track and errors reported by the engine."""

    async def test_progress_updates_position(self, player, engine, tracks):
        await player.set_queue(tracks)

        await _progress(player, engine, 12.5)

        assert player.position == 12.5

    async def test_progress_clamped_to_duration(self, player, engine, tracks):
        await player.set_queue(tracks)

        await _progress(player, engine, 500.0)

        assert player.position == 180.0

    async def test_loaded_refines_duration(self, player, engine, tracks):
        await player.set_queue(tracks)

        engine.emit(EngineLoaded(generation=engine.generation, duration=201.0))
        await player.drain()

        assert player.duration == 201.0

    async def test_end_of_track_advances(self, player, engine, tracks, recorded_events):
        await player.set_queue(tracks)

        engine.emit(EngineEnded(generation=engine.generation))
        await player.drain()

        assert player.current_index == 1
        assert player.is_playing
        assert _of_type(recorded_events, TrackChanged)[-1].reason is AdvanceReason.TRACK_ENDED

    async def test_end_of_last_track_stops(self, player, engine, tracks):
        await player.set_queue(tracks, 2)

        engine.emit(EngineEnded(generation=engine.generation))
        await player.drain()

        assert player.state is TransportState.STOPPED
        assert player.current_index == 2

    async def test_end_while_paused_is_ignored(self, player, engine, tracks):
        await player.set_queue(tracks)
        await player.pause()

        engine.emit(EngineEnded(generation=engine.generation))
        await player.drain()

        assert player.current_index == 0
        assert player.state is TransportState.PAUSED

    async def test_error_during_playback(self, player, engine, tracks, recorded_events):
        await player.set_queue(tracks)

        engine.emit(
            EngineError(generation=engine.generation, code="DECODE_ERROR", message="corrupt frame")
        )
        await player.drain()

        assert player.state is TransportState.ERROR
        assert player.last_error == "corrupt frame"
        failure = _of_type(recorded_events, PlaybackFailed)[-1]
        assert failure.code == "DECODE_ERROR"
        assert failure.track_id == "a"

    async def test_error_after_releasing_media_is_ignored(
        self, player, engine, tracks, recorded_events
    ):
        await player.set_queue(tracks)
        await player.pause()
        released = player.session.load_generation

        await player.remove_at(0)
        await player.handle_engine_event(EngineError(generation=released, message="late"))
        await player.handle_engine_event(
            EngineError(generation=player.session.load_generation, message="late")
        )

        assert player.state is TransportState.IDLE
        assert player.last_error is None
        assert _of_type(recorded_events, PlaybackFailed) == []

    async def test_error_after_failed_play_updates_message(
        self, player, engine, tracks, recorded_events
    ):
        engine.failing_plays.add("/music/a.mp3")
        assert await player.play(tracks[0]) is False
        failures = len(_of_type(recorded_events, PlaybackFailed))

        await player.handle_engine_event(
            EngineError(generation=player.session.load_generation, message="device lost")
        )

        assert player.state is TransportState.ERROR
        assert player.last_error == "device lost"
        assert len(_of_type(recorded_events, PlaybackFailed)) == failures

    async def test_event_pump_handles_notifications(self, player, engine, tracks):
        await player.set_queue(tracks)
        player.start_event_pump()
        assert player.is_pumping

        try:
            engine.emit(EngineProgress(generation=engine.generation, position=7.0))
            await player.drain()
            assert player.position == 7.0
        finally:
            await player.stop_event_pump()

        assert not player.is_pumping

    async def test_failing_handler_does_not_stop_pump(self, player, engine, tracks):
        await player.set_queue(tracks)

        async def broken(_event) -> None:
            raise RuntimeError("subscriber bug")

        from local_music_player.domain.player.events import PositionUpdated

        player.events.subscribe(PositionUpdated, broken)
        player.start_event_pump()
        try:
            engine.emit(EngineProgress(generation=engine.generation, position=3.0))
            engine.emit(EngineProgress(generation=engine.generation, position=4.0))
            await player.drain()
        finally:
            await player.stop_event_pump()

        assert player.position == 4.0


# =============================================================================
# Seek / Volume / Mode
# =============================================================================


class TestSeek:
    """Tests for seek()."""

    @pytest.mark.parametrize(("target", "expected"), [(60.0, 60.0), (500.0, 180.0), (-3.0, 0.0)])
    async def test_seek_clamped(self, player, engine, tracks, target, expected):
        await player.set_queue(tracks)

        assert await player.seek(target) == expected

        assert player.position == expected
        assert player.get_snapshot().position == expected
        assert engine.calls[-1] == ("seek", expected)

    async def test_seek_without_track(self, player, engine):
        assert await player.seek(10.0) is None
        assert engine.calls == []

    async def test_seek_unloaded_track_only_moves_position(self, player, engine, tracks):
        await player.add_to_queue(tracks[0])

        assert await player.seek(30.0) == 30.0
        assert not any(call[0] == "seek" for call in engine.calls)

    async def test_seek_while_loading_is_ignored(self, player, engine, tracks):
        engine.load_gate = asyncio.Event()
        task = asyncio.create_task(player.set_queue(tracks))
        await _wait_until(lambda: player.is_loading)

        assert await player.seek(20.0) is None

        engine.load_gate.set()
        await task


class TestVolumeAndMode:
    """Tests for set_volume() and set_mode()."""

    @pytest.mark.parametrize(("level", "expected"), [(0.4, 0.4), (1.5, 1.0), (-1.0, 0.0)])
    async def test_volume_clamped(self, player, engine, recorded_events, level, expected):
        assert await player.set_volume(level) == expected

        assert player.volume == expected
        assert engine.volume == expected
        assert _of_type(recorded_events, VolumeChanged)[-1].volume == expected

    async def test_set_mode_from_string(self, player, recorded_events):
        assert await player.set_mode("shuffle") is PlaybackMode.SHUFFLE
        assert player.mode is PlaybackMode.SHUFFLE
        assert _of_type(recorded_events, PlaybackModeChanged)[-1].mode is PlaybackMode.SHUFFLE

    async def test_invalid_mode_is_ignored(self, player, recorded_events):
        assert await player.set_mode("backwards") is None
        assert player.mode is PlaybackMode.SEQUENTIAL
        assert _of_type(recorded_events, PlaybackModeChanged) == []

    async def test_mode_change_keeps_current_track(self, player, tracks):
        await player.set_queue(tracks, 1)

        await player.set_mode(PlaybackMode.SHUFFLE)

        assert player.current_index == 1
        assert player.is_playing


# =============================================================================
# Queue Commands
# =============================================================================


class TestSetQueue:
    """Tests for set_queue()."""

    async def test_start_index_clamped(self, player, tracks):
        await player.set_queue(tracks, 10)
        assert player.current_index == 2

    async def test_empty_queue_clears(self, player, tracks):
        await player.set_queue(tracks)

        assert await player.set_queue([]) is False

        assert player.queue == ()
        assert player.current_index == -1
        assert player.state is TransportState.IDLE


class TestAddAndInsert:
    """Tests for add_to_queue() and insert_next()."""

    async def test_duplicate_add_is_ignored(self, player, tracks, make_track):
        await player.set_queue(tracks)

        assert await player.add_to_queue(make_track("a")) is False
        assert len(player.queue) == 3

    async def test_add_to_empty_selects_without_playing(self, player, engine, tracks):
        assert await player.add_to_queue(tracks[0]) is True

        assert player.current_index == 0
        assert player.state is TransportState.IDLE
        assert engine.calls == []

    async def test_add_does_not_interrupt(self, player, engine, tracks, make_track):
        await player.set_queue(tracks)

        await player.add_to_queue(make_track("d"))

        assert player.current_index == 0
        assert engine.loads == ["/music/a.mp3"]

    async def test_insert_next_plays_after_current(self, player, tracks, make_track):
        await player.set_queue(tracks)

        assert await player.insert_next(make_track("d")) == 1

        await player.next()
        assert player.current_track.id == "d"

    async def test_insert_current_track_is_ignored(self, player, tracks):
        await player.set_queue(tracks)

        assert await player.insert_next(tracks[0]) is None
        assert [t.id for t in player.queue] == ["a", "b", "c"]


class TestRemove:
    """Tests for remove_at()."""

    async def test_remove_other_track_keeps_playing(self, player, engine, tracks):
        await player.set_queue(tracks, 1)

        removed = await player.remove_at(0)

        assert removed.id == "a"
        assert player.current_index == 0
        assert player.current_track.id == "b"
        assert player.is_playing
        assert engine.loads == ["/music/b.mp3"]

    async def test_remove_playing_track_plays_following(self, player, engine, tracks):
        await player.set_queue(tracks, 0)

        await player.remove_at(0)

        assert player.current_track.id == "b"
        assert player.is_playing
        assert engine.loads == ["/music/a.mp3", "/music/b.mp3"]

    async def test_remove_paused_track_unloads(self, player, engine, tracks):
        await player.set_queue(tracks, 2)
        await player.pause()

        await player.remove_at(2)

        assert player.current_index == 1
        assert player.state is TransportState.IDLE
        assert engine.commands[-1] == "stop"

    async def test_remove_last_track_empties(self, player, tracks):
        await player.set_queue(tracks[:1])

        await player.remove_at(0)

        assert player.current_index == -1
        assert player.state is TransportState.IDLE

    async def test_remove_out_of_range(self, player, tracks):
        await player.set_queue(tracks)

        assert await player.remove_at(7) is None
        assert len(player.queue) == 3


class TestReorderAndClear:
    """Tests for reorder() and clear_queue()."""

    async def test_reorder_keeps_current_track(self, player, engine, tracks):
        await player.set_queue(tracks, 0)

        assert await player.reorder(0, 2) is True

        assert player.current_index == 2
        assert player.current_track.id == "a"
        assert player.is_playing
        assert engine.loads == ["/music/a.mp3"]

    async def test_reorder_same_index_is_ignored(self, player, tracks, recorded_events):
        await player.set_queue(tracks)
        before = len(_of_type(recorded_events, QueueChanged))

        assert await player.reorder(1, 1) is False
        assert len(_of_type(recorded_events, QueueChanged)) == before

    async def test_clear_queue(self, player, engine, tracks):
        await player.set_queue(tracks)

        assert await player.clear_queue() == 3

        assert player.queue == ()
        assert player.current_index == -1
        assert player.state is TransportState.IDLE
        assert not player.is_playing
        assert "stop" in engine.commands


class TestSnapshotView:
    """Tests for get_snapshot()."""

    async def test_snapshot_while_playing(self, player, engine, tracks):
        await player.set_mode(PlaybackMode.REPEAT_ALL)
        await player.set_volume(0.6)
        await player.set_queue(tracks, 1)
        await _progress(player, engine, 33.0)

        snapshot = player.get_snapshot()

        assert snapshot.current_track_id == "b"
        assert snapshot.is_playing is True
        assert snapshot.position == 33.0
        assert snapshot.volume == 0.6
        assert snapshot.mode is PlaybackMode.REPEAT_ALL
        assert snapshot.queue_track_ids == ("a", "b", "c")
        assert snapshot.queue_index == 1

    def test_initial_volume_and_mode(self, engine, catalog):
        player = PlayerSession(
            engine=engine,
            catalog=catalog,
            initial_volume=0.3,
            initial_mode=PlaybackMode.SHUFFLE,
            rng=random.Random(1),
        )

        assert player.volume == 0.3
        assert player.mode is PlaybackMode.SHUFFLE
        assert engine.sink == player.post_engine_event
