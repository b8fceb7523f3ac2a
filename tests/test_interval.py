"""Tests for the work/break interval timer engine.

Covers: start/pause/resume, the phase-completion tick (work → break →
idle), long-break cadence, skip_break, stop logging rules, configuration
changes mid-run, persistence and recovery, collaborator failures.
"""

import pytest

from habito.errors import InvalidStateError
from habito.timer.clock import to_datetime
from habito.timer.interval import (
    IntervalConfig, IntervalTimerEngine, POMODORO, ULTRADIAN,
)
from habito.timer.snapshot import TimerStatus

from helpers import MINUTE, T0, CallRecorder, SignalCollector, tick_after


# ═══════════════════════════════════════════════════════════════════════════
#  CONFIGURATION
# ═══════════════════════════════════════════════════════════════════════════


class TestConfig:

    def test_presets(self):
        assert (POMODORO.work_minutes, POMODORO.break_minutes) == (25, 5)
        assert POMODORO.long_break_minutes == 15
        assert POMODORO.cycles_before_long_break == 4
        assert (ULTRADIAN.work_minutes, ULTRADIAN.break_minutes) == (90, 20)
        assert ULTRADIAN.session_type == "ultradian_work"

    def test_defaults(self):
        cfg = IntervalConfig(50, 10)
        assert cfg.long_break_minutes == 15
        assert cfg.cycles_before_long_break == 4

    @pytest.mark.parametrize("kwargs", [
        {"work_minutes": 0, "break_minutes": 5},
        {"work_minutes": 25, "break_minutes": -1},
        {"work_minutes": 25, "break_minutes": 5, "cycles_before_long_break": 0},
        {"work_minutes": 25.5, "break_minutes": 5},
    ])
    def test_invalid_values_rejected(self, kwargs):
        with pytest.raises(ValueError):
            IntervalConfig(**kwargs)

    def test_break_after_cadence(self):
        cfg = IntervalConfig(25, 5, 15, 4)
        assert [cfg.break_ms_after(n) // MINUTE for n in range(1, 9)] == [
            5, 5, 5, 15, 5, 5, 5, 15,
        ]


# ═══════════════════════════════════════════════════════════════════════════
#  STATE TRANSITIONS
# ═══════════════════════════════════════════════════════════════════════════


class TestStateTransitions:

    def test_initial_state(self, pomodoro):
        assert pomodoro.status == TimerStatus.IDLE
        assert pomodoro.is_break is False
        assert pomodoro.cycles_completed == 0
        assert pomodoro.remaining_ms == 25 * MINUTE
        assert (pomodoro.minutes, pomodoro.seconds) == (25, 0)
        assert pomodoro.progress == 0.0

    def test_start(self, pomodoro, clock):
        pomodoro.start()
        snap = pomodoro.snapshot
        assert snap.status == TimerStatus.RUNNING
        assert snap.is_break is False
        assert snap.reference_instant == clock.now
        assert snap.accumulated_ms == 0
        assert snap.work_duration_ms == 25 * MINUTE
        assert snap.break_duration_ms == 5 * MINUTE
        assert pomodoro.is_ticking is True

    def test_pause_resume_keeps_phase(self, short_cycle, clock):
        short_cycle.start()
        tick_after(short_cycle, clock, MINUTE)  # into the break
        short_cycle.pause()
        assert short_cycle.status == TimerStatus.PAUSED
        assert short_cycle.is_break is True
        short_cycle.resume()
        assert short_cycle.status == TimerStatus.RUNNING
        assert short_cycle.is_break is True

    def test_paused_time_not_counted(self, pomodoro, clock):
        pomodoro.start()
        clock.advance(30_000)
        pomodoro.pause()
        clock.advance(10 * MINUTE)
        pomodoro.resume()
        tick_after(pomodoro, clock, 30_000)
        assert pomodoro.elapsed_ms == MINUTE

    def test_start_while_running_is_noop(self, pomodoro, clock):
        pomodoro.start()
        tick_after(pomodoro, clock, 5_000)
        pomodoro.start()
        assert pomodoro.elapsed_ms == 5_000

    def test_strict_mode_raises(self, qapp, store, clock):
        engine = IntervalTimerEngine(store, "strict", POMODORO, clock=clock, strict=True)
        with pytest.raises(InvalidStateError):
            engine.resume()
        with pytest.raises(InvalidStateError):
            engine.skip_break()


# ═══════════════════════════════════════════════════════════════════════════
#  COUNTDOWN / DRIFT
# ═══════════════════════════════════════════════════════════════════════════


class TestCountdown:

    def test_tick_updates_remaining(self, pomodoro, clock):
        pomodoro.start()
        tick_after(pomodoro, clock, 61_500)
        assert pomodoro.elapsed_ms == 61_500
        assert pomodoro.remaining_ms == 25 * MINUTE - 61_500
        assert (pomodoro.minutes, pomodoro.seconds) == (23, 58)

    def test_progress(self, pomodoro, clock):
        pomodoro.start()
        tick_after(pomodoro, clock, 5 * MINUTE)
        assert pomodoro.progress == pytest.approx(20.0)

    def test_late_tick_catches_up_in_one_step(self, pomodoro, clock):
        pomodoro.start()
        tick_after(pomodoro, clock, 16)
        tick_after(pomodoro, clock, 10 * MINUTE)
        assert pomodoro.elapsed_ms == 10 * MINUTE + 16


# ═══════════════════════════════════════════════════════════════════════════
#  PHASE COMPLETION
# ═══════════════════════════════════════════════════════════════════════════


class TestPhaseCompletion:

    def test_work_completion_logs_and_starts_break(self, short_cycle, clock, segments):
        short_cycle.start()
        tick_after(short_cycle, clock, MINUTE)

        assert segments.calls == [(1, to_datetime(T0), to_datetime(T0 + MINUTE))]
        assert short_cycle.status == TimerStatus.RUNNING
        assert short_cycle.is_break is True
        assert short_cycle.cycles_completed == 1
        assert short_cycle.break_duration_ms == MINUTE
        assert short_cycle.elapsed_ms == 0
        assert short_cycle.snapshot.reference_instant == clock.now

    def test_crossing_fires_once(self, short_cycle, clock, segments):
        short_cycle.start()
        tick_after(short_cycle, clock, MINUTE)
        short_cycle._on_tick()
        short_cycle._on_tick()
        assert len(segments) == 1
        assert short_cycle.cycles_completed == 1

    def test_overshoot_is_logged_in_full(self, short_cycle, clock, segments):
        short_cycle.start()
        tick_after(short_cycle, clock, 3 * MINUTE + 20_000)
        assert segments.last[0] == 3
        # the break still starts fresh at the crossing tick
        assert short_cycle.elapsed_ms == 0

    def test_end_to_end_cycle(self, short_cycle, clock, segments):
        breaks = SignalCollector()
        short_cycle.break_completed.connect(breaks)

        short_cycle.start()
        tick_after(short_cycle, clock, 30_000)
        assert len(segments) == 0
        tick_after(short_cycle, clock, 30_000)
        assert len(segments) == 1
        assert segments.last[0] == 1
        assert short_cycle.is_break is True
        assert short_cycle.break_duration_ms == 60_000

        tick_after(short_cycle, clock, MINUTE)
        assert len(breaks) == 1
        assert short_cycle.status == TimerStatus.IDLE
        assert short_cycle.is_break is False
        assert short_cycle.cycles_completed == 1
        assert short_cycle.snapshot.reference_instant is None
        assert short_cycle.elapsed_ms == 0
        assert short_cycle.is_ticking is False
        assert len(segments) == 1

    def test_break_complete_callback(self, qapp, store, clock):
        on_break = CallRecorder()
        engine = IntervalTimerEngine(
            store, "t", IntervalConfig(1, 1), clock=clock, on_break_complete=on_break,
        )
        engine.start()
        tick_after(engine, clock, MINUTE)
        assert len(on_break) == 0
        tick_after(engine, clock, MINUTE)
        assert on_break.calls == [()]

    def test_long_break_every_fourth_cycle(self, pomodoro, clock):
        chosen = []
        for _ in range(4):
            pomodoro.start()
            tick_after(pomodoro, clock, 25 * MINUTE)
            chosen.append(pomodoro.break_duration_ms)
            tick_after(pomodoro, clock, pomodoro.break_duration_ms)
            assert pomodoro.status == TimerStatus.IDLE
        assert chosen == [5 * MINUTE, 5 * MINUTE, 5 * MINUTE, 15 * MINUTE]
        assert pomodoro.cycles_completed == 4

    def test_cycles_survive_break_completion(self, short_cycle, clock):
        short_cycle.start()
        tick_after(short_cycle, clock, MINUTE)
        tick_after(short_cycle, clock, MINUTE)
        short_cycle.start()
        tick_after(short_cycle, clock, MINUTE)
        assert short_cycle.cycles_completed == 2
        assert short_cycle.break_duration_ms == 2 * MINUTE  # long break

    def test_phase_changed_signal(self, short_cycle, clock):
        c = SignalCollector()
        short_cycle.phase_changed.connect(c)
        short_cycle.start()
        tick_after(short_cycle, clock, MINUTE)
        tick_after(short_cycle, clock, MINUTE)
        assert c.items == [True, False]


# ═══════════════════════════════════════════════════════════════════════════
#  SKIP BREAK
# ═══════════════════════════════════════════════════════════════════════════


class TestSkipBreak:

    def test_skip_break_goes_idle_silently(self, short_cycle, clock, segments):
        breaks = SignalCollector()
        short_cycle.break_completed.connect(breaks)

        short_cycle.start()
        tick_after(short_cycle, clock, MINUTE)
        assert len(segments) == 1

        tick_after(short_cycle, clock, 10_000)
        short_cycle.skip_break()

        assert short_cycle.status == TimerStatus.IDLE
        assert short_cycle.is_break is False
        assert short_cycle.cycles_completed == 1
        assert len(segments) == 1
        assert len(breaks) == 0

    def test_skip_break_ignored_during_work(self, pomodoro, clock):
        pomodoro.start()
        tick_after(pomodoro, clock, 10_000)
        pomodoro.skip_break()
        assert pomodoro.status == TimerStatus.RUNNING
        assert pomodoro.elapsed_ms == 10_000

    def test_skip_break_ignored_while_paused(self, short_cycle, clock):
        short_cycle.start()
        tick_after(short_cycle, clock, MINUTE)
        short_cycle.pause()
        short_cycle.skip_break()
        assert short_cycle.status == TimerStatus.PAUSED

    def test_skipped_state_is_persisted(self, short_cycle, store, clock):
        short_cycle.start()
        tick_after(short_cycle, clock, MINUTE)
        short_cycle.skip_break()
        saved = store.load("short-timer")
        assert saved["status"] == "idle"
        assert saved["cyclesCompleted"] == 1


# ═══════════════════════════════════════════════════════════════════════════
#  STOP
# ═══════════════════════════════════════════════════════════════════════════


class TestStop:

    def test_stop_in_work_logs_when_over_a_minute(self, pomodoro, clock, segments):
        pomodoro.start()
        tick_after(pomodoro, clock, 4 * MINUTE)
        clock.advance(30_000)
        pomodoro.stop()
        assert segments.last == (4, to_datetime(T0), to_datetime(clock.now))

    def test_stop_exactly_one_minute(self, pomodoro, clock, segments):
        pomodoro.start()
        clock.advance(MINUTE)
        pomodoro.stop()
        assert segments.last[0] == 1

    def test_stop_under_a_minute_not_logged(self, pomodoro, clock, segments):
        pomodoro.start()
        clock.advance(59_000)
        pomodoro.stop()
        assert len(segments) == 0

    def test_stop_in_break_not_logged(self, short_cycle, clock, segments):
        short_cycle.start()
        tick_after(short_cycle, clock, MINUTE)
        clock.advance(50_000)
        short_cycle.stop()
        assert len(segments) == 1  # only the completed work phase

    def test_stop_paused_in_break_not_logged(self, qapp, store, clock, segments):
        engine = IntervalTimerEngine(
            store, "t", IntervalConfig(1, 5), clock=clock, on_work_segment_complete=segments,
        )
        engine.start()
        tick_after(engine, clock, MINUTE)
        tick_after(engine, clock, 2 * MINUTE)
        engine.pause()
        engine.stop()
        assert len(segments) == 1

    def test_stop_resets_everything(self, short_cycle, clock, store):
        short_cycle.start()
        tick_after(short_cycle, clock, MINUTE)
        short_cycle.stop()
        assert short_cycle.status == TimerStatus.IDLE
        assert short_cycle.cycles_completed == 0
        assert short_cycle.is_break is False
        assert short_cycle.break_duration_ms == MINUTE
        assert "short-timer" not in store

    def test_stop_when_idle_is_noop(self, pomodoro, segments):
        pomodoro.stop()
        pomodoro.stop()
        assert pomodoro.status == TimerStatus.IDLE
        assert len(segments) == 0

    def test_reset_does_not_log(self, pomodoro, clock, segments):
        pomodoro.start()
        clock.advance(10 * MINUTE)
        pomodoro.reset()
        assert len(segments) == 0
        assert pomodoro.status == TimerStatus.IDLE


# ═══════════════════════════════════════════════════════════════════════════
#  CONFIG CHANGES MID-RUN
# ═══════════════════════════════════════════════════════════════════════════


class TestConfigChanges:

    def test_running_phase_keeps_its_length(self, pomodoro, clock):
        pomodoro.start()
        pomodoro.config = IntervalConfig(50, 10)
        assert pomodoro.work_duration_ms == 25 * MINUTE
        pomodoro.pause()
        pomodoro.resume()
        assert pomodoro.work_duration_ms == 25 * MINUTE

    def test_new_config_applies_on_next_start(self, pomodoro, clock):
        pomodoro.start()
        pomodoro.config = IntervalConfig(50, 10)
        pomodoro.stop()
        pomodoro.start()
        assert pomodoro.work_duration_ms == 50 * MINUTE
        assert pomodoro.break_duration_ms == 10 * MINUTE

    def test_idle_display_follows_new_config(self, pomodoro):
        pomodoro.config = IntervalConfig(50, 10)
        assert pomodoro.remaining_ms == 50 * MINUTE

    def test_idle_config_change_updates_stored_snapshot(self, short_cycle, clock, store):
        short_cycle.start()
        tick_after(short_cycle, clock, MINUTE)
        short_cycle.skip_break()
        assert store.load("short-timer")["cyclesCompleted"] == 1

        short_cycle.config = IntervalConfig(3, 2)
        stored = store.load("short-timer")
        assert stored["workDurationMs"] == 3 * MINUTE
        assert stored["breakDurationMs"] == 2 * MINUTE
        assert stored["cyclesCompleted"] == 1

    def test_idle_config_change_does_not_create_a_snapshot(self, pomodoro, store):
        pomodoro.config = IntervalConfig(50, 10)
        assert "pomodoro-timer" not in store


# ═══════════════════════════════════════════════════════════════════════════
#  PERSISTENCE / RECOVERY
# ═══════════════════════════════════════════════════════════════════════════


class TestRecovery:

    def test_running_break_restored_verbatim(self, qapp, store, clock):
        store.save("pomodoro-timer", {
            "status": "running", "referenceInstant": T0, "accumulatedMs": 30_000,
            "workStartedAt": None, "isBreak": True,
            "workDurationMs": 25 * MINUTE, "breakDurationMs": 15 * MINUTE,
            "cyclesCompleted": 4,
        })
        clock.advance(2 * MINUTE)
        engine = IntervalTimerEngine(store, "pomodoro-timer", POMODORO, clock=clock)

        assert engine.status == TimerStatus.RUNNING
        assert engine.is_break is True
        assert engine.break_duration_ms == 15 * MINUTE
        assert engine.cycles_completed == 4
        assert engine.elapsed_ms == 30_000 + 2 * MINUTE
        assert engine.snapshot.reference_instant == clock.now
        engine.close()

    def test_completion_detected_on_first_tick_after_reload(self, qapp, store, clock, segments):
        first = IntervalTimerEngine(store, "t", IntervalConfig(1, 1), clock=clock)
        first.start()
        first.close()

        clock.advance(5 * MINUTE)
        second = IntervalTimerEngine(
            store, "t", IntervalConfig(1, 1), clock=clock,
            on_work_segment_complete=segments,
        )
        second._on_tick()
        assert segments.last == (5, to_datetime(T0), to_datetime(T0 + 5 * MINUTE))
        assert second.is_break is True
        second.close()

    def test_phase_transition_is_persisted(self, short_cycle, store, clock):
        short_cycle.start()
        tick_after(short_cycle, clock, MINUTE)
        saved = store.load("short-timer")
        assert saved["isBreak"] is True
        assert saved["cyclesCompleted"] == 1
        assert saved["referenceInstant"] == clock.now

    def test_missing_durations_come_from_config(self, qapp, store, clock):
        store.save("t", {"status": "paused", "referenceInstant": T0, "accumulatedMs": 1_000})
        engine = IntervalTimerEngine(store, "t", IntervalConfig(40, 8), clock=clock)
        assert engine.work_duration_ms == 40 * MINUTE
        assert engine.break_duration_ms == 8 * MINUTE

    def test_corrupt_snapshot_recovers_to_idle(self, qapp, store, clock):
        store.save("t", {"status": "running", "referenceInstant": T0, "workDurationMs": 0})
        engine = IntervalTimerEngine(store, "t", POMODORO, clock=clock)
        assert engine.status == TimerStatus.IDLE
        assert engine.work_duration_ms == 25 * MINUTE
        assert "t" not in store


# ═══════════════════════════════════════════════════════════════════════════
#  COLLABORATOR FAILURES
# ═══════════════════════════════════════════════════════════════════════════


class TestCollaboratorFailures:

    def test_failing_segment_logger_still_enters_break(self, qapp, store, clock):
        broken = CallRecorder(error=RuntimeError("save failed"))
        engine = IntervalTimerEngine(
            store, "t", IntervalConfig(1, 1), clock=clock,
            on_work_segment_complete=broken,
        )
        failures = SignalCollector()
        engine.segment_log_failed.connect(failures)

        engine.start()
        tick_after(engine, clock, MINUTE)

        assert engine.is_break is True
        assert engine.cycles_completed == 1
        assert len(failures) == 1
        assert str(failures.last) == "save failed"

    def test_failing_break_observer_is_isolated(self, qapp, store, clock):
        engine = IntervalTimerEngine(
            store, "t", IntervalConfig(1, 1), clock=clock,
            on_break_complete=CallRecorder(error=RuntimeError("no notifications")),
        )
        engine.start()
        tick_after(engine, clock, MINUTE)
        tick_after(engine, clock, MINUTE)
        assert engine.status == TimerStatus.IDLE
        assert engine.cycles_completed == 1
