import pytest

from debris_tracker.core.timekeeping import Scheduler, SimulationClock


class TestSimulationClock:
    def test_advance_scales_by_warp(self):
        clock = SimulationClock(simulated_ms=1_000.0, wall_clock_last_tick=0.0, time_warp=100.0)
        assert clock.advance(16.0) == pytest.approx(1_000.0 + 1_600.0)
        assert clock.wall_clock_last_tick == pytest.approx(16.0)

    def test_warp_change_is_not_retroactive(self):
        clock = SimulationClock(simulated_ms=0.0, wall_clock_last_tick=0.0, time_warp=10.0)
        clock.advance(100.0)
        clock.time_warp = 1000.0
        clock.advance(1.0)
        assert clock.simulated_ms == pytest.approx(100.0 * 10.0 + 1.0 * 1000.0)

    def test_negative_warp_moves_backwards_by_exact_amount(self):
        clock = SimulationClock(simulated_ms=10_000.0, wall_clock_last_tick=0.0, time_warp=-5.0)
        clock.advance(200.0)
        assert clock.simulated_ms == pytest.approx(9_000.0)

    def test_tick_uses_elapsed_since_last_tick(self):
        clock = SimulationClock(simulated_ms=0.0, wall_clock_last_tick=50.0, time_warp=2.0)
        assert clock.tick(80.0) == pytest.approx(60.0)
        assert clock.tick(80.0) == pytest.approx(60.0)
        assert clock.wall_clock_last_tick == 80.0

    def test_format_utc(self):
        clock = SimulationClock(simulated_ms=0.0, wall_clock_last_tick=0.0)
        assert clock.format_utc() == "01 Jan 1970 00:00:00"

    def test_start_uses_given_instants(self):
        clock = SimulationClock.start(time_warp=500.0, now_wall_ms=123.0, now_perf_ms=7.0)
        assert (clock.simulated_ms, clock.wall_clock_last_tick, clock.time_warp) == (123.0, 7.0, 500.0)


class TestScheduler:
    def test_frame_requested_during_pass_runs_next_pass(self, scheduler):
        calls = []

        def frame(now):
            calls.append(now)
            scheduler.request_frame(frame)

        scheduler.request_frame(frame)
        scheduler.run_pending()
        assert len(calls) == 1
        assert scheduler.pending_frames == 1
        scheduler.run_pending()
        assert len(calls) == 2

    def test_cancel_is_idempotent(self, scheduler):
        handle = scheduler.request_frame(lambda now: None)
        scheduler.cancel_frame(handle)
        scheduler.cancel_frame(handle)
        scheduler.cancel_frame(None)
        assert scheduler.pending_frames == 0

    def test_frame_cancelled_during_pass_is_skipped(self, scheduler):
        calls = []
        handles = {}

        def first(now):
            calls.append("first")
            scheduler.cancel_frame(handles["second"])

        handles["first"] = scheduler.request_frame(first)
        handles["second"] = scheduler.request_frame(lambda now: calls.append("second"))
        scheduler.run_pending()
        assert calls == ["first"]

    def test_timers_fire_in_due_order(self, scheduler, manual_time):
        calls = []
        scheduler.set_timeout(lambda: calls.append("late"), 200)
        scheduler.set_timeout(lambda: calls.append("early"), 100)
        manual_time.now = 99
        scheduler.run_pending()
        assert calls == []
        manual_time.now = 250
        scheduler.run_pending()
        assert calls == ["early", "late"]
        assert scheduler.active_timers == 0

    def test_interval_repeats_until_cleared(self, scheduler, manual_time):
        calls = []
        handle = scheduler.set_interval(lambda: calls.append(manual_time.now), 500)
        for now in (499, 500, 900, 1000, 1500):
            manual_time.now = now
            scheduler.run_pending()
        assert calls == [500, 1000, 1500]
        scheduler.clear_timer(handle)
        scheduler.clear_timer(handle)
        manual_time.now = 5000
        scheduler.run_pending()
        assert len(calls) == 3

    def test_interval_must_be_positive(self, scheduler):
        with pytest.raises(ValueError):
            scheduler.set_interval(lambda: None, 0)

    def test_timers_run_before_frames(self, scheduler, manual_time):
        order = []
        scheduler.request_frame(lambda now: order.append("frame"))
        scheduler.set_timeout(lambda: order.append("timer"), 0)
        scheduler.run_pending()
        assert order == ["timer", "frame"]

    def test_frame_callback_receives_pass_time(self, manual_time):
        manual_time.now = 42.0
        scheduler = Scheduler(time_source=manual_time)
        seen = []
        scheduler.request_frame(seen.append)
        scheduler.run_pending()
        assert seen == [42.0]
