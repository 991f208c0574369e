"""Tests for dailyfocus/timer.py: focus/break state machine and driver."""

from dailyfocus.clock import VirtualClock
from dailyfocus.models import Phase, TimerConfig, TimerState
from dailyfocus.timer import FocusTimer, TimerDriver

from conftest import at


def test_initial_state():
    t = FocusTimer(TimerConfig(25, 5))
    assert t.state == TimerState(phase=Phase.FOCUS, seconds_remaining=1500, running=False)
    assert t.display() == "25:00"


def test_full_focus_phase_rolls_into_break():
    t = FocusTimer(TimerConfig(25, 5))
    t.start()
    for _ in range(1500):
        t.tick()
    assert t.state == TimerState(phase=Phase.BREAK, seconds_remaining=300, running=True)


def test_break_rolls_back_into_focus():
    t = FocusTimer(TimerConfig(25, 5))
    t.start()
    for _ in range(1500 + 300):
        t.tick()
    assert t.phase is Phase.FOCUS
    assert t.seconds_remaining == 1500
    assert t.running is True


def test_tick_ignored_while_paused():
    t = FocusTimer()
    t.start()
    t.tick()
    t.pause()
    t.tick()
    assert t.seconds_remaining == 1499
    assert t.running is False


def test_reset_uses_current_phase():
    t = FocusTimer(TimerConfig(25, 5))
    t.toggle_break()
    t.start()
    t.tick()
    t.reset()
    assert t.state == TimerState(phase=Phase.BREAK, seconds_remaining=300, running=False)


def test_toggle_break_keeps_remaining_seconds():
    t = FocusTimer(TimerConfig(25, 5))
    t.start()
    for _ in range(10):
        t.tick()
    t.toggle_break()
    assert t.phase is Phase.BREAK
    assert t.seconds_remaining == 1490
    assert t.running is True


def test_set_config_when_stopped_applies_immediately():
    t = FocusTimer()
    t.set_config(50, 10)
    assert t.seconds_remaining == 3000
    t.toggle_break()
    t.reset()
    assert t.seconds_remaining == 600


def test_set_config_when_running_waits_for_flip():
    t = FocusTimer(TimerConfig(1, 5))
    t.start()
    t.tick()
    t.set_config(2, 3)
    assert t.seconds_remaining == 59
    for _ in range(59):
        t.tick()
    assert t.phase is Phase.BREAK
    assert t.seconds_remaining == 180


def test_set_config_clamps():
    t = FocusTimer()
    t.set_config(0, -4)
    assert t.config == TimerConfig(1, 1)
    assert t.seconds_remaining == 60
    t.set_config("abc", None)
    assert t.config == TimerConfig(1, 1)


def test_toggle_running():
    t = FocusTimer()
    t.toggle_running()
    assert t.running is True
    t.toggle_running()
    assert t.running is False


def test_display_formats_long_durations():
    t = FocusTimer(TimerConfig(120, 5))
    assert t.display() == "120:00"
    t.start()
    t.tick()
    assert t.display() == "119:59"


def test_subscribers_get_events():
    t = FocusTimer(TimerConfig(1, 1))
    events = []
    t.subscribe(lambda event, payload: events.append(event))
    t.start()
    for _ in range(60):
        t.tick()
    t.pause()
    assert events[0] == "timer_started"
    assert events.count("timer_ticked") == 59
    assert events[-2:] == ["phase_changed", "timer_paused"]


def test_driver_ticks_once_per_second():
    clock = VirtualClock(at("2026-02-11", 9))
    t = FocusTimer(TimerConfig(25, 5))
    driver = TimerDriver(t, clock)
    handle = driver.start()
    assert driver.start() is handle
    clock.advance(seconds=90)
    assert t.seconds_remaining == 1500 - 90
    driver.pause()
    assert not handle.active
    clock.advance(seconds=30)
    assert t.seconds_remaining == 1500 - 90


def test_driver_reset_and_close():
    clock = VirtualClock(at("2026-02-11", 9))
    t = FocusTimer(TimerConfig(25, 5))
    driver = TimerDriver(t, clock)
    driver.start()
    clock.advance(seconds=5)
    driver.reset()
    assert t.seconds_remaining == 1500
    assert clock.pending() == 0
    driver.toggle_running()
    assert driver.active
    driver.close()
    assert not driver.active
    clock.advance(seconds=5)
    assert t.seconds_remaining == 1500


def test_driver_runs_through_phase_change():
    clock = VirtualClock(at("2026-02-11", 9))
    t = FocusTimer(TimerConfig(25, 5))
    driver = TimerDriver(t, clock)
    driver.start()
    clock.advance(seconds=1500)
    assert t.state == TimerState(phase=Phase.BREAK, seconds_remaining=300, running=True)


def test_zero_durations_are_clamped_to_a_minute():
    t = FocusTimer(TimerConfig(0, 0))
    assert t.seconds_remaining == 60
    t.start()
    t.tick()
    assert t.phase is Phase.FOCUS
    assert t.seconds_remaining == 59
