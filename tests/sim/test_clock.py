# tests/sim/test_clock.py
from datetime import UTC, datetime

from ruralnav.sim.clock import SimClock


def test_sim_and_wall_time_round_trip():
    clock = SimClock.utc_epoch(2025, 1, 1, 8, 0, 0)
    wall = clock.to_wall(90.0)
    assert wall == datetime(2025, 1, 1, 8, 1, 30, tzinfo=UTC)
    assert clock.to_sim(wall) == 90.0


def test_naive_datetimes_are_read_as_utc():
    clock = SimClock.utc_epoch(2025, 1, 1)
    assert clock.to_sim(datetime(2025, 1, 1, 0, 10)) == 600.0


def test_clock_text_for_eta():
    clock = SimClock.utc_epoch(2025, 1, 1, 23, 30, 0)
    assert clock.clock_text(0.0) == "23:30"
    assert clock.clock_text(45 * 60.0) == "00:15"  # rolls over midnight


def test_starting_now_is_tz_aware():
    assert SimClock.starting_now().epoch.tzinfo is not None
