# tests/app/test_build_and_run.py
import logging

import pytest

from ruralnav.app.build import build
from ruralnav.app.events import (
    DestinationRequested,
    GpsStatusChanged,
    NavigationStopped,
    PositionFix,
    SensorSample,
    TrackCommand,
)
from ruralnav.domain.entities.geography import Coordinate
from ruralnav.domain.entities.motion import ManeuverKind
from ruralnav.domain.entities.sensors import SensorReadings
from ruralnav.domain.mechanics.mechanics_geodesy import bearing_deg, destination_point, distance_m
from ruralnav.domain.mechanics.mechanics_routers import AStarRouter
from ruralnav.domain.mechanics.mechanics_topology import build_builtin_graph
from ruralnav.io.recorder import AsyncSink, MemorySink
from ruralnav.runtime.types import MotionMode, NavState, RouteSource

START = Coordinate(26.9124, 75.7873)
LOG = logging.getLogger("tests.ruralnav")


def make_app(*, mode="walk", planner=None, tick_s=0.1, duration=600.0, log=None):
    cfg = {
        "name": "test",
        "run_id": "t-1",
        "sim": {"epoch": [2025, 1, 1, 8, 0, 0], "seed": 1, "tick_s": tick_s, "duration": duration},
        "vehicle": {"start": list(START.as_tuple()), "mode": mode},
        "routing": {
            "planner": planner or {"kind": "direct"},
            "remote": {"kind": "disabled"},
        },
        "log": log or {},
    }
    mem = MemorySink()
    app = build(cfg, sinks=[mem], logger=LOG)
    return app, mem


def test_car_on_straight_route_arrives():
    app, mem = make_app(mode="CAR")
    dest = destination_point(START, 500.0, 0.0)
    app.kernel.schedule(DestinationRequested(t=0.0, destination=dest))
    app.start()
    app.kernel.run(until=120.0)

    assert app.state.nav_state is NavState.ARRIVED
    assert distance_m(app.state.vehicle.position, dest) < 20.0

    (requested,) = mem.named("route_requested")
    assert requested.mode == "car" and requested.request_id == 1
    (installed,) = mem.named("route_installed")
    assert installed.source == "direct" and installed.points == 2
    assert len(mem.named("arrived")) == 1

    modes = [(e.previous, e.current) for e in mem.named("motion_mode_changed")]
    assert modes == [("idle", "route_following"), ("route_following", "idle")]

    snap = app.navigation.last_snapshot
    assert snap.speed_mps == 0.0
    assert snap.maneuver.kind is ManeuverKind.ARRIVE
    assert snap.signal_strength is not None
    app.close()


def test_walk_through_the_builtin_graph():
    app, mem = make_app(planner={"kind": "astar"}, tick_s=0.5, duration=1500.0)
    assert isinstance(app.mechanics.planner, AStarRouter)
    dest = build_builtin_graph().node_point("n5")
    app.kernel.schedule(DestinationRequested(t=0.0, destination=dest))
    app.start()
    app.kernel.run(until=1500.0)

    route = app.state.route
    assert route.source is RouteSource.OFFLINE
    assert route.start == START and route.destination == dest
    assert len(route) == 3
    assert app.state.nav_state is NavState.ARRIVED
    assert any(e.kind in ("left", "right") for e in mem.named("maneuver_changed"))


def test_dead_reckoning_without_gps():
    app, mem = make_app()
    app.kernel.schedule(GpsStatusChanged(t=0.0, available=False))
    app.kernel.schedule(SensorSample(t=0.0, readings=SensorReadings(heading=90.0, acc_x=3.0)))
    app.start()
    app.kernel.run(until=10.0)

    moved = distance_m(START, app.state.vehicle.position)
    assert moved == pytest.approx(15.0, abs=0.2)
    assert bearing_deg(START, app.state.vehicle.position) == pytest.approx(90.0, abs=0.01)
    assert app.navigation.last_snapshot.motion_mode is MotionMode.DEAD_RECKONING
    assert mem.named("motion_mode_changed")[0].current == "dead_reckoning"


def test_position_fixes_apply_only_with_gps():
    app, _ = make_app()
    fix = destination_point(START, 30.0, 45.0)
    app.kernel.schedule(GpsStatusChanged(t=0.0, available=False))
    app.kernel.schedule(PositionFix(t=1.0, position=fix))
    app.kernel.schedule(GpsStatusChanged(t=2.0, available=True))
    app.kernel.schedule(PositionFix(t=3.0, position=fix))
    app.kernel.run(until=1.5)
    assert app.state.vehicle.position == START
    app.kernel.run(until=4.0)
    assert app.state.vehicle.position == fix


def test_track_is_recorded_while_driving():
    app, _ = make_app(mode="car")
    app.kernel.schedule(TrackCommand(t=0.0, action="start"))
    dest = destination_point(START, 300.0, 0.0)
    app.kernel.schedule(DestinationRequested(t=0.0, destination=dest))
    app.start()
    app.kernel.run(until=30.0)
    pts = app.navigation.track.points
    assert pts[0] == START
    assert len(pts) > 10
    assert all(distance_m(a, b) > 5.0 for a, b in zip(pts, pts[1:]))


def test_stopping_navigation_halts_the_vehicle():
    app, mem = make_app(mode="bike")
    dest = destination_point(START, 800.0, 0.0)
    app.kernel.schedule(DestinationRequested(t=0.0, destination=dest))
    app.kernel.schedule(NavigationStopped(t=10.0))
    app.start()
    app.kernel.run(until=12.0)
    s = app.state
    assert s.nav_state is NavState.IDLE and s.route is None
    assert s.vehicle.speed_mps == 0.0
    assert app.navigation.last_snapshot.maneuver is None
    assert app.navigation.last_snapshot.eta is None
    assert not mem.named("arrived")


def test_buffered_recorder_flushes_on_close():
    app, mem = make_app(mode="CAR", log={"async_sink": True})
    (sink,) = app.recorder.sinks
    assert isinstance(sink, AsyncSink) and sink.sink is mem
    dest = destination_point(START, 500.0, 0.0)
    app.kernel.schedule(DestinationRequested(t=0.0, destination=dest))
    app.start()
    app.kernel.run(until=120.0)
    app.close()
    assert not sink._t.is_alive()
    assert len(mem.named("route_requested")) == 1
    assert len(mem.named("arrived")) == 1
