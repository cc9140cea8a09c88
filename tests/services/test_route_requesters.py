# tests/services/test_route_requesters.py
import logging
import threading
import time

from ruralnav.domain.entities.geography import Coordinate, Route, RoutingPreferences
from ruralnav.domain.mechanics.mechanics_routers import DirectRouter
from ruralnav.runtime.types import RouteSource, TransportMode
from ruralnav.services.route_acquisition import RouteAcquisition
from ruralnav.services.route_requesters import InlineRouteRequester, ThreadedRouteRequester

A, B = Coordinate(0.0, 0.0), Coordinate(0.0, 0.01)
KW = {"mode": TransportMode.WALK, "prefs": RoutingPreferences()}


def wait_for(poll, timeout=2.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        got = poll()
        if got is not None:
            return got
        time.sleep(0.01)
    return None


def test_inline_requester_hands_back_the_newest_result_once():
    req = InlineRouteRequester(RouteAcquisition(DirectRouter()))
    assert req.poll() is None
    req.submit(1, A, B, **KW)
    req.submit(2, B, A, **KW)
    rid, route = req.poll()
    assert rid == 2
    assert route == Route((B, A), RouteSource.DIRECT)
    assert req.poll() is None


class GatedAcquisition:
    """Blocks every acquisition until the test opens the gate."""

    def __init__(self):
        self.gate = threading.Event()
        self.calls = []

    def acquire(self, start, end, mode=None, prefs=None, waypoints=(), *, online=True):
        self.gate.wait(timeout=2.0)
        self.calls.append((start, end))
        return Route((start, end), RouteSource.DIRECT)


def test_threaded_requester_does_not_block_submit():
    acq = GatedAcquisition()
    req = ThreadedRouteRequester(acq)
    try:
        t0 = time.monotonic()
        req.submit(1, A, B, **KW)
        assert time.monotonic() - t0 < 0.5
        assert req.poll() is None
        acq.gate.set()
        rid, route = wait_for(req.poll)
        assert rid == 1 and route.points == (A, B)
    finally:
        req.close()


def test_threaded_requester_drops_oldest_pending_on_overflow():
    acq = GatedAcquisition()
    req = ThreadedRouteRequester(acq, maxsize=1)
    try:
        for rid in range(1, 6):
            req.submit(rid, A, B, **KW)
        assert req.dropped >= 3
        acq.gate.set()
        # the newest request always survives
        deadline = time.monotonic() + 2.0
        newest = None
        while time.monotonic() < deadline and newest != 5:
            got = req.poll()
            if got is not None:
                newest = got[0]
            time.sleep(0.01)
        assert newest == 5
    finally:
        req.close()


def test_close_stops_the_worker():
    req = ThreadedRouteRequester(RouteAcquisition(DirectRouter()))
    req.close()
    assert not req._t.is_alive()


class BrokenAcquisition:
    def __init__(self):
        self.calls = 0

    def acquire(self, start, end, mode=None, prefs=None, waypoints=(), *, online=True):
        self.calls += 1
        if self.calls == 1:
            raise RuntimeError("router exploded")
        return Route((start, end), RouteSource.OFFLINE)


def test_threaded_requester_survives_a_failing_acquisition(caplog):
    via = Coordinate(0.005, 0.005)
    acq = BrokenAcquisition()
    req = ThreadedRouteRequester(acq)
    try:
        with caplog.at_level(logging.ERROR, logger="ruralnav.routing"):
            req.submit(1, A, B, waypoints=(via,), **KW)
            rid, route = wait_for(req.poll)
        assert rid == 1
        assert route == Route((A, via, B), RouteSource.DIRECT)
        assert "route_acquisition_failed" in caplog.text

        req.submit(2, A, B, **KW)
        rid, route = wait_for(req.poll)
        assert rid == 2 and route.source is RouteSource.OFFLINE
    finally:
        req.close()
