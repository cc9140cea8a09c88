# tests/services/test_route_acquisition.py
import logging
from unittest.mock import Mock

import pytest

from ruralnav.app.protocols import RemoteRouter
from ruralnav.domain.entities.geography import Coordinate, RoutingPreferences
from ruralnav.domain.mechanics.mechanics_routers import AStarRouter, DirectRouter
from ruralnav.domain.mechanics.mechanics_topology import TopologyGraph
from ruralnav.runtime.types import RouteSource, TransportMode
from ruralnav.services.osrm_client import RemoteRoutingUnavailable
from ruralnav.services.route_acquisition import RouteAcquisition

A, B, C = Coordinate(0.0, 0.0), Coordinate(0.0, 0.01), Coordinate(0.0, 0.02)


@pytest.fixture
def planner():
    g = TopologyGraph.from_definitions(
        [("A", 0.0, 0.0), ("B", 0.0, 0.01), ("C", 0.0, 0.02)],
        [("A", "B", "paved", False), ("B", "C", "paved", False)],
    )
    return AStarRouter(g)


def failing_remote(reason="timeout after 3.0s"):
    remote = Mock(spec=RemoteRouter)
    remote.route.side_effect = RemoteRoutingUnavailable(reason)
    return remote


def test_remote_failure_falls_back_to_graph(planner, caplog):
    remote = failing_remote()
    acq = RouteAcquisition(planner, remote)
    with caplog.at_level(logging.WARNING, logger="ruralnav.routing"):
        route = acq.acquire(A, C, TransportMode.CAR)
    assert route.points == (A, B, C)
    assert route.source is RouteSource.OFFLINE
    remote.route.assert_called_once_with([A, C], "driving")
    assert "online_routing_unavailable" in caplog.messages


def test_online_geometry_gets_exact_endpoints():
    remote = Mock(spec=RemoteRouter)
    snapped = [Coordinate(0.0001, 0.0), Coordinate(0.0001, 0.02)]
    remote.route.return_value = snapped
    route = RouteAcquisition(DirectRouter(), remote).acquire(A, C, TransportMode.BIKE)
    assert route.source is RouteSource.ONLINE
    assert route.points == (A, *snapped, C)
    remote.route.assert_called_once_with([A, C], "bike")


def test_offline_flag_skips_the_network(planner):
    remote = Mock(spec=RemoteRouter)
    route = RouteAcquisition(planner, remote).acquire(A, C, online=False)
    remote.route.assert_not_called()
    assert route.points == (A, B, C)


def test_missing_mode_and_prefs_default_to_walking_and_neutral():
    remote = Mock(spec=RemoteRouter)
    remote.route.return_value = [A, C]
    RouteAcquisition(DirectRouter(), remote).acquire(A, C)
    remote.route.assert_called_once_with([A, C], "foot")


def test_waypoints_are_visited_in_order_without_duplicate_junctions(planner):
    route = RouteAcquisition(planner).acquire(A, C, waypoints=[B])
    assert route.points == (A, B, C)
    assert all(p != q for p, q in zip(route.points, route.points[1:]))


def test_waypoints_go_to_the_remote_in_order():
    remote = Mock(spec=RemoteRouter)
    remote.route.return_value = [A, B, C]
    RouteAcquisition(DirectRouter(), remote).acquire(A, C, TransportMode.CAR, waypoints=[B])
    remote.route.assert_called_once_with([A, B, C], "driving")


def test_all_direct_legs_are_marked_direct():
    route = RouteAcquisition(DirectRouter()).acquire(A, C, waypoints=[B])
    assert route.points == (A, B, C)
    assert route.source is RouteSource.DIRECT


def test_acquisition_is_idempotent(planner):
    acq = RouteAcquisition(planner, failing_remote())
    prefs = RoutingPreferences(prefer_paved=True)
    start, end = Coordinate(0.0005, -0.0005), Coordinate(-0.0005, 0.0205)
    assert acq.acquire(start, end, TransportMode.WALK, prefs) == acq.acquire(
        start, end, TransportMode.WALK, prefs
    )
