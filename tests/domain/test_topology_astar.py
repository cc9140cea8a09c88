# tests/domain/test_topology_astar.py
import heapq

import pytest

from ruralnav.domain.entities.geography import Coordinate, RoutingPreferences
from ruralnav.domain.mechanics.mechanics_routers import (
    AStarRouter,
    DirectRouter,
    attach_endpoints,
    edge_cost,
)
from ruralnav.domain.mechanics.mechanics_topology import (
    JAIPUR_EDGES,
    JAIPUR_NODES,
    TopologyGraph,
    build_builtin_graph,
)

A, B, C = Coordinate(0.0, 0.0), Coordinate(0.0, 0.01), Coordinate(0.0, 0.02)


def line_graph():
    return TopologyGraph.from_definitions(
        [("A", 0.0, 0.0), ("B", 0.0, 0.01), ("C", 0.0, 0.02), ("D", 5.0, 5.0)],
        [("A", "B", "paved", False), ("B", "C", "paved", False)],
    )


def detour_graph(surface: str, hilly: bool):
    # S -> M -> T is short but tagged; S -> P -> T is a clean paved detour
    return TopologyGraph.from_definitions(
        [("S", 0.0, 0.0), ("M", 0.0, 0.01), ("T", 0.0, 0.02), ("P", 0.005, 0.01)],
        [
            ("S", "M", surface, hilly),
            ("M", "T", surface, hilly),
            ("S", "P", "paved", False),
            ("P", "T", "paved", False),
        ],
    )


def dijkstra_cost(graph: TopologyGraph, src: str, dst: str, prefs: RoutingPreferences) -> float:
    dist = {src: 0.0}
    q = [(0.0, src)]
    while q:
        d, u = heapq.heappop(q)
        if u == dst:
            return d
        if d > dist[u]:
            continue
        for e in graph.neighbors(u):
            nd = d + edge_cost(e, prefs)
            if nd < dist.get(e.target_id, float("inf")):
                dist[e.target_id] = nd
                heapq.heappush(q, (nd, e.target_id))
    return float("inf")


# ---------------- graph ----------------


def test_builtin_graph_shape():
    g = build_builtin_graph()
    assert len(g) == len(JAIPUR_NODES) == 17
    # every edge is stored in both directions, duplicates included
    assert sum(len(n.neighbors) for n in g) == 2 * len(JAIPUR_EDGES)
    assert [e.target_id for e in g.neighbors("n9")].count("n15") == 2


def test_edge_weights_are_geodesic():
    g = line_graph()
    (edge,) = [e for e in g.neighbors("A") if e.target_id == "B"]
    assert edge.weight_m == pytest.approx(1113.19, abs=0.1)


def test_unknown_node_in_edge_is_rejected():
    with pytest.raises(ValueError):
        TopologyGraph.from_definitions([("A", 0.0, 0.0)], [("A", "Z", "paved", False)])


def test_unknown_builtin_graph_is_rejected():
    with pytest.raises(ValueError):
        build_builtin_graph("atlantis")


def test_nearest_node():
    g = build_builtin_graph()
    assert g.nearest_node(Coordinate(26.9169, 75.7923)) == "n5"
    assert g.nearest_node(Coordinate(26.9125, 75.7874)) == "n1"
    assert TopologyGraph([]).nearest_node(A) is None


# ---------------- pathfinder ----------------


def test_line_route_is_node_sequence():
    assert AStarRouter(line_graph()).route(A, C) == [A, B, C]


def test_penalized_only_path_still_routes_without_duplicates():
    graph = TopologyGraph.from_definitions(
        [("A", 0.0, 0.0), ("B", 0.0, 0.01), ("C", 0.0, 0.02)],
        [("A", "B", "paved", False), ("B", "C", "unpaved", True)],
    )
    prefs = RoutingPreferences(prefer_paved=True, avoid_hills=True)
    assert AStarRouter(graph).route(A, C, prefs) == [A, B, C]


def test_exact_endpoints_are_reattached():
    start, end = Coordinate(0.001, -0.001), Coordinate(-0.001, 0.021)
    path = AStarRouter(line_graph()).route(start, end)
    assert path == [start, A, B, C, end]


def test_same_nearest_node_gives_direct_segment():
    start, end = Coordinate(0.0001, 0.0), Coordinate(-0.0001, 0.0)
    assert AStarRouter(line_graph()).route(start, end) == [start, end]


def test_disconnected_graph_degrades_to_direct_segment():
    far = Coordinate(5.0, 5.0)
    r = AStarRouter(line_graph())
    assert r.node_path(A, far) == []
    assert r.route(A, far) == [A, far]


def test_direct_router():
    assert DirectRouter().route(A, C, RoutingPreferences(prefer_paved=True)) == [A, C]


@pytest.mark.parametrize(
    "surface,hilly,prefs",
    [
        ("unpaved", False, RoutingPreferences(prefer_paved=True)),
        ("paved", True, RoutingPreferences(avoid_hills=True)),
    ],
)
def test_preferences_steer_around_penalized_edges(surface, hilly, prefs):
    r = AStarRouter(detour_graph(surface, hilly))
    start, end = Coordinate(0.0, 0.0), Coordinate(0.0, 0.02)
    assert r.node_path(start, end) == ["S", "M", "T"]
    assert r.node_path(start, end, prefs) == ["S", "P", "T"]


def test_disallowing_highways_penalizes_paved_edges():
    r = AStarRouter(detour_graph("unpaved", False))
    start, end = Coordinate(0.0, 0.0), Coordinate(0.0, 0.02)
    assert r.node_path(start, end, RoutingPreferences(allow_highways=False)) == ["S", "M", "T"]


def test_edge_cost_multipliers():
    g = detour_graph("unpaved", True)
    (e,) = [e for e in g.neighbors("S") if e.target_id == "M"]
    both = RoutingPreferences(prefer_paved=True, avoid_hills=True)
    assert edge_cost(e, RoutingPreferences()) == e.weight_m
    assert edge_cost(e, both) == pytest.approx(e.weight_m * 15.0)


@pytest.mark.parametrize(
    "prefs",
    [
        RoutingPreferences(),
        RoutingPreferences(prefer_paved=True),
        RoutingPreferences(avoid_hills=True),
        RoutingPreferences(prefer_paved=True, avoid_hills=True, allow_highways=False),
    ],
)
def test_astar_matches_dijkstra_on_builtin_graph(prefs):
    g = build_builtin_graph()
    r = AStarRouter(g)
    ids = [n.id for n in g]
    for src in ids[::3]:
        for dst in ids[1::4]:
            if src == dst:
                continue
            nodes = r.node_path(g.node_point(src), g.node_point(dst), prefs)
            assert nodes[0] == src and nodes[-1] == dst
            assert r.path_cost(nodes, prefs) == pytest.approx(dijkstra_cost(g, src, dst, prefs))


def test_preferred_path_never_costs_more_under_its_preferences():
    g = build_builtin_graph()
    r = AStarRouter(g)
    prefs = RoutingPreferences(prefer_paved=True)
    start, end = g.node_point("n15"), g.node_point("n11")
    chosen = r.node_path(start, end, prefs)
    neutral = r.node_path(start, end)
    assert r.path_cost(chosen, prefs) <= r.path_cost(neutral, prefs)


def test_attach_endpoints_does_not_duplicate():
    assert attach_endpoints([A, B, C], A, C) == [A, B, C]
    assert attach_endpoints([B], A, C) == [A, B, C]
    assert attach_endpoints([], A, C) == [A, C]
