import heapq

from ruralnav.app.protocols import RoutePlanner
from ruralnav.domain.entities.geography import Coordinate, GraphEdge, RoutingPreferences
from ruralnav.domain.mechanics.mechanics_geodesy import distance_m
from ruralnav.domain.mechanics.mechanics_topology import TopologyGraph
from ruralnav.runtime.types import SurfaceKind

UNPAVED_PENALTY = 3.0
HILL_PENALTY = 5.0
HIGHWAY_PENALTY = 2.0

NEUTRAL = RoutingPreferences()


def edge_cost(edge: GraphEdge, prefs: RoutingPreferences) -> float:
    cost = edge.weight_m
    if prefs.prefer_paved and edge.surface is SurfaceKind.UNPAVED:
        cost *= UNPAVED_PENALTY
    if prefs.avoid_hills and edge.is_hilly:
        cost *= HILL_PENALTY
    # paved stands in for "highway" here
    if prefs.allow_highways is False and edge.surface is SurfaceKind.PAVED:
        cost *= HIGHWAY_PENALTY
    return cost


def attach_endpoints(
    points: list[Coordinate], start: Coordinate, end: Coordinate
) -> list[Coordinate]:
    """Put the caller's exact endpoints around a snapped path without doubling them."""
    out = list(points)
    if not out or out[0] != start:
        out.insert(0, start)
    if out[-1] != end:
        out.append(end)
    return out


class DirectRouter(RoutePlanner):
    def route(self, start, end, prefs=None):
        return [start, end]


class AStarRouter(RoutePlanner):
    def __init__(self, graph: TopologyGraph):
        self.G = graph

    def route(
        self, start: Coordinate, end: Coordinate, prefs: RoutingPreferences | None = None
    ) -> list[Coordinate]:
        nodes = self.node_path(start, end, prefs)
        if not nodes:
            return [start, end]
        return attach_endpoints([self.G.node_point(n) for n in nodes], start, end)

    def node_path(
        self, start: Coordinate, end: Coordinate, prefs: RoutingPreferences | None = None
    ) -> list[str]:
        """Node ids from the start's nearest node to the end's; [] when degraded."""
        prefs = prefs or NEUTRAL
        na, nb = self.G.nearest_node(start), self.G.nearest_node(end)
        if na is None or nb is None or na == nb:
            return []

        goal = self.G.node_point(nb)
        g: dict[str, float] = {na: 0.0}
        f: dict[str, float] = {na: self._h(na, goal)}
        came_from: dict[str, str] = {}
        seq = 0
        open_q: list[tuple[float, int, str]] = [(f[na], seq, na)]

        while open_q:
            fu, _, u = heapq.heappop(open_q)
            if fu > f[u]:
                continue  # stale entry, a cheaper one was pushed later
            if u == nb:
                return self._reconstruct(came_from, u)
            for e in self.G.neighbors(u):
                tentative = g[u] + edge_cost(e, prefs)
                if tentative < g.get(e.target_id, float("inf")):
                    came_from[e.target_id] = u
                    g[e.target_id] = tentative
                    f[e.target_id] = tentative + self._h(e.target_id, goal)
                    seq += 1
                    heapq.heappush(open_q, (f[e.target_id], seq, e.target_id))
        return []

    def path_cost(self, nodes: list[str], prefs: RoutingPreferences | None = None) -> float:
        prefs = prefs or NEUTRAL
        total = 0.0
        for u, v in zip(nodes, nodes[1:]):
            total += min(edge_cost(e, prefs) for e in self.G.neighbors(u) if e.target_id == v)
        return total

    def _h(self, u: str, goal: Coordinate) -> float:
        # physical distance even when penalties inflate g
        return distance_m(self.G.node_point(u), goal)

    @staticmethod
    def _reconstruct(came_from: dict[str, str], u: str) -> list[str]:
        path = [u]
        while u in came_from:
            u = came_from[u]
            path.append(u)
        path.reverse()
        return path
