# ruralnav/domain/mechanics/mechanics_topology.py
from collections.abc import Iterable, Iterator

from ruralnav.domain.entities.geography import Coordinate, GraphEdge, GraphNode
from ruralnav.domain.mechanics.mechanics_geodesy import distance_m
from ruralnav.runtime.types import SurfaceKind

NodeDef = tuple[str, float, float]  # (id, lat, lon)
EdgeDef = tuple[str, str, str, bool]  # (a, b, surface, hilly)


class TopologyGraph:
    """
    Fixed offline road network. Built once, read-only afterwards, so a single
    instance can be shared by any number of planners.
    """

    def __init__(self, nodes: Iterable[GraphNode]):
        # dict keeps definition order -> deterministic nearest-node ties
        self._nodes: dict[str, GraphNode] = {n.id: n for n in nodes}

    @classmethod
    def from_definitions(
        cls, nodes: Iterable[NodeDef], edges: Iterable[EdgeDef] = ()
    ) -> "TopologyGraph":
        coords: dict[str, Coordinate] = {}
        adj: dict[str, list[GraphEdge]] = {}
        for nid, lat, lon in nodes:
            coords[nid] = Coordinate(float(lat), float(lon))
            adj[nid] = []

        for a, b, surface, hilly in edges:
            if a not in coords or b not in coords:
                raise ValueError(f"edge {a!r}-{b!r} references an unknown node")
            w = distance_m(coords[a], coords[b])
            kind = SurfaceKind(surface)
            adj[a].append(GraphEdge(b, w, kind, bool(hilly)))
            adj[b].append(GraphEdge(a, w, kind, bool(hilly)))

        return cls(GraphNode(nid, coords[nid], tuple(adj[nid])) for nid in coords)

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: str) -> bool:
        return node_id in self._nodes

    def __iter__(self) -> Iterator[GraphNode]:
        return iter(self._nodes.values())

    def node(self, node_id: str) -> GraphNode:
        return self._nodes[node_id]

    def node_point(self, node_id: str) -> Coordinate:
        return self._nodes[node_id].coordinate

    def neighbors(self, node_id: str) -> tuple[GraphEdge, ...]:
        return self._nodes[node_id].neighbors

    def nearest_node(self, p: Coordinate) -> str | None:
        best, best_d = None, float("inf")
        for n in self._nodes.values():
            d = distance_m(p, n.coordinate)
            if d < best_d:  # strict: first defined wins ties
                best, best_d = n.id, d
        return best


# ---------------- Built-in demo network ----------------------
# Grid-like network around (26.9124, 75.7873), Jaipur region.

JAIPUR_NODES: list[NodeDef] = [
    # center
    ("n1", 26.9124, 75.7873),
    ("n2", 26.9124, 75.7923),
    ("n3", 26.9124, 75.7823),
    # north street
    ("n4", 26.9169, 75.7873),
    ("n5", 26.9169, 75.7923),
    ("n6", 26.9169, 75.7823),
    # south street
    ("n7", 26.9079, 75.7873),
    ("n8", 26.9079, 75.7923),
    ("n9", 26.9079, 75.7823),
    # far east
    ("n10", 26.9124, 75.7973),
    ("n11", 26.9169, 75.7973),
    ("n12", 26.9079, 75.7973),
    # far west
    ("n13", 26.9124, 75.7773),
    ("n14", 26.9169, 75.7773),
    ("n15", 26.9079, 75.7773),
    # irregular
    ("n16", 26.9200, 75.7900),
    ("n17", 26.9050, 75.7850),
]

JAIPUR_EDGES: list[EdgeDef] = [
    # horizontal arterials
    ("n3", "n1", "paved", False),
    ("n1", "n2", "paved", False),
    ("n2", "n10", "paved", False),
    ("n13", "n3", "unpaved", True),
    # north, residential
    ("n6", "n4", "paved", False),
    ("n4", "n5", "paved", False),
    ("n5", "n11", "paved", False),
    ("n14", "n6", "unpaved", False),
    # south, rural
    ("n9", "n7", "unpaved", False),
    ("n7", "n8", "paved", False),
    ("n8", "n12", "unpaved", True),
    ("n15", "n9", "unpaved", True),
    # vertical
    ("n6", "n3", "paved", False),
    ("n3", "n9", "unpaved", False),
    ("n9", "n15", "unpaved", False),
    ("n4", "n1", "paved", False),
    ("n1", "n7", "paved", False),
    ("n7", "n17", "unpaved", False),
    ("n5", "n2", "paved", False),
    ("n2", "n8", "paved", False),
    ("n11", "n10", "unpaved", False),
    ("n10", "n12", "unpaved", False),
    ("n14", "n13", "unpaved", False),
    ("n13", "n15", "unpaved", False),
    # diagonal shortcuts
    ("n4", "n16", "unpaved", True),
    ("n16", "n5", "unpaved", False),
]

BUILTIN_GRAPHS: dict[str, tuple[list[NodeDef], list[EdgeDef]]] = {
    "jaipur": (JAIPUR_NODES, JAIPUR_EDGES),
}


def build_builtin_graph(name: str = "jaipur") -> TopologyGraph:
    try:
        nodes, edges = BUILTIN_GRAPHS[name]
    except KeyError:
        raise ValueError(f"Unknown built-in graph {name!r}")
    return TopologyGraph.from_definitions(nodes, edges)
