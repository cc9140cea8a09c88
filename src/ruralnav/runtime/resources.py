# ruralnav/runtime/resources.py
import json
import pickle
from functools import lru_cache

from ruralnav.domain.mechanics.mechanics_topology import TopologyGraph


def _from_mapping(data: dict) -> TopologyGraph:
    """
    {"nodes": [[id, lat, lon], ...], "edges": [[a, b, surface, hilly], ...]}
    Edge surface defaults to "paved" and hilly to false when omitted.
    """
    nodes = [(str(n[0]), float(n[1]), float(n[2])) for n in data["nodes"]]
    edges = []
    for e in data.get("edges", []):
        a, b, *rest = e
        surface = rest[0] if len(rest) > 0 else "paved"
        hilly = bool(rest[1]) if len(rest) > 1 else False
        edges.append((str(a), str(b), surface, hilly))
    return TopologyGraph.from_definitions(nodes, edges)


@lru_cache(maxsize=8)
def load_topology_from_path(file: str, fmt: str) -> TopologyGraph:
    if fmt == "json":
        with open(file, encoding="utf-8") as f:
            return _from_mapping(json.load(f))
    if fmt == "pickle":
        with open(file, "rb") as f:
            obj = pickle.load(f)
        if isinstance(obj, TopologyGraph):
            return obj
        if isinstance(obj, dict):
            return _from_mapping(obj)
        raise TypeError(f"{file}: expected a TopologyGraph or mapping, got {type(obj).__name__}")
    raise ValueError(f"Unsupported graph fmt {fmt!r}")
