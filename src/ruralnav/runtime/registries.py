# runtime/registries.py
from collections.abc import Callable

from ruralnav.app.protocols import RemoteRouter, RoutePlanner, RouteRequester
from ruralnav.config.models import (
    GraphBuiltin,
    GraphByPath,
    GraphRef,
    PlannerAStarModel,
    PlannerDirectModel,
    PlannerUnion,
    RemoteRouterDisabledModel,
    RemoteRouterOsrmModel,
    RemoteRouterUnion,
    RequesterInlineModel,
    RequesterThreadedModel,
    RequesterUnion,
)
from ruralnav.domain.mechanics.mechanics_routers import AStarRouter, DirectRouter
from ruralnav.domain.mechanics.mechanics_topology import TopologyGraph, build_builtin_graph
from ruralnav.runtime.resources import load_topology_from_path
from ruralnav.services.osrm_client import OSRMClient
from ruralnav.services.route_acquisition import RouteAcquisition
from ruralnav.services.route_requesters import InlineRouteRequester, ThreadedRouteRequester

PlannerFactory = Callable[[PlannerUnion, dict], RoutePlanner]
RemoteFactory = Callable[[RemoteRouterUnion, dict], RemoteRouter | None]
RequesterFactory = Callable[[RequesterUnion, dict], RouteRequester]

_planner_registry: dict[str, PlannerFactory] = {}
_remote_registry: dict[str, RemoteFactory] = {}
_requester_registry: dict[str, RequesterFactory] = {}


def resolve_graph(ref: GraphRef | None, *, deps: dict) -> TopologyGraph:
    """
    deps can include:
      - 'graph': TopologyGraph   # an already built graph, used when ref is None
    """
    if ref is None:
        if "graph" in deps:
            return deps["graph"]
        raise ValueError("No graph provided")
    if isinstance(ref, GraphBuiltin):
        return build_builtin_graph(ref.name)
    if isinstance(ref, GraphByPath):
        return load_topology_from_path(ref.file, ref.fmt)
    raise TypeError(ref)


# --------------------- Route planners  ---------------------


def register_planner(kind: str):
    def deco(fn: PlannerFactory):
        _planner_registry[kind] = fn
        return fn

    return deco


def make_planner(cfg: PlannerUnion, *, deps: dict | None = None) -> RoutePlanner:
    try:
        factory = _planner_registry[cfg.kind]
    except KeyError:
        raise ValueError(f"Unknown planner kind {cfg.kind!r}")
    return factory(cfg, deps or {})


@register_planner("astar")
def _make_astar(cfg: PlannerAStarModel, deps):
    return AStarRouter(resolve_graph(cfg.graph, deps=deps))


@register_planner("direct")
def _make_direct(cfg: PlannerDirectModel, deps):
    return DirectRouter()


# --------------------- Remote routers  ---------------------


def register_remote(kind: str):
    def deco(fn: RemoteFactory):
        _remote_registry[kind] = fn
        return fn

    return deco


def make_remote(cfg: RemoteRouterUnion, *, deps: dict | None = None) -> RemoteRouter | None:
    try:
        factory = _remote_registry[cfg.kind]
    except KeyError:
        raise ValueError(f"Unknown remote router kind {cfg.kind!r}")
    return factory(cfg, deps or {})


@register_remote("osrm")
def _make_osrm(cfg: RemoteRouterOsrmModel, deps):
    return OSRMClient(cfg.base_url, timeout_s=cfg.timeout_s, session=deps.get("session"))


@register_remote("disabled")
def _make_disabled(cfg: RemoteRouterDisabledModel, deps):
    return None


# --------------------- Requesters  -------------------------


def register_requester(kind: str):
    def deco(fn: RequesterFactory):
        _requester_registry[kind] = fn
        return fn

    return deco


def make_requester(cfg: RequesterUnion, *, acquisition: RouteAcquisition) -> RouteRequester:
    try:
        factory = _requester_registry[cfg.kind]
    except KeyError:
        raise ValueError(f"Unknown requester kind {cfg.kind!r}")
    return factory(cfg, {"acquisition": acquisition})


@register_requester("inline")
def _make_inline(cfg: RequesterInlineModel, deps):
    return InlineRouteRequester(deps["acquisition"])


@register_requester("threaded")
def _make_threaded(cfg: RequesterThreadedModel, deps):
    return ThreadedRouteRequester(deps["acquisition"], maxsize=cfg.maxsize)
