# ruralnav/services/route_acquisition.py
import logging
from collections.abc import Sequence

from ruralnav.app.protocols import RemoteRouter, RoutePlanner
from ruralnav.domain.entities.geography import Coordinate, Route, RoutingPreferences
from ruralnav.domain.mechanics.mechanics_routers import attach_endpoints
from ruralnav.runtime.types import RouteSource, TransportMode
from ruralnav.services.osrm_client import RemoteRoutingUnavailable

log = logging.getLogger("ruralnav.routing")


class RouteAcquisition:
    """
    Network first, offline graph second. Never raises for routing failures:
    the worst outcome is a straight line per leg.
    """

    def __init__(self, planner: RoutePlanner, remote: RemoteRouter | None = None):
        self.planner = planner
        self.remote = remote

    def acquire(
        self,
        start: Coordinate,
        end: Coordinate,
        mode: TransportMode | None = None,
        prefs: RoutingPreferences | None = None,
        waypoints: Sequence[Coordinate] = (),
        *,
        online: bool = True,
    ) -> Route:
        mode = mode or TransportMode.WALK
        prefs = prefs or RoutingPreferences()
        points = [start, *waypoints, end]

        if online and self.remote is not None:
            try:
                geometry = self.remote.route(points, mode.profile)
            except RemoteRoutingUnavailable as exc:
                log.warning(
                    "online_routing_unavailable",
                    extra={"extra": {"reason": exc.reason, "profile": mode.profile}},
                )
            else:
                return Route(tuple(attach_endpoints(geometry, start, end)), RouteSource.ONLINE)
        else:
            log.info(
                "offline_routing", extra={"extra": {"online": online, "legs": len(points) - 1}}
            )

        return self.offline(points, prefs)

    def offline(self, points: Sequence[Coordinate], prefs: RoutingPreferences) -> Route:
        full: list[Coordinate] = []
        direct = True
        for i, (a, b) in enumerate(zip(points, points[1:])):
            leg = self.planner.route(a, b, prefs)
            direct = direct and len(leg) == 2
            # each later leg starts where the previous one ended
            full.extend(leg if i == 0 else leg[1:])
        return Route(tuple(full), RouteSource.DIRECT if direct else RouteSource.OFFLINE)
