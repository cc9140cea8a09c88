# ruralnav/app/controllers/routing.py
import logging

from ruralnav.app.events import (
    ConnectivityChanged,
    DestinationRequested,
    NavigationStopped,
    PreferencesChanged,
    TransportModeChanged,
    WaypointAdded,
    WaypointsCleared,
)
from ruralnav.app.protocols import RouteRequester
from ruralnav.domain.entities.geography import Route
from ruralnav.domain.state import NavigationState
from ruralnav.io.business_events import RouteDiscardedBiz, RouteRequestedBiz
from ruralnav.runtime.types import NavState, RouteSource, TransportMode
from ruralnav.sim.hooks import NavHooks, NoopHooks

log = logging.getLogger("ruralnav.routing")


class RoutingController:
    """
    Turns user requests into route acquisitions. Every submission gets a fresh
    request id; only the result for the latest id is ever handed to navigation.
    """

    def __init__(
        self,
        state: NavigationState,
        requester: RouteRequester,
        hooks: NavHooks | None = None,
        run_id: str = "local",
    ):
        self.state = state
        self.requester = requester
        self.hooks = hooks or NoopHooks()
        self.run_id = run_id
        self.latest_request_id = 0

    # --------------- Requests ----------------------------

    def request_route(self, t: float, mode: TransportMode | None = None) -> int | None:
        s = self.state
        if s.destination is None:
            return None
        self.latest_request_id += 1
        rid = self.latest_request_id
        mode = mode or s.vehicle.mode
        self.requester.submit(
            rid,
            s.vehicle.position,
            s.destination,
            mode=mode,
            prefs=s.prefs,
            waypoints=tuple(s.waypoints),
            online=s.online,
        )
        self.hooks.biz(
            RouteRequestedBiz(
                run_id=self.run_id,
                t=t,
                name="route_requested",
                request_id=rid,
                destination=s.destination.as_tuple(),
                waypoints=len(s.waypoints),
                mode=mode.value,
                online=s.online,
            )
        )
        return rid

    def _reroute(self, t: float, mode: TransportMode | None = None) -> int | None:
        if self.state.nav_state is not NavState.NAVIGATING:
            return None
        return self.request_route(t, mode)

    def poll(self, t: float) -> tuple[int, Route] | None:
        """Newest finished route, or None. Superseded results are dropped here."""
        got = self.requester.poll()
        if got is None:
            return None
        rid, route = got
        if rid != self.latest_request_id:
            log.debug(
                "stale_route",
                extra={"extra": {"request_id": rid, "latest": self.latest_request_id}},
            )
            self.hooks.biz(
                RouteDiscardedBiz(
                    run_id=self.run_id,
                    t=t,
                    name="route_discarded",
                    request_id=rid,
                    latest_request_id=self.latest_request_id,
                )
            )
            return None
        return got

    # --------------- Handlers ----------------------------

    def on_destination_requested(self, ev: DestinationRequested):
        s = self.state
        if ev.waypoints is not None:
            s.waypoints = list(ev.waypoints)
        # keeps following the previous route until the new one is installed
        s.begin_navigation(ev.destination)
        self.request_route(ev.t)
        return []

    def on_waypoint_added(self, ev: WaypointAdded):
        self.state.waypoints.append(ev.position)
        self._reroute(ev.t)
        return []

    def on_waypoints_cleared(self, ev: WaypointsCleared):
        if self.state.waypoints:
            self.state.waypoints.clear()
            self._reroute(ev.t)
        return []

    def on_preferences_changed(self, ev: PreferencesChanged):
        if ev.prefs != self.state.prefs:
            self.state.prefs = ev.prefs
            self._reroute(ev.t)
        return []

    def on_transport_mode_changed(self, ev: TransportModeChanged):
        # the vehicle may not have switched yet; route for the requested mode
        self._reroute(ev.t, ev.mode)
        return []

    def on_connectivity_changed(self, ev: ConnectivityChanged):
        s = self.state
        was_online, s.online = s.online, ev.online
        # back online: swap an offline route for a network one
        route = s.route
        if ev.online and not was_online and route and route.source is not RouteSource.ONLINE:
            self._reroute(ev.t)
        return []

    def on_navigation_stopped(self, ev: NavigationStopped):
        # burn an id so any in-flight result is discarded
        self.latest_request_id += 1
        return []
