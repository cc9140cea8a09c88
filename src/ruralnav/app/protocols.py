from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from ruralnav.domain.entities.geography import Coordinate, Route, RoutingPreferences
from ruralnav.runtime.types import TransportMode


# ------------- Routing --------------------
@runtime_checkable
class RoutePlanner(Protocol):
    """
    Responsibilities:
      • Compute an offline coordinate path between two points.
      • Never fail: degrade to the direct segment [start, end].
    """

    def route(
        self, start: Coordinate, end: Coordinate, prefs: RoutingPreferences | None = None
    ) -> list[Coordinate]: ...


@runtime_checkable
class RemoteRouter(Protocol):
    """
    Online routing service. Returns the geometry of the first candidate route
    visiting `points` in order, or raises RemoteRoutingUnavailable.
    """

    def route(self, points: Sequence[Coordinate], profile: str) -> list[Coordinate]: ...


@runtime_checkable
class RouteRequester(Protocol):
    """
    Runs route acquisitions off the tick path.
    submit() returns immediately; poll() hands back the newest finished Route
    (or None) and never blocks.
    """

    def submit(
        self,
        request_id: int,
        start: Coordinate,
        end: Coordinate,
        *,
        mode: TransportMode,
        prefs: RoutingPreferences,
        waypoints: Sequence[Coordinate] = (),
        online: bool = True,
    ) -> None: ...
    def poll(self) -> tuple[int, Route] | None: ...
    def close(self) -> None: ...


# ------------- Motion --------------------
@runtime_checkable
class MotionStrategy(Protocol):
    """
    One per MotionMode. Advances the navigation state in place for a tick of
    `dt_s` seconds (vehicle kinematics and, when following, route progress).
    """

    def update(self, state, dt_s: float) -> None: ...
