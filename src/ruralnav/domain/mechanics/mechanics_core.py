# ruralnav/domain/mechanics/mechanics_core.py
from dataclasses import dataclass, field
from datetime import datetime

from ruralnav.app.protocols import MotionStrategy, RoutePlanner
from ruralnav.domain.entities.geography import Coordinate, RoutingPreferences
from ruralnav.domain.entities.motion import Eta, ManeuverDescriptor
from ruralnav.domain.mechanics.mechanics_maneuvers import EtaEstimator, ManeuverDetector
from ruralnav.domain.mechanics.mechanics_movers import (
    DeadReckoningMover,
    IdleMover,
    RouteFollowingMover,
)
from ruralnav.domain.state import NavigationState
from ruralnav.runtime.types import MotionMode, NavState


def default_movers() -> dict[MotionMode, MotionStrategy]:
    return {
        MotionMode.ROUTE_FOLLOWING: RouteFollowingMover(),
        MotionMode.DEAD_RECKONING: DeadReckoningMover(),
        MotionMode.IDLE: IdleMover(),
    }


@dataclass
class Mechanics:
    """
    Bundles the planner and the per-tick pieces so call sites don't juggle them.
    """

    planner: RoutePlanner
    movers: dict[MotionMode, MotionStrategy] = field(default_factory=default_movers)
    maneuvers: ManeuverDetector = field(default_factory=ManeuverDetector)
    eta: EtaEstimator = field(default_factory=EtaEstimator)

    def route(
        self, a: Coordinate, b: Coordinate, prefs: RoutingPreferences | None = None
    ) -> list[Coordinate]:
        return self.planner.route(a, b, prefs)

    def step(self, state: NavigationState, dt_s: float) -> MotionMode:
        mode = state.motion_mode()
        self.movers[mode].update(state, dt_s)
        return mode

    def next_maneuver(self, state: NavigationState) -> ManeuverDescriptor | None:
        if state.nav_state is NavState.IDLE or state.route is None or len(state.route) < 2:
            return None
        return self.maneuvers.detect(state.route, state.vehicle.position, state.next_index)

    def estimate_eta(self, state: NavigationState, now: datetime) -> Eta | None:
        if state.route is None or state.nav_state is NavState.IDLE:
            return None
        v = state.vehicle
        return self.eta.estimate(
            state.route, v.position, state.next_index, v.speed_mps, v.mode, now
        )
