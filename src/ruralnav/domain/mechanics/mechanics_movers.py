# ruralnav/domain/mechanics/mechanics_movers.py
from ruralnav.app.protocols import MotionStrategy
from ruralnav.domain.mechanics.mechanics_geodesy import (
    bearing_deg,
    destination_point,
    signed_delta_deg,
)
from ruralnav.domain.mechanics.mechanics_path_traversers import LookaheadTraverser
from ruralnav.domain.mechanics.mechanics_speeds import (
    AccelerometerSpeed,
    CurvatureSpeedController,
    turn_rate_cap_dps,
)
from ruralnav.domain.state import NavigationState


def _move(state: NavigationState, dt_s: float) -> None:
    v = state.vehicle
    if v.speed_mps > 0 and dt_s > 0:
        v.position = destination_point(v.position, v.speed_mps * dt_s, v.heading_deg)


class RouteFollowingMover(MotionStrategy):
    def __init__(
        self,
        traverser: LookaheadTraverser | None = None,
        speed: CurvatureSpeedController | None = None,
    ):
        self.traverser = traverser or LookaheadTraverser()
        self.speed = speed or CurvatureSpeedController()

    def update(self, state: NavigationState, dt_s: float) -> None:
        v, route = state.vehicle, state.route
        state.next_index = self.traverser.advance(route, v.position, state.next_index, v.speed_mps)

        steer, brake = self.traverser.targets(route, v.position, state.next_index, v.speed_mps)
        to_steer = bearing_deg(v.position, steer)
        to_brake = bearing_deg(v.position, brake)

        curve = abs(signed_delta_deg(to_steer, to_brake))
        heading_err = signed_delta_deg(v.heading_deg, to_steer)

        nominal = v.mode.nominal_mps
        target = self.speed.target_speed(nominal, curve, heading_err)
        # turn cap uses the speed at the start of the tick
        max_turn = turn_rate_cap_dps(v.speed_mps) * dt_s
        v.speed_mps = self.speed.integrate(v.speed_mps, target, nominal, dt_s)
        v.turn_towards(to_steer, max_turn)
        _move(state, dt_s)


class DeadReckoningMover(MotionStrategy):
    def __init__(self, speed: AccelerometerSpeed | None = None):
        self.speed = speed or AccelerometerSpeed()

    def update(self, state: NavigationState, dt_s: float) -> None:
        cal = state.calibrated
        v = state.vehicle
        v.speed_mps = self.speed.speed_mps(cal.planar_magnitude)
        v.turn_towards(cal.heading)
        _move(state, dt_s)


class IdleMover(MotionStrategy):
    def update(self, state: NavigationState, dt_s: float) -> None:
        state.vehicle.speed_mps = 0.0
