from ruralnav.domain.entities.geography import Coordinate, Route
from ruralnav.domain.mechanics.mechanics_geodesy import distance_m, interpolate


def point_along(route: Route, pos: Coordinate, next_index: int, dist_m: float) -> Coordinate:
    """
    Point `dist_m` meters ahead of `pos`, walking pos -> route[next_index] -> ... -> end.
    Past the end of the route the destination is returned.
    """
    remaining = dist_m
    a = pos
    for i in range(min(next_index, route.last_index), len(route)):
        b = route[i]
        seg = distance_m(a, b)
        if seg > 1e-9 and remaining <= seg:
            return interpolate(a, b, remaining / seg)
        remaining -= seg
        a = b
    return route.destination


def remaining_distance_m(route: Route, pos: Coordinate, next_index: int) -> float:
    i = min(next_index, route.last_index)
    total = distance_m(pos, route[i])
    for a, b in zip(route.points[i:], route.points[i + 1 :]):
        total += distance_m(a, b)
    return total


class LookaheadTraverser:
    """
    Dual-lookahead helper: a short steering target for precision and a long
    braking target to see curvature early. Both grow with speed.
    """

    def __init__(
        self,
        *,
        steer_gain_s: float = 1.5,
        steer_range_m: tuple[float, float] = (10.0, 30.0),
        brake_gain_s: float = 4.0,
        brake_range_m: tuple[float, float] = (40.0, 100.0),
        reach_min_m: float = 5.0,
    ):
        self.steer_gain, self.steer_range = steer_gain_s, steer_range_m
        self.brake_gain, self.brake_range = brake_gain_s, brake_range_m
        self.reach_min = reach_min_m

    @staticmethod
    def _clamp(x: float, lo_hi: tuple[float, float]) -> float:
        lo, hi = lo_hi
        return max(lo, min(hi, x))

    def steer_distance_m(self, speed_mps: float) -> float:
        return self._clamp(speed_mps * self.steer_gain, self.steer_range)

    def brake_distance_m(self, speed_mps: float) -> float:
        return self._clamp(speed_mps * self.brake_gain, self.brake_range)

    def targets(
        self, route: Route, pos: Coordinate, next_index: int, speed_mps: float
    ) -> tuple[Coordinate, Coordinate]:
        return (
            point_along(route, pos, next_index, self.steer_distance_m(speed_mps)),
            point_along(route, pos, next_index, self.brake_distance_m(speed_mps)),
        )

    def advance(self, route: Route, pos: Coordinate, next_index: int, speed_mps: float) -> int:
        """At most one step forward per call, never past the last point."""
        i = min(next_index, route.last_index)
        if i < route.last_index and distance_m(pos, route[i]) < max(self.reach_min, speed_mps):
            return i + 1
        return i
