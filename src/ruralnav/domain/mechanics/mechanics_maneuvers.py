# ruralnav/domain/mechanics/mechanics_maneuvers.py
from datetime import datetime, timedelta

from ruralnav.domain.entities.geography import Coordinate, Route
from ruralnav.domain.entities.motion import Eta, ManeuverDescriptor, ManeuverKind
from ruralnav.domain.mechanics.mechanics_geodesy import bearing_deg, distance_m, signed_delta_deg
from ruralnav.domain.mechanics.mechanics_path_traversers import remaining_distance_m
from ruralnav.runtime.types import TransportMode


class ManeuverDetector:
    def __init__(
        self,
        *,
        arrival_m: float = 20.0,
        turn_threshold_deg: float = 30.0,
        slight_max_deg: float = 45.0,
        normal_max_deg: float = 100.0,
        max_lookahead_m: float = 1500.0,
        max_points: int = 30,
    ):
        self.arrival_m = arrival_m
        self.turn_threshold = turn_threshold_deg
        self.slight_max, self.normal_max = slight_max_deg, normal_max_deg
        self.max_lookahead_m, self.max_points = max_lookahead_m, max_points

    def classify(self, delta_deg: float) -> ManeuverKind:
        left = delta_deg < 0
        mag = abs(delta_deg)
        if mag > self.normal_max:
            return ManeuverKind.SHARP_LEFT if left else ManeuverKind.SHARP_RIGHT
        if mag > self.slight_max:
            return ManeuverKind.LEFT if left else ManeuverKind.RIGHT
        return ManeuverKind.SLIGHT_LEFT if left else ManeuverKind.SLIGHT_RIGHT

    def arrived(self, route: Route, pos: Coordinate) -> bool:
        return distance_m(pos, route.destination) < self.arrival_m

    def detect(self, route: Route, pos: Coordinate, next_index: int) -> ManeuverDescriptor:
        to_end = distance_m(pos, route.destination)
        if next_index >= route.last_index or to_end < self.arrival_m:
            return ManeuverDescriptor.of(ManeuverKind.ARRIVE, to_end)

        # candidate turn points are route[next_index:], each entered from the point before it
        dist = distance_m(pos, route[next_index])
        stop = min(route.last_index, next_index + self.max_points)
        scanned = False
        for i in range(next_index, stop):
            if dist > self.max_lookahead_m:
                break
            scanned = True
            prev, here, nxt = route[i - 1], route[i], route[i + 1]
            delta = signed_delta_deg(bearing_deg(prev, here), bearing_deg(here, nxt))
            if abs(delta) > self.turn_threshold:
                return ManeuverDescriptor.of(self.classify(delta), dist)
            dist += distance_m(here, nxt)

        if not scanned:
            dist = remaining_distance_m(route, pos, next_index)
        return ManeuverDescriptor.of(ManeuverKind.STRAIGHT, dist)


class EtaEstimator:
    def __init__(self, *, stall_mps: float = 0.5):
        self.stall_mps = stall_mps

    def effective_speed(self, speed_mps: float, mode: TransportMode) -> float:
        # a stalled vehicle would otherwise predict an infinite ETA
        return mode.nominal_mps if speed_mps < self.stall_mps else speed_mps

    def estimate(
        self,
        route: Route,
        pos: Coordinate,
        next_index: int,
        speed_mps: float,
        mode: TransportMode,
        now: datetime,
    ) -> Eta:
        remaining = remaining_distance_m(route, pos, next_index)
        duration = remaining / self.effective_speed(speed_mps, mode)
        arrival = now + timedelta(seconds=duration)
        return Eta(remaining_m=remaining, duration_s=duration, arrival=arrival)
