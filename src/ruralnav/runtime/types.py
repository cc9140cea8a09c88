from enum import Enum


class TransportMode(Enum):
    WALK = "walk"
    BIKE = "bike"
    CAR = "car"

    @property
    def nominal_mps(self) -> float:
        return NOMINAL_SPEED_MPS[self]

    @property
    def profile(self) -> str:
        """Remote routing profile name."""
        return ROUTING_PROFILE[self]


NOMINAL_SPEED_MPS = {
    TransportMode.WALK: 1.4,  # ~5 km/h
    TransportMode.BIKE: 5.5,  # ~20 km/h
    TransportMode.CAR: 11.1,  # ~40 km/h on rural roads
}

ROUTING_PROFILE = {
    TransportMode.WALK: "foot",
    TransportMode.BIKE: "bike",
    TransportMode.CAR: "driving",
}


class SurfaceKind(Enum):
    PAVED = "paved"
    UNPAVED = "unpaved"


class NavState(Enum):
    IDLE = "idle"
    NAVIGATING = "navigating"
    ARRIVED = "arrived"


class MotionMode(Enum):
    ROUTE_FOLLOWING = "route_following"
    DEAD_RECKONING = "dead_reckoning"
    IDLE = "idle"


class RouteSource(Enum):
    ONLINE = "online"
    OFFLINE = "offline"
    DIRECT = "direct"
