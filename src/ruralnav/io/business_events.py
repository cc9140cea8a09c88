# ruralnav/io/business_events.py

from dataclasses import dataclass
from typing import Literal


# Base type for analytics events (not scheduled in the kernel!)
@dataclass
class BizEvent:
    run_id: str
    t: float  # simulation time
    name: str  # stable event name


@dataclass
class RouteRequestedBiz(BizEvent):
    request_id: int
    destination: tuple[float, float]
    waypoints: int
    mode: str
    online: bool


@dataclass
class RouteInstalledBiz(BizEvent):
    request_id: int
    source: Literal["online", "offline", "direct"]
    points: int
    length_m: float


@dataclass
class RouteDiscardedBiz(BizEvent):
    request_id: int
    latest_request_id: int


@dataclass
class ManeuverChangedBiz(BizEvent):
    kind: str
    distance_m: float
    text: str


@dataclass
class MotionModeChangedBiz(BizEvent):
    previous: str
    current: str


@dataclass
class ArrivedBiz(BizEvent):
    destination: tuple[float, float]
    distance_m: float
