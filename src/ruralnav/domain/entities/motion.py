from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from ruralnav.domain.entities.geography import Coordinate
from ruralnav.runtime.types import MotionMode, NavState


class ManeuverKind(Enum):
    STRAIGHT = "straight"
    SLIGHT_LEFT = "slight-left"
    SLIGHT_RIGHT = "slight-right"
    LEFT = "left"
    RIGHT = "right"
    SHARP_LEFT = "sharp-left"
    SHARP_RIGHT = "sharp-right"
    ARRIVE = "arrive"


MANEUVER_TEXT = {
    ManeuverKind.STRAIGHT: "Continue straight",
    ManeuverKind.SLIGHT_LEFT: "Keep left",
    ManeuverKind.SLIGHT_RIGHT: "Keep right",
    ManeuverKind.LEFT: "Turn left",
    ManeuverKind.RIGHT: "Turn right",
    ManeuverKind.SHARP_LEFT: "Sharp left turn",
    ManeuverKind.SHARP_RIGHT: "Sharp right turn",
    ManeuverKind.ARRIVE: "Arriving at destination",
}


@dataclass(frozen=True)
class ManeuverDescriptor:
    kind: ManeuverKind
    distance_m: float
    text: str

    @classmethod
    def of(cls, kind: ManeuverKind, distance_m: float) -> "ManeuverDescriptor":
        return cls(kind, distance_m, MANEUVER_TEXT[kind])


@dataclass(frozen=True)
class Eta:
    remaining_m: float
    duration_s: float
    arrival: datetime

    @property
    def duration_text(self) -> str:
        minutes = max(0, int(-(-self.duration_s // 60)))  # ceil
        hours, rem = divmod(minutes, 60)
        return f"{hours}h {rem}m" if hours > 0 else f"{minutes} min"


@dataclass(frozen=True)
class NavigationSnapshot:
    t: float
    position: Coordinate
    heading_deg: float  # accumulated
    speed_mps: float
    next_index: int
    nav_state: NavState
    motion_mode: MotionMode
    maneuver: ManeuverDescriptor | None = None
    eta: Eta | None = None
    signal_strength: int | None = None
