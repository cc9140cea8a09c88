from dataclasses import dataclass, field

from ruralnav.domain.entities.geography import Coordinate
from ruralnav.domain.mechanics.mechanics_geodesy import distance_m


@dataclass
class TrackRecorder:
    """Breadcrumb trail of the estimated position."""

    min_step_m: float = 5.0
    recording: bool = False
    points: list[Coordinate] = field(default_factory=list)

    def start(self, at: Coordinate) -> None:
        self.points = [at]
        self.recording = True

    def stop(self) -> None:
        self.recording = False

    def clear(self) -> None:
        self.points = []
        self.recording = False

    def record(self, p: Coordinate) -> bool:
        if not self.recording:
            return False
        if self.points and distance_m(self.points[-1], p) <= self.min_step_m:
            return False
        self.points.append(p)
        return True
