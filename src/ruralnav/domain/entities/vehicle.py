# domain/entities/vehicle.py
from dataclasses import dataclass

from ruralnav.domain.entities.geography import Coordinate
from ruralnav.domain.mechanics.mechanics_geodesy import normalize_deg, signed_delta_deg
from ruralnav.runtime.types import TransportMode


@dataclass
class Vehicle:
    position: Coordinate
    mode: TransportMode = TransportMode.WALK
    speed_mps: float = 0.0
    heading_deg: float = 0.0  # accumulated, may leave [0, 360)

    @property
    def bearing_deg(self) -> float:
        """Heading folded into [0, 360) for display."""
        return normalize_deg(self.heading_deg)

    def turn_towards(self, target_deg: float, max_step_deg: float | None = None) -> float:
        """Rotate by the shortest signed difference, optionally rate-limited. Returns the step."""
        err = signed_delta_deg(self.heading_deg, target_deg)
        if max_step_deg is not None and abs(err) > max_step_deg:
            err = max_step_deg if err > 0 else -max_step_deg
        self.heading_deg += err
        return err
