from ruralnav.runtime.types import TransportMode


class CurvatureSpeedController:
    """
    Slows the vehicle ahead of bends. Severity blends the predicted curvature
    (steer vs brake lookahead divergence) with the current heading error.
    """

    def __init__(
        self,
        *,
        curve_weight: float = 1.8,
        heading_weight: float = 0.5,
        severity_scale: float = 70.0,
        floor_factor: float = 0.3,
        accel_mps2: float = 2.5,
        decel_mps2: float = 5.0,
        min_speed_mps: float = 0.5,
    ):
        self.curve_w, self.heading_w, self.scale = curve_weight, heading_weight, severity_scale
        self.floor = floor_factor
        self.accel, self.decel = accel_mps2, decel_mps2
        self.min_speed = min_speed_mps

    def speed_factor(self, curve_deg: float, heading_err_deg: float) -> float:
        severity = self.curve_w * abs(curve_deg) + self.heading_w * abs(heading_err_deg)
        return max(self.floor, 1.0 - severity / self.scale)

    def target_speed(self, nominal_mps: float, curve_deg: float, heading_err_deg: float) -> float:
        return nominal_mps * self.speed_factor(curve_deg, heading_err_deg)

    def integrate(self, v: float, target: float, nominal_mps: float, dt_s: float) -> float:
        # braking is modelled as harsher than accelerating
        if v < target:
            v = min(target, v + self.accel * dt_s)
        else:
            v = max(target, v - self.decel * dt_s)
        return max(self.min_speed, min(v, nominal_mps))


def turn_rate_cap_dps(speed_mps: float) -> float:
    """Max heading change per second; wider turns at speed."""
    return max(35.0, 120.0 - 2.5 * speed_mps)


class AccelerometerSpeed:
    """Magnitude-to-speed heuristic used while dead reckoning."""

    def __init__(
        self,
        *,
        threshold_mps2: float = 1.2,
        gain: float = 0.5,
        cap_mps: float = 1.5 * TransportMode.WALK.nominal_mps,
    ):
        self.threshold, self.gain, self.cap = threshold_mps2, gain, cap_mps

    def speed_mps(self, magnitude_mps2: float) -> float:
        if magnitude_mps2 <= self.threshold:
            return 0.0
        return min(self.cap, magnitude_mps2 * self.gain)
