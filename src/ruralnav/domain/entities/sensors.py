import math
from dataclasses import dataclass


@dataclass(frozen=True)
class SensorReadings:
    """Raw device readings; any field may be absent."""

    heading: float | None = None  # compass, degrees
    acc_x: float | None = None  # m/s^2
    acc_y: float | None = None
    acc_z: float | None = None


@dataclass(frozen=True)
class SensorCalibration:
    heading_offset: float = 0.0
    acc_x_offset: float = 0.0
    acc_y_offset: float = 0.0
    acc_z_offset: float = 0.0


@dataclass(frozen=True)
class CalibratedSensors:
    heading: float
    acc_x: float
    acc_y: float
    acc_z: float

    @classmethod
    def from_raw(cls, raw: SensorReadings, cal: SensorCalibration) -> "CalibratedSensors":
        # absent readings count as zero
        return cls(
            heading=((raw.heading or 0.0) + cal.heading_offset + 360.0) % 360.0,
            acc_x=(raw.acc_x or 0.0) - cal.acc_x_offset,
            acc_y=(raw.acc_y or 0.0) - cal.acc_y_offset,
            acc_z=(raw.acc_z or 0.0) - cal.acc_z_offset,
        )

    @property
    def planar_magnitude(self) -> float:
        return math.hypot(self.acc_x, self.acc_y)
