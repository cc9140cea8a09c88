# app/events.py
from dataclasses import dataclass, field
from typing import Literal

from ruralnav.domain.entities.geography import Coordinate, RoutingPreferences
from ruralnav.domain.entities.sensors import SensorCalibration, SensorReadings
from ruralnav.runtime.types import TransportMode
from ruralnav.sim.event import BaseEvent


# Loop
@dataclass(order=True)
class NavTick(BaseEvent):
    period_s: float = field(default=1.0 / 60.0, compare=False)


# Collaborator inputs
@dataclass(order=True)
class SensorSample(BaseEvent):
    readings: SensorReadings = field(default_factory=SensorReadings, compare=False)


@dataclass(order=True)
class CalibrationChanged(BaseEvent):
    calibration: SensorCalibration = field(default_factory=SensorCalibration, compare=False)


@dataclass(order=True)
class GpsStatusChanged(BaseEvent):
    available: bool = True


@dataclass(order=True)
class PositionFix(BaseEvent):
    position: Coordinate = field(default=None, compare=False)


@dataclass(order=True)
class ConnectivityChanged(BaseEvent):
    online: bool = True


# User requests
@dataclass(order=True)
class DestinationRequested(BaseEvent):
    destination: Coordinate = field(default=None, compare=False)
    waypoints: tuple[Coordinate, ...] | None = field(default=None, compare=False)  # None: keep


@dataclass(order=True)
class WaypointAdded(BaseEvent):
    position: Coordinate = field(default=None, compare=False)


@dataclass(order=True)
class WaypointsCleared(BaseEvent):
    pass


@dataclass(order=True)
class PreferencesChanged(BaseEvent):
    prefs: RoutingPreferences = field(default_factory=RoutingPreferences, compare=False)


@dataclass(order=True)
class TransportModeChanged(BaseEvent):
    mode: TransportMode = field(default=TransportMode.WALK, compare=False)


@dataclass(order=True)
class NavigationStopped(BaseEvent):
    pass


@dataclass(order=True)
class TrackCommand(BaseEvent):
    action: Literal["start", "stop", "clear"] = "start"
