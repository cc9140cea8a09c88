# ruralnav/domain/state.py
from dataclasses import dataclass, field

from ruralnav.domain.entities.geography import Coordinate, Route, RoutingPreferences
from ruralnav.domain.entities.motion import ManeuverDescriptor
from ruralnav.domain.entities.sensors import CalibratedSensors, SensorCalibration, SensorReadings
from ruralnav.domain.entities.vehicle import Vehicle
from ruralnav.runtime.types import MotionMode, NavState


@dataclass
class NavigationState:
    """Working state of the navigation loop. Mutated only by the controllers."""

    vehicle: Vehicle
    route: Route | None = None
    next_index: int = 1
    nav_state: NavState = NavState.IDLE
    destination: Coordinate | None = None
    waypoints: list[Coordinate] = field(default_factory=list)
    prefs: RoutingPreferences = field(default_factory=RoutingPreferences)
    gps_available: bool = True
    online: bool = True
    sensors: SensorReadings = field(default_factory=SensorReadings)
    calibration: SensorCalibration = field(default_factory=SensorCalibration)
    maneuver: ManeuverDescriptor | None = None
    route_version: int = 0

    @property
    def calibrated(self) -> CalibratedSensors:
        return CalibratedSensors.from_raw(self.sensors, self.calibration)

    def install_route(self, route: Route) -> None:
        # route and index always change together
        self.route = route
        self.next_index = 1
        self.maneuver = None
        self.route_version += 1

    def begin_navigation(self, destination: Coordinate) -> None:
        if self.nav_state is NavState.ARRIVED:
            self.route = None
        self.destination = destination
        # otherwise keep following the previous route until the new one is installed
        self.nav_state = NavState.NAVIGATING

    def stop_navigation(self) -> None:
        self.nav_state = NavState.IDLE
        self.destination = None
        self.route = None
        self.next_index = 1
        self.maneuver = None

    def motion_mode(self) -> MotionMode:
        if self.nav_state is NavState.NAVIGATING and self.route is not None and len(self.route) > 1:
            return MotionMode.ROUTE_FOLLOWING
        if not self.gps_available:
            return MotionMode.DEAD_RECKONING
        return MotionMode.IDLE
