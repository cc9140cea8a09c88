# ruralnav/app/wiring.py
from ruralnav.app.controllers.navigation import NavigationController
from ruralnav.app.controllers.routing import RoutingController
from ruralnav.app.events import (
    CalibrationChanged,
    ConnectivityChanged,
    DestinationRequested,
    GpsStatusChanged,
    NavigationStopped,
    NavTick,
    PositionFix,
    PreferencesChanged,
    SensorSample,
    TrackCommand,
    TransportModeChanged,
    WaypointAdded,
    WaypointsCleared,
)
from ruralnav.sim.kernel import Kernel


def wire(kernel: Kernel, *, navigation: NavigationController, routing: RoutingController) -> None:
    k = kernel

    # the loop
    k.on(NavTick, navigation.on_tick)  # re-schedules itself

    # collaborator inputs
    k.on(SensorSample, navigation.on_sensor_sample)
    k.on(CalibrationChanged, navigation.on_calibration_changed)
    k.on(GpsStatusChanged, navigation.on_gps_status_changed)
    k.on(PositionFix, navigation.on_position_fix)
    k.on(ConnectivityChanged, routing.on_connectivity_changed)

    # user requests -> (re-)acquisition
    k.on(DestinationRequested, routing.on_destination_requested)
    k.on(WaypointAdded, routing.on_waypoint_added)
    k.on(WaypointsCleared, routing.on_waypoints_cleared)
    k.on(PreferencesChanged, routing.on_preferences_changed)

    # both sides care: vehicle kinematics and the route profile
    k.on(TransportModeChanged, navigation.on_transport_mode_changed)
    k.on(TransportModeChanged, routing.on_transport_mode_changed)

    k.on(NavigationStopped, routing.on_navigation_stopped)  # invalidate in-flight results
    k.on(NavigationStopped, navigation.on_navigation_stopped)

    k.on(TrackCommand, navigation.on_track_command)
