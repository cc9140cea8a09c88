# ruralnav/app/controllers/navigation.py
from ruralnav.app.controllers.routing import RoutingController
from ruralnav.app.events import (
    CalibrationChanged,
    GpsStatusChanged,
    NavigationStopped,
    NavTick,
    PositionFix,
    SensorSample,
    TrackCommand,
    TransportModeChanged,
)
from ruralnav.domain.entities.motion import NavigationSnapshot
from ruralnav.domain.entities.track import TrackRecorder
from ruralnav.domain.mechanics.mechanics_core import Mechanics
from ruralnav.domain.mechanics.mechanics_geodesy import distance_m, path_length_m
from ruralnav.domain.state import NavigationState
from ruralnav.io.business_events import (
    ArrivedBiz,
    ManeuverChangedBiz,
    MotionModeChangedBiz,
    RouteInstalledBiz,
)
from ruralnav.runtime.types import MotionMode, NavState
from ruralnav.services.signal import SignalSimulator
from ruralnav.sim.clock import SimClock
from ruralnav.sim.hooks import NavHooks, NoopHooks


class NavigationController:
    """
    Owns the tick loop. Each NavTick installs any finished route, steps the
    active motion strategy, refreshes maneuver and ETA, and publishes a snapshot.
    """

    def __init__(
        self,
        state: NavigationState,
        mechanics: Mechanics,
        routing: RoutingController,
        clock: SimClock,
        *,
        track: TrackRecorder | None = None,
        signal: SignalSimulator | None = None,
        hooks: NavHooks | None = None,
        run_id: str = "local",
    ):
        self.state = state
        self.mechanics = mechanics
        self.routing = routing
        self.clock = clock
        self.track = track or TrackRecorder()
        self.signal = signal
        self.hooks = hooks or NoopHooks()
        self.run_id = run_id

        self.last_snapshot: NavigationSnapshot | None = None
        self._last_t: float | None = None
        self._mode = MotionMode.IDLE

    # --------------- Tick --------------------------------

    def on_tick(self, ev: NavTick):
        # measured elapsed time, so late ticks still move the right distance
        dt = 0.0 if self._last_t is None else max(0.0, ev.t - self._last_t)
        self._last_t = ev.t
        s = self.state

        self._install_finished_route(ev.t)

        mode = self.mechanics.step(s, dt)
        if mode is not self._mode:
            self._biz(
                MotionModeChangedBiz,
                ev.t,
                "motion_mode_changed",
                previous=self._mode.value,
                current=mode.value,
            )
            self._mode = mode

        if s.nav_state is NavState.NAVIGATING and s.route is not None:
            # a pending reroute elsewhere must not end navigation at the old destination
            if s.route.destination == s.destination and self.mechanics.maneuvers.arrived(
                s.route, s.vehicle.position
            ):
                self._arrive(ev.t)

        self._refresh_maneuver(ev.t)
        eta = self.mechanics.estimate_eta(s, self.clock.to_wall(ev.t))
        self.track.record(s.vehicle.position)

        v = s.vehicle
        snap = NavigationSnapshot(
            t=ev.t,
            position=v.position,
            heading_deg=v.heading_deg,
            speed_mps=v.speed_mps,
            next_index=s.next_index,
            nav_state=s.nav_state,
            motion_mode=mode,
            maneuver=s.maneuver,
            eta=eta,
            signal_strength=self.signal.step() if self.signal else None,
        )
        self.last_snapshot = snap
        self.hooks.snapshot(snap)
        return [NavTick(t=ev.t + ev.period_s, period_s=ev.period_s)]

    def _install_finished_route(self, t: float) -> None:
        got = self.routing.poll(t)
        if got is None:
            return
        rid, route = got
        s = self.state
        if s.nav_state is not NavState.NAVIGATING:
            return
        s.install_route(route)
        self._biz(
            RouteInstalledBiz,
            t,
            "route_installed",
            request_id=rid,
            source=route.source.value,
            points=len(route),
            length_m=round(path_length_m(route.points), 1),
        )

    def _arrive(self, t: float) -> None:
        s = self.state
        s.nav_state = NavState.ARRIVED
        s.vehicle.speed_mps = 0.0
        dest = s.route.destination
        self._biz(
            ArrivedBiz,
            t,
            "arrived",
            destination=dest.as_tuple(),
            distance_m=round(distance_m(s.vehicle.position, dest), 1),
        )

    def _refresh_maneuver(self, t: float) -> None:
        s = self.state
        m = self.mechanics.next_maneuver(s)
        prev = s.maneuver
        s.maneuver = m
        if m is not None and (prev is None or prev.kind is not m.kind):
            self._biz(
                ManeuverChangedBiz,
                t,
                "maneuver_changed",
                kind=m.kind.value,
                distance_m=round(m.distance_m, 1),
                text=m.text,
            )

    def _biz(self, cls, t: float, name: str, **fields) -> None:
        self.hooks.biz(cls(run_id=self.run_id, t=t, name=name, **fields))

    # --------------- Inputs ------------------------------

    def on_sensor_sample(self, ev: SensorSample):
        self.state.sensors = ev.readings
        return []

    def on_calibration_changed(self, ev: CalibrationChanged):
        self.state.calibration = ev.calibration
        return []

    def on_gps_status_changed(self, ev: GpsStatusChanged):
        self.state.gps_available = ev.available
        return []

    def on_position_fix(self, ev: PositionFix):
        # fixes are ignored while the receiver reports no signal
        if self.state.gps_available:
            self.state.vehicle.position = ev.position
        return []

    def on_transport_mode_changed(self, ev: TransportModeChanged):
        v = self.state.vehicle
        v.mode = ev.mode
        v.speed_mps = min(v.speed_mps, ev.mode.nominal_mps)
        return []

    def on_navigation_stopped(self, ev: NavigationStopped):
        self.state.stop_navigation()
        return []

    def on_track_command(self, ev: TrackCommand):
        if ev.action == "start":
            self.track.start(self.state.vehicle.position)
        elif ev.action == "stop":
            self.track.stop()
        elif ev.action == "clear":
            self.track.clear()
        else:
            raise ValueError(f"unknown track action: {ev.action!r}")
        return []
