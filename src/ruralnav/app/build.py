# ruralnav/app/build.py
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from ruralnav.app.controllers.navigation import NavigationController
from ruralnav.app.controllers.routing import RoutingController
from ruralnav.app.events import NavTick
from ruralnav.app.protocols import RouteRequester
from ruralnav.app.wiring import wire
from ruralnav.config.models import ScenarioModel
from ruralnav.domain.entities.geography import Coordinate, RoutingPreferences
from ruralnav.domain.entities.sensors import SensorCalibration
from ruralnav.domain.entities.track import TrackRecorder
from ruralnav.domain.entities.vehicle import Vehicle
from ruralnav.domain.mechanics.mechanics_core import Mechanics
from ruralnav.domain.mechanics.mechanics_factory import build_mechanics
from ruralnav.domain.state import NavigationState
from ruralnav.io.kernel_logging import KernelLogging  # JSON logs
from ruralnav.io.recorder import JsonlSink, Recorder, Sink
from ruralnav.runtime.registries import make_remote, make_requester
from ruralnav.services.route_acquisition import RouteAcquisition
from ruralnav.services.signal import SignalSimulator
from ruralnav.sim.clock import SimClock
from ruralnav.sim.hooks import NoopHooks
from ruralnav.sim.kernel import Kernel
from ruralnav.sim.rng import RNGRegistry


@dataclass
class App:
    kernel: Kernel
    clock: SimClock
    rng: RNGRegistry
    state: NavigationState
    mechanics: Mechanics
    routing: RoutingController
    navigation: NavigationController
    requester: RouteRequester
    tick_s: float
    recorder: Recorder | None = None

    def start(self, t0: float = 0.0) -> None:
        """Seed the first tick; every tick schedules the next one."""
        self.kernel.schedule(NavTick(t=t0, period_s=self.tick_s))

    def close(self) -> None:
        self.requester.close()
        if self.recorder:
            self.recorder.close()


def build(
    cfg: ScenarioModel | Mapping,
    *,
    use_logging: bool = True,
    sinks: Sequence[Sink] = (),
    remote_deps: dict | None = None,
    logger: logging.Logger | None = None,
) -> App:
    # 0) Validate config
    model = cfg if isinstance(cfg, ScenarioModel) else ScenarioModel.model_validate(cfg)

    # 1) Clock & RNG
    clock = SimClock.utc_epoch(*model.sim.epoch)
    rng_registry = RNGRegistry(model.sim.seed, scenario=model.name)

    # 2) Kernel (with hooks); analytics go to the recorder
    sinks = sinks or [JsonlSink()]
    recorder = Recorder.buffered(*sinks) if model.log.async_sink else Recorder(*sinks)
    hooks = (
        KernelLogging(
            run_id=model.run_id,
            recorder=recorder,
            clock=clock,
            level=model.log.level,
            debug=model.log.debug,
            sample_every=model.log.sample_every,
            logger=logger,
        )
        if use_logging
        else NoopHooks()
    )
    kernel = Kernel(hooks=hooks)

    # 3) State
    state = NavigationState(
        vehicle=Vehicle(position=Coordinate(*model.vehicle.start), mode=model.vehicle.mode),
        prefs=RoutingPreferences(**model.routing.preferences.model_dump()),
        calibration=SensorCalibration(**model.vehicle.calibration.model_dump()),
    )

    # 4) Mechanics & routing services
    mechanics = build_mechanics(model.routing.planner, model.navigation)
    remote = make_remote(model.routing.remote, deps=remote_deps)
    acquisition = RouteAcquisition(mechanics.planner, remote)
    requester = make_requester(model.routing.requester, acquisition=acquisition)

    # 5) Handlers (inject deps explicitly)
    routing = RoutingController(state, requester, hooks=hooks, run_id=model.run_id)
    signal = SignalSimulator(rng_registry.stream("signal")) if model.simulate_signal else None
    navigation = NavigationController(
        state,
        mechanics,
        routing,
        clock,
        track=TrackRecorder(min_step_m=model.navigation.track_min_step_m),
        signal=signal,
        hooks=hooks,
        run_id=model.run_id,
    )

    # 6) Wiring
    wire(kernel, navigation=navigation, routing=routing)

    return App(
        kernel,
        clock,
        rng_registry,
        state,
        mechanics,
        routing,
        navigation,
        requester,
        model.sim.tick_s,
        recorder,
    )
