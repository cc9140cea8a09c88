import os
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from ruralnav.runtime.types import TransportMode


class SimModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    epoch: tuple[int, int, int, int, int, int] = (2025, 1, 1, 0, 0, 0)
    seed: int = 0
    tick_s: float = 1.0 / 60.0  # display refresh cadence
    duration: float = 600.0  # seconds

    @field_validator("tick_s", "duration")
    @classmethod
    def _positive(cls, v: float, info: ValidationInfo) -> float:
        if v <= 0:
            raise ValueError(f"{info.field_name} must be > 0")
        return v


class LogModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    debug: bool = False
    sample_every: int = 60  # ticks between snapshot log lines
    async_sink: bool = False  # business events written off the tick loop


# ----------------- VEHICLE ---------------------


class CalibrationModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    heading_offset: float = 0.0
    acc_x_offset: float = 0.0
    acc_y_offset: float = 0.0
    acc_z_offset: float = 0.0


class VehicleModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    start: tuple[float, float] = (26.9124, 75.7873)  # (lat, lon)
    mode: TransportMode = TransportMode.WALK
    calibration: CalibrationModel = Field(default_factory=CalibrationModel)

    @field_validator("mode", mode="before")
    @classmethod
    def _mode_lower(cls, v):
        # accept "CAR" as well as "car"
        return v.lower() if isinstance(v, str) else v


class PreferencesModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    prefer_paved: bool = True
    avoid_hills: bool = False
    allow_highways: bool = True


# ----------------- GRAPH ---------------------


class GraphBuiltin(BaseModel):
    model_config = ConfigDict(extra="forbid")
    by: Literal["builtin"] = "builtin"
    name: str = "jaipur"


class GraphByPath(BaseModel):
    model_config = ConfigDict(extra="forbid")
    by: Literal["path"] = "path"
    file: str
    fmt: Literal["json", "pickle"] = "json"

    @field_validator("file")
    @classmethod
    def _expand(cls, v: str) -> str:
        return os.path.expandvars(os.path.expanduser(v))


GraphRef = Annotated[GraphBuiltin | GraphByPath, Field(discriminator="by")]


# ----------------- ROUTE PLANNERS ---------------------


class PlannerAStarModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["astar"] = "astar"
    graph: GraphRef = Field(default_factory=GraphBuiltin)


class PlannerDirectModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["direct"] = "direct"


PlannerUnion = Annotated[PlannerAStarModel | PlannerDirectModel, Field(discriminator="kind")]


# ----------------- REMOTE ROUTERS ---------------------


class RemoteRouterOsrmModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["osrm"] = "osrm"
    base_url: str = Field(
        default_factory=lambda: os.getenv("RURALNAV_OSRM_URL", "https://router.project-osrm.org")
    )
    timeout_s: float = 3.0

    @field_validator("timeout_s")
    @classmethod
    def _positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeout_s must be > 0")
        return v


class RemoteRouterDisabledModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["disabled"] = "disabled"


RemoteRouterUnion = Annotated[
    RemoteRouterOsrmModel | RemoteRouterDisabledModel, Field(discriminator="kind")
]


# ----------------- REQUESTERS ---------------------


class RequesterInlineModel(BaseModel):
    """Acquire synchronously; results are picked up on the next tick."""

    model_config = ConfigDict(extra="forbid")
    kind: Literal["inline"] = "inline"


class RequesterThreadedModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["threaded"] = "threaded"
    maxsize: int = 8


RequesterUnion = Annotated[
    RequesterInlineModel | RequesterThreadedModel, Field(discriminator="kind")
]


# ------------------------------------------------------------------


class NavigationModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    arrival_m: float = 20.0
    turn_threshold_deg: float = 30.0
    max_lookahead_m: float = 1500.0
    track_min_step_m: float = 5.0


class RoutingModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    planner: PlannerUnion = Field(default_factory=PlannerAStarModel)
    remote: RemoteRouterUnion = Field(default_factory=RemoteRouterOsrmModel)
    requester: RequesterUnion = Field(default_factory=RequesterInlineModel)
    preferences: PreferencesModel = Field(default_factory=PreferencesModel)


class ScenarioModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str = "default"
    run_id: str = "local"
    sim: SimModel = Field(default_factory=SimModel)
    log: LogModel = Field(default_factory=LogModel)
    vehicle: VehicleModel = Field(default_factory=VehicleModel)
    routing: RoutingModel = Field(default_factory=RoutingModel)
    navigation: NavigationModel = Field(default_factory=NavigationModel)
    simulate_signal: bool = True
