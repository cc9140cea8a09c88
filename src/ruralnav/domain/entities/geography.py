from dataclasses import dataclass

from ruralnav.runtime.types import RouteSource, SurfaceKind


# Core geometry types shared by planner and navigator
@dataclass(frozen=True)
class Coordinate:
    lat: float  # degrees
    lon: float

    def as_tuple(self) -> tuple[float, float]:
        return (self.lat, self.lon)


@dataclass(frozen=True)
class GraphEdge:
    target_id: str
    weight_m: float  # geodesic length, never hand-specified
    surface: SurfaceKind = SurfaceKind.PAVED
    is_hilly: bool = False


@dataclass(frozen=True)
class GraphNode:
    id: str
    coordinate: Coordinate
    neighbors: tuple[GraphEdge, ...] = ()


@dataclass(frozen=True)
class RoutingPreferences:
    prefer_paved: bool = False
    avoid_hills: bool = False
    allow_highways: bool = True


@dataclass(frozen=True)
class Route:
    points: tuple[Coordinate, ...]
    source: RouteSource = RouteSource.OFFLINE

    def __len__(self) -> int:
        return len(self.points)

    def __getitem__(self, i):
        return self.points[i]

    @property
    def start(self) -> Coordinate:
        return self.points[0]

    @property
    def destination(self) -> Coordinate:
        return self.points[-1]

    @property
    def last_index(self) -> int:
        return len(self.points) - 1
