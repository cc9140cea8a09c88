# ruralnav/services/osrm_client.py
# OSRM adapter: talks HTTP, converts (lat, lon) <-> OSRM (lon,lat), and
# normalizes every failure into RemoteRoutingUnavailable.
from collections.abc import Sequence

import requests

from ruralnav.app.protocols import RemoteRouter
from ruralnav.domain.entities.geography import Coordinate


class RemoteRoutingUnavailable(Exception):
    """Online routing could not produce a route; `reason` says why."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class OSRMClient(RemoteRouter):
    def __init__(
        self,
        base_url: str = "https://router.project-osrm.org",
        timeout_s: float = 3.0,
        session: requests.Session | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s  # whole request is abandoned past this
        self.session = session or requests.Session()

    @staticmethod
    def format_coordinates(points: Sequence[Coordinate]) -> str:
        return ";".join(f"{p.lon},{p.lat}" for p in points)

    def url_for(self, points: Sequence[Coordinate], profile: str) -> str:
        return f"{self.base_url}/route/v1/{profile}/{self.format_coordinates(points)}"

    def route(self, points: Sequence[Coordinate], profile: str) -> list[Coordinate]:
        if len(points) < 2:
            raise ValueError("At least two coordinates are required to compute a route.")
        try:
            response = self.session.get(
                self.url_for(points, profile),
                params={"overview": "full", "geometries": "geojson"},
                timeout=self.timeout_s,
            )
            response.raise_for_status()
            data = response.json()
        except requests.Timeout as exc:
            raise RemoteRoutingUnavailable(f"timeout after {self.timeout_s}s") from exc
        except requests.JSONDecodeError as exc:
            raise RemoteRoutingUnavailable("malformed payload: not JSON") from exc
        except requests.RequestException as exc:
            raise RemoteRoutingUnavailable(f"transport error: {exc}") from exc
        except ValueError as exc:
            raise RemoteRoutingUnavailable("malformed payload: not JSON") from exc
        return self.parse_geometry(data)

    @staticmethod
    def parse_geometry(data) -> list[Coordinate]:
        try:
            routes = data.get("routes") or []
            if not routes:
                raise RemoteRoutingUnavailable(f"no route found (code={data.get('code')!r})")
            coords = routes[0]["geometry"]["coordinates"]
            out = [Coordinate(float(c[1]), float(c[0])) for c in coords]
        except (AttributeError, KeyError, IndexError, TypeError, ValueError) as exc:
            raise RemoteRoutingUnavailable(f"malformed payload: {exc!r}") from exc
        if not out:
            raise RemoteRoutingUnavailable("empty route geometry")
        return out
