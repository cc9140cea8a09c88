# ruralnav/domain/mechanics/mechanics_geodesy.py
"""
Spherical-earth primitives shared by the planner and the navigation loop.
All functions are pure; no module state is touched.
"""

import math

from ruralnav.domain.entities.geography import Coordinate

EARTH_RADIUS_M = 6_378_137.0  # WGS84 equatorial


def distance_m(a: Coordinate, b: Coordinate) -> float:
    """Great-circle (haversine) distance in meters."""
    lat1, lat2 = math.radians(a.lat), math.radians(b.lat)
    dlat = lat2 - lat1
    dlon = math.radians(b.lon - a.lon)
    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    return 2 * EARTH_RADIUS_M * math.atan2(math.sqrt(h), math.sqrt(max(0.0, 1 - h)))


def bearing_deg(a: Coordinate, b: Coordinate) -> float:
    """Initial forward azimuth a -> b in [0, 360). Coincident points give 0."""
    lat1, lat2 = math.radians(a.lat), math.radians(b.lat)
    dlon = math.radians(b.lon - a.lon)
    y = math.sin(dlon) * math.cos(lat2)
    x = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(dlon)
    return normalize_deg(math.degrees(math.atan2(y, x)))


def destination_point(start: Coordinate, dist_m: float, brg_deg: float) -> Coordinate:
    """Point reached from `start` after `dist_m` meters along initial bearing `brg_deg`."""
    lat1, lon1 = math.radians(start.lat), math.radians(start.lon)
    delta = dist_m / EARTH_RADIUS_M
    theta = math.radians(brg_deg)

    lat2 = math.asin(
        math.sin(lat1) * math.cos(delta) + math.cos(lat1) * math.sin(delta) * math.cos(theta)
    )
    lon2 = lon1 + math.atan2(
        math.sin(theta) * math.sin(delta) * math.cos(lat1),
        math.cos(delta) - math.sin(lat1) * math.sin(lat2),
    )
    return Coordinate(math.degrees(lat2), math.degrees(lon2))


# ---------- angle helpers


def normalize_deg(x: float) -> float:
    r = x % 360.0
    # -1e-15 % 360 rounds to 360.0
    return 0.0 if r >= 360.0 else r


def signed_delta_deg(from_deg: float, to_deg: float) -> float:
    """Shortest signed rotation from `from_deg` to `to_deg`, in (-180, 180]."""
    d = (to_deg - from_deg) % 360.0
    return d - 360.0 if d > 180.0 else d


def interpolate(a: Coordinate, b: Coordinate, ratio: float) -> Coordinate:
    # linear in lat/lon; segments are short enough for this to be fine
    return Coordinate(a.lat + (b.lat - a.lat) * ratio, a.lon + (b.lon - a.lon) * ratio)


def path_length_m(points) -> float:
    return sum(distance_m(p, q) for p, q in zip(points, points[1:]))
