import math

import gpxpy.geo

from route_maker.domain.entities.geography import GeoPoint

EARTH_RADIUS_M = 6_371_000.0
WEB_MERCATOR_RADIUS_M = 6_378_137.0
# Web Mercator is undefined at the poles
MAX_MERCATOR_LAT = 85.05112878


def haversine_m(a: GeoPoint, b: GeoPoint, radius_m: float = EARTH_RADIUS_M) -> float:
    lat1, lon1 = map(math.radians, a.lat_lon)
    lat2, lon2 = map(math.radians, b.lat_lon)
    sin_dphi = math.sin((lat2 - lat1) / 2.0)
    sin_dlambda = math.sin((lon2 - lon1) / 2.0)
    value = sin_dphi**2 + math.cos(lat1) * math.cos(lat2) * sin_dlambda**2
    value = min(1.0, max(0.0, value))
    return 2.0 * radius_m * math.asin(math.sqrt(value))


class HaversineDistance:
    def __init__(self, radius_m: float = EARTH_RADIUS_M):
        self.radius_m = radius_m

    def __call__(self, a: GeoPoint, b: GeoPoint) -> float:
        return haversine_m(a, b, self.radius_m)


class GpxpyDistance:
    """Great-circle distance as computed by gpxpy (WGS84 equatorial radius)."""

    def __call__(self, a: GeoPoint, b: GeoPoint) -> float:
        return gpxpy.geo.haversine_distance(a.lat, a.lon, b.lat, b.lon)


# -------- Projections between map coordinates and GeoPoint


class LonLatProjection:
    def to_geo(self, xy: tuple[float, float]) -> GeoPoint:
        return GeoPoint(float(xy[0]), float(xy[1]))

    def from_geo(self, p: GeoPoint) -> tuple[float, float]:
        return p.lon_lat


class WebMercatorProjection:
    """Spherical Mercator (EPSG:3857), meters on the map side."""

    def __init__(self, radius_m: float = WEB_MERCATOR_RADIUS_M):
        self.radius_m = radius_m

    def to_geo(self, xy: tuple[float, float]) -> GeoPoint:
        x, y = xy
        lon = math.degrees(x / self.radius_m)
        lat = math.degrees(2.0 * math.atan(math.exp(y / self.radius_m)) - math.pi / 2.0)
        return GeoPoint(lon, lat)

    def from_geo(self, p: GeoPoint) -> tuple[float, float]:
        lat = max(-MAX_MERCATOR_LAT, min(MAX_MERCATOR_LAT, p.lat))
        x = self.radius_m * math.radians(p.lon)
        y = self.radius_m * math.log(math.tan(math.pi / 4.0 + math.radians(lat) / 2.0))
        return (x, y)
