from dataclasses import dataclass


# Core geometry types used by the ledger
@dataclass(frozen=True)
class GeoPoint:
    lon: float  # degrees
    lat: float

    @property
    def lon_lat(self) -> tuple[float, float]:
        return (self.lon, self.lat)

    @property
    def lat_lon(self) -> tuple[float, float]:
        return (self.lat, self.lon)


@dataclass
class PathNode:
    point: GeoPoint
    distance_from_previous_m: float = 0.0
    cumulative_m: float = 0.0
