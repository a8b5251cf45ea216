from typing import Protocol, runtime_checkable

from route_maker.domain.entities.geography import GeoPoint


# ------------- Collaborators --------------------
@runtime_checkable
class GeodesicDistance(Protocol):
    """
    Great-circle distance between two geographic points.
    Units: meters. Must be symmetric and >= 0.
    """

    def __call__(self, a: GeoPoint, b: GeoPoint) -> float: ...


@runtime_checkable
class Projection(Protocol):
    """
    Responsibilities:
      • Convert map coordinates handed over by the shell into GeoPoints.
      • Convert GeoPoints back into map coordinates for rendering.
    """

    def to_geo(self, xy: tuple[float, float]) -> GeoPoint: ...
    def from_geo(self, p: GeoPoint) -> tuple[float, float]: ...
