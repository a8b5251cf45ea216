# runtime/registries.py
from collections.abc import Callable

from route_maker.app.protocols import GeodesicDistance, Projection
from route_maker.config.models import (
    GeodesyGpxpyModel,
    GeodesyHaversineModel,
    GeodesyUnion,
    ProjectionLonLatModel,
    ProjectionUnion,
    ProjectionWebMercatorModel,
)
from route_maker.domain.geodesy import (
    GpxpyDistance,
    HaversineDistance,
    LonLatProjection,
    WebMercatorProjection,
)

GeodesyFactory = Callable[[GeodesyUnion], GeodesicDistance]
ProjectionFactory = Callable[[ProjectionUnion], Projection]

_geodesy_registry: dict[str, GeodesyFactory] = {}
_projection_registry: dict[str, ProjectionFactory] = {}


# ------------------- Geodesy ---------------------------


def register_geodesy(kind: str):
    def deco(fn: GeodesyFactory):
        _geodesy_registry[kind] = fn
        return fn

    return deco


def make_geodesy(cfg: GeodesyUnion) -> GeodesicDistance:
    try:
        factory = _geodesy_registry[cfg.kind]
    except KeyError:
        raise ValueError(f"Unknown geodesy kind {cfg.kind!r}") from None
    return factory(cfg)


@register_geodesy("haversine")
def _make_haversine(cfg: GeodesyHaversineModel):
    return HaversineDistance(cfg.radius_m)


@register_geodesy("gpxpy")
def _make_gpxpy(cfg: GeodesyGpxpyModel):
    return GpxpyDistance()


# ------------------- Projections ---------------------------


def register_projection(kind: str):
    def deco(fn: ProjectionFactory):
        _projection_registry[kind] = fn
        return fn

    return deco


def make_projection(cfg: ProjectionUnion) -> Projection:
    try:
        factory = _projection_registry[cfg.kind]
    except KeyError:
        raise ValueError(f"Unknown projection kind {cfg.kind!r}") from None
    return factory(cfg)


@register_projection("lonlat")
def _make_lonlat(cfg: ProjectionLonLatModel):
    return LonLatProjection()


@register_projection("web_mercator")
def _make_web_mercator(cfg: ProjectionWebMercatorModel):
    return WebMercatorProjection(cfg.radius_m)
