from datetime import UTC, datetime
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LogModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    debug: bool = False


# ----------------- GEODESY ---------------------


class GeodesyHaversineModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["haversine"] = "haversine"
    radius_m: float = 6_371_000.0

    @field_validator("radius_m")
    @classmethod
    def _positive(cls, v: float) -> float:
        if not v > 0:
            raise ValueError("radius_m must be > 0")
        return v


class GeodesyGpxpyModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["gpxpy"] = "gpxpy"


GeodesyUnion = Annotated[
    GeodesyHaversineModel | GeodesyGpxpyModel,
    Field(discriminator="kind"),
]

# ----------------- PROJECTIONS ---------------------


class ProjectionLonLatModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["lonlat"] = "lonlat"


class ProjectionWebMercatorModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["web_mercator"] = "web_mercator"
    radius_m: float = 6_378_137.0


ProjectionUnion = Annotated[
    ProjectionLonLatModel | ProjectionWebMercatorModel,
    Field(discriminator="kind"),
]

# ------------------ EXPORT -----------------------------


class ExportModel(BaseModel):
    """Options for writing a track file."""

    model_config = ConfigDict(extra="forbid")
    name: str = ""
    creator: str = "route-maker"
    # Some consumers reject tracks without monotonic timestamps; this fakes
    # them at a 1 m/s pace. It is not a measurement.
    include_synthetic_timestamps: bool = False
    start_time: datetime | None = None

    @field_validator("start_time")
    @classmethod
    def _utc_whole_seconds(cls, v: datetime | None) -> datetime | None:
        if v is None:
            return None
        v = v.replace(tzinfo=UTC) if v.tzinfo is None else v.astimezone(UTC)
        return v.replace(microsecond=0)


# ------------------------------------------------------------------


class EditorModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    session_id: str = "local"
    log: LogModel = LogModel()
    geodesy: GeodesyUnion = Field(default_factory=GeodesyHaversineModel)
    projection: ProjectionUnion = Field(default_factory=ProjectionLonLatModel)
    export: ExportModel = ExportModel()
