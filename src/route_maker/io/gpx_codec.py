"""Read and write paths as GPX track files.

Only the subset the editor needs is handled: one ``<trk>`` with a name, an
optional type, and ``<trkpt>`` elements carrying ``lat``/``lon`` and an
optional ``<time>``. Points are always written in geographic degrees.
"""

from __future__ import annotations

import math
import xml.etree.ElementTree as ET
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import gpxpy
import gpxpy.gpx

from route_maker.app.protocols import GeodesicDistance
from route_maker.config.models import ExportModel
from route_maker.domain.entities.geography import GeoPoint
from route_maker.domain.errors import TrackImportError
from route_maker.domain.ledger import PathLedger

GPX_VERSION = "1.1"
# Activity type tag some consumers expect next to synthetic timestamps.
SYNTHETIC_TRACK_TYPE = "9"
SYNTHETIC_PACE_MPS = 1.0


@dataclass
class DecodedTrack:
    ledger: PathLedger
    name: str | None


class TrackCodec:
    def __init__(self, distance: GeodesicDistance | None = None):
        self.distance = distance

    # --------------- Decoding -----------------------------

    def decode(self, text: str | bytes) -> DecodedTrack:
        """Parse a GPX document into a fresh ledger.

        Points are replayed through ``PathLedger.insert`` in document order so
        distances match interactive editing exactly. Raises
        ``TrackImportError`` on any structural or numeric problem; nothing is
        returned half-built.
        """

        try:
            if isinstance(text, bytes):
                text = text.decode("utf-8")
            root = ET.fromstring(text)
            gpx = gpxpy.parse(text)
        except (ET.ParseError, gpxpy.gpx.GPXException, ValueError) as exc:
            raise TrackImportError(f"Unable to parse track document: {exc}") from exc

        # gpxpy reads any root element as if it were <gpx>
        if root.tag.rsplit("}", 1)[-1] != "gpx":
            raise TrackImportError("Track document root is not <gpx>")

        if not gpx.tracks:
            raise TrackImportError("Track document has no <trk> element")
        track = gpx.tracks[0]

        points = [_to_geo(p) for seg in track.segments for p in seg.points]
        ledger = PathLedger.from_points(points, self.distance)
        return DecodedTrack(ledger=ledger, name=track.name or gpx.name)

    # --------------- Encoding -----------------------------

    def encode(self, ledger: PathLedger, options: ExportModel | Mapping | None = None) -> str:
        opts = _options(options)

        gpx = gpxpy.gpx.GPX()
        gpx.creator = opts.creator
        track = gpxpy.gpx.GPXTrack(name=opts.name)
        segment = gpxpy.gpx.GPXTrackSegment()
        track.segments.append(segment)
        gpx.tracks.append(track)

        times = [None] * len(ledger.nodes)
        if opts.include_synthetic_timestamps:
            start = opts.start_time or datetime.now(UTC).replace(microsecond=0)
            gpx.time = start
            track.type = SYNTHETIC_TRACK_TYPE
            times = synthetic_times(ledger, start)

        for node, t in zip(ledger.nodes, times):
            segment.points.append(
                gpxpy.gpx.GPXTrackPoint(latitude=node.point.lat, longitude=node.point.lon, time=t)
            )
        return gpx.to_xml(version=GPX_VERSION)


def synthetic_times(ledger: PathLedger, start: datetime) -> list[datetime]:
    """Strictly increasing timestamps at a worst-case 1 m/s pace."""
    out: list[datetime] = []
    t = start
    for i, node in enumerate(ledger.nodes):
        if i > 0:
            step = math.ceil(node.distance_from_previous_m / SYNTHETIC_PACE_MPS)
            t += timedelta(seconds=max(1, step))
        out.append(t)
    return out


def _options(options: ExportModel | Mapping | None) -> ExportModel:
    if options is None:
        return ExportModel()
    return options if isinstance(options, ExportModel) else ExportModel.model_validate(options)


def _to_geo(p: gpxpy.gpx.GPXTrackPoint) -> GeoPoint:
    lat, lon = p.latitude, p.longitude
    if lat is None or lon is None:
        raise TrackImportError("Track point is missing lat/lon")
    try:
        lat, lon = float(lat), float(lon)
    except (TypeError, ValueError) as exc:
        raise TrackImportError(f"Non-numeric coordinate: lat={lat!r} lon={lon!r}") from exc
    if not (math.isfinite(lat) and math.isfinite(lon)):
        raise TrackImportError(f"Non-finite coordinate: lat={lat!r} lon={lon!r}")
    return GeoPoint(lon, lat)
