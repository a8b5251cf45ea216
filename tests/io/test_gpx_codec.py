# tests/io/test_gpx_codec.py
import math
import random
import xml.etree.ElementTree as ET
from datetime import UTC, datetime, timedelta

import gpxpy
import pytest

from route_maker.config.models import ExportModel
from route_maker.domain.entities.geography import GeoPoint
from route_maker.domain.errors import TrackImportError
from route_maker.domain.ledger import PathLedger
from route_maker.io.gpx_codec import TrackCodec, synthetic_times

START = datetime(2024, 5, 1, 8, 30, 0, tzinfo=UTC)


@pytest.fixture
def ledger() -> PathLedger:
    return PathLedger.from_points(
        [
            GeoPoint(-121.961234, 37.550987),
            GeoPoint(-121.955321, 37.552111),
            GeoPoint(-121.950004, 37.549876),
            GeoPoint(-121.950004, 37.549876),  # duplicate: zero-length step
        ]
    )


def _gpx(body: str) -> str:
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<gpx version="1.1" creator="test" xmlns="http://www.topografix.com/GPX/1/1">'
        f"{body}</gpx>"
    )


# ---------- Encoding


def test_encode_plain_track(ledger: PathLedger):
    text = TrackCodec().encode(ledger, {"name": "Morning loop"})
    assert text.startswith("<?xml")
    assert 'encoding="UTF-8"' in text.splitlines()[0]

    root = ET.fromstring(text.split("?>", 1)[1])
    assert root.tag.endswith("gpx")
    assert root.find("{*}trk/{*}name").text == "Morning loop"
    assert root.find("{*}trk/{*}type") is None
    assert root.find("{*}metadata/{*}time") is None
    pts = root.findall("{*}trk/{*}trkseg/{*}trkpt")
    assert len(pts) == 4
    assert float(pts[0].get("lat")) == pytest.approx(37.550987)
    assert float(pts[0].get("lon")) == pytest.approx(-121.961234)
    assert all(p.find("{*}time") is None for p in pts)


def test_encode_synthetic_timestamps(ledger: PathLedger):
    opts = ExportModel(name="x", include_synthetic_timestamps=True, start_time=START)
    text = TrackCodec().encode(ledger, opts)

    root = ET.fromstring(text.split("?>", 1)[1])
    assert root.find("{*}trk/{*}type").text == "9"

    gpx = gpxpy.parse(text)
    assert gpx.time == START
    times = [p.time for p in gpx.tracks[0].segments[0].points]
    assert times[0] == START
    for prev, cur, node in zip(times, times[1:], ledger.nodes[1:]):
        step = (cur - prev).total_seconds()
        assert step == max(1, math.ceil(node.distance_from_previous_m))
        assert step >= 1


def test_synthetic_times_pace():
    ledger = PathLedger.from_points([GeoPoint(0.0, 0.0), GeoPoint(0.0, 0.001)])
    times = synthetic_times(ledger, START)
    assert times == [START, START + timedelta(seconds=112)]  # ceil(111.19 m)


def test_start_time_is_truncated_to_seconds():
    opts = ExportModel(start_time=datetime(2024, 5, 1, 8, 30, 0, 999_000))
    assert opts.start_time == START


def test_encode_empty_path():
    text = TrackCodec().encode(PathLedger())
    decoded = TrackCodec().decode(text)
    assert len(decoded.ledger) == 0
    assert decoded.ledger.cursor is None


# ---------- Decoding


def test_round_trip(ledger: PathLedger):
    codec = TrackCodec()
    decoded = codec.decode(codec.encode(ledger, {"name": "rt"}))
    assert decoded.name == "rt"
    got, want = decoded.ledger.snapshot(), ledger.snapshot()
    assert got.points == want.points
    assert got.distances_m == want.distances_m
    assert got.cumulative_m == want.cumulative_m
    assert got.cursor == len(got) - 1


def test_round_trip_keeps_full_precision():
    rng = random.Random(11)
    pts = [GeoPoint(rng.uniform(-180.0, 180.0), rng.uniform(-90.0, 90.0)) for _ in range(200)]
    original = PathLedger.from_points(pts)
    codec = TrackCodec()

    decoded = codec.decode(codec.encode(original)).ledger

    assert decoded.points == pts
    assert decoded.snapshot().distances_m == original.snapshot().distances_m
    assert decoded.total_distance() == original.total_distance()


def test_decode_tolerates_missing_optional_elements():
    doc = _gpx('<trk><trkseg><trkpt lat="1.0" lon="2.0"/><trkpt lat="1.001" lon="2.0"/></trkseg></trk>')
    decoded = TrackCodec().decode(doc)
    assert decoded.name is None
    assert decoded.ledger.points == [GeoPoint(2.0, 1.0), GeoPoint(2.0, 1.001)]
    assert decoded.ledger.total_distance() == pytest.approx(111.2, abs=0.1)


def test_decode_joins_segments_in_order():
    doc = _gpx(
        "<trk><name>two</name>"
        '<trkseg><trkpt lat="0" lon="0"/></trkseg>'
        '<trkseg><trkpt lat="0" lon="1"/><trkpt lat="1" lon="1"/></trkseg>'
        "</trk>"
    )
    decoded = TrackCodec().decode(doc)
    assert decoded.name == "two"
    assert [p.lon_lat for p in decoded.ledger.points] == [(0, 0), (1, 0), (1, 1)]


@pytest.mark.parametrize(
    "doc",
    [
        "<gpx><trk>",  # malformed XML
        "not xml at all",
        _gpx('<trk><trkseg><trkpt lat="abc" lon="2.0"/></trkseg></trk>'),
        _gpx('<trk><trkseg><trkpt lat="nan" lon="2.0"/></trkseg></trk>'),
        _gpx('<trk><trkseg><trkpt lat="1.0"/></trkseg></trk>'),
        _gpx("<metadata><name>no track</name></metadata>"),
        '<foo><trk><trkseg><trkpt lat="1" lon="2"/></trkseg></trk></foo>',  # wrong root
    ],
)
def test_decode_rejects_bad_documents(doc):
    with pytest.raises(TrackImportError):
        TrackCodec().decode(doc)


def test_decode_requires_gpx_root_even_when_namespaced():
    doc = '<foo xmlns="http://www.topografix.com/GPX/1/1"><trk><trkseg><trkpt lat="1" lon="2"/></trkseg></trk></foo>'
    with pytest.raises(TrackImportError, match="root is not <gpx>"):
        TrackCodec().decode(doc)
