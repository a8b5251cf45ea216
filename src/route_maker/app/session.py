# app/session.py
from collections.abc import Callable

from route_maker.app.events import (
    DragEnded,
    DragStarted,
    PathCleared,
    PathReversed,
    PointInserted,
    PointMoved,
    PointRemoved,
    PointSelected,
    SessionEvent,
    TrackExported,
    TrackImported,
    TrackImportFailed,
)
from route_maker.app.hooks import NoopHooks, SessionHooks
from route_maker.app.protocols import GeodesicDistance, Projection
from route_maker.config.models import ExportModel
from route_maker.domain.entities.geography import GeoPoint
from route_maker.domain.errors import LedgerContractError, TrackImportError
from route_maker.domain.geodesy import HaversineDistance, LonLatProjection
from route_maker.domain.ledger import LedgerSnapshot, PathLedger
from route_maker.io.gpx_codec import TrackCodec

Coord = GeoPoint | tuple[float, float]
Handler = Callable[[SessionEvent], None]


class EditingSession:
    """
    The API the map shell talks to.

    Coordinates arrive in map projection (or as GeoPoints) and are converted
    before they reach the ledger. After every change the session publishes an
    event carrying a fresh snapshot; the shell re-renders from that and never
    reads the ledger's nodes directly.
    """

    def __init__(
        self,
        *,
        distance: GeodesicDistance | None = None,
        projection: Projection | None = None,
        codec: TrackCodec | None = None,
        export: ExportModel | None = None,
        hooks: SessionHooks | None = None,
        name: str = "",
    ):
        self.distance = distance or HaversineDistance()
        self.projection = projection or LonLatProjection()
        self.codec = codec or TrackCodec(self.distance)
        self.export_defaults = export or ExportModel()
        self.ledger = PathLedger(self.distance)
        self.name = name
        self._subs: dict[type[SessionEvent], list[Handler]] = {}
        self._hooks = hooks or NoopHooks()
        self._seq = 0

    # --------------- Helpers -----------------------------

    def on(self, etype: type[SessionEvent], handler: Handler) -> None:
        """Subscribe to ``etype`` and its subclasses (``SessionEvent`` gets everything)."""
        self._subs.setdefault(etype, []).append(handler)

    def _publish(self, ev: SessionEvent) -> None:
        self._seq += 1
        handlers = [h for etype, hs in self._subs.items() if isinstance(ev, etype) for h in hs]
        self._hooks.dispatch(ev, seq=self._seq, handlers=len(handlers))
        for h in handlers:
            h(ev)

    def _geo(self, c: Coord) -> GeoPoint:
        return c if isinstance(c, GeoPoint) else self.projection.to_geo(c)

    def _guarded(self, op: str, fn, *args):
        try:
            return fn(*args)
        except LedgerContractError as exc:
            self._hooks.error(op, exc=exc, points=len(self.ledger), cursor=self.ledger.cursor)
            raise

    # --------------- Editing -----------------------------

    def insert(self, coordinate: Coord) -> int:
        index = self.ledger.insert(self._geo(coordinate))
        self._publish(PointInserted(self.snapshot(), index=index))
        return index

    def remove_at_cursor(self) -> None:
        index = self.ledger.cursor
        if index is None:
            return
        self.ledger.remove_at_cursor()
        self._publish(PointRemoved(self.snapshot(), index=index))

    def select_nearest(self, index: int) -> None:
        self._guarded("select_nearest", self.ledger.select_nearest, index)
        self._publish(PointSelected(self.snapshot(), index=index))

    def select_at(self, coordinate: Coord, max_distance_m: float | None = None) -> int | None:
        """Select the point closest to ``coordinate``; returns its index or None."""
        index = self.ledger.nearest_index(self._geo(coordinate), max_distance_m)
        if index is not None:
            self.select_nearest(index)
        return index

    def reverse(self) -> None:
        self.ledger.reverse()
        self._publish(PathReversed(self.snapshot()))

    def clear(self) -> None:
        self.ledger.clear()
        self._publish(PathCleared(self.snapshot()))

    # --------------- Dragging -----------------------------

    def begin_drag(self, index: int) -> None:
        self._guarded("begin_drag", self.ledger.begin_drag, index)
        self._publish(DragStarted(self.snapshot(), index=index))

    def move_to(self, coordinate: Coord) -> None:
        self._guarded("move_to", self.ledger.move_to, self._geo(coordinate))
        self._publish(PointMoved(self.snapshot(), index=self.ledger.dragging_index))

    def end_drag(self) -> None:
        index = self.ledger.dragging_index
        if index is None:
            return
        self.ledger.end_drag()
        self._publish(DragEnded(self.snapshot(), index=index))

    # --------------- Queries -----------------------------

    def snapshot(self) -> LedgerSnapshot:
        return self.ledger.snapshot()

    def total_distance_km(self) -> float:
        return self.ledger.total_distance_km()

    def total_distance_miles(self) -> float:
        return self.ledger.total_distance_miles()

    def map_coordinates(self) -> list[tuple[float, float]]:
        return [self.projection.from_geo(p) for p in self.ledger.points]

    # --------------- Track files -----------------------------

    def import_track(self, text: str | bytes) -> LedgerSnapshot:
        """Replace the path with the one in ``text``.

        All or nothing: on ``TrackImportError`` the previous path and name are
        restored, a ``TrackImportFailed`` event is published, and the error is
        re-raised for the shell to report.
        """
        previous = (self.ledger, self.name)
        try:
            decoded = self.codec.decode(text)
            self.ledger = decoded.ledger
            self.name = decoded.name or ""
        except TrackImportError as exc:
            self.ledger, self.name = previous
            self._publish(TrackImportFailed(self.snapshot(), reason=str(exc)))
            raise
        self._publish(TrackImported(self.snapshot(), name=self.name))
        return self.snapshot()

    def export_track(self, **overrides) -> str:
        """Encode the path; ``overrides`` patch the configured ExportModel."""
        fields = self.export_defaults.model_dump()
        if self.name:
            fields["name"] = self.name
        opts = ExportModel.model_validate({**fields, **overrides})
        text = self.codec.encode(self.ledger, opts)
        self._publish(
            TrackExported(
                self.snapshot(),
                name=opts.name,
                synthetic_timestamps=opts.include_synthetic_timestamps,
            )
        )
        return text
