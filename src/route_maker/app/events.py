# app/events.py
from dataclasses import dataclass

from route_maker.domain.ledger import LedgerSnapshot


# Every event carries the ledger state right after the change
@dataclass(frozen=True)
class SessionEvent:
    snapshot: LedgerSnapshot


# Editing
@dataclass(frozen=True)
class PointInserted(SessionEvent):
    index: int


@dataclass(frozen=True)
class PointRemoved(SessionEvent):
    index: int  # index the point had before removal


@dataclass(frozen=True)
class PointSelected(SessionEvent):
    index: int


@dataclass(frozen=True)
class PathReversed(SessionEvent):
    pass


@dataclass(frozen=True)
class PathCleared(SessionEvent):
    pass


# Dragging
@dataclass(frozen=True)
class DragStarted(SessionEvent):
    index: int


@dataclass(frozen=True)
class PointMoved(SessionEvent):
    index: int


@dataclass(frozen=True)
class DragEnded(SessionEvent):
    index: int


# Track files
@dataclass(frozen=True)
class TrackImported(SessionEvent):
    name: str


@dataclass(frozen=True)
class TrackImportFailed(SessionEvent):
    reason: str


@dataclass(frozen=True)
class TrackExported(SessionEvent):
    name: str
    synthetic_timestamps: bool
