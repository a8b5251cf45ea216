# io/session_logging.py
import json
import logging
import sys
from dataclasses import fields

from route_maker.app.events import PointMoved, SessionEvent, TrackImportFailed
from route_maker.app.hooks import NoopHooks


def _default_json_logger(name="route_maker", level="INFO"):
    logger = logging.getLogger(name)
    if not logger.handlers:
        h = logging.StreamHandler(sys.stdout)

        class _JsonFormatter(logging.Formatter):
            def format(self, record: logging.LogRecord) -> str:
                payload = {
                    "level": record.levelname,
                    "msg": record.getMessage(),
                    "logger": record.name,
                }
                extra = getattr(record, "extra", None)
                if isinstance(extra, dict):
                    payload.update(extra)
                return json.dumps(payload)

        h.setFormatter(_JsonFormatter())
        logger.addHandler(h)
        logger.setLevel(level)
    return logger


class SessionLogging(NoopHooks):
    """
    One place to shape and emit structured logs for editing-session events.
    """

    # high-frequency while the pointer moves
    CHATTY = {PointMoved}

    def __init__(
        self,
        session_id: str = "local",
        level: str = "INFO",
        debug: bool = False,
        logger: logging.Logger | None = None,
    ):
        self.session_id, self.debug = session_id, debug
        self.log = logger or _default_json_logger(level=level)

    # --------------- Helpers -----------------------------

    def _emit(self, level: str, msg: str, **extra):
        payload = {"session_id": self.session_id}
        self.log.log(getattr(logging, level), msg, extra={"extra": {**payload, **extra}})

    def _shape_event(self, ev: SessionEvent) -> dict:
        snap = ev.snapshot
        base = {
            "points": len(snap),
            "total_m": round(snap.total_m, 3),
            "cursor": snap.cursor,
        }
        for f in fields(ev):
            if f.name != "snapshot":
                base[f.name] = getattr(ev, f.name)
        return base

    # --------------------------------------------------------

    def dispatch(self, ev: SessionEvent, *, seq: int, handlers: int):
        name = type(ev).__name__
        if isinstance(ev, TrackImportFailed):
            level = "WARNING"
        elif type(ev) in self.CHATTY:
            level = "DEBUG" if self.debug else None
        else:
            level = "INFO"
        if level:
            self._emit(level, name, **self._shape_event(ev), seq=seq, handlers=handlers)

    def error(self, op: str, *, exc: BaseException, **extra):
        self._emit("ERROR", "contract_violation", op=op, error=str(exc), **extra)
