# app/hooks.py
from typing import Protocol

from route_maker.app.events import SessionEvent


class SessionHooks(Protocol):
    def dispatch(self, ev: SessionEvent, *, seq: int, handlers: int): ...
    def error(self, op: str, *, exc: BaseException, **kw): ...


class NoopHooks:
    def dispatch(self, *_, **__):
        pass

    def error(self, *_, **__):
        pass
