from __future__ import annotations
from dataclasses import dataclass, field
from typing import Generic, List, Optional, TypeVar

T = TypeVar("T")

@dataclass
class ProcessInfo:
    pid: int
    name: str

@dataclass(frozen=True)
class ConnEntry:
    port: int
    pid: int

@dataclass
class ProcPorts:
    pid: int
    name: str
    ports: List[int] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"pid": self.pid, "name": self.name, "ports": list(self.ports)}

@dataclass(frozen=True)
class ProcPortSnapshot:
    processes: tuple[ProcPorts, ...] = ()

    def to_dict(self) -> dict:
        return {"processes": [p.to_dict() for p in self.processes]}

@dataclass(frozen=True)
class EventRecord:
    event_id: int
    provider_name: str
    level: int  # 1=Critical .. 5=Verbose

    def to_dict(self) -> dict:
        return {"event_id": self.event_id, "provider_name": self.provider_name, "level": self.level}

@dataclass(frozen=True)
class EventSnapshot:
    events: tuple[EventRecord, ...] = ()

    def to_list(self) -> list[dict]:
        return [e.to_dict() for e in self.events]

@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Per-record result: either a value or an error message.

    `raw` keeps the offending input so callers can report it.
    """
    value: Optional[T] = None
    error: Optional[str] = None
    raw: object = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: str, raw: object = None) -> "Outcome[T]":
        return cls(error=error, raw=raw)
