from __future__ import annotations
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Iterator, Sequence

try:
    import pywintypes  # type: ignore
    import win32evtlog  # type: ignore
except ImportError:  # pywin32 only exists on Windows
    pywintypes = None
    win32evtlog = None

from ..config import CHANNELS, SEVERITY_THRESHOLD
from ..errors import FetchError

ERROR_NO_MORE_ITEMS = 259

@dataclass(frozen=True)
class EventQuery:
    channels: Sequence[str] = field(default_factory=lambda: list(CHANNELS))
    max_level: int = SEVERITY_THRESHOLD

    def condition(self) -> str:
        # keeps levels at least as severe as max_level: Level=1 or ... or Level=max_level
        levels = range(1, max(self.max_level, 1) + 1)
        return " or ".join(f"Level={n}" for n in levels)

    def xpath(self) -> str:
        return f"*[System[({self.condition()})]]"

    def to_xml(self) -> str:
        """Structured QueryList: one Select per channel, same filter on each."""
        root = ET.Element("QueryList")
        q = ET.SubElement(root, "Query", Id="0")
        for ch in self.channels:
            sel = ET.SubElement(q, "Select", Path=ch)
            sel.text = self.xpath()
        return ET.tostring(root, encoding="unicode")

def build_query(channels: Sequence[str] = CHANNELS, max_level: int = SEVERITY_THRESHOLD) -> EventQuery:
    return EventQuery(channels=list(channels), max_level=max_level)

class EventLogSource:
    """Windows Event Log reader. fetch() raises FetchError when the log
    cannot be queried; records are rendered to XML lazily, newest first."""

    def __init__(self, batch_size: int = 64, timeout_ms: int = 5000):
        self.batch_size = batch_size
        self.timeout_ms = timeout_ms

    def fetch(self, query: EventQuery) -> Iterator[str]:
        if win32evtlog is None:
            raise FetchError("Windows event log API (pywin32) is not available on this platform")
        flags = win32evtlog.EvtQueryChannelPath | win32evtlog.EvtQueryReverseDirection
        try:
            handle = win32evtlog.EvtQuery(None, flags, query.to_xml(), None)
        except pywintypes.error as e:
            raise FetchError(f"query rejected: {e.strerror} ({e.winerror})") from e
        return self._iter(handle)

    def _iter(self, handle) -> Iterator[str]:
        while True:
            try:
                batch = win32evtlog.EvtNext(handle, self.batch_size, self.timeout_ms, 0)
            except pywintypes.error as e:
                if e.winerror == ERROR_NO_MORE_ITEMS:
                    return
                raise FetchError(f"reading events failed: {e.strerror} ({e.winerror})") from e
            if not batch:
                return
            for ev in batch:
                try:
                    xml = win32evtlog.EvtRender(ev, win32evtlog.EvtRenderEventXml)
                except pywintypes.error as e:
                    raise FetchError(f"rendering event failed: {e.strerror} ({e.winerror})") from e
                yield xml
