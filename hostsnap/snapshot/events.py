from __future__ import annotations
import logging
import xml.etree.ElementTree as ET
from typing import Iterable, Iterator, List, Optional, Protocol

from ..collectors.eventlog import EventLogSource, EventQuery, build_query
from ..config import CFG
from ..errors import FetchError, WriteError
from ..models import EventRecord, EventSnapshot, Outcome
from ..utils.net import UINT32_MAX, parse_uint
from ..utils.path import output_path
from .writer import write_json

log = logging.getLogger(__name__)

class LogSource(Protocol):
    def fetch(self, query: EventQuery) -> Iterator[str]: ...

def _uint32(node: Optional[ET.Element]) -> Optional[int]:
    if node is None or node.text is None:
        return None
    return parse_uint(node.text.strip(), UINT32_MAX)

def normalize_record(raw: str | bytes) -> Outcome[EventRecord]:
    """Project one rendered event (<Event><System>...</System></Event>) to an
    EventRecord. Namespaces are ignored; extra elements are ignored."""
    try:
        root = ET.fromstring(raw)
    except (ET.ParseError, ValueError) as e:
        return Outcome.failure(f"malformed XML: {e}", raw)
    system = root.find("{*}System")
    if system is None:
        return Outcome.failure("missing System section", raw)
    provider = system.find("{*}Provider")
    name = provider.get("Name") if provider is not None else None
    if name is None:
        return Outcome.failure("missing Provider Name", raw)
    event_id = _uint32(system.find("{*}EventID"))
    if event_id is None:
        return Outcome.failure("missing or invalid EventID", raw)
    level = _uint32(system.find("{*}Level"))
    if level is None:
        return Outcome.failure("missing or invalid Level", raw)
    return Outcome.success(EventRecord(event_id=event_id, provider_name=name, level=level))

def normalize_records(raws: Iterable[str | bytes]) -> EventSnapshot:
    events: List[EventRecord] = []
    failed = 0
    for raw in raws:
        res = normalize_record(raw)
        if res.ok:
            events.append(res.value)
        else:
            failed += 1
            log.warning("Error parsing event: %s", res.error)
    if failed:
        log.info("%d event(s) extracted, %d skipped", len(events), failed)
    return EventSnapshot(events=tuple(events))

def _until_failure(raws: Iterator[str]) -> Iterator[str]:
    try:
        yield from raws
    except FetchError as e:
        log.error("Error fetching events: %s (keeping records read so far)", e)

def collect_events(cfg: CFG, source: LogSource) -> EventSnapshot:
    query = build_query(cfg.channels, cfg.level)
    try:
        raws = source.fetch(query)
    except FetchError as e:
        log.error("Error fetching events: %s", e)
        return EventSnapshot()
    return normalize_records(_until_failure(raws))

def run_events(cfg: CFG, source: Optional[LogSource] = None) -> bool:
    snap = collect_events(cfg, source if source is not None else EventLogSource())
    path = output_path(cfg.out_dir, cfg.events_file)
    try:
        write_json(path, snap.to_list())
    except WriteError as e:
        log.error("Error saving events to file: %s", e)
        return False
    print(f"[*] Events saved to '{path}'")
    return True
