from __future__ import annotations
import logging
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from ..collectors.netstat import parse_netstat_output, run_netstat
from ..collectors.proctable import snapshot_process_table
from ..config import CFG
from ..errors import ListerError, WriteError
from ..models import ConnEntry, ProcessInfo, ProcPorts, ProcPortSnapshot
from ..utils.path import output_path
from .writer import write_json

log = logging.getLogger(__name__)

Lister = Callable[[Sequence[str], float], str]
ProcTable = Callable[[], Dict[int, ProcessInfo]]

def aggregate_ports(procs: Dict[int, ProcessInfo], entries: Iterable[ConnEntry]) -> ProcPortSnapshot:
    """Group ports by owning process.

    Records come out in the order their pid is first seen; ports keep
    discovery order, duplicates included. Entries whose pid is not in
    procs (process already gone) are dropped.
    """
    records: List[ProcPorts] = []
    index: Dict[int, int] = {}  # pid -> position in records
    dropped = 0
    for e in entries:
        proc = procs.get(e.pid)
        if proc is None:
            dropped += 1
            continue
        pos = index.get(e.pid)
        if pos is None:
            index[e.pid] = len(records)
            records.append(ProcPorts(pid=e.pid, name=proc.name, ports=[e.port]))
        else:
            records[pos].ports.append(e.port)
    if dropped:
        log.debug("%d connection(s) dropped: owning process not in process table", dropped)
    return ProcPortSnapshot(processes=tuple(records))

def collect_ports(cfg: CFG, lister: Optional[Lister] = None,
                  proc_table: Optional[ProcTable] = None) -> ProcPortSnapshot:
    lister = lister or run_netstat
    proc_table = proc_table or snapshot_process_table
    try:
        out = lister(cfg.netstat_cmd, cfg.netstat_timeout)
    except ListerError as e:
        log.error("Error listing connections: %s", e)
        return ProcPortSnapshot()
    entries = parse_netstat_output(out)
    # refresh right before lookup to keep the race window small
    procs = proc_table()
    snap = aggregate_ports(procs, entries)
    log.info("%d connection(s) mapped to %d process(es)", len(entries), len(snap.processes))
    return snap

def run_ports(cfg: CFG, lister: Optional[Lister] = None,
              proc_table: Optional[ProcTable] = None) -> bool:
    snap = collect_ports(cfg, lister, proc_table)
    path = output_path(cfg.out_dir, cfg.ports_file)
    try:
        write_json(path, snap.to_dict())
    except WriteError as e:
        log.error("Error saving process ports: %s", e)
        return False
    print(f"[*] Process and port data saved to '{path}'")
    return True
