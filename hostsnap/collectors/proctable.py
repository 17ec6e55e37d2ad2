from __future__ import annotations
from typing import Dict

import psutil

from ..models import ProcessInfo

def snapshot_process_table() -> Dict[int, ProcessInfo]:
    """One bulk pass over the live process table.

    process_iter() skips processes that exit mid-pass; a name we may not
    read comes back as None and is shown as '?'.
    """
    table: Dict[int, ProcessInfo] = {}
    for p in psutil.process_iter(["pid", "name"]):
        pid = p.info.get("pid")
        if pid is None:
            continue
        table[pid] = ProcessInfo(pid=pid, name=p.info.get("name") or "?")
    return table
