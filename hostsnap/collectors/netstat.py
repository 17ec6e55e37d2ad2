from __future__ import annotations
import subprocess
from typing import Iterable, List, Optional, Sequence

from ..config import NETSTAT_CMD, NETSTAT_TIMEOUT
from ..errors import ListerError
from ..models import ConnEntry
from ..utils.net import parse_pid, port_of

def run_netstat(cmd: Sequence[str] = NETSTAT_CMD, timeout: float = NETSTAT_TIMEOUT) -> str:
    try:
        # undecodable bytes (OEM code pages) are replaced, never fatal
        return subprocess.check_output(list(cmd), stderr=subprocess.DEVNULL, timeout=timeout,
                                       encoding="utf-8", errors="replace")
    except FileNotFoundError as e:
        raise ListerError(f"{cmd[0]} not found") from e
    except subprocess.TimeoutExpired as e:
        raise ListerError(f"{cmd[0]} timed out after {timeout}s") from e
    except subprocess.CalledProcessError as e:
        raise ListerError(f"{cmd[0]} exited with status {e.returncode}") from e
    except OSError as e:
        raise ListerError(f"failed to run {cmd[0]}: {e}") from e

def parse_line(line: str) -> Optional[ConnEntry]:
    # Proto  Local Address  Foreign Address  State  PID
    parts = line.split()
    if len(parts) < 5 or parts[0].lower() == "proto":
        return None
    port = port_of(parts[1])
    if port is None:
        return None
    pid = parse_pid(parts[4])
    if pid is None:
        return None
    return ConnEntry(port=port, pid=pid)

def parse_netstat_output(output: str | Iterable[str]) -> List[ConnEntry]:
    lines = output.splitlines() if isinstance(output, str) else output
    entries: List[ConnEntry] = []
    for line in lines:
        if not line.strip():
            continue
        entry = parse_line(line)
        if entry is not None:
            entries.append(entry)
    return entries
