from __future__ import annotations
import argparse
import logging

from .config import init_cfg_from_args, LEVEL_NAMES
from .snapshot import run_ports, run_events
from .utils.log import setup_logger

log = logging.getLogger("hostsnap")

def parse_args(argv=None):
    ap = argparse.ArgumentParser(description='Point-in-time snapshot of process-owned ports and severe event log entries')
    ap.add_argument('--config', type=str, default=None, help='YAML or JSON file overriding the defaults')
    ap.add_argument('--out-dir', type=str, default=None, help='directory for process_ports.json and events.json (default: cwd)')
    ap.add_argument('--level', type=int, default=None, choices=sorted(LEVEL_NAMES),
                    help='keep events at least this severe (1=Critical .. 5=Verbose; default 1)')
    ap.add_argument('--channel', action='append', default=None, help='event log channel, repeatable (default: Application, System)')
    ap.add_argument('--skip-ports', action='store_true', help='do not collect process ports')
    ap.add_argument('--skip-events', action='store_true', help='do not collect events')
    ap.add_argument('--log-level', type=str, default=None, help='DEBUG, INFO, WARNING, ERROR')
    ap.add_argument('--log-file', type=str, default=None)
    return ap.parse_args(argv)

def _guarded(name: str, fn, *args) -> bool:
    # a crash in one pipeline must not stop the other
    try:
        return fn(*args)
    except Exception:
        log.exception("%s pipeline failed", name)
        return False

def main(argv=None) -> int:
    args = parse_args(argv)
    # handlers first so config diagnostics are formatted; level and file come from the config
    setup_logger("hostsnap")
    cfg = init_cfg_from_args(args)
    setup_logger("hostsnap", cfg.log_file, logging.getLevelName(cfg.log_level))

    if not cfg.skip_ports:
        _guarded("port", run_ports, cfg)
    if not cfg.skip_events:
        _guarded("event", run_events, cfg)
    return 0

if __name__ == '__main__':
    raise SystemExit(main())
