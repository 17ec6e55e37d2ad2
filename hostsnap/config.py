from __future__ import annotations
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .utils.path import to_abs_path

log = logging.getLogger(__name__)

SEVERITY_THRESHOLD = 1
CHANNELS = ("Application", "System")
NETSTAT_CMD = ("netstat", "-no")
NETSTAT_TIMEOUT = 30.0
PORTS_FILE = "process_ports.json"
EVENTS_FILE = "events.json"

# Windows event levels; lower is more severe
LEVEL_NAMES = {1: "Critical", 2: "Error", 3: "Warning", 4: "Information", 5: "Verbose"}
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

@dataclass
class CFG:
    level: int = SEVERITY_THRESHOLD
    channels: List[str] = field(default_factory=lambda: list(CHANNELS))
    netstat_cmd: List[str] = field(default_factory=lambda: list(NETSTAT_CMD))
    netstat_timeout: float = NETSTAT_TIMEOUT
    out_dir: Optional[Path] = None
    ports_file: str = PORTS_FILE
    events_file: str = EVENTS_FILE
    skip_ports: bool = False
    skip_events: bool = False
    log_level: str = "INFO"
    log_file: Optional[str] = None

def load_config_file(path: Optional[str]) -> Dict[str, Any]:
    if not path:
        return {}
    p = to_abs_path(path)
    if not p or not p.exists():
        log.warning("config not found: %s", p)
        return {}
    try:
        txt = p.read_text(encoding="utf-8")
        data = yaml.safe_load(txt) if p.suffix in (".yaml", ".yml") else json.loads(txt)
    except (OSError, ValueError, yaml.YAMLError) as e:
        log.warning("config %s unreadable, using defaults: %s", p, e)
        return {}
    if data is None:
        return {}
    if not isinstance(data, dict):
        log.warning("config %s is not a mapping, ignored", p)
        return {}
    return data

def _valid_level(v: Any) -> bool:
    return isinstance(v, int) and not isinstance(v, bool) and v in LEVEL_NAMES

def _valid_timeout(v: Any) -> bool:
    if isinstance(v, bool) or not isinstance(v, (int, float, str)):
        return False
    try:
        t = float(v)
    except ValueError:
        return False
    return 0 < t < float("inf")

def apply_overrides(cfg: CFG, data: Dict[str, Any]) -> CFG:
    for key, val in data.items():
        if key == "level":
            if _valid_level(val):
                cfg.level = val
            else:
                log.warning("invalid level %r, keeping %d", val, cfg.level)
        elif key == "channels":
            if isinstance(val, list) and val and all(isinstance(c, str) and c for c in val):
                cfg.channels = list(val)
            else:
                log.warning("invalid channels %r, keeping %s", val, cfg.channels)
        elif key == "netstat_cmd":
            if isinstance(val, list) and val and all(isinstance(c, str) for c in val):
                cfg.netstat_cmd = list(val)
            else:
                log.warning("invalid netstat_cmd %r, keeping %s", val, cfg.netstat_cmd)
        elif key == "netstat_timeout":
            if _valid_timeout(val):
                cfg.netstat_timeout = float(val)
            else:
                log.warning("invalid netstat_timeout %r, keeping %s", val, cfg.netstat_timeout)
        elif key == "out_dir":
            if val is None or isinstance(val, str):
                cfg.out_dir = to_abs_path(val) if val else None
            else:
                log.warning("invalid out_dir %r, keeping %s", val, cfg.out_dir)
        elif key in ("ports_file", "events_file"):
            if isinstance(val, str) and val.strip():
                setattr(cfg, key, val)
            else:
                log.warning("invalid %s %r, keeping %s", key, val, getattr(cfg, key))
        elif key == "log_level":
            if isinstance(val, str) and val.upper() in LOG_LEVELS:
                cfg.log_level = val.upper()
            else:
                log.warning("invalid log_level %r, keeping %s", val, cfg.log_level)
        elif key == "log_file":
            if val is None or isinstance(val, str):
                cfg.log_file = val or None
            else:
                log.warning("invalid log_file %r, keeping %s", val, cfg.log_file)
        elif key in ("skip_ports", "skip_events"):
            setattr(cfg, key, bool(val))
        else:
            log.warning("unknown config key %r ignored", key)
    return cfg

def init_cfg_from_args(args) -> CFG:
    cfg = CFG()
    apply_overrides(cfg, load_config_file(getattr(args, "config", None)))

    cli: Dict[str, Any] = {}
    if getattr(args, "level", None) is not None:
        cli["level"] = args.level
    if getattr(args, "channel", None):
        cli["channels"] = args.channel
    if getattr(args, "out_dir", None):
        cli["out_dir"] = args.out_dir
    if getattr(args, "skip_ports", False):
        cli["skip_ports"] = True
    if getattr(args, "skip_events", False):
        cli["skip_events"] = True
    if getattr(args, "log_level", None):
        cli["log_level"] = args.log_level
    if getattr(args, "log_file", None):
        cli["log_file"] = args.log_file
    return apply_overrides(cfg, cli)
