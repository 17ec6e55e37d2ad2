import json
import logging

import pytest

from hostsnap import main as main_mod
from hostsnap.errors import FetchError, ListerError
from hostsnap.models import ProcessInfo
from hostsnap.snapshot import events, ports

@pytest.fixture(autouse=True)
def reset_logger():
    yield
    logger = logging.getLogger("hostsnap")
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()

def boom(cfg):
    raise RuntimeError("unexpected")

def test_exit_code_zero_and_events_written_when_ports_crash(tmp_path, monkeypatch):
    class NoLog:
        def fetch(self, query):
            raise FetchError("no event log here")
    monkeypatch.setattr(main_mod, "run_ports", boom)
    monkeypatch.setattr(events, "EventLogSource", NoLog)

    assert main_mod.main(["--out-dir", str(tmp_path)]) == 0
    assert json.loads((tmp_path / "events.json").read_text()) == []

def test_ports_written_when_events_crash(tmp_path, monkeypatch):
    def lister(cmd, timeout):
        raise ListerError("netstat missing")
    real_run_ports = main_mod.run_ports
    monkeypatch.setattr(main_mod, "run_ports", lambda cfg: real_run_ports(cfg, lister, lambda: {}))
    monkeypatch.setattr(main_mod, "run_events", boom)

    assert main_mod.main(["--out-dir", str(tmp_path)]) == 0
    assert json.loads((tmp_path / "process_ports.json").read_text()) == {"processes": []}

def test_skip_flags(tmp_path, monkeypatch):
    called = []
    monkeypatch.setattr(main_mod, "run_ports", lambda cfg: called.append("ports"))
    monkeypatch.setattr(main_mod, "run_events", lambda cfg: called.append("events"))
    main_mod.main(["--out-dir", str(tmp_path), "--skip-ports"])
    assert called == ["events"]

@pytest.mark.parametrize("text", [
    "level: [1\n",
    "log_level: null\n",
    "ports_file: null\nevents_file: ''\n",
])
def test_bad_config_still_writes_both_files(tmp_path, monkeypatch, text):
    conf = tmp_path / "hostsnap.yaml"
    conf.write_text(text)
    out = tmp_path / "out"
    monkeypatch.setattr(ports, "run_netstat", lambda cmd, timeout: "TCP 0.0.0.0:80 0.0.0.0:0 LISTENING 4\n")
    monkeypatch.setattr(ports, "snapshot_process_table", lambda: {4: ProcessInfo(4, "System")})

    class NoLog:
        def fetch(self, query):
            return iter(())
    monkeypatch.setattr(events, "EventLogSource", NoLog)

    assert main_mod.main(["--config", str(conf), "--out-dir", str(out)]) == 0
    assert json.loads((out / "process_ports.json").read_text()) == {
        "processes": [{"pid": 4, "name": "System", "ports": [80]}]}
    assert json.loads((out / "events.json").read_text()) == []

def test_config_warnings_use_log_format(tmp_path, capsys):
    conf = tmp_path / "hostsnap.yaml"
    conf.write_text("bogus: 1\n")
    main_mod.main(["--config", str(conf), "--out-dir", str(tmp_path), "--skip-ports", "--skip-events"])
    err = capsys.readouterr().err
    assert "[WARNING] unknown config key 'bogus' ignored" in err
    assert "[warn]" not in err
