import pytest

from hostsnap.config import CFG
from hostsnap.models import ProcessInfo

NETSTAT_SAMPLE = """
Active Connections

  Proto  Local Address          Foreign Address        State           PID
  TCP    0.0.0.0:135            0.0.0.0:0              LISTENING       1104
  TCP    0.0.0.0:445            0.0.0.0:0              LISTENING       4
  TCP    127.0.0.1:5432         127.0.0.1:50122        ESTABLISHED     2244
  TCP    192.168.1.20:50123     52.1.2.3:443           ESTABLISHED     7788
  TCP    [::]:135               [::]:0                 LISTENING       1104
  TCP    [::1]:5432             [::1]:50200            ESTABLISHED     2244
  UDP    0.0.0.0:500            *:*                                    4660
"""

@pytest.fixture
def cfg(tmp_path):
    return CFG(out_dir=tmp_path)

@pytest.fixture
def procs():
    return {
        4: ProcessInfo(pid=4, name="System"),
        1104: ProcessInfo(pid=1104, name="svchost.exe"),
        2244: ProcessInfo(pid=2244, name="postgres.exe"),
    }
