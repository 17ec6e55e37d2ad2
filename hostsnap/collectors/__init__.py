from .netstat import run_netstat, parse_netstat_output
from .proctable import snapshot_process_table
from .eventlog import EventLogSource, EventQuery, build_query
