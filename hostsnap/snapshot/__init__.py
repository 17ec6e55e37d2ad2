from .ports import aggregate_ports, collect_ports, run_ports
from .events import normalize_record, normalize_records, collect_events, run_events
from .writer import write_json
