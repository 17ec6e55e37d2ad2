from __future__ import annotations
from pathlib import Path

import orjson

from ..errors import WriteError

def write_json(path: Path, obj) -> Path:
    """Pretty-print obj to path, creating or truncating the file."""
    path = Path(path)
    try:
        data = orjson.dumps(obj, option=orjson.OPT_INDENT_2 | orjson.OPT_APPEND_NEWLINE)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
    except (OSError, TypeError) as e:
        raise WriteError(f"cannot write {path}: {e}") from e
    return path
