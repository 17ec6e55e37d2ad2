from __future__ import annotations
import os
from pathlib import Path
from typing import Optional

def to_abs_path(p: Optional[str | os.PathLike]) -> Optional[Path]:
    """Convert p to an absolute path.
    Sequence:
      1) Absolute: expanduser+resolve
      2) Relative to CWD
    """
    if not p:
        return None
    pp = Path(p).expanduser()
    if pp.is_absolute():
        return pp.resolve()
    return (Path.cwd() / pp).resolve()

def output_path(out_dir: Optional[str | os.PathLike], file_name: str) -> Path:
    base = to_abs_path(out_dir) or Path.cwd()
    return base / file_name
