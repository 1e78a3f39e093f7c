"""
Hetzner Freezer - Dump Path Layout

Dumps live at {root}/{project}/{server_name}/{dump_id}/.
Dump ids are decimal nanosecond timestamps, so the numerically largest
id is the most recent dump.
"""

import os
import time
from pathlib import Path
from typing import List

from hetzner_freezer.core.config import DEFAULT_OUTPUT_DIR
from hetzner_freezer.core.exceptions import DumpNotFoundError, DumpStoreError


def server_path(root: str, project: str, server_name: str) -> Path:
    """Directory holding every dump of one server."""
    return Path(root or DEFAULT_OUTPUT_DIR) / project / server_name


def is_valid_dump_id(dump_id: str) -> bool:
    """True if `dump_id` names a single directory (no separators, not . or ..)."""
    if not dump_id or dump_id in ('.', '..'):
        return False
    return not any(sep and sep in dump_id for sep in ('/', os.sep, os.altsep))


def server_dump_path(root: str, project: str, server_name: str, dump_id: str) -> Path:
    """
    Directory holding one dump.

    Raises:
        DumpNotFoundError: If `dump_id` would leave the server path
    """
    path = server_path(root, project, server_name)
    if not is_valid_dump_id(dump_id):
        raise DumpNotFoundError(str(path), dump_id)
    return path / dump_id


def new_dump_id() -> str:
    """Generate a dump id from the current time in nanoseconds."""
    return str(time.time_ns())


def ensure_directory(path: Path) -> Path:
    """
    Create `path` (and parents) if missing. Idempotent.

    Raises:
        DumpStoreError: If the directory cannot be created
    """
    path = Path(path)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise DumpStoreError(str(path), str(e)) from e
    return path


def list_dump_ids(path: Path) -> List[str]:
    """Names of the dump directories under a server path (empty if missing)."""
    path = Path(path)
    if not path.is_dir():
        return []
    return sorted(entry.name for entry in path.iterdir() if entry.is_dir())


def _numeric_id(name: str) -> int:
    # Non-numeric names rank lowest and are never selected as latest
    try:
        return int(name)
    except ValueError:
        return -1


def latest_dump_id(path: Path) -> str:
    """
    Pick the dump with the numerically largest id.

    Args:
        path: Server path (see server_path())

    Returns:
        str: The latest dump id

    Raises:
        DumpNotFoundError: If there is no numeric dump directory

    Example:
        # output/p/web-1/{3,10,2,x}
        latest_dump_id(server_path('output', 'p', 'web-1'))
        '10'
    """
    candidates = [name for name in list_dump_ids(path) if _numeric_id(name) >= 0]
    if not candidates:
        raise DumpNotFoundError(str(path))
    return max(candidates, key=_numeric_id)
