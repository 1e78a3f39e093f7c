"""
Hetzner Freezer - Dump Storage

Reads and writes the four JSON parts of a dump directory:

    server.json       server descriptor
    floatingIPs.json  list of floating IP descriptors
    sshKeys.json      list of SSH key descriptors
    snapshot.json     image descriptor

A missing part loads as empty data. Any other read or parse failure is
fatal and names the part.
"""

import json
from pathlib import Path

from hetzner_freezer.core.exceptions import DumpLoadError, DumpNotFoundError, DumpStoreError
from hetzner_freezer.dump.models import (
    FloatingIPRecord,
    ImageRecord,
    ServerDump,
    ServerRecord,
    SSHKeyRecord
)

SERVER_PART = 'server'
FLOATING_IPS_PART = 'floatingIPs'
SSH_KEYS_PART = 'sshKeys'
SNAPSHOT_PART = 'snapshot'

DUMP_PARTS = (SERVER_PART, FLOATING_IPS_PART, SSH_KEYS_PART, SNAPSHOT_PART)


def _part_file(path: Path, part: str) -> Path:
    return Path(path) / f'{part}.json'


def _store_part(path: Path, part: str, data):
    try:
        with open(_part_file(path, part), 'w') as f:
            json.dump(data, f, indent=4)
    except (OSError, TypeError, ValueError) as e:
        raise DumpStoreError(part, str(e)) from e


def _load_part(path: Path, part: str):
    """Return the decoded part, or None if its file is missing or holds null."""
    try:
        with open(_part_file(path, part), 'r') as f:
            return json.load(f)
    except FileNotFoundError:
        return None
    except (OSError, ValueError) as e:
        raise DumpLoadError(part, str(e)) from e


def store_server_dump(path: Path, dump: ServerDump):
    """
    Write a dump into an existing directory.

    Parts that were not recorded (server or snapshot set to None) are
    not written.

    Raises:
        DumpStoreError: If a part cannot be written
    """
    if dump.server is not None:
        _store_part(path, SERVER_PART, dump.server.to_dict())
    _store_part(path, FLOATING_IPS_PART, [f.to_dict() for f in dump.floating_ips])
    _store_part(path, SSH_KEYS_PART, [k.to_dict() for k in dump.ssh_keys])
    if dump.snapshot is not None:
        _store_part(path, SNAPSHOT_PART, dump.snapshot.to_dict())


def load_server_dump(path: Path) -> ServerDump:
    """
    Load a dump directory.

    Raises:
        DumpNotFoundError: If the directory does not exist
        DumpLoadError: If a part exists but cannot be read or decoded
    """
    path = Path(path)
    if not path.is_dir():
        raise DumpNotFoundError(str(path.parent), path.name)

    dump = ServerDump()

    data = _load_part(path, SERVER_PART)
    if data is not None:
        dump.server = _decode(SERVER_PART, ServerRecord.from_dict, data)

    data = _load_part(path, FLOATING_IPS_PART)
    if data is not None:
        dump.floating_ips = _decode_list(FLOATING_IPS_PART, FloatingIPRecord.from_dict, data)

    data = _load_part(path, SSH_KEYS_PART)
    if data is not None:
        dump.ssh_keys = _decode_list(SSH_KEYS_PART, SSHKeyRecord.from_dict, data)

    data = _load_part(path, SNAPSHOT_PART)
    if data is not None:
        dump.snapshot = _decode(SNAPSHOT_PART, ImageRecord.from_dict, data)

    return dump


def _decode(part: str, from_dict, data):
    """Build one record from a JSON object, naming the part on any shape error."""
    try:
        return from_dict(_expect(part, data, dict))
    except (AttributeError, TypeError, ValueError) as e:
        raise DumpLoadError(part, str(e)) from e


def _decode_list(part: str, from_dict, data) -> list:
    try:
        return [from_dict(item) for item in _expect(part, data, list)]
    except (AttributeError, TypeError, ValueError) as e:
        raise DumpLoadError(part, str(e)) from e


def _expect(part: str, data, kind):
    if not isinstance(data, kind):
        raise DumpLoadError(part, f"expected a JSON {'object' if kind is dict else 'array'}")
    if kind is list and not all(isinstance(item, dict) for item in data):
        raise DumpLoadError(part, "expected an array of JSON objects")
    return data
