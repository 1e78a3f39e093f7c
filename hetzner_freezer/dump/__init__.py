"""
Hetzner Freezer - Dump Module

Portable server dumps and their on-disk layout.

Usage:
    from hetzner_freezer.dump import load_server_dump, server_dump_path

    path = server_dump_path('output', 'my-project', 'web-1', dump_id)
    dump = load_server_dump(path)
"""

from hetzner_freezer.dump.models import (
    FloatingIPRecord,
    ImageRecord,
    PrivateNetRecord,
    PublicNetRecord,
    ServerDump,
    ServerRecord,
    SSHKeyRecord
)
from hetzner_freezer.dump.paths import (
    ensure_directory,
    is_valid_dump_id,
    latest_dump_id,
    list_dump_ids,
    new_dump_id,
    server_dump_path,
    server_path
)
from hetzner_freezer.dump.store import DUMP_PARTS, load_server_dump, store_server_dump

__all__ = [
    # Records
    'ServerDump',
    'ServerRecord',
    'PrivateNetRecord',
    'PublicNetRecord',
    'FloatingIPRecord',
    'SSHKeyRecord',
    'ImageRecord',

    # Layout
    'server_path',
    'server_dump_path',
    'is_valid_dump_id',
    'new_dump_id',
    'ensure_directory',
    'list_dump_ids',
    'latest_dump_id',

    # Storage
    'DUMP_PARTS',
    'store_server_dump',
    'load_server_dump',
]
