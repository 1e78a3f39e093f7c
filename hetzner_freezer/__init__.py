"""Hetzner Freezer - Freeze Hetzner Cloud servers to disk and bring them back.

Freezing a server shuts it down, snapshots it, records its configuration
(floating IPs, SSH keys, networks, firewalls, volumes) in a dump
directory, releases its addresses and deletes it. Unfreezing recreates
the server from the dump and re-attaches its addresses.

Example usage:
    >>> from hetzner_freezer import freeze_server, unfreeze_server
    >>> dump_id = freeze_server('web-1', 'my-project', token)
    >>> unfreeze_server('web-1', 'my-project', token, dump_id=dump_id)
"""

from hetzner_freezer.core.config import VERSION
from hetzner_freezer.main import dump_server, freeze_server, unfreeze_server

__version__ = VERSION

__all__ = ['freeze_server', 'unfreeze_server', 'dump_server']
