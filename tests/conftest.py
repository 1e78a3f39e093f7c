"""Shared fixtures: an in-memory control plane and sample resources."""

import copy
import logging
import threading

import pytest

from hetzner_freezer.core.client import ControlPlaneClient
from hetzner_freezer.core.config import FreezerConfig
from hetzner_freezer.core.exceptions import RemoteCallError
from hetzner_freezer.operations import ActionWaiter
from hetzner_freezer.utils.logger import LOGGER_NAME


class FakeControlPlane(ControlPlaneClient):
    """
    In-memory control plane that records every call in order.

    Actions finish immediately unless a poll script was queued for their
    command with `script_action`, in which case the action starts as
    'running' and each `get_action` returns the next scripted state.
    Calls listed in `failures` raise the given exception instead.
    """

    def __init__(self):
        self.calls = []
        self.servers = {}
        self.floating_ips = {}
        self.ssh_keys = []
        self.images = []
        self.failures = {}
        self._scripts = {}
        self._polls = {}
        self._next_id = 1000

    # Test helpers

    def _new_id(self):
        self._next_id += 1
        return self._next_id

    def _record(self, method, *args):
        self.calls.append((method,) + args)
        if method in self.failures:
            raise self.failures[method]

    def _action(self, command):
        action_id = self._new_id()
        script = self._scripts.pop(command, None)
        if script is None:
            return {'id': action_id, 'command': command, 'status': 'success',
                    'progress': 100, 'error': None}
        self._polls[action_id] = list(script)
        return {'id': action_id, 'command': command, 'status': 'running',
                'progress': 0, 'error': None}

    def script_action(self, command, states):
        """Make the next `command` action go through `states` when polled."""
        self._scripts[command] = states

    def call_names(self):
        return [call[0] for call in self.calls]

    def calls_to(self, method):
        return [call[1:] for call in self.calls if call[0] == method]

    # ControlPlaneClient

    def get_server_by_name(self, name):
        self._record('get_server_by_name', name)
        for server in self.servers.values():
            if server['name'] == name:
                return copy.deepcopy(server)
        return None

    def shutdown_server(self, server_id):
        self._record('shutdown_server', server_id)
        self.servers[server_id]['status'] = 'off'
        return self._action('shutdown_server')

    def create_image(self, server_id, description, image_type='snapshot'):
        self._record('create_image', server_id, description)
        image = {'id': self._new_id(), 'description': description,
                 'type': image_type, 'created_from': {'id': server_id}}
        self.images.append(image)
        return {'image': copy.deepcopy(image), 'action': self._action('create_image')}

    def list_floating_ips(self):
        self._record('list_floating_ips')
        return [copy.deepcopy(fip) for fip in self.floating_ips.values()]

    def get_floating_ip(self, floating_ip_id):
        self._record('get_floating_ip', floating_ip_id)
        if floating_ip_id not in self.floating_ips:
            raise RemoteCallError('floating_ips.get_by_id', 'not_found', 'floating_ip not found')
        return copy.deepcopy(self.floating_ips[floating_ip_id])

    def unassign_floating_ip(self, floating_ip_id):
        self._record('unassign_floating_ip', floating_ip_id)
        self.floating_ips[floating_ip_id]['server'] = None
        return self._action('unassign_floating_ip')

    def assign_floating_ip(self, floating_ip_id, server_id):
        self._record('assign_floating_ip', floating_ip_id, server_id)
        self.floating_ips[floating_ip_id]['server'] = server_id
        return self._action('assign_floating_ip')

    def unassign_primary_ip(self, primary_ip_id):
        self._record('unassign_primary_ip', primary_ip_id)
        return self._action('unassign_primary_ip')

    def list_ssh_keys(self):
        self._record('list_ssh_keys')
        return copy.deepcopy(self.ssh_keys)

    def delete_server(self, server_id):
        self._record('delete_server', server_id)
        del self.servers[server_id]
        return self._action('delete_server')

    def create_server(self, body):
        self._record('create_server', copy.deepcopy(body))
        server = {'id': self._new_id(), 'name': body['name'], 'status': 'running',
                  'private_net': []}
        self.servers[server['id']] = server
        return {'server': copy.deepcopy(server), 'action': self._action('create_server')}

    def attach_server_to_network(self, server_id, network_id, ip=None):
        self._record('attach_server_to_network', server_id, network_id, ip)
        self.servers[server_id]['private_net'].append({'network': network_id, 'ip': ip})
        return self._action('attach_server_to_network')

    def get_action(self, action_id):
        self._record('get_action', action_id)
        return dict(self._polls[action_id].pop(0), id=action_id)


def make_server(server_id=42, name='web-1', ipv4_id=7, ipv6_id=8):
    """A live server resource shaped like the Hetzner API returns it."""
    return {
        'id': server_id,
        'name': name,
        'status': 'running',
        'server_type': {'id': 22, 'name': 'cx22'},
        'datacenter': {'id': 3, 'name': 'fsn1-dc14'},
        'placement_group': {'id': 31, 'name': 'spread'},
        'labels': {'env': 'prod', 'team': 'web'},
        'volumes': [11, 12],
        'private_net': [
            {'network': 5, 'ip': '10.1.0.2', 'alias_ips': [], 'mac_address': '86:00:00:00:00:01'},
        ],
        'public_net': {
            'ipv4': {'id': ipv4_id, 'ip': '1.2.3.4', 'blocked': False} if ipv4_id else None,
            'ipv6': {'id': ipv6_id, 'ip': '2a01:4f8::/64', 'blocked': False} if ipv6_id else None,
            'floating_ips': [100, 101],
            'firewalls': [{'id': 9, 'status': 'applied'}],
        },
    }


@pytest.fixture
def control_plane():
    """Control plane with one server, two of its floating IPs and two SSH keys."""
    plane = FakeControlPlane()
    server = make_server()
    plane.servers[server['id']] = server
    plane.floating_ips = {
        100: {'id': 100, 'ip': '10.0.0.5', 'type': 'ipv4', 'description': 'www', 'server': 42},
        101: {'id': 101, 'ip': '10.0.0.6', 'type': 'ipv4', 'description': None, 'server': 42},
        102: {'id': 102, 'ip': '10.0.0.7', 'type': 'ipv4', 'description': None, 'server': 99},
        103: {'id': 103, 'ip': '10.0.0.8', 'type': 'ipv4', 'description': None, 'server': None},
    }
    plane.ssh_keys = [
        {'id': 501, 'name': 'alice', 'fingerprint': 'aa:bb'},
        {'id': 502, 'name': 'bob', 'fingerprint': 'cc:dd'},
    ]
    return plane


@pytest.fixture
def config(tmp_path):
    """Config writing dumps under a temporary directory, without progress bars."""
    return FreezerConfig(output_dir=str(tmp_path / 'output'), show_progress=False)


@pytest.fixture
def cancel_event():
    return threading.Event()


@pytest.fixture
def waiter(control_plane, cancel_event):
    """Waiter that polls without sleeping."""
    return ActionWaiter(control_plane, poll_interval=0, timeout=60, cancel_event=cancel_event)


@pytest.fixture(autouse=True)
def reset_freezer_logger():
    """Drop handlers setup_logging() attached, so they never outlive a test's stdout."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def server_factory():
    """Factory for live server resources (see make_server)."""
    return make_server
