"""
Hetzner Freezer - Control Plane Client

This module defines the control-plane capabilities the orchestrators
need and implements them with the Hetzner Cloud SDK (hcloud).

Resources are plain dicts in the API's JSON shape, e.g. an action:
    {'id': 42, 'command': 'shutdown_server', 'status': 'running',
     'progress': 40, 'error': None}
"""

from abc import ABC, abstractmethod
from typing import List, Optional

import requests
from hcloud import APIException, Client
from hcloud.datacenters import Datacenter
from hcloud.firewalls import Firewall
from hcloud.floating_ips import FloatingIP
from hcloud.images import Image
from hcloud.networks import Network
from hcloud.placement_groups import PlacementGroup
from hcloud.primary_ips import PrimaryIP
from hcloud.server_types import ServerType
from hcloud.servers import Server, ServerCreatePublicNetwork
from hcloud.ssh_keys import SSHKey
from hcloud.volumes import Volume

from hetzner_freezer.core.config import DEFAULT_API_ENDPOINT, VERSION
from hetzner_freezer.core.exceptions import RemoteCallError
from hetzner_freezer.utils.logger import log_api_call, log_api_result

APPLICATION_NAME = 'hetzner-freezer'


class ControlPlaneClient(ABC):
    """
    Capabilities consumed by the freeze/unfreeze workflows.

    Every call either returns the decoded resource or raises
    RemoteCallError. Implementations must not retry.
    """

    @abstractmethod
    def get_server_by_name(self, name: str) -> Optional[dict]:
        """Return the server named `name`, or None if there is none."""

    @abstractmethod
    def shutdown_server(self, server_id: int) -> dict:
        """Send an ACPI shutdown. Returns the action."""

    @abstractmethod
    def create_image(self, server_id: int, description: str,
                     image_type: str = 'snapshot') -> dict:
        """Create an image of the server. Returns {'image': ..., 'action': ...}."""

    @abstractmethod
    def list_floating_ips(self) -> List[dict]:
        """Return every floating IP in the project."""

    @abstractmethod
    def get_floating_ip(self, floating_ip_id: int) -> dict:
        """Return one floating IP."""

    @abstractmethod
    def unassign_floating_ip(self, floating_ip_id: int) -> dict:
        """Unassign a floating IP from its server. Returns the action."""

    @abstractmethod
    def assign_floating_ip(self, floating_ip_id: int, server_id: int) -> dict:
        """Assign a floating IP to a server. Returns the action."""

    @abstractmethod
    def unassign_primary_ip(self, primary_ip_id: int) -> dict:
        """Unassign a primary IP from its server. Returns the action."""

    @abstractmethod
    def list_ssh_keys(self) -> List[dict]:
        """Return every SSH key in the project."""

    @abstractmethod
    def delete_server(self, server_id: int) -> dict:
        """Delete a server. Returns the action."""

    @abstractmethod
    def create_server(self, body: dict) -> dict:
        """Create a server. Returns {'server': ..., 'action': ...}."""

    @abstractmethod
    def attach_server_to_network(self, server_id: int, network_id: int,
                                 ip: str = None) -> dict:
        """Attach a server to a private network. Returns the action."""

    @abstractmethod
    def get_action(self, action_id: int) -> dict:
        """Return the current state of an action."""


class HetznerClient(ControlPlaneClient):
    """
    Hetzner Cloud client built on hcloud.Client.

    The SDK returns bound models; they are translated into the API's
    dict shape so the dump model can read live resources directly.

    Usage:
        client = HetznerClient(token='...', logger=logger)
        server = client.get_server_by_name('web-1')
        action = client.shutdown_server(server['id'])
    """

    def __init__(self, token: str, endpoint: str = DEFAULT_API_ENDPOINT,
                 timeout: int = 30, logger=None, hcloud_client=None):
        """
        Initialize the client.

        Args:
            token: Project API token
            endpoint: API base URL
            timeout: Request timeout in seconds
            logger: Optional logger for API debug output
            hcloud_client: Optional hcloud.Client (for tests)
        """
        self.logger = logger
        self.hcloud = hcloud_client or Client(
            token=token,
            api_endpoint=endpoint,
            application_name=APPLICATION_NAME,
            application_version=VERSION,
            timeout=timeout
        )

    def _call(self, operation: str, convert, method, *args, **kwargs):
        """
        Run one SDK call and translate its result with `convert`.

        Raises:
            RemoteCallError: On an API error response or a transport failure
        """
        log_api_call(self.logger, operation, *args, **kwargs)

        try:
            result = method(*args, **kwargs)
        except APIException as e:
            raise RemoteCallError(operation, e.code, e.message) from e
        except requests.exceptions.RequestException as e:
            raise RemoteCallError(operation, reason=str(e)) from e

        data = convert(result)
        log_api_result(self.logger, operation, data)
        return data

    def get_server_by_name(self, name: str) -> Optional[dict]:
        return self._call('servers.get_by_name', _optional(_server_dict),
                          self.hcloud.servers.get_by_name, name)

    def shutdown_server(self, server_id: int) -> dict:
        return self._call('servers.shutdown', _action_dict,
                          self.hcloud.servers.shutdown, Server(id=server_id))

    def create_image(self, server_id: int, description: str,
                     image_type: str = 'snapshot') -> dict:
        return self._call('servers.create_image', _image_response,
                          self.hcloud.servers.create_image, Server(id=server_id),
                          description=description, type=image_type)

    def list_floating_ips(self) -> List[dict]:
        return self._call('floating_ips.get_all', _each(_floating_ip_dict),
                          self.hcloud.floating_ips.get_all)

    def get_floating_ip(self, floating_ip_id: int) -> dict:
        return self._call('floating_ips.get_by_id', _floating_ip_dict,
                          self.hcloud.floating_ips.get_by_id, floating_ip_id)

    def unassign_floating_ip(self, floating_ip_id: int) -> dict:
        return self._call('floating_ips.unassign', _action_dict,
                          self.hcloud.floating_ips.unassign, FloatingIP(id=floating_ip_id))

    def assign_floating_ip(self, floating_ip_id: int, server_id: int) -> dict:
        return self._call('floating_ips.assign', _action_dict,
                          self.hcloud.floating_ips.assign,
                          FloatingIP(id=floating_ip_id), Server(id=server_id))

    def unassign_primary_ip(self, primary_ip_id: int) -> dict:
        return self._call('primary_ips.unassign', _action_dict,
                          self.hcloud.primary_ips.unassign, PrimaryIP(id=primary_ip_id))

    def list_ssh_keys(self) -> List[dict]:
        return self._call('ssh_keys.get_all', _each(_ssh_key_dict),
                          self.hcloud.ssh_keys.get_all)

    def delete_server(self, server_id: int) -> dict:
        return self._call('servers.delete', _action_dict,
                          self.hcloud.servers.delete, Server(id=server_id))

    def create_server(self, body: dict) -> dict:
        """
        Create a server from an API-shaped request body.

        References in the body (server type, image, SSH keys, ...) are ids.
        """
        return self._call('servers.create', _server_response,
                          self.hcloud.servers.create, **_create_arguments(body))

    def attach_server_to_network(self, server_id: int, network_id: int,
                                 ip: str = None) -> dict:
        return self._call('servers.attach_to_network', _action_dict,
                          self.hcloud.servers.attach_to_network,
                          Server(id=server_id), Network(id=network_id), ip=ip)

    def get_action(self, action_id: int) -> dict:
        return self._call('actions.get_by_id', _action_dict,
                          self.hcloud.actions.get_by_id, action_id)


def _create_arguments(body: dict) -> dict:
    """Translate a create-server body into servers.create() keyword arguments."""
    public_net = body.get('public_net') or {}
    datacenter_id = body.get('datacenter')
    placement_group_id = body.get('placement_group')

    return {
        'name': body['name'],
        'server_type': ServerType(id=body['server_type']),
        'image': Image(id=body['image']),
        'datacenter': Datacenter(id=datacenter_id) if datacenter_id else None,
        'ssh_keys': [SSHKey(id=key_id) for key_id in body.get('ssh_keys') or []],
        'volumes': [Volume(id=volume_id) for volume_id in body.get('volumes') or []],
        'firewalls': [Firewall(id=fw['firewall']) for fw in body.get('firewalls') or []],
        'labels': body.get('labels'),
        'placement_group': PlacementGroup(id=placement_group_id) if placement_group_id else None,
        'user_data': body.get('user_data'),
        'public_net': ServerCreatePublicNetwork(
            ipv4=PrimaryIP(id=public_net['ipv4']) if public_net.get('ipv4') else None,
            ipv6=PrimaryIP(id=public_net['ipv6']) if public_net.get('ipv6') else None,
            enable_ipv4=public_net.get('enable_ipv4', True),
            enable_ipv6=public_net.get('enable_ipv6', True)
        ),
    }


# SDK model -> API dict translation

def _ref(model) -> Optional[dict]:
    return {'id': model.id} if model is not None else None


def _optional(convert):
    return lambda model: convert(model) if model is not None else None


def _each(convert):
    return lambda models: [convert(model) for model in models]


def _action_dict(action) -> dict:
    return {
        'id': action.id,
        'command': action.command,
        'status': action.status,
        'progress': action.progress,
        'error': action.error,
    }


def _server_dict(server) -> dict:
    public_net = server.public_net
    return {
        'id': server.id,
        'name': server.name,
        'status': server.status,
        'server_type': _ref(server.server_type),
        'datacenter': _ref(server.datacenter),
        'placement_group': _ref(server.placement_group),
        'labels': dict(server.labels or {}),
        'volumes': [volume.id for volume in server.volumes or []],
        'private_net': [{'network': net.network.id, 'ip': net.ip}
                        for net in server.private_net or []],
        'public_net': {
            'ipv4': _ref(public_net.primary_ipv4) if public_net else None,
            'ipv6': _ref(public_net.primary_ipv6) if public_net else None,
            'firewalls': [_ref(fw.firewall) for fw in public_net.firewalls or []]
            if public_net else [],
        },
    }


def _floating_ip_dict(floating_ip) -> dict:
    return {
        'id': floating_ip.id,
        'ip': floating_ip.ip,
        'type': floating_ip.type,
        'description': floating_ip.description,
        'server': floating_ip.server.id if floating_ip.server is not None else None,
    }


def _ssh_key_dict(ssh_key) -> dict:
    return {'id': ssh_key.id, 'name': ssh_key.name, 'fingerprint': ssh_key.fingerprint}


def _image_dict(image) -> dict:
    return {'id': image.id, 'description': image.description, 'type': image.type}


def _image_response(response) -> dict:
    return {'image': _image_dict(response.image), 'action': _action_dict(response.action)}


def _server_response(response) -> dict:
    return {'server': _server_dict(response.server), 'action': _action_dict(response.action)}
