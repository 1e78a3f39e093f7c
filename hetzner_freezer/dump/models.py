"""
Hetzner Freezer - Dump Model

Portable representation of one server at freeze time.

Every record reads from and writes to dicts that use the Hetzner Cloud
API key names, so the same `from_dict` works for a live API resource and
for a stored JSON part. Unknown keys are ignored and missing keys fall
back to zero values.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional


_JSON_TYPES = {dict: 'object', list: 'array'}


def _field(data: dict, key: str, kind):
    """
    Return data[key] checked against `kind`, or an empty `kind` when unset.

    Raises:
        TypeError: If the value has another JSON type
    """
    value = data.get(key)
    if value is None:
        return kind()
    if not isinstance(value, kind):
        raise TypeError(f"'{key}' must be a JSON {_JSON_TYPES[kind]}, "
                        f"not {type(value).__name__}")
    return value


def _ref_id(ref) -> Optional[int]:
    """Return the id of a nested `{'id': ...}` reference, None if unset or zero."""
    if ref is None:
        return None
    if not isinstance(ref, dict):
        raise TypeError(f"expected an {{'id': ...}} reference, not {type(ref).__name__}")
    return ref.get('id') or None


def _ref(ref_id: Optional[int]) -> Optional[dict]:
    return {'id': ref_id} if ref_id else None


@dataclass
class PrivateNetRecord:
    """A private network attachment: network id and assigned IPv4 address."""
    network: int = 0
    ip: str = ''

    @classmethod
    def from_dict(cls, data: dict) -> 'PrivateNetRecord':
        if not isinstance(data, dict):
            raise TypeError(f"private network must be a JSON object, not {type(data).__name__}")
        return cls(network=data.get('network') or 0, ip=data.get('ip') or '')

    def to_dict(self) -> dict:
        return {'network': self.network, 'ip': self.ip}


@dataclass
class PublicNetRecord:
    """
    Public network descriptor.

    A primary IP id of None means the address family was not enabled
    at freeze time and must not be requested on unfreeze.
    """
    ipv4_id: Optional[int] = None
    ipv6_id: Optional[int] = None
    firewall_ids: List[int] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> 'PublicNetRecord':
        return cls(
            ipv4_id=_ref_id(data.get('ipv4')),
            ipv6_id=_ref_id(data.get('ipv6')),
            firewall_ids=[fw_id for fw_id in map(_ref_id, _field(data, 'firewalls', list)) if fw_id]
        )

    def to_dict(self) -> dict:
        return {
            'ipv4': _ref(self.ipv4_id),
            'ipv6': _ref(self.ipv6_id),
            'firewalls': [{'id': fw_id} for fw_id in self.firewall_ids],
        }


@dataclass
class ServerRecord:
    """Identity and configuration of the source server."""
    id: int = 0
    name: str = ''
    server_type_id: Optional[int] = None
    datacenter_id: Optional[int] = None
    placement_group_id: Optional[int] = None
    labels: Dict[str, str] = field(default_factory=dict)
    volumes: List[int] = field(default_factory=list)
    private_net: List[PrivateNetRecord] = field(default_factory=list)
    public_net: PublicNetRecord = field(default_factory=PublicNetRecord)

    @classmethod
    def from_dict(cls, data: dict) -> 'ServerRecord':
        return cls(
            id=data.get('id') or 0,
            name=data.get('name') or '',
            server_type_id=_ref_id(data.get('server_type')),
            datacenter_id=_ref_id(data.get('datacenter')),
            placement_group_id=_ref_id(data.get('placement_group')),
            labels=dict(_field(data, 'labels', dict)),
            volumes=list(_field(data, 'volumes', list)),
            private_net=[PrivateNetRecord.from_dict(n) for n in _field(data, 'private_net', list)],
            public_net=PublicNetRecord.from_dict(_field(data, 'public_net', dict))
        )

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'name': self.name,
            'server_type': _ref(self.server_type_id),
            'datacenter': _ref(self.datacenter_id),
            'placement_group': _ref(self.placement_group_id),
            'labels': dict(self.labels),
            'volumes': list(self.volumes),
            'private_net': [n.to_dict() for n in self.private_net],
            'public_net': self.public_net.to_dict(),
        }


@dataclass
class FloatingIPRecord:
    """A floating IP that was assigned to the server."""
    id: int = 0
    ip: str = ''
    type: str = 'ipv4'
    description: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> 'FloatingIPRecord':
        return cls(
            id=data.get('id') or 0,
            ip=data.get('ip') or '',
            type=data.get('type') or 'ipv4',
            description=data.get('description')
        )

    def to_dict(self) -> dict:
        return {'id': self.id, 'ip': self.ip, 'type': self.type,
                'description': self.description}


@dataclass
class SSHKeyRecord:
    id: int = 0
    name: str = ''
    fingerprint: str = ''

    @classmethod
    def from_dict(cls, data: dict) -> 'SSHKeyRecord':
        return cls(
            id=data.get('id') or 0,
            name=data.get('name') or '',
            fingerprint=data.get('fingerprint') or ''
        )

    def to_dict(self) -> dict:
        return {'id': self.id, 'name': self.name, 'fingerprint': self.fingerprint}


@dataclass
class ImageRecord:
    """The snapshot image the server is recreated from."""
    id: int = 0
    description: str = ''
    type: str = 'snapshot'

    @classmethod
    def from_dict(cls, data: dict) -> 'ImageRecord':
        return cls(
            id=data.get('id') or 0,
            description=data.get('description') or '',
            type=data.get('type') or 'snapshot'
        )

    def to_dict(self) -> dict:
        return {'id': self.id, 'description': self.description, 'type': self.type}


@dataclass
class ServerDump:
    """
    Everything needed to recreate one server.

    The four parts are independently optional: `server` and `snapshot`
    are None and the lists are empty when their part was not recorded.

    Example:
        dump = ServerDump.from_live(server, floating_ips, ssh_keys, image)
        dump.server.name
        'web-1'
    """
    server: Optional[ServerRecord] = None
    floating_ips: List[FloatingIPRecord] = field(default_factory=list)
    ssh_keys: List[SSHKeyRecord] = field(default_factory=list)
    snapshot: Optional[ImageRecord] = None

    @classmethod
    def from_live(cls, server: dict, floating_ips: List[dict],
                  ssh_keys: List[dict], image: dict) -> 'ServerDump':
        """Build a dump from control-plane resources."""
        return cls(
            server=ServerRecord.from_dict(server),
            floating_ips=[FloatingIPRecord.from_dict(f) for f in floating_ips],
            ssh_keys=[SSHKeyRecord.from_dict(k) for k in ssh_keys],
            snapshot=ImageRecord.from_dict(image)
        )
