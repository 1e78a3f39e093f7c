"""Unit tests for HetznerClient (hcloud.Client mocked)."""

from types import SimpleNamespace as Model
from unittest.mock import MagicMock, patch

import pytest
import requests
from hcloud import APIException
from hcloud.servers import ServerCreatePublicNetwork

from hetzner_freezer.core.client import HetznerClient
from hetzner_freezer.core.config import VERSION
from hetzner_freezer.core.exceptions import RemoteCallError
from hetzner_freezer.dump import ServerRecord


def sdk_action(action_id=1, status='running', error=None):
    return Model(id=action_id, command='shutdown_server', status=status,
                 progress=0, error=error)


def sdk_server(server_id=42):
    """A bound server as the SDK returns it (attribute access only)."""
    return Model(
        id=server_id,
        name='web-1',
        status='running',
        server_type=Model(id=22),
        datacenter=Model(id=3),
        placement_group=Model(id=31),
        labels={'env': 'prod'},
        volumes=[Model(id=11), Model(id=12)],
        private_net=[Model(network=Model(id=5), ip='10.1.0.2')],
        public_net=Model(
            primary_ipv4=Model(id=7),
            primary_ipv6=None,
            firewalls=[Model(firewall=Model(id=9), status='applied')]
        )
    )


@pytest.fixture
def sdk():
    """Provide a mocked hcloud.Client."""
    return MagicMock()


@pytest.fixture
def client(sdk):
    return HetznerClient('secret-token', hcloud_client=sdk)


class TestConstruction:

    def test_sdk_client_settings(self):
        """Test that the SDK client is identified and uses the configured endpoint."""
        with patch('hetzner_freezer.core.client.Client') as sdk_class:
            HetznerClient('secret-token', endpoint='https://api.example.test/v1', timeout=10)

        sdk_class.assert_called_once_with(
            token='secret-token',
            api_endpoint='https://api.example.test/v1',
            application_name='hetzner-freezer',
            application_version=VERSION,
            timeout=10
        )


class TestServers:
    """Tests for server calls and their translation."""

    def test_get_server_by_name(self, client, sdk):
        sdk.servers.get_by_name.return_value = sdk_server()

        server = client.get_server_by_name('web-1')

        sdk.servers.get_by_name.assert_called_once_with('web-1')
        assert server == {
            'id': 42,
            'name': 'web-1',
            'status': 'running',
            'server_type': {'id': 22},
            'datacenter': {'id': 3},
            'placement_group': {'id': 31},
            'labels': {'env': 'prod'},
            'volumes': [11, 12],
            'private_net': [{'network': 5, 'ip': '10.1.0.2'}],
            'public_net': {'ipv4': {'id': 7}, 'ipv6': None, 'firewalls': [{'id': 9}]},
        }

    def test_translated_server_reads_into_the_dump_model(self, client, sdk):
        sdk.servers.get_by_name.return_value = sdk_server()

        record = ServerRecord.from_dict(client.get_server_by_name('web-1'))

        assert record.public_net.ipv4_id == 7
        assert record.public_net.ipv6_id is None
        assert record.public_net.firewall_ids == [9]
        assert record.private_net[0].ip == '10.1.0.2'

    def test_get_server_by_name_not_found(self, client, sdk):
        """Test that a missing server is None rather than an error."""
        sdk.servers.get_by_name.return_value = None

        assert client.get_server_by_name('missing') is None

    def test_shutdown_server(self, client, sdk):
        sdk.servers.shutdown.return_value = sdk_action(action_id=8)

        action = client.shutdown_server(42)

        (server,), _ = sdk.servers.shutdown.call_args
        assert server.id == 42
        assert action == {'id': 8, 'command': 'shutdown_server', 'status': 'running',
                          'progress': 0, 'error': None}

    def test_create_image(self, client, sdk):
        """Test that a snapshot is requested with its description."""
        sdk.servers.create_image.return_value = Model(
            image=Model(id=9001, description='2024-01-02 03:04:05', type='snapshot'),
            action=sdk_action()
        )

        result = client.create_image(42, '2024-01-02 03:04:05')

        (server,), kwargs = sdk.servers.create_image.call_args
        assert server.id == 42
        assert kwargs == {'description': '2024-01-02 03:04:05', 'type': 'snapshot'}
        assert result['image'] == {'id': 9001, 'description': '2024-01-02 03:04:05',
                                   'type': 'snapshot'}
        assert result['action']['status'] == 'running'

    def test_delete_server(self, client, sdk):
        sdk.servers.delete.return_value = sdk_action(action_id=8)

        assert client.delete_server(42)['id'] == 8
        (server,), _ = sdk.servers.delete.call_args
        assert server.id == 42

    def test_attach_server_to_network(self, client, sdk):
        """Test that the requested address is sent."""
        sdk.servers.attach_to_network.return_value = sdk_action()

        client.attach_server_to_network(43, 5, '10.1.0.2')

        (server, network), kwargs = sdk.servers.attach_to_network.call_args
        assert (server.id, network.id) == (43, 5)
        assert kwargs == {'ip': '10.1.0.2'}


class TestCreateServer:
    """Tests for translating the create request into SDK arguments."""

    BODY = {
        'name': 'web-1',
        'server_type': 22,
        'image': 9001,
        'datacenter': 3,
        'ssh_keys': [501, 502],
        'volumes': [11],
        'firewalls': [{'firewall': 9}],
        'labels': {'env': 'prod'},
        'public_net': {'enable_ipv4': True, 'enable_ipv6': False, 'ipv4': 7},
        'placement_group': 31,
        'user_data': '#cloud-config',
    }

    def test_arguments(self, client, sdk):
        sdk.servers.create.return_value = Model(server=sdk_server(43), action=sdk_action())

        client.create_server(self.BODY)

        kwargs = sdk.servers.create.call_args.kwargs
        assert kwargs['name'] == 'web-1'
        assert kwargs['server_type'].id == 22
        assert kwargs['image'].id == 9001
        assert kwargs['datacenter'].id == 3
        assert [key.id for key in kwargs['ssh_keys']] == [501, 502]
        assert [volume.id for volume in kwargs['volumes']] == [11]
        assert [fw.id for fw in kwargs['firewalls']] == [9]
        assert kwargs['labels'] == {'env': 'prod'}
        assert kwargs['placement_group'].id == 31
        assert kwargs['user_data'] == '#cloud-config'

    def test_public_net(self, client, sdk):
        """Test that only recorded primary IPs are requested."""
        sdk.servers.create.return_value = Model(server=sdk_server(43), action=sdk_action())

        client.create_server(self.BODY)

        public_net = sdk.servers.create.call_args.kwargs['public_net']
        assert isinstance(public_net, ServerCreatePublicNetwork)
        assert public_net.ipv4.id == 7
        assert public_net.ipv6 is None
        assert public_net.enable_ipv4 is True
        assert public_net.enable_ipv6 is False

    def test_optional_references_are_omitted(self, client, sdk):
        sdk.servers.create.return_value = Model(server=sdk_server(43), action=sdk_action())
        body = {key: value for key, value in self.BODY.items()
                if key not in ('placement_group', 'user_data', 'datacenter')}

        client.create_server(body)

        kwargs = sdk.servers.create.call_args.kwargs
        assert kwargs['placement_group'] is None
        assert kwargs['datacenter'] is None
        assert kwargs['user_data'] is None

    def test_returns_server_and_action(self, client, sdk):
        sdk.servers.create.return_value = Model(server=sdk_server(43),
                                                action=sdk_action(action_id=3))

        result = client.create_server(self.BODY)

        assert result['server']['id'] == 43
        assert result['action']['id'] == 3


class TestAddresses:
    """Tests for floating IP, primary IP and SSH key calls."""

    def test_list_floating_ips(self, client, sdk):
        sdk.floating_ips.get_all.return_value = [
            Model(id=100, ip='10.0.0.5', type='ipv4', description=None, server=Model(id=42)),
            Model(id=103, ip='10.0.0.9', type='ipv4', description='spare', server=None),
        ]

        floating_ips = client.list_floating_ips()

        assert [(fip['id'], fip['server']) for fip in floating_ips] == [(100, 42), (103, None)]

    def test_get_floating_ip(self, client, sdk):
        sdk.floating_ips.get_by_id.return_value = Model(
            id=100, ip='10.0.0.5', type='ipv4', description=None, server=None)

        assert client.get_floating_ip(100)['ip'] == '10.0.0.5'
        sdk.floating_ips.get_by_id.assert_called_once_with(100)

    def test_assign_floating_ip(self, client, sdk):
        sdk.floating_ips.assign.return_value = sdk_action(action_id=5)

        action = client.assign_floating_ip(100, 43)

        (floating_ip, server), _ = sdk.floating_ips.assign.call_args
        assert (floating_ip.id, server.id) == (100, 43)
        assert action['id'] == 5

    def test_unassign_floating_ip(self, client, sdk):
        sdk.floating_ips.unassign.return_value = sdk_action()

        client.unassign_floating_ip(100)

        (floating_ip,), _ = sdk.floating_ips.unassign.call_args
        assert floating_ip.id == 100

    def test_unassign_primary_ip(self, client, sdk):
        sdk.primary_ips.unassign.return_value = sdk_action(action_id=9)

        assert client.unassign_primary_ip(7)['id'] == 9
        (primary_ip,), _ = sdk.primary_ips.unassign.call_args
        assert primary_ip.id == 7

    def test_list_ssh_keys(self, client, sdk):
        sdk.ssh_keys.get_all.return_value = [Model(id=501, name='alice', fingerprint='aa:bb')]

        assert client.list_ssh_keys() == [{'id': 501, 'name': 'alice', 'fingerprint': 'aa:bb'}]

    def test_get_action_keeps_error(self, client, sdk):
        sdk.actions.get_by_id.return_value = sdk_action(
            status='error', error={'code': 'action_failed', 'message': 'Unknown error'})

        action = client.get_action(1)

        assert action['error']['message'] == 'Unknown error'
        sdk.actions.get_by_id.assert_called_once_with(1)


class TestErrors:
    """Tests for remote-call failure handling."""

    def test_api_error(self, client, sdk):
        """Test that API errors become remote-call failures with code and message."""
        sdk.servers.shutdown.side_effect = APIException(
            code='locked', message='server is locked', details={})

        with pytest.raises(RemoteCallError) as exc_info:
            client.shutdown_server(42)

        assert exc_info.value.code == 'locked'
        assert exc_info.value.reason == 'server is locked'
        assert exc_info.value.operation == 'servers.shutdown'
        assert isinstance(exc_info.value.__cause__, APIException)

    def test_unauthorized_mentions_token(self, client, sdk):
        sdk.ssh_keys.get_all.side_effect = APIException(
            code='unauthorized', message='unable to authenticate', details={})

        with pytest.raises(RemoteCallError) as exc_info:
            client.list_ssh_keys()

        assert '--token' in str(exc_info.value)

    def test_not_found(self, client, sdk):
        sdk.floating_ips.get_by_id.side_effect = APIException(
            code='not_found', message='floating_ip not found', details={})

        with pytest.raises(RemoteCallError) as exc_info:
            client.get_floating_ip(101)

        assert exc_info.value.code == 'not_found'

    def test_transport_error(self, client, sdk):
        """Test that connection failures become remote-call failures without a code."""
        sdk.servers.get_by_name.side_effect = requests.exceptions.ConnectionError(
            'Failed to resolve api.hetzner.cloud')

        with pytest.raises(RemoteCallError) as exc_info:
            client.get_server_by_name('web-1')

        assert exc_info.value.code is None
        assert 'Failed to resolve' in str(exc_info.value)

    def test_timeout(self, client, sdk):
        sdk.actions.get_by_id.side_effect = requests.exceptions.Timeout('read timed out')

        with pytest.raises(RemoteCallError) as exc_info:
            client.get_action(1)

        assert isinstance(exc_info.value.__cause__, requests.exceptions.Timeout)
