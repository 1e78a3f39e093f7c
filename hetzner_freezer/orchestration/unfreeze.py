"""
Hetzner Freezer - Unfreeze Orchestrator

Coordinates the unfreeze workflow:
1. Select the dump (given id, or the latest one)
2. Load it
3. Re-resolve the recorded floating IPs
4. Create the server from the snapshot (with cloud-init for floating IPs)
5. Assign the floating IPs, one at a time
6. Attach the private networks, one at a time
"""

import ipaddress
from typing import List, Optional

from hetzner_freezer.core.exceptions import DumpLoadError
from hetzner_freezer.dump import (
    ServerDump,
    latest_dump_id,
    load_server_dump,
    server_dump_path,
    server_path
)
from hetzner_freezer.dump.store import SERVER_PART, SNAPSHOT_PART
from hetzner_freezer.operations import (
    AssignFloatingIPOperation,
    AttachNetworkOperation,
    CreateServerOperation
)
from hetzner_freezer.orchestration.base import Workflow
from hetzner_freezer.utils.progress import create_progress_tracker

UNFREEZE_STEPS = 5

# Brings the floating IPs up on the primary interface at first boot
CLOUD_INIT_COMMAND = 'ip addr add 0.0.0.0/32 dev eth0'
CLOUD_INIT_PLACEHOLDER = '0.0.0.0/32'


def build_user_data(addresses: List[str]) -> Optional[str]:
    """
    Build cloud-init user data that adds each address as a /32.

    Args:
        addresses: Floating IP addresses

    Returns:
        str: cloud-config document, or None when there are no addresses

    Example:
        build_user_data(['10.0.0.5', '10.0.0.6'])
        '#cloud-config\\nruncmd:\\n- [ip, addr, add, 10.0.0.5/32, 10.0.0.6/32, dev, eth0]'
    """
    if not addresses:
        return None

    routes = ' '.join(f'{address}/32' for address in addresses)
    command = CLOUD_INIT_COMMAND.replace(CLOUD_INIT_PLACEHOLDER, routes)
    return f"#cloud-config\nruncmd:\n- [{', '.join(command.split(' '))}]"


def build_server_body(dump: ServerDump, user_data: Optional[str] = None) -> dict:
    """
    Build the server create request for a dump.

    Referenced resources (SSH keys, volumes, firewalls, placement group)
    are passed by id and must still exist.

    Raises:
        DumpLoadError: If the dump has no server or snapshot part
    """
    server = dump.server
    if server is None:
        raise DumpLoadError(SERVER_PART, "part is missing")
    if not server.name:
        raise DumpLoadError(SERVER_PART, "server name is empty")
    if dump.snapshot is None:
        raise DumpLoadError(SNAPSHOT_PART, "part is missing")

    public_net = server.public_net
    public_net_body = {
        'enable_ipv4': bool(public_net.ipv4_id),
        'enable_ipv6': bool(public_net.ipv6_id),
    }
    if public_net.ipv4_id:
        public_net_body['ipv4'] = public_net.ipv4_id
    if public_net.ipv6_id:
        public_net_body['ipv6'] = public_net.ipv6_id

    body = {
        'name': server.name,
        'server_type': server.server_type_id,
        'image': dump.snapshot.id,
        'datacenter': server.datacenter_id,
        'ssh_keys': [key.id for key in dump.ssh_keys],
        'volumes': list(server.volumes),
        'firewalls': [{'firewall': fw_id} for fw_id in public_net.firewall_ids],
        'labels': dict(server.labels),
        'public_net': public_net_body,
    }
    if server.placement_group_id:
        body['placement_group'] = server.placement_group_id
    if user_data:
        body['user_data'] = user_data

    return body


def parse_private_ip(address: str) -> Optional[str]:
    """Normalized dotted-quad IPv4 address, or None if `address` is not one."""
    try:
        return str(ipaddress.IPv4Address(address))
    except ValueError:
        return None


class UnfreezeOrchestrator(Workflow):
    """
    Orchestrates the unfreeze workflow.

    Nothing is rolled back on failure: a server created before a failed
    attach stays, partially attached.

    Example:
        orchestrator = UnfreezeOrchestrator(client, 'my-project', config, logger)
        server = orchestrator.unfreeze('web-1')            # latest dump
        server = orchestrator.unfreeze('web-1', '1700000000000000000')
    """

    def select_dump(self, server_name: str, dump_id: str = None) -> str:
        """
        Return `dump_id`, or the latest dump id when it is empty.

        Raises:
            DumpNotFoundError: If no dump exists for the server
        """
        if dump_id:
            return dump_id

        dump_id = latest_dump_id(server_path(self.config.output_dir, self.project, server_name))
        self._log_debug(f"Latest dump for {server_name}: {dump_id}")
        return dump_id

    def unfreeze(self, server_name: str, dump_id: str = None) -> dict:
        """
        Recreate a server from a dump.

        Args:
            server_name: Name the server was frozen under
            dump_id: Dump to restore (latest if omitted)

        Returns:
            dict: The created server

        Raises:
            DumpNotFoundError: The dump (or any dump) does not exist
            DumpLoadError: The dump cannot be read or is incomplete
            RemoteCallError: Resolving a floating IP failed
            OperationFailedError: A step failed; earlier steps stay done
        """
        self._log_info("")
        self._log_info("Executing Unfreeze:")
        self._log_debug(f"Config: {self.config}")

        progress = create_progress_tracker(
            total_steps=UNFREEZE_STEPS,
            desc=f"Unfreeze Server: {server_name}",
            enabled=self.config.show_progress
        )
        progress.start()

        try:
            # Step 1: Select and load dump
            progress.update_step("Loading dump")
            dump_id = self.select_dump(server_name, dump_id)
            self._log_info(f"  Loading dump {dump_id}...")
            path = server_dump_path(self.config.output_dir, self.project, server_name, dump_id)
            dump = load_server_dump(path)
            self.state_tracker.add_step("Load Dump", True, f"Loaded {path}")
            progress.advance()

            # Step 2: Resolve floating IPs
            progress.update_step("Resolving floating IPs")
            floating_ips = [self.client.get_floating_ip(record.id) for record in dump.floating_ips]
            user_data = build_user_data([fip['ip'] for fip in floating_ips])
            body = build_server_body(dump, user_data)
            progress.advance()

            # Step 3: Create server
            progress.update_step("Creating server")
            self._log_info(f"  Creating server {body['name']} from snapshot {body['image']}...")
            result = self._run_step(self._operation(CreateServerOperation), body=body)
            server = result.data['server']
            progress.advance()

            # Step 4: Floating IPs
            progress.update_step("Assigning floating IPs")
            for floating_ip in floating_ips:
                self._log_info(f"  Assigning floating IP {floating_ip.get('ip')}...")
                self._run_step(self._operation(AssignFloatingIPOperation),
                               floating_ip=floating_ip, server_id=server['id'])
            progress.advance()

            # Step 5: Private networks
            progress.update_step("Attaching private networks")
            for private_net in dump.server.private_net:
                ip = parse_private_ip(private_net.ip)
                if ip is None:
                    self._log_warning(f"  Skipping network {private_net.network}: "
                                      f"invalid address '{private_net.ip}'")
                    self.state_tracker.add_step("Attach Network", True,
                                                f"Skipped invalid address '{private_net.ip}'")
                    continue
                self._log_info(f"  Attaching network {private_net.network} ({ip})...")
                self._run_step(self._operation(AttachNetworkOperation),
                               server_id=server['id'], network_id=private_net.network, ip=ip)
            progress.advance()
        finally:
            progress.finish()
            self._log_summary()

        return server
