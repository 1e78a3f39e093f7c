"""
Hetzner Freezer - Snapshot Capturer

Reads a live server's configuration, creates its snapshot image and
persists both as a dump:
1. Collect the floating IPs assigned to the server
2. Collect the project's SSH keys
3. Create the snapshot image and wait for it
4. Translate everything into the dump model
5. Create the dump directory
6. Write the dump
"""

from typing import List

from hetzner_freezer.dump import (
    ServerDump,
    ensure_directory,
    server_dump_path,
    store_server_dump
)
from hetzner_freezer.operations import CreateImageOperation
from hetzner_freezer.orchestration.base import Workflow


class SnapshotCapturer(Workflow):
    """
    Captures one server into a dump.

    The snapshot image is the artifact the server is recreated from. It is
    kept even if a later step fails.

    Note: every SSH key in the project is recorded, not only the keys the
    server was created with. The API does not report a server's keys.

    Example:
        capturer = SnapshotCapturer(client, 'my-project', config, logger)
        dump = capturer.capture_server(new_dump_id(), server)
    """

    def assigned_floating_ips(self, server: dict) -> List[dict]:
        """Floating IPs in the project currently assigned to `server`."""
        return [fip for fip in self.client.list_floating_ips()
                if fip.get('server') == server['id']]

    def capture_server(self, dump_id: str, server: dict) -> ServerDump:
        """
        Capture a server.

        The server should already be shut down when the image must be
        filesystem-consistent.

        Args:
            dump_id: Identifier of the new dump
            server: Live server resource

        Returns:
            ServerDump: The dump as written

        Raises:
            RemoteCallError: A listing call failed
            OperationFailedError: Creating the snapshot failed
            DumpStoreError: The dump could not be written
        """
        floating_ips = self.assigned_floating_ips(server)
        self._log_info(f"  Found {len(floating_ips)} assigned floating IP(s)")

        ssh_keys = self.client.list_ssh_keys()
        self._log_debug(f"Recording {len(ssh_keys)} project SSH key(s)")

        self._log_info("  Creating snapshot...")
        result = self._run_step(self._operation(CreateImageOperation),
                                server_id=server['id'])

        dump = ServerDump.from_live(server, floating_ips, ssh_keys, result.data['image'])

        path = server_dump_path(self.config.output_dir, self.project, server['name'], dump_id)
        ensure_directory(path)
        store_server_dump(path, dump)

        self.state_tracker.add_step("Write Dump", True, f"Dump written to {path}")
        self._log_info(f"  [OK] Dump written to {path}")
        return dump
