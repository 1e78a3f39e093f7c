"""
Hetzner Freezer - Freeze Orchestrator

Coordinates the freeze workflow:
1. Look up the server by name
2. Shut it down
3. Capture the snapshot and write the dump
4. Unassign its floating IPs, one at a time
5. Unassign its primary IPv4/IPv6
6. Delete the server

Every step waits for its action before the next starts. The control
plane allows one conflicting network change per server at a time.
"""

from hetzner_freezer.core.exceptions import ServerNotFoundError
from hetzner_freezer.dump import new_dump_id
from hetzner_freezer.operations import (
    DeleteServerOperation,
    ShutdownServerOperation,
    UnassignFloatingIPOperation,
    UnassignPrimaryIPOperation
)
from hetzner_freezer.orchestration.base import Workflow
from hetzner_freezer.orchestration.capture import SnapshotCapturer
from hetzner_freezer.utils.progress import create_progress_tracker

FREEZE_STEPS = 6


class FreezeOrchestrator(Workflow):
    """
    Orchestrates the freeze workflow.

    Deleting the server is last, so every step before it leaves the
    server recoverable. Nothing is rolled back on failure: a server that
    was shut down and snapshotted stays that way.

    Example:
        orchestrator = FreezeOrchestrator(
            client=client,
            project='my-project',
            config=config,
            logger=logger,
            cancel_event=cancel_event
        )

        dump_id = orchestrator.freeze('web-1')
    """

    def __init__(self, client, project: str, config=None, logger=None,
                 waiter=None, cancel_event=None):
        super().__init__(client, project, config, logger, waiter, cancel_event)

        self.capturer = SnapshotCapturer(client, project, self.config, logger, self.waiter)
        # One record for the whole run, capture steps included
        self.capturer.state_tracker = self.state_tracker

    def _lookup_server(self, server_name: str) -> dict:
        self._log_info(f"  Looking up server {server_name}...")
        server = self.client.get_server_by_name(server_name)
        if server is None:
            self.state_tracker.add_step("Lookup Server", False, "Server not found")
            raise ServerNotFoundError(server_name, self.project)

        self.state_tracker.add_step("Lookup Server", True, f"Found server {server['id']}")
        self._log_debug(f"Server {server_name} has id {server['id']}")
        return server

    def freeze(self, server_name: str) -> str:
        """
        Freeze a server: dump it, then delete it.

        Args:
            server_name: Name of the server to freeze

        Returns:
            str: Id of the dump that was written

        Raises:
            ServerNotFoundError: No server has this name (nothing was touched)
            RemoteCallError: A lookup or listing call failed
            OperationFailedError: A step failed; earlier steps stay done
            DumpStoreError: The dump could not be written
        """
        dump_id = new_dump_id()

        self._log_info("")
        self._log_info(f"Executing Freeze (dump {dump_id}):")
        self._log_debug(f"Config: {self.config}")

        progress = create_progress_tracker(
            total_steps=FREEZE_STEPS,
            desc=f"Freeze Server: {server_name}",
            enabled=self.config.show_progress
        )
        progress.start()

        try:
            # Step 1: Look up server
            progress.update_step("Looking up server")
            server = self._lookup_server(server_name)
            progress.advance()

            # Step 2: Shut down
            progress.update_step("Shutting down server")
            self._log_info("  Shutting down server...")
            self._run_step(self._operation(ShutdownServerOperation), server_id=server['id'])
            progress.advance()

            # Step 3: Snapshot + dump
            progress.update_step("Capturing snapshot")
            dump = self.capturer.capture_server(dump_id, server)
            progress.advance()

            # Step 4: Floating IPs
            progress.update_step("Unassigning floating IPs")
            for floating_ip in dump.floating_ips:
                self._log_info(f"  Unassigning floating IP {floating_ip.ip}...")
                self._run_step(self._operation(UnassignFloatingIPOperation),
                               floating_ip_id=floating_ip.id)
            progress.advance()

            # Step 5: Primary IPs (only those recorded as assigned)
            progress.update_step("Unassigning primary IPs")
            public_net = dump.server.public_net
            if public_net.ipv4_id:
                self._log_info("  Unassigning primary IPv4...")
                self._run_step(self._operation(UnassignPrimaryIPOperation),
                               primary_ip_id=public_net.ipv4_id, family='ipv4')
            if public_net.ipv6_id:
                self._log_info("  Unassigning primary IPv6...")
                self._run_step(self._operation(UnassignPrimaryIPOperation),
                               primary_ip_id=public_net.ipv6_id, family='ipv6')
            progress.advance()

            # Step 6: Delete (irreversible)
            progress.update_step("Deleting server")
            self._log_info("  Deleting server...")
            self._run_step(self._operation(DeleteServerOperation), server_id=server['id'])
            progress.advance()
        finally:
            progress.finish()
            self._log_summary()

        return dump_id

    def dump(self, server_name: str) -> str:
        """
        Capture a server without shutting it down or deleting it.

        Args:
            server_name: Name of the server to dump

        Returns:
            str: Id of the dump that was written

        Raises:
            ServerNotFoundError: No server has this name
            RemoteCallError: A lookup or listing call failed
            OperationFailedError: Creating the snapshot failed
            DumpStoreError: The dump could not be written
        """
        dump_id = new_dump_id()

        self._log_info("")
        self._log_info(f"Executing Dump (dump {dump_id}):")

        try:
            server = self._lookup_server(server_name)
            self.capturer.capture_server(dump_id, server)
        finally:
            self._log_summary()

        return dump_id
