"""
Hetzner Freezer - Shutdown Server Operation

Sends an ACPI shutdown to a server and waits until it is off.
"""

from hetzner_freezer.operations.base import BaseOperation, OperationResult


class ShutdownServerOperation(BaseOperation):
    """
    Shuts down a server.

    The image is captured after this, so the filesystem is consistent.

    Example:
        operation = ShutdownServerOperation(client, waiter, logger)
        result = operation.execute(server_id=42)
    """

    @property
    def name(self) -> str:
        """Display name for this operation."""
        return "Shutdown Server"

    def _run(self, server_id: int) -> OperationResult:
        """
        Shut down the server.

        Args:
            server_id: ID of the server to shut down

        Returns:
            OperationResult with the finished action
        """
        action = self.client.shutdown_server(server_id)
        self._log_debug(f"Waiting for shutdown action {action.get('id')}...")
        action = self.waiter.wait(action)

        return self._success("Server shut down", action=action)
