"""
Hetzner Freezer - Delete Server Operation

Deletes a server.
This cannot be undone; the freeze workflow runs it last.
"""

from hetzner_freezer.operations.base import BaseOperation, OperationResult


class DeleteServerOperation(BaseOperation):
    """
    Deletes a server.

    WARNING: The server is permanently gone once this succeeds!
    Only use this operation after the dump has been written.
    """

    @property
    def name(self) -> str:
        """Display name for this operation."""
        return "Delete Server"

    def _run(self, server_id: int) -> OperationResult:
        """
        Args:
            server_id: ID of the server to delete

        Returns:
            OperationResult
        """
        self._log_debug("WARNING: This operation cannot be undone!")

        action = self.client.delete_server(server_id)
        self.waiter.wait(action)

        return self._success("Server deleted")
