"""
Hetzner Freezer - Create Server Operation

Creates a server from a request body and waits until it is running.
"""

from hetzner_freezer.operations.base import BaseOperation, OperationResult


class CreateServerOperation(BaseOperation):
    """
    Creates a server.

    The body is passed through unchanged; building it from a dump is the
    unfreeze workflow's job.
    """

    @property
    def name(self) -> str:
        """Display name for this operation."""
        return "Create Server"

    def _run(self, body: dict) -> OperationResult:
        """
        Create a server.

        Args:
            body: Server create request (name, server_type, image, ...)

        Returns:
            OperationResult with the new server in data['server']
        """
        self._log_debug(f"Creating server with config: {body}")

        response = self.client.create_server(body)
        server = response['server']

        self._log_debug(f"Waiting for server {server.get('id')} to be created...")
        self.waiter.wait(response['action'])

        return self._success(f"Server created: {server.get('name')} ({server.get('id')})",
                             server=server)
