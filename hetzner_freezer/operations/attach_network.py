"""
Hetzner Freezer - Attach Network Operation

Attaches a server to a private network with a fixed address.
"""

from hetzner_freezer.operations.base import BaseOperation, OperationResult


class AttachNetworkOperation(BaseOperation):
    """
    Attaches a server to a private network.
    """

    @property
    def name(self) -> str:
        """Display name for this operation."""
        return "Attach Network"

    def _run(self, server_id: int, network_id: int, ip: str) -> OperationResult:
        """
        Args:
            server_id: ID of the server
            network_id: ID of the private network
            ip: IPv4 address to request in that network

        Returns:
            OperationResult
        """
        action = self.client.attach_server_to_network(server_id, network_id, ip)
        self.waiter.wait(action)

        return self._success(f"Attached to network {network_id} as {ip}")
