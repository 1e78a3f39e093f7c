"""
Hetzner Freezer - Assign Floating IP Operation

Assigns a floating IP to a server.
"""

from hetzner_freezer.operations.base import BaseOperation, OperationResult


class AssignFloatingIPOperation(BaseOperation):
    """
    Assigns a floating IP to a server.
    """

    @property
    def name(self) -> str:
        """Display name for this operation."""
        return "Assign Floating IP"

    def _run(self, floating_ip: dict, server_id: int) -> OperationResult:
        """
        Args:
            floating_ip: Floating IP resource (as returned by the client)
            server_id: ID of the server to assign it to

        Returns:
            OperationResult
        """
        action = self.client.assign_floating_ip(floating_ip['id'], server_id)
        self.waiter.wait(action)

        return self._success(f"Floating IP {floating_ip.get('ip')} assigned")
