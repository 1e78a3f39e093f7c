"""
Hetzner Freezer - Unassign Primary IP Operation

Unassigns a primary IPv4/IPv6 address from a (powered off) server so the
address survives the server's deletion.
"""

from hetzner_freezer.operations.base import BaseOperation, OperationResult


class UnassignPrimaryIPOperation(BaseOperation):
    """
    Unassigns a primary IP.
    """

    @property
    def name(self) -> str:
        """Display name for this operation."""
        return "Unassign Primary IP"

    def _run(self, primary_ip_id: int, family: str = 'ipv4') -> OperationResult:
        """
        Args:
            primary_ip_id: ID of the primary IP
            family: 'ipv4' or 'ipv6' (for display)

        Returns:
            OperationResult
        """
        action = self.client.unassign_primary_ip(primary_ip_id)
        self.waiter.wait(action)

        return self._success(f"Primary {family} {primary_ip_id} unassigned")
