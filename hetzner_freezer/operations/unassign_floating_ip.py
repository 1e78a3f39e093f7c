"""
Hetzner Freezer - Unassign Floating IP Operation

Unassigns a floating IP from whatever server holds it.
"""

from hetzner_freezer.operations.base import BaseOperation, OperationResult


class UnassignFloatingIPOperation(BaseOperation):
    """
    Unassigns a floating IP.

    The floating IP is fetched again by id first; the capture step only
    saw a filtered list.
    """

    @property
    def name(self) -> str:
        """Display name for this operation."""
        return "Unassign Floating IP"

    def _run(self, floating_ip_id: int) -> OperationResult:
        """
        Args:
            floating_ip_id: ID of the floating IP

        Returns:
            OperationResult with the floating IP in data['floating_ip']
        """
        floating_ip = self.client.get_floating_ip(floating_ip_id)
        self._log_debug(f"Floating IP {floating_ip.get('ip')} assigned to {floating_ip.get('server')}")

        action = self.client.unassign_floating_ip(floating_ip['id'])
        self.waiter.wait(action)

        return self._success(f"Floating IP {floating_ip.get('ip')} unassigned",
                             floating_ip=floating_ip)
