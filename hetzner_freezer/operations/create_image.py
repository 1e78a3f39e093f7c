"""
Hetzner Freezer - Create Image Operation

Creates a snapshot image of a server.
The image is the artifact a server is recreated from, so it is never
deleted by this tool.
"""

import time

from hetzner_freezer.operations.base import BaseOperation, OperationResult


class CreateImageOperation(BaseOperation):
    """
    Creates a snapshot image of a server and waits for it to be ready.
    """

    @property
    def name(self) -> str:
        """Display name for this operation."""
        return "Create Snapshot"

    def _run(self, server_id: int, description: str = None) -> OperationResult:
        """
        Create a snapshot of a server.

        Args:
            server_id: ID of the server to snapshot
            description: Image description (defaults to the current local time)

        Returns:
            OperationResult with the created image in data['image']
        """
        if not description:
            description = time.strftime('%Y-%m-%d %H:%M:%S')

        self._log_debug(f"  Description: {description}")

        response = self.client.create_image(server_id, description)
        image = response['image']

        self._log_debug(f"Waiting for image {image.get('id')}...")
        self.waiter.wait(response['action'])

        return self._success(f"Snapshot created: {image.get('id')} ({description})",
                             image=image)
