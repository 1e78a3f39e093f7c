"""
Hetzner Freezer - Operations Module

One class per remote mutation. Each issues its call and waits for the
resulting action.
"""

from hetzner_freezer.operations.base import BaseOperation, OperationResult
from hetzner_freezer.operations.waiter import ActionWaiter
from hetzner_freezer.operations.shutdown_server import ShutdownServerOperation
from hetzner_freezer.operations.create_image import CreateImageOperation
from hetzner_freezer.operations.unassign_floating_ip import UnassignFloatingIPOperation
from hetzner_freezer.operations.unassign_primary_ip import UnassignPrimaryIPOperation
from hetzner_freezer.operations.delete_server import DeleteServerOperation
from hetzner_freezer.operations.create_server import CreateServerOperation
from hetzner_freezer.operations.assign_floating_ip import AssignFloatingIPOperation
from hetzner_freezer.operations.attach_network import AttachNetworkOperation

__all__ = [
    'BaseOperation',
    'OperationResult',
    'ActionWaiter',
    'ShutdownServerOperation',
    'CreateImageOperation',
    'UnassignFloatingIPOperation',
    'UnassignPrimaryIPOperation',
    'DeleteServerOperation',
    'CreateServerOperation',
    'AssignFloatingIPOperation',
    'AttachNetworkOperation'
]
