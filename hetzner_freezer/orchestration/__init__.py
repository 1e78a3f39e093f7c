"""
Hetzner Freezer - Orchestration Module

Coordinates the capture, freeze and unfreeze workflows.
"""

from hetzner_freezer.orchestration.capture import SnapshotCapturer
from hetzner_freezer.orchestration.freeze import FreezeOrchestrator
from hetzner_freezer.orchestration.state import StateTracker, StepState
from hetzner_freezer.orchestration.unfreeze import UnfreezeOrchestrator, build_user_data

__all__ = [
    'SnapshotCapturer',
    'FreezeOrchestrator',
    'UnfreezeOrchestrator',
    'StateTracker',
    'StepState',
    'build_user_data'
]
