"""Utils package."""

from hetzner_freezer.utils.logger import setup_logging
from hetzner_freezer.utils.progress import (
    ProgressTracker,
    SimpleProgressTracker,
    create_progress_tracker
)
from hetzner_freezer.utils.signals import setup_signal_handler

__all__ = [
    'setup_logging',
    'ProgressTracker',
    'SimpleProgressTracker',
    'create_progress_tracker',
    'setup_signal_handler',
]
