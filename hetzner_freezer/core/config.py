"""
Hetzner Freezer - Configuration Management

This module manages configuration options for freeze/unfreeze operations.
"""

from dataclasses import dataclass
from typing import Optional

# Version for the User-Agent header
VERSION = '1.0.0'

DEFAULT_API_ENDPOINT = 'https://api.hetzner.cloud/v1'
DEFAULT_OUTPUT_DIR = 'output'


@dataclass
class FreezerConfig:
    """
    Configuration for freeze, unfreeze and dump operations.

    This stores all options that can be customized for a run.
    Makes it easy to pass configuration around without many parameters.

    Example:
        config = FreezerConfig(
            output_dir='/var/lib/freezer',
            action_timeout=900
        )
    """

    # Dump storage
    output_dir: str = DEFAULT_OUTPUT_DIR

    # Action polling (in seconds)
    poll_interval: float = 5
    action_timeout: float = 600  # 10 minutes

    # Error messages containing this marker are retried while polling
    transient_error_marker: str = 'Unknown error'

    # API settings
    api_endpoint: str = DEFAULT_API_ENDPOINT
    request_timeout: int = 30

    # Logging settings
    log_level: str = 'INFO'
    log_file: Optional[str] = None
    # Keeps stdout free for a machine-readable result
    log_to_stderr: bool = False

    # Behavior settings
    show_progress: bool = True


def create_config(**kwargs) -> FreezerConfig:
    """
    Create a configuration with custom options.

    Args:
        **kwargs: Configuration options (any field from FreezerConfig)

    Returns:
        FreezerConfig: Configuration object

    Example:
        config = create_config(
            output_dir='dumps',
            log_level='DEBUG'
        )
    """
    return FreezerConfig(**kwargs)
