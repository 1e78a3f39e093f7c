"""
Hetzner Freezer - Cancellation Signal

The first SIGINT/SIGTERM sets a shared event that ends any action wait
in progress; a second signal aborts immediately.
"""

import signal
import threading


def setup_signal_handler(logger=None) -> threading.Event:
    """
    Install SIGINT/SIGTERM handlers and return the cancellation event.

    Actions already submitted to the control plane keep running there;
    only the local wait is abandoned.

    Args:
        logger: Optional logger for a warning on the first signal

    Returns:
        threading.Event: Set once a signal has been received
    """
    cancel_event = threading.Event()

    def _handle_signal(signum, _frame):
        if cancel_event.is_set():
            raise KeyboardInterrupt
        if logger:
            logger.warning(f"Received signal {signum}; cancelling after current call")
        cancel_event.set()

    for sig in (signal.SIGINT, signal.SIGTERM):
        signal.signal(sig, _handle_signal)

    return cancel_event
