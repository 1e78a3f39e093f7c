"""
Hetzner Freezer - Action Waiter

Polls a control-plane action until it succeeds, fails, runs past its
deadline or the wait is cancelled.

Only the wait is retried here. A failing `get_action` call is raised
immediately; transport retries are not this layer's job.
"""

import threading
import time

from hetzner_freezer.core.exceptions import (
    ActionCancelledError,
    ActionFailedError,
    ActionTimeoutError
)
from hetzner_freezer.utils.logger import log_state_change

ACTION_RUNNING = 'running'
ACTION_SUCCESS = 'success'
ACTION_ERROR = 'error'


class ActionWaiter:
    """
    Waits for remote actions to reach a terminal status.

    Three things can end a wait: the action finishing, the deadline
    passing, or the cancel event being set (first SIGINT/SIGTERM).

    Errors whose message contains `transient_error_marker` are the
    control plane's way of saying "try again"; polling continues.

    Example:
        waiter = ActionWaiter(client, logger, cancel_event=cancel_event)
        action = client.shutdown_server(server['id'])
        waiter.wait(action)
    """

    def __init__(self, client, logger=None, poll_interval: float = 5,
                 timeout: float = 600, transient_error_marker: str = 'Unknown error',
                 cancel_event: threading.Event = None, clock=time.monotonic):
        """
        Args:
            client: ControlPlaneClient used to fetch action status
            logger: Optional logger for progress output
            poll_interval: Seconds between polls
            timeout: Seconds before giving up on one action
            transient_error_marker: Substring marking a retryable action error
            cancel_event: Event that cancels the wait when set
            clock: Monotonic clock (injectable for tests)
        """
        self.client = client
        self.logger = logger
        self.poll_interval = poll_interval
        self.timeout = timeout
        self.transient_error_marker = transient_error_marker
        self.cancel_event = cancel_event or threading.Event()
        self._clock = clock

    @classmethod
    def from_config(cls, client, config, logger=None, cancel_event=None):
        """Build a waiter from a FreezerConfig."""
        return cls(
            client,
            logger=logger,
            poll_interval=config.poll_interval,
            timeout=config.action_timeout,
            transient_error_marker=config.transient_error_marker,
            cancel_event=cancel_event
        )

    def _log_progress(self, action: dict):
        if self.logger:
            self.logger.info(f"    progress {action.get('progress', 0)}/100")

    def wait(self, action: dict) -> dict:
        """
        Block until `action` reaches a terminal status.

        Args:
            action: Action dict as returned by the client

        Returns:
            dict: The final action (status 'success')

        Raises:
            ActionFailedError: Action ended with a non-transient error
            ActionTimeoutError: Deadline passed first
            ActionCancelledError: Cancel event was set first
            RemoteCallError: Fetching the action status failed
        """
        if action.get('status') == ACTION_SUCCESS:
            self._log_progress(dict(action, progress=100))
            return action

        action_id = action['id']
        last = action
        deadline = self._clock() + self.timeout

        while True:
            remaining = deadline - self._clock()
            if remaining <= 0:
                raise ActionTimeoutError(action_id, last.get('status'),
                                         last.get('progress', 0), self.timeout)

            if remaining < self.poll_interval:
                # The deadline comes before the next tick
                if self.cancel_event.wait(remaining):
                    raise ActionCancelledError(action_id, last.get('status'),
                                               last.get('progress', 0))
                continue

            if self.cancel_event.wait(self.poll_interval):
                raise ActionCancelledError(action_id, last.get('status'),
                                           last.get('progress', 0))

            current = self.client.get_action(action_id)
            if current.get('status') != last.get('status'):
                log_state_change(self.logger, f"action {action_id}",
                                 last.get('status'), current.get('status'))
            last = current

            status = current.get('status')
            if status == ACTION_SUCCESS:
                self._log_progress(dict(current, progress=100))
                return current

            if status == ACTION_ERROR:
                message = _error_message(current)
                if self.transient_error_marker and self.transient_error_marker in message:
                    if self.logger:
                        self.logger.debug(f"Action {action_id} reported transient error: {message}")
                    continue
                raise ActionFailedError(action_id, status, message)

            self._log_progress(current)


def _error_message(action: dict) -> str:
    error = action.get('error') or {}
    return error.get('message') or ''
