"""
Hetzner Freezer - Workflow Base

Shared plumbing for the capture, freeze and unfreeze workflows: logging
helpers and running one operation as a tracked, fail-fast step.
"""

from hetzner_freezer.core.config import FreezerConfig
from hetzner_freezer.core.exceptions import OperationFailedError
from hetzner_freezer.operations import ActionWaiter
from hetzner_freezer.orchestration.state import StateTracker


class Workflow:
    """
    Base class for orchestrators.

    Dependencies are passed in, never looked up globally. A waiter is
    built from the config when none is given.
    """

    def __init__(self, client, project: str, config: FreezerConfig = None,
                 logger=None, waiter: ActionWaiter = None, cancel_event=None):
        """
        Args:
            client: ControlPlaneClient
            project: Project name (first segment of the dump path)
            config: Optional freezer configuration
            logger: Optional logger
            waiter: Optional ActionWaiter (built from config if omitted)
            cancel_event: Optional threading.Event that cancels waits
        """
        self.client = client
        self.project = project
        self.config = config or FreezerConfig()
        self.logger = logger
        self.waiter = waiter or ActionWaiter.from_config(
            client, self.config, logger=logger, cancel_event=cancel_event)
        self.state_tracker = StateTracker()

    def _log_info(self, message: str):
        """Log info message."""
        if self.logger:
            self.logger.info(message)

    def _log_debug(self, message: str):
        """Log debug message."""
        if self.logger:
            self.logger.debug(message)

    def _log_warning(self, message: str):
        """Log warning message."""
        if self.logger:
            self.logger.warning(message)

    def _log_error(self, message: str):
        """Log error message."""
        if self.logger:
            self.logger.error(message)

    def _operation(self, operation_class):
        return operation_class(self.client, self.waiter, self.logger)

    def _run_step(self, operation, **kwargs):
        """
        Execute an operation and record it.

        Returns:
            OperationResult of the successful operation

        Raises:
            OperationFailedError: If the operation failed (chained to its cause)
        """
        result = operation.execute(**kwargs)
        self.state_tracker.add_result(result)

        if not result.success:
            raise OperationFailedError(result.operation_name, result.error) from result.exception

        self._log_info(f"  [OK] {result.message}")
        return result

    def _log_summary(self):
        self._log_info(self.state_tracker.get_summary())
        self.state_tracker.log_details(self.logger)
