"""
Hetzner Freezer - Operations

An operation is one remote mutation followed by a wait on the action it
started. Operations do not undo anything: when one fails, the steps
before it stay done and the workflow stops.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional

from hetzner_freezer.core.exceptions import FreezerError
from hetzner_freezer.utils.logger import operation_timer


@dataclass
class OperationResult:
    """
    Outcome of one operation.

    Attributes:
        operation_name: Display name of the operation
        success: Whether the operation completed
        message: Short human-readable outcome
        data: Resources the operation produced (created server, image, ...)
        error: Failure text, when unsuccessful
        exception: The FreezerError behind the failure
    """
    operation_name: str
    success: bool
    message: str
    data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    exception: Optional[FreezerError] = None

    def __str__(self):
        marker = "[OK]" if self.success else "[X]"
        return f"{marker} {self.operation_name}: {self.message}"


class BaseOperation(ABC):
    """
    Base class for operations.

    Subclasses provide `name` and `_run()`. `_run()` raises FreezerError
    when the remote side refuses or the action fails; execute() turns
    that into an unsuccessful OperationResult. Other exceptions are bugs
    and propagate.

    Example:
        result = ShutdownServerOperation(client, waiter, logger).execute(server_id=42)
        if not result.success:
            print(result.error)
    """

    def __init__(self, client, waiter, logger=None):
        self.client = client
        self.waiter = waiter
        self.logger = logger

    @property
    @abstractmethod
    def name(self) -> str:
        """Display name, also used as the state tracker step name."""

    @abstractmethod
    def _run(self, **kwargs) -> OperationResult:
        """Start the mutation and wait for it."""

    def execute(self, **kwargs) -> OperationResult:
        """Run the operation and report the outcome instead of raising."""
        self._log_debug(f"Executing {self.name}: {kwargs}")

        try:
            with operation_timer(self.logger, self.name):
                return self._run(**kwargs)
        except FreezerError as e:
            if self.logger:
                self.logger.error(f"{self.name} failed: {e}")
            return OperationResult(
                operation_name=self.name,
                success=False,
                message=f"Failed to {self.name.lower()}",
                error=str(e),
                exception=e
            )

    def _success(self, message: str, **data) -> OperationResult:
        return OperationResult(self.name, True, message, data=data or None)

    def _log_debug(self, message: str):
        if self.logger:
            self.logger.debug(message)
