"""
Hetzner Freezer - Workflow State Tracking

Records the steps of a freeze/unfreeze run in the order they ran.
Nothing is undone on failure, so the record is what tells the operator
how far a failed run got.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List


@dataclass
class StepState:
    """
    State of a single executed step.
    """
    step_name: str
    success: bool
    message: str
    data: Dict[str, Any] = None
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())


class StateTracker:
    """
    Tracks the steps of one workflow run.

    Example:
        tracker = StateTracker()

        tracker.add_step("Shutdown Server", success=True, message="Server shut down")
        tracker.add_step("Create Snapshot", success=False, message="Failed to create snapshot")

        tracker.last_failed().step_name
        'Create Snapshot'
    """

    def __init__(self):
        """Initialize empty state tracker."""
        self.steps: List[StepState] = []
        self.workflow_start_time = datetime.now()

    def add_step(self, step_name: str, success: bool,
                 message: str, data: Dict[str, Any] = None):
        """
        Record a step.

        Args:
            step_name: Name of the step
            success: Whether it succeeded
            message: Result message
            data: Resources the step produced, if any
        """
        self.steps.append(StepState(
            step_name=step_name,
            success=success,
            message=message,
            data=data
        ))

    def add_result(self, result):
        """Record an OperationResult."""
        self.add_step(result.operation_name, result.success,
                      result.message if result.success else result.error,
                      result.data)

    def get_successful_steps(self) -> List[StepState]:
        """Get only successful steps."""
        return [step for step in self.steps if step.success]

    def get_failed_steps(self) -> List[StepState]:
        """Get only failed steps."""
        return [step for step in self.steps if not step.success]

    def last_failed(self):
        failed = self.get_failed_steps()
        return failed[-1] if failed else None

    def step_names(self) -> List[str]:
        return [step.step_name for step in self.steps]

    def all_succeeded(self) -> bool:
        """Check if all steps succeeded."""
        return all(step.success for step in self.steps)

    def get_summary(self) -> str:
        """Get summary of steps."""
        total = len(self.steps)
        successful = len(self.get_successful_steps())
        failed = len(self.get_failed_steps())

        duration = (datetime.now() - self.workflow_start_time).total_seconds()

        summary = f"Steps: {successful}/{total} succeeded"
        if failed > 0:
            summary += f", {failed} failed"
        summary += f" (took {duration:.1f}s)"

        return summary

    def log_details(self, logger):
        """Log every recorded step, numbered, at debug level."""
        if not logger:
            return
        for i, step in enumerate(self.steps, 1):
            status = "[OK]" if step.success else "[X]"
            logger.debug(f"  {i}. {status} {step.step_name}: {step.message}")
