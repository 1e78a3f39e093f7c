"""
Hetzner Freezer - Progress Tracking

Step progress for the freeze and unfreeze workflows.

The bar goes to stderr, away from the command result on stdout.
"""

import sys

from tqdm import tqdm

BAR_FORMAT = '{desc}: {percentage:3.0f}%|{bar}| {n_fmt}/{total_fmt} [{elapsed}]'


class SimpleProgressTracker:
    """
    Counts workflow steps without drawing anything.

    Used with --no-progress and in tests. ProgressTracker adds the bar.

    Example:
        with SimpleProgressTracker(total_steps=6, desc="Freeze Server") as tracker:
            tracker.update_step("Shutting down server")
            tracker.advance()
    """

    def __init__(self, total_steps: int = 0, desc: str = "Operation"):
        self.total_steps = total_steps
        self.desc = desc
        self.current_step = 0
        self.current_step_name = ""

    def start(self):
        """Reset the counter."""
        self.current_step = 0

    def update_step(self, step_name: str):
        """Name the step that is running now."""
        self.current_step_name = step_name

    def advance(self, steps: int = 1):
        """Mark one or more steps as done."""
        self.current_step += steps

    def finish(self):
        pass

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.finish()
        return False


class ProgressTracker(SimpleProgressTracker):
    """
    Step progress drawn as a tqdm bar.

    The bar shows completed steps out of the total; the running step's
    name is appended to the description.
    """

    def __init__(self, total_steps: int, desc: str = "Operation", file=None):
        """
        Args:
            total_steps: Number of steps in the workflow
            desc: Workflow description (bar prefix)
            file: Stream for the bar (default: stderr)
        """
        super().__init__(total_steps, desc)
        self.file = file or sys.stderr
        self.bar = None

    def start(self):
        super().start()
        self.bar = tqdm(
            total=self.total_steps,
            desc=self.desc,
            bar_format=BAR_FORMAT,
            ncols=80,
            file=self.file
        )

    def update_step(self, step_name: str):
        super().update_step(step_name)
        if self.bar:
            self.bar.set_description(f"{self.desc} - {step_name}")

    def advance(self, steps: int = 1):
        super().advance(steps)
        if self.bar:
            self.bar.update(steps)

    def finish(self):
        # Safe to call twice
        if self.bar:
            self.bar.close()
            self.bar = None


def create_progress_tracker(total_steps: int, desc: str = "Operation",
                            enabled: bool = True) -> SimpleProgressTracker:
    """
    Create the tracker for a workflow.

    Args:
        total_steps: Total number of steps
        desc: Description of the workflow
        enabled: Draw a progress bar (config.show_progress)

    Returns:
        ProgressTracker, or SimpleProgressTracker when disabled
    """
    if not enabled:
        return SimpleProgressTracker(total_steps, desc)
    return ProgressTracker(total_steps, desc)
