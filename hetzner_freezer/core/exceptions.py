"""
Hetzner Freezer - Custom Exception Classes

This module defines all custom exceptions used in Hetzner Freezer.
Each exception provides a clear error message, with troubleshooting
steps where the operator can act on them.
"""


class FreezerError(Exception):
    """
    Base exception for all Hetzner Freezer errors.

    All custom exceptions inherit from this, making it easy to catch
    any expected failure with a single except clause.
    """
    pass


class RemoteCallError(FreezerError):
    """
    Raised when a control-plane call fails.

    Common causes (API error code):
    - Network or TLS failure (code is None)
    - Invalid or expired API token (unauthorized)
    - Resource locked by another action (locked)
    - Rate limit exceeded (rate_limit_exceeded)
    """

    def __init__(self, operation: str, code: str = None, reason: str = None):
        """
        Args:
            operation: API call that failed (e.g., 'servers.get_by_name')
            code: API error code (e.g., 'not_found'), None for transport errors
            reason: Error message returned by the API, if any
        """
        self.operation = operation
        self.code = code
        self.reason = reason

        if code is None:
            message = f"Call '{operation}' failed"
        else:
            message = f"Call '{operation}' failed: {code}"
        if reason:
            message += f" ({reason})"

        if code == 'unauthorized':
            message += "\n\nFix: check that --token is a valid read/write API token for the project"

        super().__init__(message)


class ActionFailedError(FreezerError):
    """
    Raised when a remote action finishes with a non-transient error.
    """

    def __init__(self, action_id: int, status: str, reason: str):
        """
        Args:
            action_id: ID of the failed action
            status: Final action status (normally 'error')
            reason: Error message reported by the action
        """
        self.action_id = action_id
        self.status = status
        self.reason = reason

        message = f"Action {action_id} status {status}: message: {reason}"
        super().__init__(message)


class ActionTimeoutError(FreezerError):
    """
    Raised when an action does not finish before the wait deadline.

    The action keeps running on the control plane; it is not cancelled.
    """

    def __init__(self, action_id: int, status: str, progress: int, timeout: float):
        self.action_id = action_id
        self.status = status
        self.progress = progress
        self.timeout = timeout

        message = (f"Wait for action {action_id} deadline reached after {timeout:.0f}s, "
                   f"action status {status} ({progress}/100)")
        super().__init__(message)


class ActionCancelledError(FreezerError):
    """
    Raised when the wait for an action is cancelled (e.g., SIGINT).

    The action keeps running on the control plane; it is not cancelled.
    """

    def __init__(self, action_id: int, status: str, progress: int):
        self.action_id = action_id
        self.status = status
        self.progress = progress

        message = (f"Wait for action {action_id} was cancelled, "
                   f"action status {status} ({progress}/100)")
        super().__init__(message)


class ServerNotFoundError(FreezerError):
    """
    Raised when the specified server doesn't exist.
    """

    def __init__(self, server_name: str, project: str):
        """
        Args:
            server_name: Name of the server that wasn't found
            project: Project where we looked
        """
        self.server_name = server_name
        self.project = project

        message = f"Server with name '{server_name}' not found (project: {project})"
        message += "\n\nTroubleshooting:"
        message += "\n  1. Check server name spelling"
        message += "\n  2. Verify the token belongs to the right project"

        super().__init__(message)


class DumpNotFoundError(FreezerError):
    """
    Raised when no usable server dump exists.

    Examples:
    - The server dump directory is empty or missing
    - An explicit --server-dump-id does not exist
    """

    def __init__(self, path: str, dump_id: str = None):
        """
        Args:
            path: Directory that was searched
            dump_id: Requested dump id (None when selecting the latest)
        """
        self.path = path
        self.dump_id = dump_id

        if dump_id:
            message = f"Server dump '{dump_id}' not found at {path}"
        else:
            message = f"No dumps found in {path}"
            message += "\n\nFix: create a dump first by running the 'freeze' command"

        super().__init__(message)


class DumpLoadError(FreezerError):
    """
    Raised when a dump part exists but cannot be read or parsed.
    """

    def __init__(self, part: str, reason: str):
        """
        Args:
            part: Dump part name (e.g., 'server', 'sshKeys')
            reason: Why it failed
        """
        self.part = part
        self.reason = reason

        message = f"Failed to load '{part}': {reason}"
        super().__init__(message)


class OperationFailedError(FreezerError):
    """
    Raised when a workflow step fails.
    """

    def __init__(self, operation_name: str, reason: str):
        """
        Args:
            operation_name: Name of the operation (e.g., 'Shutdown Server')
            reason: Why it failed
        """
        self.operation_name = operation_name
        self.reason = reason

        message = f"Operation '{operation_name}' failed: {reason}"
        super().__init__(message)


class DumpStoreError(FreezerError):
    """
    Raised when a dump cannot be written to disk.
    """

    def __init__(self, target: str, reason: str):
        """
        Args:
            target: Dump part name or directory that failed
            reason: Why it failed
        """
        self.target = target
        self.reason = reason

        message = f"Failed to store '{target}': {reason}"
        super().__init__(message)
