"""
# Error Taxonomy

All failures raised by `mongo_membership` derive from `ReplicaSetError`, so a
scheduler can catch one type around a reconciliation cycle. Driver exceptions are
always chained with `raise ... from exc`.

| Error | Raised when |
|-------|-------------|
| `ClusterConnectionError` | A session cannot be established or authenticated |
| `TLSLoadError` | Certificate material cannot be read |
| `AdminCommandError` | The backend rejects an admin command |
| `ReconfigureError` | The backend rejects `replSetReconfig` (stale version, quorum, change size) |
| `InitializationTimeoutError` | Bootstrap reconfigure retries are exhausted |
"""

from typing import Optional


class ReplicaSetError(Exception):
    """Base class for replica set membership errors."""


class ClusterConnectionError(ReplicaSetError):
    """A session to a cluster endpoint could not be opened."""

    def __init__(self, address: str, message: str):
        self.address = address
        super().__init__(f"Could not connect to {address}: {message}")


class TLSLoadError(ReplicaSetError):
    """TLS certificate material could not be read."""

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"Failed to load TLS material from {path}: {message}")


class AdminCommandError(ReplicaSetError):
    """
    The backend rejected an admin command.

    Attributes:
        command (str): Name of the rejected command, e.g. `replSetGetConfig`.
        code (Optional[int]): Server error code, when the server supplied one.
        code_name (Optional[str]): Server error code name, e.g. `NotYetInitialized`.
    """

    def __init__(
        self,
        command: str,
        message: str,
        code: Optional[int] = None,
        code_name: Optional[str] = None,
    ):
        self.command = command
        self.code = code
        self.code_name = code_name
        detail = f" ({code_name})" if code_name else ""
        super().__init__(f"{command} failed{detail}: {message}")


class ReconfigureError(AdminCommandError):
    """`replSetReconfig` was rejected; the remote configuration is unchanged."""


class InitializationTimeoutError(ReplicaSetError):
    """
    The freshly initiated replica set never accepted its corrected configuration.

    Attributes:
        attempts (int): Number of reconfigure attempts made.
        last_error (Exception): The error raised by the final attempt.
    """

    def __init__(self, attempts: int, last_error: Exception):
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"Replica set did not accept reconfiguration after {attempts} attempts: {last_error}")
