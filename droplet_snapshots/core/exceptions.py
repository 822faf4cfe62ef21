"""
Core exception classes for Droplet Snapshots.
"""


class DropletSnapshotError(Exception):
    """Base exception for all Droplet Snapshots errors."""
    
    def __init__(self, message: str, details: str = None):
        super().__init__(message)
        self.message = message
        self.details = details


class AuthenticationError(DropletSnapshotError):
    """Raised when the API rejects the bearer token."""
    pass


class ConfigurationError(DropletSnapshotError):
    """Raised when configuration is invalid or missing."""
    pass


class ServiceError(DropletSnapshotError):
    """Raised when a DigitalOcean API request fails."""
    pass


class DropletNotFoundError(ServiceError):
    """Raised when the target droplet is not in the droplet listing."""

    def __init__(self, droplet_name: str):
        super().__init__(f"Droplet {droplet_name} not found")
        self.droplet_name = droplet_name


class ActionFailedError(ServiceError):
    """Raised when a lifecycle step fails and the cycle is set to halt on failure."""

    def __init__(self, action_type: str, report=None):
        super().__init__(f"Action {action_type} did not complete, snapshot cycle halted")
        self.action_type = action_type
        self.report = report
