from .base import TransportError, ValidationError, VaultDriveError


class EntityNotFoundError(TransportError):
    """Raised when a Drive file or folder no longer exists."""
    pass


class ConflictError(VaultDriveError):
    """
    Raised when the remote file changed since it was last loaded.

    Args:
        message: Human readable description of the conflict.
        local: The metadata snapshot the caller expected to overwrite.
        remote: The metadata currently stored on Drive.
    """

    def __init__(self, message: str, local=None, remote=None):
        super().__init__(message)
        self.local = local
        self.remote = remote


class UnsupportedValueKind(ValidationError, TypeError):
    """Raised when a query literal is built from a value the query language cannot express."""
    pass
