from .base import VaultDriveError, TransportError, AuthenticationError, ValidationError
from .drive import EntityNotFoundError, ConflictError, UnsupportedValueKind

__all__ = [
    "VaultDriveError",
    "TransportError",
    "AuthenticationError",
    "ValidationError",
    "EntityNotFoundError",
    "ConflictError",
    "UnsupportedValueKind",
]
