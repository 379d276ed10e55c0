"""Google Drive storage for KeePass password databases."""

from .provider import GoogleDriveProvider
from .services.drive import (
    DriveApiService, CloudStorageEntity, DriveFileMetadata, EntityType,
    FileContent, FileSource, SaveAsTarget, SearchResponse
)
from .exceptions import (
    VaultDriveError, TransportError, AuthenticationError, ValidationError,
    EntityNotFoundError, ConflictError, UnsupportedValueKind
)

__all__ = [
    "GoogleDriveProvider",
    "DriveApiService",
    "CloudStorageEntity",
    "DriveFileMetadata",
    "EntityType",
    "FileContent",
    "FileSource",
    "SaveAsTarget",
    "SearchResponse",
    "VaultDriveError",
    "TransportError",
    "AuthenticationError",
    "ValidationError",
    "EntityNotFoundError",
    "ConflictError",
    "UnsupportedValueKind",
]
