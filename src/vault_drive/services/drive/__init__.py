"""Google Drive storage for password databases."""

from .api_service import DriveApiService
from .types import (
    CloudStorageEntity, DriveFileMetadata, EntityType,
    FileContent, FileSource, SaveAsTarget, SearchResponse
)
from .query import Field, Literal, Operator, Term, to_query, name_contains, in_parents
from .utils import metadata_map_for, metadata_from_map
from .constants import METADATA_KEY

__all__ = [
    # Service layer
    "DriveApiService",

    # Data types
    "CloudStorageEntity",
    "DriveFileMetadata",
    "EntityType",
    "FileContent",
    "FileSource",
    "SaveAsTarget",
    "SearchResponse",

    # Query builder
    "Field",
    "Literal",
    "Operator",
    "Term",
    "to_query",
    "name_contains",
    "in_parents",

    # Persisted metadata map
    "METADATA_KEY",
    "metadata_map_for",
    "metadata_from_map",
]
