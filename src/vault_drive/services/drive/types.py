from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict, Any
from dataclasses import dataclass, field

from ...utils.datetime import parse_datetime_field
from .constants import METADATA_FIELDS


class EntityType(Enum):
    FILE = "file"
    DIRECTORY = "directory"


@dataclass(frozen=True)
class CloudStorageEntity:
    """
    An addressable file or folder on Drive.
    Args:
        id: The Drive file id.
        name: The file or folder name.
        type: Whether the entity is a file or a directory.
    """
    id: str
    name: Optional[str] = None
    type: EntityType = EntityType.FILE

    def is_directory(self) -> bool:
        return self.type == EntityType.DIRECTORY

    def __str__(self):
        prefix = "[Folder] " if self.is_directory() else ""
        return f"{prefix}{self.name}"


@dataclass
class SearchResponse:
    """
    A single page of search or listing results.
    Args:
        results: The entities found.
        has_more: Whether Drive reported further pages beyond this one.
    """
    results: List[CloudStorageEntity] = field(default_factory=list)
    has_more: bool = False

    def __len__(self):
        return len(self.results)

    def __iter__(self):
        return iter(self.results)


@dataclass(frozen=True)
class DriveFileMetadata:
    """
    Snapshot of the identity relevant fields of a Drive file.

    The ``version`` token changes on every content change and is what a save
    compares against before overwriting the remote file.
    Args:
        file_id: The Drive file id.
        version: The opaque version token assigned by Drive.
        name: The file name.
        modified_time: When the file content was last modified.
        md5_checksum: MD5 checksum of the file content.
        size: The size of the file in bytes.
    """
    FIELDS = METADATA_FIELDS

    file_id: str
    version: str
    name: Optional[str] = None
    modified_time: Optional[datetime] = None
    md5_checksum: Optional[str] = None
    size: Optional[int] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "DriveFileMetadata":
        """
        Parses a Drive ``files`` resource.
        Args:
            data: The resource as returned by the Drive API.
        Returns:
            The parsed snapshot.
        Raises:
            ValueError: If the resource lacks an id or a version.
        """
        if not data.get("id") or data.get("version") is None:
            raise ValueError(f"Drive response is missing id or version: {sorted(data)}")
        size = data.get("size")
        return cls(
            file_id=data["id"],
            version=str(data["version"]),
            name=data.get("name"),
            modified_time=parse_datetime_field(data.get("modifiedTime")),
            md5_checksum=data.get("md5Checksum"),
            size=int(size) if size is not None else None,
        )

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "DriveFileMetadata":
        """Restores a snapshot persisted with ``to_json``."""
        return cls.from_api(data)

    def to_json(self) -> Dict[str, Any]:
        """
        Converts the snapshot to its persisted representation.
        Returns:
            A dictionary using Drive's field names.
        """
        result = {"id": self.file_id, "version": self.version}
        if self.name is not None:
            result["name"] = self.name
        if self.modified_time:
            result["modifiedTime"] = self.modified_time.isoformat().replace("+00:00", "Z")
        if self.md5_checksum:
            result["md5Checksum"] = self.md5_checksum
        if self.size is not None:
            result["size"] = str(self.size)
        return result

    def __str__(self):
        return f"{self.name} (version {self.version})"


@dataclass
class FileContent:
    """
    Downloaded file bytes together with the persisted metadata map.
    Args:
        content: The raw file bytes.
        metadata: Map to store alongside the local copy and pass back on save.
    """
    content: bytes
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __repr__(self):
        return f"FileContent({len(self.content)} bytes, metadata_keys={sorted(self.metadata)!r})"


@dataclass(frozen=True)
class SaveAsTarget:
    """
    Where to create a new file.
    Args:
        file_name: Name of the file to create.
        parent: Folder to create the file in; Drive's root folder when None.
    """
    file_name: str
    parent: Optional[CloudStorageEntity] = None


@dataclass
class FileSource:
    """
    A newly created Drive file, ready to be opened by the application.
    Args:
        uuid: Locally generated identifier for this file source.
        entity: The created Drive entity.
        initial_content: The uploaded bytes and their metadata map.
    """
    uuid: str
    entity: CloudStorageEntity
    initial_content: FileContent

    def __str__(self):
        return f"Google Drive: {self.entity.name}"
