import io
from typing import Optional, Dict, Any, Callable
import logging

from ...exceptions import ValidationError
from .types import CloudStorageEntity, DriveFileMetadata, EntityType
from .constants import FOLDER_MIME_TYPE, METADATA_KEY, DOWNLOAD_CHUNK_SIZE

logger = logging.getLogger(__name__)


def from_google_file(file_data: Dict[str, Any]) -> CloudStorageEntity:
    """
    Create a CloudStorageEntity from a Drive ``files`` resource.

    Args:
        file_data: Entry from a ``files().list`` response

    Returns:
        The entity; a directory when the MIME type is Drive's folder type
    """
    entity_type = EntityType.DIRECTORY if file_data.get("mimeType") == FOLDER_MIME_TYPE else EntityType.FILE
    return CloudStorageEntity(
        id=file_data["id"],
        name=file_data.get("name"),
        type=entity_type,
    )


def metadata_map_for(metadata: DriveFileMetadata) -> Dict[str, Any]:
    """Wraps a metadata snapshot in the map persisted next to the local file."""
    return {METADATA_KEY: metadata.to_json()}


def metadata_from_map(metadata_map: Optional[Dict[str, Any]]) -> Optional[DriveFileMetadata]:
    """
    Narrow a persisted metadata map to the Drive metadata snapshot.

    Keys belonging to other storage providers are ignored.

    Args:
        metadata_map: The map stored alongside the local copy, or None

    Returns:
        The snapshot, or None when no map was given

    Raises:
        ValidationError: If the map holds no Drive entry or the entry is malformed
    """
    if metadata_map is None:
        return None
    if METADATA_KEY not in metadata_map:
        raise ValidationError(f"Stored metadata has no {METADATA_KEY} entry")

    payload = metadata_map[METADATA_KEY]
    if not isinstance(payload, dict):
        raise ValidationError(f"Stored Drive metadata must be a mapping, got {type(payload).__name__}")
    try:
        return DriveFileMetadata.from_json(payload)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"Invalid stored Drive metadata: {e}") from e


def download_media(request: Any, downloader_factory: Callable, chunk_size: int = DOWNLOAD_CHUNK_SIZE) -> bytes:
    """
    Drain a media download into a single buffer.

    Chunks are appended in the order the downloader delivers them and the
    download is polled until it reports completion.

    Args:
        request: The ``files().get_media`` request
        downloader_factory: Callable with the ``MediaIoBaseDownload`` signature
        chunk_size: Bytes requested per chunk

    Returns:
        The complete file content
    """
    buffer = io.BytesIO()
    downloader = downloader_factory(buffer, request, chunksize=chunk_size)
    done = False
    chunks = 0
    while not done:
        status, done = downloader.next_chunk()
        chunks += 1
        if status:
            logger.debug("Download progress: %d%%", int(status.progress() * 100))
    logger.debug("Downloaded %d bytes in %d chunks", buffer.tell(), chunks)
    return buffer.getvalue()
