import io
import uuid
from typing import Optional, Any, Dict, Callable
import logging

from google.auth.exceptions import RefreshError
from googleapiclient.errors import HttpError
from googleapiclient.http import MediaIoBaseDownload, MediaIoBaseUpload

from ...exceptions import (
    VaultDriveError, TransportError, AuthenticationError,
    EntityNotFoundError, ConflictError
)
from ...utils.log_sanitizer import sanitize_for_logging
from .types import (
    CloudStorageEntity, DriveFileMetadata, EntityType,
    FileContent, FileSource, SaveAsTarget, SearchResponse
)
from .query import Term, name_contains, in_parents
from . import utils
from .constants import (
    DEFAULT_SEARCH_NAME, ROOT_FOLDER_ID, LIST_FIELDS,
    UPLOAD_MIME_TYPE
)

logger = logging.getLogger(__name__)


def _translate_error(error: Exception, action: str) -> VaultDriveError:
    """Maps a failure of the Drive client library onto the package's error taxonomy."""
    if isinstance(error, HttpError):
        status = error.resp.status
        if status in (401, 403):
            return AuthenticationError(f"Permission denied {action}: {error}")
        if status == 404:
            return EntityNotFoundError(f"Not found while {action}: {error}")
        return TransportError(f"Drive API error {action}: {error}")
    if isinstance(error, RefreshError):
        return AuthenticationError(f"Could not refresh credentials {action}: {error}")
    logger.error("Unexpected error %s: %s", action, error)
    return TransportError(f"Unexpected error {action}: {error}")


class DriveApiService:
    """
    Service layer for storing password databases on Google Drive.

    Every public method performs one independent request/response exchange.
    Failures reaching Drive surface as ``TransportError`` (or one of its
    subclasses) and are never retried here.

    Methods may be called from several threads at once when ``service`` was
    created by ``build_drive_service``, which gives every request its own
    HTTP connection.
    """

    def __init__(self, service: Any, downloader_factory: Callable = MediaIoBaseDownload):
        """
        Initialize Drive service.

        Args:
            service: The Drive v3 API service instance
            downloader_factory: Factory for chunked media downloads
        """
        self._service = service
        self._downloader_factory = downloader_factory

    # Search Operations
    def search_files(self, term: Term) -> SearchResponse:
        """
        Runs a Drive search and maps the first page of results.

        Args:
            term: The query to run.

        Returns:
            A SearchResponse; ``has_more`` is set when Drive reported further pages.
        """
        query = term.to_query()
        logger.debug("Query: %s", sanitize_for_logging(query=query)['query'])

        try:
            result = self._service.files().list(q=query, fields=LIST_FIELDS).execute()
            files_data = result.get('files', [])
            response = SearchResponse(
                results=[utils.from_google_file(file_data) for file_data in files_data],
                has_more=result.get('nextPageToken') is not None,
            )
        except Exception as e:
            raise _translate_error(e, "searching files") from e

        logger.info(
            "Found %d entries (incomplete search: %s, more pages: %s)",
            len(response), result.get('incompleteSearch', False), response.has_more
        )
        return response

    def search(self, name: str = DEFAULT_SEARCH_NAME) -> SearchResponse:
        """
        Finds files whose name contains ``name``.

        Args:
            name: Name fragment to look for (default: the KeePass extension).

        Returns:
            The matching entities.
        """
        return self.search_files(name_contains(name))

    def list(self, parent: Optional[CloudStorageEntity] = None) -> SearchResponse:
        """
        Lists the direct children of a folder.

        Args:
            parent: The folder to list; the root of the drive when None.

        Returns:
            The folder's children.
        """
        parent_id = parent.id if parent is not None else ROOT_FOLDER_ID
        return self.search_files(in_parents(parent_id))

    # File Operations
    def get_metadata(self, file_id: str) -> DriveFileMetadata:
        """
        Fetches the current metadata snapshot of a file.

        Args:
            file_id: The Drive file id.

        Returns:
            The file's metadata, including its current version token.
        """
        try:
            file_data = self._service.files().get(fileId=file_id, fields=DriveFileMetadata.FIELDS).execute()
            return DriveFileMetadata.from_api(file_data)
        except Exception as e:
            raise _translate_error(e, f"fetching metadata of {file_id}") from e

    def load_entity(self, entity: CloudStorageEntity) -> FileContent:
        """
        Downloads a file together with the metadata needed for a later save.

        Args:
            entity: The file to download.

        Returns:
            The file bytes and the metadata map to keep alongside them.
        """
        sanitized = sanitize_for_logging(file_id=entity.id, file_name=entity.name)
        logger.info("Loading file %s %s", sanitized['file_id'], sanitized['file_name'])

        metadata = self.get_metadata(entity.id)
        try:
            request = self._service.files().get_media(fileId=entity.id)
            content = utils.download_media(request, self._downloader_factory)
        except Exception as e:
            raise _translate_error(e, f"downloading {entity.id}") from e

        logger.info("Loaded %d bytes at version %s", len(content), metadata.version)
        return FileContent(content, utils.metadata_map_for(metadata))

    def save_entity(
            self,
            entity: CloudStorageEntity,
            content: bytes,
            previous_metadata: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Overwrites a file unless it changed remotely since it was last read.

        When ``previous_metadata`` is given, the remote version token is
        compared with the stored one first and nothing is uploaded on a
        mismatch. A write landing between that check and the upload is not
        detected.

        Args:
            entity: The file to overwrite.
            content: The new file content.
            previous_metadata: The metadata map returned by the last load or
                save, or None for a first save.

        Returns:
            The metadata map describing the newly saved version.

        Raises:
            ConflictError: If the remote version differs from the stored one.
            ValidationError: If ``previous_metadata`` holds no valid Drive entry.
            EntityNotFoundError: If the file no longer exists on Drive.
        """
        sanitized = sanitize_for_logging(file_id=entity.id, file_name=entity.name)
        logger.info("Saving %d bytes to %s %s", len(content), sanitized['file_id'], sanitized['file_name'])

        expected = utils.metadata_from_map(previous_metadata)
        if expected is not None:
            remote = self.get_metadata(entity.id)
            if expected.version != remote.version:
                logger.warning(
                    "Refusing to save %s: expected version %s but remote is at %s",
                    sanitized['file_id'], expected.version, remote.version
                )
                raise ConflictError(
                    "Version differs from last loaded version. "
                    f"Local: {expected.to_json()} Remote: {remote.to_json()}",
                    local=expected,
                    remote=remote,
                )
        else:
            logger.info("No previous metadata, skipping version check")

        try:
            updated_file = self._service.files().update(
                fileId=entity.id,
                body={},
                media_body=self._media_for(content),
                fields=DriveFileMetadata.FIELDS
            ).execute()
            metadata = DriveFileMetadata.from_api(updated_file)
        except Exception as e:
            raise _translate_error(e, f"saving {entity.id}") from e

        logger.info("Successfully saved file, now at version %s", metadata.version)
        return utils.metadata_map_for(metadata)

    def create_entity(self, save_as: SaveAsTarget, content: bytes) -> FileSource:
        """
        Uploads a new file.

        Args:
            save_as: Name and optional parent folder of the new file.
            content: The file content.

        Returns:
            A FileSource for the created file with the uploaded bytes cached.
        """
        body = {'name': save_as.file_name}
        if save_as.parent is not None:
            body['parents'] = [save_as.parent.id]

        sanitized = sanitize_for_logging(
            file_name=save_as.file_name,
            parent_id=save_as.parent.id if save_as.parent else None
        )
        logger.info(
            "Creating %s in %s, %d bytes",
            sanitized['file_name'], sanitized['parent_id'] or ROOT_FOLDER_ID, len(content)
        )

        try:
            new_file = self._service.files().create(
                body=body,
                media_body=self._media_for(content),
                fields=DriveFileMetadata.FIELDS
            ).execute()
            metadata = DriveFileMetadata.from_api(new_file)
        except Exception as e:
            raise _translate_error(e, "creating file") from e

        entity = CloudStorageEntity(id=metadata.file_id, name=metadata.name, type=EntityType.FILE)
        logger.info("File created successfully with ID: %s", sanitize_for_logging(file_id=entity.id)['file_id'])
        return FileSource(
            uuid=str(uuid.uuid4()),
            entity=entity,
            initial_content=FileContent(content, utils.metadata_map_for(metadata)),
        )

    @staticmethod
    def _media_for(content: bytes) -> MediaIoBaseUpload:
        return MediaIoBaseUpload(io.BytesIO(content), mimetype=UPLOAD_MIME_TYPE, resumable=False)
