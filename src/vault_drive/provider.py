"""
Google Drive storage provider.

This module ties credentials, their persistence and the Drive service layer
together behind the operations the password manager uses to browse, open and
save database files.
"""

import logging
import threading
from typing import Optional, Dict, Any, Callable

from .auth.auth import AuthorizationCodeFlow, credentials_from_stored, build_drive_service
from .auth.manager import CredentialStore
from .exceptions import AuthenticationError
from .services.drive import (
    DriveApiService, CloudStorageEntity, FileContent, FileSource,
    SaveAsTarget, SearchResponse
)
from .services.drive.constants import DEFAULT_SEARCH_NAME

logger = logging.getLogger(__name__)


class GoogleDriveProvider:
    """
    Password database storage on a user's Google Drive.

    Usage Examples:
        provider = GoogleDriveProvider(client_config, prompt_for_code=ask_user)
        if provider.authenticate():
            files = provider.search()
            loaded = provider.load_entity(files.results[0])
            metadata = provider.save_entity(files.results[0], new_bytes, loaded.metadata)
    """

    id = "GoogleDriveProvider"
    display_name = "Google Drive"
    supports_search = True

    def __init__(
            self,
            client_config: Dict[str, Any],
            credential_store: Optional[CredentialStore] = None,
            prompt_for_code: Optional[Callable[[str], Optional[str]]] = None,
            redirect_uri: Optional[str] = None
    ):
        """
        Args:
            client_config: OAuth client configuration (contents of credentials.json)
            credential_store: Where refreshed credentials are persisted
            prompt_for_code: Shows the authorization URL to the user and returns
                the code they obtained, or None if they cancelled
            redirect_uri: Redirect URI registered for the OAuth client
        """
        self._client_config = client_config
        self._credential_store = credential_store or CredentialStore()
        self._prompt_for_code = prompt_for_code
        self._redirect_uri = redirect_uri
        self._credentials = None
        self._drive: Optional[DriveApiService] = None
        self._lock = threading.Lock()

    @property
    def is_authenticated(self) -> bool:
        """Whether credentials are held in memory. Does not touch the credential store."""
        return self._credentials is not None

    def authenticate(self) -> bool:
        """
        Make sure credentials are available, asking the user if necessary.

        Returns:
            True once authenticated, False if the user cancelled authorization
        """
        if self.is_authenticated or self._load_stored_credentials():
            return True
        if self._prompt_for_code is None:
            raise AuthenticationError("No stored credentials and no way to prompt for authorization")

        flow = AuthorizationCodeFlow(self._client_config, redirect_uri=self._redirect_uri)
        code = self._prompt_for_code(flow.authorization_url())
        if not code:
            logger.warning("User cancelled authorization. (did not provide code)")
            return False

        try:
            self._credentials = flow.exchange(code, on_refresh=self._credential_store.store)
        except Exception as e:
            logger.error("Authorization code exchange failed: %s", e)
            raise AuthenticationError(f"Authorization code exchange failed: {e}") from e
        logger.info("OAuth2 flow completed successfully")
        return True

    def logout(self) -> None:
        """Drop the credentials in memory and in the credential store."""
        self._credential_store.clear()
        with self._lock:
            self._credentials = None
            self._drive = None

    def _load_stored_credentials(self) -> bool:
        stored = self._credential_store.load()
        if not stored:
            return False
        try:
            self._credentials = credentials_from_stored(stored, on_refresh=self._credential_store.store)
        except ValueError as e:
            logger.warning("Ignoring unusable stored credentials: %s", e)
            return False
        return True

    def _require_drive(self) -> DriveApiService:
        with self._lock:
            if self._drive is None:
                if not self.is_authenticated and not self._load_stored_credentials():
                    raise AuthenticationError("Not authenticated with Google Drive")
                self._drive = DriveApiService(build_drive_service(self._credentials))
            return self._drive

    def search(self, name: str = DEFAULT_SEARCH_NAME) -> SearchResponse:
        """Find files whose name contains ``name``."""
        return self._require_drive().search(name)

    def list(self, parent: Optional[CloudStorageEntity] = None) -> SearchResponse:
        """List the children of ``parent``, or of the drive root."""
        return self._require_drive().list(parent)

    def load_entity(self, entity: CloudStorageEntity) -> FileContent:
        return self._require_drive().load_entity(entity)

    def save_entity(
            self,
            entity: CloudStorageEntity,
            content: bytes,
            previous_metadata: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        return self._require_drive().save_entity(entity, content, previous_metadata)

    def create_entity(self, save_as: SaveAsTarget, content: bytes) -> FileSource:
        return self._require_drive().create_entity(save_as, content)
