import json
import os
import logging
from typing import Optional, Callable, Dict, Any

from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import Flow
import google_auth_httplib2
import httplib2
from googleapiclient.discovery import build
from googleapiclient.http import HttpRequest

logger = logging.getLogger(__name__)

SCOPES = [
    "https://www.googleapis.com/auth/drive",
]

# Allow environment variable override for the redirect URI registered with Google
REDIRECT_URI = os.getenv("VAULT_DRIVE_REDIRECT_URI", "http://localhost:8080/")

RefreshCallback = Callable[[str], None]


class NotifyingCredentials(Credentials):
    """
    OAuth2 user credentials that report every token refresh.

    The callback receives the credentials serialized as JSON so the caller can
    persist them; how they are stored is up to the caller.
    """

    def __init__(self, *args, on_refresh: Optional[RefreshCallback] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self._on_refresh = on_refresh

    def set_refresh_callback(self, on_refresh: Optional[RefreshCallback]) -> None:
        self._on_refresh = on_refresh

    def refresh(self, request):
        super().refresh(request)
        logger.debug("Received new credentials from oauth.")
        self.notify_refreshed()

    def notify_refreshed(self) -> None:
        """Passes the current credentials to the refresh callback, if any."""
        if self._on_refresh is not None:
            self._on_refresh(self.to_json())


def credentials_from_stored(
        stored: str,
        on_refresh: Optional[RefreshCallback] = None,
        scopes: list = None
) -> NotifyingCredentials:
    """
    Rebuild credentials from the JSON blob persisted by a refresh callback.

    Args:
        stored: Credentials JSON as produced by ``Credentials.to_json``
        on_refresh: Called with the new JSON whenever the token is refreshed
        scopes: List of OAuth scopes

    Returns:
        NotifyingCredentials instance

    Raises:
        ValueError: If the stored data is not valid credentials JSON
    """
    info = json.loads(stored)
    credentials = NotifyingCredentials.from_authorized_user_info(info, scopes or SCOPES)
    credentials.set_refresh_callback(on_refresh)
    return credentials


class AuthorizationCodeFlow:
    """
    OAuth2 authorization-code flow for a single sign-in attempt.

    The same instance must produce the authorization URL and exchange the
    code, since it carries the PKCE verifier between the two steps.

    Usage:
        flow = AuthorizationCodeFlow(client_config)
        url = flow.authorization_url()
        code = ask_user_to_visit(url)
        credentials = flow.exchange(code, on_refresh=store.store)
    """

    def __init__(self, client_config: Dict[str, Any], redirect_uri: str = None, scopes: list = None):
        """
        Args:
            client_config: OAuth client configuration (contents of credentials.json)
            redirect_uri: Redirect URI registered for the client
            scopes: List of scopes to request
        """
        self._flow = Flow.from_client_config(
            client_config,
            scopes=scopes or SCOPES,
            redirect_uri=redirect_uri or REDIRECT_URI,
        )

    def authorization_url(self) -> str:
        """Returns the URL the user has to open to grant access."""
        url, _ = self._flow.authorization_url(access_type="offline", prompt="consent")
        return url

    def exchange(self, code: str, on_refresh: Optional[RefreshCallback] = None) -> NotifyingCredentials:
        """
        Exchange an authorization code for credentials.

        The new credentials are passed to ``on_refresh`` right away so they are
        persisted like any later refresh.

        Args:
            code: The authorization code returned to the user
            on_refresh: Called with the credentials JSON now and after every refresh

        Returns:
            NotifyingCredentials instance
        """
        self._flow.fetch_token(code=code)
        credentials = credentials_from_stored(self._flow.credentials.to_json(), on_refresh)
        credentials.notify_refreshed()
        return credentials


def build_drive_service(credentials: Credentials):
    """
    Build the Drive v3 API service.

    httplib2 connections are not thread-safe, so every request gets a fresh
    authorized connection and the service can be shared between threads.

    Args:
        credentials: Google OAuth2 credentials

    Returns:
        Google API service instance
    """
    def build_request(http, *args, **kwargs):
        return HttpRequest(_authorized_http(credentials), *args, **kwargs)

    return build(
        "drive", "v3",
        http=_authorized_http(credentials),
        requestBuilder=build_request,
        cache_discovery=False,
    )


def _authorized_http(credentials: Credentials) -> google_auth_httplib2.AuthorizedHttp:
    return google_auth_httplib2.AuthorizedHttp(credentials, http=httplib2.Http())
