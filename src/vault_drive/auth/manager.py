"""
Persistent storage for Drive OAuth2 credentials.

The credential JSON written by ``NotifyingCredentials`` refresh callbacks is
kept in a single token file so later sessions can skip the authorization flow.
"""

import os
import logging
from typing import Optional

logger = logging.getLogger(__name__)

# Allow environment variable override for the token path
TOKEN_PATH = os.getenv(
    "VAULT_DRIVE_TOKEN_PATH",
    os.path.join(os.path.expanduser("~"), ".vault_drive", "token.json")
)


class CredentialStore:
    """
    Stores the credentials JSON blob in a token file.

    Instances are meant to be passed as the refresh callback:
        store = CredentialStore()
        credentials = credentials_from_stored(store.load(), on_refresh=store.store)
    """

    def __init__(self, token_path: str = None):
        self.token_path = token_path or TOKEN_PATH

    def load(self) -> Optional[str]:
        """
        Read the stored credentials.

        Returns:
            The credentials JSON, or None if nothing was stored yet
        """
        if not os.path.exists(self.token_path):
            return None
        with open(self.token_path, "r") as token:
            stored = token.read()
        logger.info("Loaded credentials from token file")
        return stored or None

    def store(self, credentials_json: str) -> None:
        """Persist updated credentials, replacing any stored ones."""
        directory = os.path.dirname(self.token_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.token_path, "w") as token:
            token.write(credentials_json)
        logger.info("Credentials saved to token file")

    def __call__(self, credentials_json: str) -> None:
        self.store(credentials_json)

    def clear(self) -> None:
        """Forget the stored credentials."""
        if os.path.exists(self.token_path):
            os.remove(self.token_path)
            logger.info("Stored credentials removed")
