from .auth import (
    SCOPES, NotifyingCredentials, AuthorizationCodeFlow,
    credentials_from_stored, build_drive_service
)
from .manager import CredentialStore

__all__ = [
    "SCOPES",
    "NotifyingCredentials",
    "AuthorizationCodeFlow",
    "credentials_from_stored",
    "build_drive_service",
    "CredentialStore",
]
