class VaultDriveError(Exception):
    """Base exception for all vault-drive errors."""
    pass


class TransportError(VaultDriveError):
    """Raised when the remote service cannot be reached or returns an invalid response."""
    pass


class AuthenticationError(TransportError):
    """Raised when authentication fails or no credentials are available."""
    pass


class ValidationError(VaultDriveError):
    """Raised when input validation fails."""
    pass
