import pytest
from types import SimpleNamespace
from unittest.mock import Mock, patch

from vault_drive.provider import GoogleDriveProvider
from vault_drive.services.drive.types import CloudStorageEntity, SaveAsTarget
from vault_drive.exceptions import AuthenticationError


@pytest.fixture
def credential_store():
    store = Mock()
    store.load.return_value = None
    return store


@pytest.fixture
def client_config():
    return {"installed": {"client_id": "id", "client_secret": "secret"}}


@pytest.mark.unit
class TestGoogleDriveProviderAuthentication:
    """Test cases for obtaining credentials."""

    def test_provider_description(self, client_config, credential_store):
        provider = GoogleDriveProvider(client_config, credential_store=credential_store)

        assert provider.id == "GoogleDriveProvider"
        assert provider.display_name == "Google Drive"
        assert provider.supports_search is True

    @patch('vault_drive.provider.credentials_from_stored')
    def test_authenticate_with_stored_credentials(self, mock_from_stored, client_config, credential_store):
        """Test that stored credentials are used without prompting."""
        credential_store.load.return_value = '{"token": "abc"}'
        prompt = Mock()
        provider = GoogleDriveProvider(client_config, credential_store=credential_store, prompt_for_code=prompt)

        assert provider.authenticate() is True

        mock_from_stored.assert_called_once_with('{"token": "abc"}', on_refresh=credential_store.store)
        prompt.assert_not_called()

    @patch('vault_drive.provider.AuthorizationCodeFlow')
    def test_authenticate_prompts_for_code(self, mock_flow_class, client_config, credential_store):
        mock_flow = mock_flow_class.return_value
        mock_flow.authorization_url.return_value = "https://auth.example/url"
        prompt = Mock(return_value="the_code")
        provider = GoogleDriveProvider(
            client_config, credential_store=credential_store,
            prompt_for_code=prompt, redirect_uri="http://localhost:1234/"
        )

        assert provider.authenticate() is True

        mock_flow_class.assert_called_once_with(client_config, redirect_uri="http://localhost:1234/")
        prompt.assert_called_once_with("https://auth.example/url")
        mock_flow.exchange.assert_called_once_with("the_code", on_refresh=credential_store.store)
        assert provider.is_authenticated

    @patch('vault_drive.provider.AuthorizationCodeFlow')
    def test_authenticate_cancelled(self, mock_flow_class, client_config, credential_store):
        """Test that a missing code is treated as the user cancelling."""
        provider = GoogleDriveProvider(client_config, credential_store=credential_store,
                                       prompt_for_code=Mock(return_value=None))

        assert provider.authenticate() is False

        mock_flow_class.return_value.exchange.assert_not_called()
        assert not provider.is_authenticated

    @patch('vault_drive.provider.AuthorizationCodeFlow')
    def test_authenticate_exchange_failure(self, mock_flow_class, client_config, credential_store):
        mock_flow_class.return_value.exchange.side_effect = ValueError("invalid_grant")
        provider = GoogleDriveProvider(client_config, credential_store=credential_store,
                                       prompt_for_code=Mock(return_value="bad_code"))

        with pytest.raises(AuthenticationError, match="invalid_grant"):
            provider.authenticate()

    def test_authenticate_without_prompt(self, client_config, credential_store):
        provider = GoogleDriveProvider(client_config, credential_store=credential_store)

        with pytest.raises(AuthenticationError):
            provider.authenticate()

    @patch('vault_drive.provider.credentials_from_stored', side_effect=ValueError("missing fields"))
    def test_unusable_stored_credentials(self, mock_from_stored, client_config, credential_store):
        credential_store.load.return_value = '{"token": "abc"}'
        provider = GoogleDriveProvider(client_config, credential_store=credential_store)

        with pytest.raises(AuthenticationError, match="no way to prompt"):
            provider.authenticate()
        assert not provider.is_authenticated

    @patch('vault_drive.provider.credentials_from_stored')
    def test_is_authenticated_does_not_read_store(self, mock_from_stored, client_config, credential_store):
        """Test that checking the authentication state never loads stored credentials."""
        credential_store.load.return_value = '{"token": "abc"}'
        provider = GoogleDriveProvider(client_config, credential_store=credential_store)

        assert not provider.is_authenticated

        credential_store.load.assert_not_called()
        mock_from_stored.assert_not_called()

    @patch('vault_drive.provider.credentials_from_stored')
    def test_logout(self, mock_from_stored, client_config, credential_store):
        credential_store.load.return_value = '{"token": "abc"}'
        provider = GoogleDriveProvider(client_config, credential_store=credential_store)
        provider.authenticate()

        credential_store.load.return_value = None
        provider.logout()

        credential_store.clear.assert_called_once()
        assert not provider.is_authenticated


@pytest.mark.unit
class TestGoogleDriveProviderOperations:
    """Test cases for delegating operations to the Drive service layer."""

    @pytest.fixture
    def patches(self):
        with patch('vault_drive.provider.credentials_from_stored') as mock_from_stored, \
                patch('vault_drive.provider.build_drive_service') as mock_build, \
                patch('vault_drive.provider.DriveApiService') as mock_service_class:
            yield SimpleNamespace(from_stored=mock_from_stored, build=mock_build, service_class=mock_service_class)

    @pytest.fixture
    def drive_api(self, patches):
        return patches.service_class

    @pytest.fixture
    def provider(self, client_config, credential_store, drive_api):
        credential_store.load.return_value = '{"token": "abc"}'
        return GoogleDriveProvider(client_config, credential_store=credential_store)

    def test_requires_credentials(self, client_config, credential_store):
        provider = GoogleDriveProvider(client_config, credential_store=credential_store)

        with pytest.raises(AuthenticationError, match="Not authenticated"):
            provider.search()

    def test_search(self, provider, drive_api, patches):
        result = provider.search("pwsafe.kdbx")

        assert result is drive_api.return_value.search.return_value
        drive_api.return_value.search.assert_called_once_with("pwsafe.kdbx")
        drive_api.assert_called_once_with(patches.build.return_value)
        patches.build.assert_called_once_with(patches.from_stored.return_value)

    def test_stored_credentials_loaded_on_first_use(self, provider, credential_store, patches):
        """Test that an operation loads stored credentials once when none are held."""
        assert not provider.is_authenticated

        provider.search()
        provider.search()

        credential_store.load.assert_called_once()
        patches.from_stored.assert_called_once_with('{"token": "abc"}', on_refresh=credential_store.store)
        assert provider.is_authenticated

    def test_search_default_name(self, provider, drive_api):
        provider.search()
        drive_api.return_value.search.assert_called_once_with(".kdbx")

    def test_service_is_reused(self, provider, drive_api):
        provider.list()
        provider.list(CloudStorageEntity("X1"))

        drive_api.assert_called_once()
        assert drive_api.return_value.list.call_count == 2

    def test_load_and_save(self, provider, drive_api):
        entity = CloudStorageEntity("file_123", "pwsafe.kdbx")
        previous = {"googledrive.file_metadata": {"id": "file_123", "version": "1"}}

        provider.load_entity(entity)
        result = provider.save_entity(entity, b"bytes", previous)

        drive_api.return_value.load_entity.assert_called_once_with(entity)
        drive_api.return_value.save_entity.assert_called_once_with(entity, b"bytes", previous)
        assert result is drive_api.return_value.save_entity.return_value

    def test_create(self, provider, drive_api):
        target = SaveAsTarget("new.kdbx")

        provider.create_entity(target, b"bytes")

        drive_api.return_value.create_entity.assert_called_once_with(target, b"bytes")
