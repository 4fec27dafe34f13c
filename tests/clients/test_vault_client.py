"""Tests for VaultClient - HashiCorp Vault secrets management, hvac mocked."""

from unittest.mock import MagicMock, patch

import pytest
from hvac.exceptions import Forbidden, InvalidPath, InvalidRequest

import clients.vault_client as vault_module
from clients.vault_client import VaultClient, get_database_url


@pytest.fixture
def vault_env(monkeypatch):
    monkeypatch.setenv("VAULT_ADDR", "http://vault.test:8200")
    monkeypatch.setenv("VAULT_ROLE_ID", "role")
    monkeypatch.setenv("VAULT_SECRET_ID", "secret")
    monkeypatch.delenv("VAULT_NAMESPACE", raising=False)
    monkeypatch.delenv("DATABASE_URL", raising=False)


@pytest.fixture
def hvac_client(vault_env):
    with patch("hvac.Client") as client_cls:
        client = client_cls.return_value
        client.auth.approle.login.return_value = {"auth": {"client_token": "token"}}
        client.is_authenticated.return_value = True
        client.secrets.kv.v2.read_secret_version.return_value = {
            "data": {"data": {"url": "postgresql://vault/booking"}}
        }
        client.cls = client_cls
        yield client


@pytest.fixture(autouse=True)
def reset_cache(monkeypatch):
    monkeypatch.setattr(vault_module, "_vault_client_instance", None)
    monkeypatch.setattr(vault_module, "_secret_cache", {})


class TestVaultClientInit:
    """Initialization and authentication."""

    def test_missing_vault_addr_raises(self, vault_env, monkeypatch):
        monkeypatch.delenv("VAULT_ADDR")
        with pytest.raises(ValueError, match="VAULT_ADDR"):
            VaultClient()

    def test_missing_approle_credentials_raises(self, vault_env, monkeypatch):
        monkeypatch.delenv("VAULT_SECRET_ID")
        with pytest.raises(ValueError, match="VAULT_ROLE_ID"):
            VaultClient()

    def test_invalid_approle_raises_permission_error(self, hvac_client):
        hvac_client.auth.approle.login.side_effect = InvalidRequest("invalid role or secret ID")

        with pytest.raises(PermissionError, match="authentication"):
            VaultClient()

    def test_unauthenticated_token_raises(self, hvac_client):
        hvac_client.is_authenticated.return_value = False

        with pytest.raises(PermissionError):
            VaultClient()

    def test_valid_approle_authenticates(self, hvac_client):
        client = VaultClient()

        hvac_client.auth.approle.login.assert_called_once_with(role_id="role", secret_id="secret")
        assert client.client.token == "token"

    def test_namespace_passed_through(self, hvac_client):
        VaultClient(vault_namespace="team-a")
        assert hvac_client.cls.call_args.kwargs["namespace"] == "team-a"


class TestGetSecret:
    """Secret retrieval - paths automatically scoped to booking/."""

    def test_returns_field_value(self, hvac_client):
        url = VaultClient().get_secret("database", "url")

        assert url == "postgresql://vault/booking"
        kwargs = hvac_client.secrets.kv.v2.read_secret_version.call_args.kwargs
        assert kwargs["path"] == "booking/database"

    def test_missing_path_raises(self, hvac_client):
        hvac_client.secrets.kv.v2.read_secret_version.side_effect = InvalidPath()

        with pytest.raises(PermissionError, match="not found"):
            VaultClient().get_secret("nonexistent", "field")

    def test_forbidden_path_raises(self, hvac_client):
        hvac_client.secrets.kv.v2.read_secret_version.side_effect = Forbidden()

        with pytest.raises(PermissionError, match="Access denied"):
            VaultClient().get_secret("database", "url")

    def test_missing_field_raises_keyerror(self, hvac_client):
        with pytest.raises(KeyError, match="not found"):
            VaultClient().get_secret("database", "nonexistent_field")


class TestGetDatabaseUrl:

    def test_env_override_skips_vault(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql://local/booking")

        with patch("hvac.Client") as client_cls:
            assert get_database_url() == "postgresql://local/booking"
            client_cls.assert_not_called()

    def test_reads_vault_once(self, hvac_client):
        assert get_database_url() == "postgresql://vault/booking"
        assert get_database_url() == "postgresql://vault/booking"

        assert hvac_client.secrets.kv.v2.read_secret_version.call_count == 1
