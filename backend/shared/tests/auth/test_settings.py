"""Tests for AuthSettings configuration."""

from shared.auth.secret_store import SECRET_KEY
from shared.auth.settings import AuthSettings


class TestAuthSettings:
    def test_defaults(self, monkeypatch):
        for name in ("SECRET_FILE", "SECRET_KEY", "REGENERATE_SECRET", "BANNED_TERMS_FILE", "USERS_FILE"):
            monkeypatch.delenv(f"AUTH_{name}", raising=False)
        settings = AuthSettings()
        assert settings.secret_file == "data/secrets.env"
        assert settings.secret_key == SECRET_KEY
        assert settings.regenerate_secret is True
        assert settings.banned_terms_file == "data/banned_terms.txt"
        assert settings.users_file == "data/users.json"

    def test_secret_file_from_env(self, monkeypatch):
        monkeypatch.setenv("AUTH_SECRET_FILE", "/run/secrets/api.env")
        assert AuthSettings().secret_file == "/run/secrets/api.env"

    def test_regenerate_secret_from_env(self, monkeypatch):
        monkeypatch.setenv("AUTH_REGENERATE_SECRET", "false")
        assert AuthSettings().regenerate_secret is False

    def test_users_file_from_env(self, monkeypatch):
        monkeypatch.setenv("AUTH_USERS_FILE", "custom/users.json")
        assert AuthSettings().users_file == "custom/users.json"

    def test_banned_terms_file_from_env(self, monkeypatch):
        monkeypatch.setenv("AUTH_BANNED_TERMS_FILE", "custom/terms.txt")
        assert AuthSettings().banned_terms_file == "custom/terms.txt"
