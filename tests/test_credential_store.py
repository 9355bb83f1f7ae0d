"""Tests for the encrypted credential store."""

import json

from taskbot.model.credential import UserCredential
from taskbot.stores.credentials import CredentialStore, EncryptionService


class TestEncryptionService:
    """Tests for EncryptionService."""

    def test_creates_key_file_with_restricted_permissions(self, tmp_path):
        """Test the key file is generated with 0o600 permissions."""
        key_path = tmp_path / "nested" / "credentials.key"

        EncryptionService(key_path)

        assert key_path.exists()
        assert key_path.stat().st_mode & 0o777 == 0o600

    def test_existing_key_reused(self, tmp_path):
        """Test two services over one key file decrypt each other's output."""
        key_path = tmp_path / "credentials.key"
        first = EncryptionService(key_path)
        second = EncryptionService(key_path)

        assert second.decrypt(first.encrypt("secret")) == "secret"


class TestCredentialStore:
    """Tests for CredentialStore."""

    def test_set_and_get(self, tmp_path):
        """Test a stored credential is returned by user id."""
        store = CredentialStore(tmp_path)
        store.set("42", UserCredential(access_token="tok", account_id="999", refresh_token="ref"))

        credential = store.get("42")

        assert credential.access_token == "tok"
        assert credential.refresh_token == "ref"
        assert credential.account_id == "999"

    def test_unknown_user(self, tmp_path):
        """Test unknown users have no credential."""
        assert CredentialStore(tmp_path).get("nobody") is None

    def test_tokens_encrypted_on_disk(self, tmp_path):
        """Test tokens never hit the file in clear text."""
        CredentialStore(tmp_path).set("42", UserCredential(access_token="tok-plain", account_id="999"))

        raw = (tmp_path / CredentialStore.STATE_FILE).read_text()

        assert "tok-plain" not in raw
        assert json.loads(raw)["42"]["account_id"] == "999"

    def test_persists_across_instances(self, tmp_path):
        """Test a new store reads what an earlier one wrote."""
        CredentialStore(tmp_path).set("42", UserCredential(access_token="tok", account_id="999"))

        assert CredentialStore(tmp_path).get("42").access_token == "tok"

    def test_delete(self, tmp_path):
        """Test delete removes the credential and reports whether it existed."""
        store = CredentialStore(tmp_path)
        store.set("42", UserCredential(access_token="tok", account_id="999"))

        assert store.delete("42") is True
        assert store.delete("42") is False
        assert CredentialStore(tmp_path).get("42") is None

    def test_undecryptable_entry_skipped(self, tmp_path):
        """Test entries encrypted with another key are skipped on load."""
        CredentialStore(tmp_path).set("42", UserCredential(access_token="tok", account_id="999"))
        (tmp_path / EncryptionService.KEY_FILE).unlink()

        assert CredentialStore(tmp_path).get("42") is None
