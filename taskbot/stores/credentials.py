"""Per-user Basecamp credentials, persisted with tokens encrypted at rest."""

import logging
from pathlib import Path
from threading import Lock

from cryptography.fernet import Fernet, InvalidToken

from taskbot.model.credential import UserCredential
from taskbot.stores.json_file import JsonStateFile

logger = logging.getLogger(__name__)


class EncryptionService:
    """Handles encryption of sensitive data at rest."""

    KEY_FILE = "credentials.key"

    def __init__(self, key_path: Path):
        self.key_path = Path(key_path)
        self._fernet = self._load_or_create_key()

    def _load_or_create_key(self) -> Fernet:
        """Load existing key or generate new one."""
        if self.key_path.exists():
            key = self.key_path.read_bytes()
        else:
            self.key_path.parent.mkdir(parents=True, exist_ok=True)
            key = Fernet.generate_key()
            self.key_path.write_bytes(key)
            self.key_path.chmod(0o600)

        return Fernet(key)

    def encrypt(self, plaintext: str) -> str:
        """Encrypt a string value."""
        return self._fernet.encrypt(plaintext.encode()).decode()

    def decrypt(self, ciphertext: str) -> str:
        """Decrypt a string value."""
        return self._fernet.decrypt(ciphertext.encode()).decode()


class CredentialStore:
    """Maps chat user ids to Basecamp credentials.

    Access and refresh tokens are Fernet-encrypted in the JSON file; the
    account id and platform are stored in the clear.

    Example:
        >>> store = CredentialStore(Path(".taskbot"))
        >>> store.set("123456", UserCredential(access_token="...", account_id="999"))
        >>> store.get("123456").account_id
        '999'
    """

    STATE_FILE = "credentials.json"

    def __init__(self, state_dir: Path, encryption: EncryptionService | None = None):
        state_dir = Path(state_dir)
        self._file = JsonStateFile(state_dir / self.STATE_FILE)
        self._encryption = encryption or EncryptionService(state_dir / EncryptionService.KEY_FILE)
        self._lock = Lock()
        self._credentials: dict[str, UserCredential] = {}
        self._load()
        logger.info(f"CredentialStore initialized: {self._file.path} ({len(self._credentials)} user(s))")

    def _load(self) -> None:
        with self._lock:
            self._credentials = {}
            for user_id, entry in self._file.load().items():
                try:
                    data = dict(entry)
                    data["access_token"] = self._encryption.decrypt(data["access_token"])
                    if data.get("refresh_token"):
                        data["refresh_token"] = self._encryption.decrypt(data["refresh_token"])
                    self._credentials[user_id] = UserCredential.from_dict(data)
                except (InvalidToken, KeyError, TypeError, ValueError) as e:
                    logger.error(f"Failed to load credential for user {user_id}: {e}")

    def _save(self) -> None:
        """Persist all credentials. Caller must hold self._lock."""
        data = {}
        for user_id, credential in self._credentials.items():
            entry = credential.to_dict()
            entry["access_token"] = self._encryption.encrypt(credential.access_token)
            if credential.refresh_token:
                entry["refresh_token"] = self._encryption.encrypt(credential.refresh_token)
            data[user_id] = entry
        self._file.save(data)

    def get(self, user_id: str) -> UserCredential | None:
        with self._lock:
            return self._credentials.get(str(user_id))

    def set(self, user_id: str, credential: UserCredential) -> None:
        with self._lock:
            self._credentials[str(user_id)] = credential
            self._save()
        logger.info(f"Stored Basecamp credential for user {user_id} (account {credential.account_id})")

    def delete(self, user_id: str) -> bool:
        with self._lock:
            if self._credentials.pop(str(user_id), None) is None:
                return False
            self._save()
        logger.info(f"Removed Basecamp credential for user {user_id}")
        return True
