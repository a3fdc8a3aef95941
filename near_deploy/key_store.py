"""
File system key stores for account credentials.

Keys live in ``<key_dir>/<network_id>/<account_id>.json`` using the same
layout as the other NEAR command-line tools, so existing credentials are
picked up as-is.
"""
import json
import logging
import os
import stat
from pathlib import Path
from typing import List, Optional

import base58
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey
from cryptography.hazmat.primitives.serialization import (
    Encoding, PrivateFormat, PublicFormat, NoEncryption
)

# Import portalocker for file locking
try:
    import portalocker
except ImportError:
    raise ImportError(
        "portalocker package is required for the key store. "
        "Install with: pip install portalocker"
    )

from .config import CREDENTIALS_DIR, PROJECT_KEY_DIR
from .models import AccountKey

logger = logging.getLogger(__name__)

KEY_TYPE_PREFIX = "ed25519:"


def generate_key_pair(account_id: str) -> AccountKey:
    """
    Generate a fresh ed25519 key pair for an account.

    The private key is encoded as seed followed by public key, which is the
    64 byte form the chain SDKs expect.
    """
    private_key = Ed25519PrivateKey.generate()
    seed = private_key.private_bytes(
        encoding=Encoding.Raw,
        format=PrivateFormat.Raw,
        encryption_algorithm=NoEncryption()
    )
    public_key = private_key.public_key().public_bytes(Encoding.Raw, PublicFormat.Raw)

    return AccountKey(
        account_id=account_id,
        public_key=KEY_TYPE_PREFIX + base58.b58encode(public_key).decode("ascii"),
        private_key=KEY_TYPE_PREFIX + base58.b58encode(seed + public_key).decode("ascii"),
    )


def decode_public_key(public_key: str) -> bytes:
    """Return the raw bytes of an ``ed25519:<base58>`` public key"""
    if public_key.startswith(KEY_TYPE_PREFIX):
        public_key = public_key[len(KEY_TYPE_PREFIX):]
    return base58.b58decode(public_key)


class FileKeyStore:
    """Process-safe key store backed by one JSON file per account"""

    def __init__(self, key_dir: str):
        self.key_dir = Path(os.path.expanduser(key_dir))

    def __repr__(self) -> str:
        return f"FileKeyStore({str(self.key_dir)!r})"

    def _key_path(self, network_id: str, account_id: str) -> Path:
        return self.key_dir / network_id / f"{account_id}.json"

    def _get_lock_path(self, path: Path) -> str:
        return str(path) + ".lock"

    def get_key(self, network_id: str, account_id: str) -> Optional[AccountKey]:
        """
        Read the stored key for an account.

        Returns:
            The stored key, or None if there is none
        """
        path = self._key_path(network_id, account_id)
        if not path.exists():
            return None

        with portalocker.Lock(self._get_lock_path(path), timeout=10):
            try:
                with open(path, "r") as f:
                    data = json.load(f)
            except (json.JSONDecodeError, FileNotFoundError):
                logger.warning(f"Ignoring unreadable key file {path}")
                return None

        # Older files use secret_key instead of private_key
        if "private_key" not in data and "secret_key" in data:
            data["private_key"] = data["secret_key"]
        data.setdefault("account_id", account_id)
        return AccountKey.model_validate(data)

    def set_key(self, network_id: str, key: AccountKey) -> None:
        """Write the key for ``key.account_id`` with owner-only permissions"""
        path = self._key_path(network_id, key.account_id)
        path.parent.mkdir(parents=True, exist_ok=True)

        with portalocker.Lock(self._get_lock_path(path), timeout=10):
            with open(path, "w") as f:
                json.dump(key.model_dump(), f, indent=2)

        if os.name == "posix":
            os.chmod(path, stat.S_IRUSR | stat.S_IWUSR)  # 0600
        logger.debug(f"Stored key for {key.account_id} on {network_id} in {path}")


class MergeKeyStore:
    """Reads from several key stores in order, writes to the first"""

    def __init__(self, key_stores: List[FileKeyStore]):
        if not key_stores:
            raise ValueError("MergeKeyStore needs at least one key store")
        self.key_stores = key_stores

    def get_key(self, network_id: str, account_id: str) -> Optional[AccountKey]:
        for key_store in self.key_stores:
            key = key_store.get_key(network_id, account_id)
            if key is not None:
                return key
        return None

    def set_key(self, network_id: str, key: AccountKey) -> None:
        self.key_stores[0].set_key(network_id, key)


def create_key_store(
    project_key_directory: str = PROJECT_KEY_DIR,
    credentials_directory: str = CREDENTIALS_DIR
) -> MergeKeyStore:
    """Key store over the user credentials directory and the project key directory"""
    return MergeKeyStore([
        FileKeyStore(credentials_directory),
        FileKeyStore(project_key_directory),
    ])
