"""
Throwaway development accounts.

The id of the current dev account is kept in ``<project>/dev-account`` with a
``dev-account.env`` next to it for tools that read ``CONTRACT_NAME``.
"""
import logging
import random
import time
from pathlib import Path
from typing import Optional

from .exceptions import ConfigurationError
from .key_store import FileKeyStore, generate_key_pair
from .models import DevDeployOptions

logger = logging.getLogger(__name__)

DEV_ACCOUNT_FILE = "dev-account"
DEV_ACCOUNT_ENV_FILE = "dev-account.env"


def _existing_dev_account(project_dir: Path, network_id: str, project_key_store: FileKeyStore) -> Optional[str]:
    account_file = project_dir / DEV_ACCOUNT_FILE
    env_file = project_dir / DEV_ACCOUNT_ENV_FILE
    if not account_file.exists() or not env_file.exists():
        return None

    account_id = account_file.read_text(encoding="utf8").strip()
    if account_id and project_key_store.get_key(network_id, account_id):
        return account_id
    return None


def generate_dev_account_id(master_account: Optional[str] = None) -> str:
    """``dev-<ms>.<master>`` under a master account, else ``dev-<ms>-<14 digits>``"""
    timestamp_ms = int(time.time() * 1000)
    if master_account:
        return f"dev-{timestamp_ms}.{master_account}"
    return f"dev-{timestamp_ms}-{random.randint(10**13, 10**14 - 1)}"


def create_dev_account_if_needed(near, options: DevDeployOptions) -> str:
    """
    Return the dev account to deploy to, creating one when needed.

    An existing dev account is reused unless ``options.init`` is set.

    Raises:
        ConfigurationError: If the connection has no way to create accounts
    """
    project_dir = Path(options.project_key_directory)
    project_key_store = FileKeyStore(options.project_key_directory)

    if not options.init:
        account_id = _existing_dev_account(project_dir, options.network_id, project_key_store)
        if account_id:
            logger.info(f"Reusing dev account {account_id}")
            return account_id

    if near.account_creator is None:
        raise ConfigurationError("Cannot create account as neither helperUrl nor masterAccount is configured")

    project_dir.mkdir(parents=True, exist_ok=True)
    account_id = generate_dev_account_id(options.master_account)
    key = generate_key_pair(account_id)

    near.account_creator.create_account(account_id, key.public_key)
    project_key_store.set_key(options.network_id, key)

    (project_dir / DEV_ACCOUNT_FILE).write_text(account_id, encoding="utf8")
    (project_dir / DEV_ACCOUNT_ENV_FILE).write_text(f"CONTRACT_NAME={account_id}", encoding="utf8")
    logger.info(f"Created dev account {account_id}")
    return account_id
