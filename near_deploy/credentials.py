"""
Credential presence checks.
"""
import logging

from .exceptions import CredentialsError

logger = logging.getLogger(__name__)


def check_credentials(account_id: str, network_id: str, key_store) -> None:
    """
    Make sure a key is stored for ``account_id`` on ``network_id``.

    Raises:
        CredentialsError: If the key store has no key for the account
    """
    if key_store.get_key(network_id, account_id) is None:
        raise CredentialsError(
            f"Unable to find [ {network_id} ] credentials for [ {account_id} ]..."
        )
    logger.debug(f"Found {network_id} credentials for {account_id}")
