"""
Connection factory wrapping the near-api-py JSON-RPC provider.

Everything that touches the chain goes through ``Near`` and ``NearAccount``:
state queries, transaction signing and submission, and account creation.
Serialization and signing themselves are left to ``near_api``.
"""
import logging
from typing import Any, Dict, List, Optional, Union

import base58
import requests
from near_api import transactions
from near_api.providers import JsonProvider, JsonProviderError
from near_api.signer import KeyPair, Signer

from .exceptions import AccountCreationError, CredentialsError, RemoteExecutionError
from .key_store import KEY_TYPE_PREFIX, MergeKeyStore, FileKeyStore, decode_public_key
from .models import CommandOptions
from .sessions import create_session
from .units import parse_near_amount

logger = logging.getLogger(__name__)

# broadcast_tx_commit waits for the final outcome
TX_COMMIT_TIMEOUT = 60

KeyStore = Union[MergeKeyStore, FileKeyStore]


class NearAccount:
    """An account we hold a key for and can sign transactions with"""

    def __init__(self, provider: JsonProvider, signer: Signer, public_key: str):
        self.provider = provider
        self.signer = signer
        self.public_key = public_key

    @property
    def account_id(self) -> str:
        return self.signer.account_id

    def state(self) -> Dict[str, Any]:
        """
        Query the current on-chain account state.

        Returns:
            The ``view_account`` result, including ``code_hash``
        """
        return self.provider.get_account(self.account_id)

    def sign_and_send_transaction(self, receiver_id: str, actions: List[Any]) -> Dict[str, Any]:
        """
        Sign a transaction holding ``actions`` and wait for its outcome.

        Args:
            receiver_id: Account the actions are applied to
            actions: Actions built with ``near_api.transactions``

        Returns:
            The final execution outcome

        Raises:
            RemoteExecutionError: If the transaction or one of its receipts failed
        """
        access_key = self.provider.get_access_key(self.account_id, self.public_key)
        nonce = access_key["nonce"] + 1
        block_hash = self.provider.get_status()["sync_info"]["latest_block_hash"]
        block_hash = base58.b58decode(block_hash.encode("utf8"))

        serialized_tx = transactions.sign_and_serialize_transaction(
            receiver_id, nonce, actions, block_hash, self.signer
        )
        logger.debug(f"Submitting {len(actions)} action(s) from {self.account_id} to {receiver_id}")

        try:
            result = self.provider.send_tx_and_wait(serialized_tx, TX_COMMIT_TIMEOUT)
        except JsonProviderError as e:
            error = e.args[0] if e.args else None
            data = error.get("data") if isinstance(error, dict) else None
            if isinstance(data, dict) and "TxExecutionError" in data:
                raise RemoteExecutionError(data["TxExecutionError"]) from e
            raise

        for outcome in [result.get("transaction_outcome", {})] + result.get("receipts_outcome", []):
            for log in outcome.get("outcome", {}).get("logs", []):
                logger.info(f"Log [{receiver_id}]: {log}")

        status = result.get("status", {})
        if isinstance(status, dict) and "Failure" in status:
            raise RemoteExecutionError(status["Failure"], outcome=result)
        return result

    def function_call(
        self,
        contract_id: str,
        method_name: str,
        args: Optional[bytes],
        gas: int,
        attached_deposit: Union[int, str]
    ) -> Dict[str, Any]:
        """Call ``method_name`` on ``contract_id`` with raw argument bytes"""
        action = transactions.create_function_call_action(
            method_name, args or b"", int(gas), int(attached_deposit)
        )
        return self.sign_and_send_transaction(contract_id, [action])


class LocalAccountCreator:
    """Creates accounts as sub-accounts funded by a master account"""

    def __init__(self, master_account: NearAccount, initial_balance: int):
        self.master_account = master_account
        self.initial_balance = initial_balance

    def create_account(self, account_id: str, public_key: str) -> None:
        logger.info(f"Creating {account_id} from master account {self.master_account.account_id}")
        actions = [
            transactions.create_create_account_action(),
            transactions.create_full_access_key_action(decode_public_key(public_key)),
            transactions.create_transfer_action(self.initial_balance),
        ]
        self.master_account.sign_and_send_transaction(account_id, actions)


class UrlAccountCreator:
    """Creates accounts through the network's helper service"""

    def __init__(self, helper_url: str, session: Optional[requests.Session] = None, timeout: int = 30):
        self.helper_url = helper_url.rstrip("/")
        self.session = session or create_session()
        self.timeout = timeout

    def create_account(self, account_id: str, public_key: str) -> None:
        logger.info(f"Creating {account_id} through helper {self.helper_url}")
        try:
            response = self.session.post(
                f"{self.helper_url}/account",
                json={"newAccountId": account_id, "newAccountPublicKey": public_key},
                timeout=self.timeout
            )
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"Helper account creation failed: {e}")
            raise AccountCreationError(f"Failed to create account {account_id}: {e}") from e


class Near:
    """A live connection to one network"""

    def __init__(self, options: CommandOptions, key_store: KeyStore, provider: Optional[JsonProvider] = None):
        self.network_id = options.network_id
        self.key_store = key_store
        self.provider = provider or JsonProvider(options.node_url)
        self.master_account = options.master_account
        self.helper_url = options.helper_url
        self.initial_balance = options.initial_balance
        self._account_creator: Optional[Union[LocalAccountCreator, UrlAccountCreator]] = None

    @property
    def account_creator(self) -> Optional[Union[LocalAccountCreator, UrlAccountCreator]]:
        """The master account creator if one is configured, else the helper service"""
        if self._account_creator is None:
            if self.master_account:
                initial_balance = int(parse_near_amount(self.initial_balance) or 0)
                self._account_creator = LocalAccountCreator(self.account(self.master_account), initial_balance)
            elif self.helper_url:
                self._account_creator = UrlAccountCreator(self.helper_url)
        return self._account_creator

    def account(self, account_id: str) -> NearAccount:
        """
        Get a signing handle for an account whose key is in the key store.

        Raises:
            CredentialsError: If no key is stored for the account
        """
        key = self.key_store.get_key(self.network_id, account_id)
        if key is None:
            raise CredentialsError(
                f"Unable to find [ {self.network_id} ] credentials for [ {account_id} ]"
            )
        secret_key = key.private_key
        if secret_key.startswith(KEY_TYPE_PREFIX):
            secret_key = secret_key[len(KEY_TYPE_PREFIX):]
        signer = Signer(account_id, KeyPair(secret_key))
        return NearAccount(self.provider, signer, key.public_key)


def connect(options: CommandOptions, key_store: KeyStore) -> Near:
    """Open a connection to the network described by ``options``"""
    logger.debug(f"Connecting to {options.network_id} at {options.node_url}")
    return Near(options, key_store)
