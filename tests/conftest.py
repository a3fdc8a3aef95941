"""
Pytest fixtures for the near-deploy tests.
"""
import base64
import json
import pytest
from unittest.mock import MagicMock

from near_deploy.config import NetworkConfig, Settings
from near_deploy.event_tracking import EventTracker
from near_deploy.key_store import FileKeyStore, generate_key_pair
from near_deploy.models import DevDeployOptions, JsDeployOptions, JsRemoveOptions

# Constants for testing
TEST_NODE_URL = "https://rpc.testnet.example.com"
TEST_HELPER_URL = "https://helper.testnet.example.com"
TEST_EXPLORER_URL = "https://explorer.testnet.example.com"
TEST_ACCOUNT_ID = "alice.testnet"
TEST_DEV_ACCOUNT_ID = "dev-1700000000000-12345678901234"
TEST_TX_ID = "9Hq6sZsaXb3ia8GShmbpbfYpVtdkTaBsLz1oEGNkVuNL"
TEST_GAS = 30 * 10**12


def make_outcome(success_value=None, failure=None, tx_id=TEST_TX_ID, gas_burnt=2428000000000):
    """Build a broadcast_tx_commit style outcome"""
    if failure is not None:
        status = {"Failure": failure}
    else:
        status = {"SuccessValue": success_value if success_value is not None else ""}
    return {
        "status": status,
        "transaction": {"hash": tx_id, "signer_id": TEST_ACCOUNT_ID},
        "transaction_outcome": {
            "id": tx_id,
            "outcome": {"gas_burnt": gas_burnt, "logs": [], "status": {"SuccessReceiptId": "abc"}},
        },
        "receipts_outcome": [
            {"id": "abc", "outcome": {"gas_burnt": 1000, "logs": ["contract says hi"], "status": status}},
        ],
    }


def encode_success_value(value) -> str:
    return base64.b64encode(json.dumps(value).encode("utf8")).decode("ascii")


GAS_EXCEEDED_FAILURE = {
    "ActionError": {
        "index": 0,
        "kind": {"FunctionCallError": {"ExecutionError": "Exceeded the prepaid gas."}},
    }
}


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch):
    """Keep the developer's NEAR settings out of the tests"""
    for name in ("NEAR_ENV", "NODE_ENV", "NEAR_ANALYTICS_URL", "NEAR_MASTER_ACCOUNT",
                 "TESTNET_NODE_URL", "TESTNET_HELPER_URL", "TESTNET_EXPLORER_URL"):
        monkeypatch.delenv(name, raising=False)
    NetworkConfig._networks_cache = None
    yield
    NetworkConfig._networks_cache = None


@pytest.fixture
def settings(tmp_path):
    return Settings(
        project_key_directory=str(tmp_path / "neardev"),
        credentials_directory=str(tmp_path / "credentials"),
        settings_path=str(tmp_path / "near-config" / "settings.json"),
    )


@pytest.fixture
def tracker():
    """Event tracker that records calls instead of sending them"""
    return MagicMock(spec=EventTracker)


@pytest.fixture
def wasm_file(tmp_path):
    path = tmp_path / "out" / "main.wasm"
    path.parent.mkdir(parents=True)
    path.write_bytes(b"\x00asm\x01\x00\x00\x00")
    return path


@pytest.fixture
def dev_options(settings, wasm_file):
    return DevDeployOptions(
        network_id="testnet",
        node_url=TEST_NODE_URL,
        helper_url=TEST_HELPER_URL,
        explorer_url=TEST_EXPLORER_URL,
        wasm_file=str(wasm_file),
        project_key_directory=settings.project_key_directory,
    )


@pytest.fixture
def credentials_store(settings):
    """Credentials directory holding a key for alice.testnet"""
    store = FileKeyStore(settings.credentials_directory)
    store.set_key("testnet", generate_key_pair(TEST_ACCOUNT_ID))
    return store


@pytest.fixture
def base64_file(tmp_path):
    path = tmp_path / "contract.base64"
    path.write_bytes(base64.b64encode(b"export function hello() { return 'hi' }"))
    return path


@pytest.fixture
def js_deploy_options(base64_file):
    return JsDeployOptions(
        network_id="testnet",
        node_url=TEST_NODE_URL,
        explorer_url=TEST_EXPLORER_URL,
        base64_file=str(base64_file),
        account_id=TEST_ACCOUNT_ID,
        deposit="1",
    )


@pytest.fixture
def js_remove_options():
    return JsRemoveOptions(
        network_id="testnet",
        node_url=TEST_NODE_URL,
        explorer_url=TEST_EXPLORER_URL,
        account_id=TEST_ACCOUNT_ID,
    )


@pytest.fixture
def mock_near():
    """Connection whose accounts answer with canned state and outcomes"""
    near = MagicMock()
    account = near.account.return_value
    account.account_id = TEST_DEV_ACCOUNT_ID
    account.state.side_effect = [
        {"code_hash": "11111111111111111111111111111111", "amount": "100"},
        {"code_hash": "E8jZ1giWcVs7bAVmM4VmM4FY2hKj8Ygx7YVmMNe8Bj9A", "amount": "99"},
    ]
    account.sign_and_send_transaction.return_value = make_outcome()
    account.function_call.return_value = make_outcome(success_value=encode_success_value({"ok": True}))
    return near
