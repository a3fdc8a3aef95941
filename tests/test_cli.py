"""
Tests for the near-deploy command line interface.
"""
import pytest
from click.testing import CliRunner
from unittest.mock import patch

from near_deploy.cli import cli
from near_deploy.config import DEFAULT_FUNCTION_CALL_GAS
from near_deploy.exceptions import RemoteExecutionError
from near_deploy.models import DevDeployOptions, JsDeployOptions, JsRemoveOptions
from conftest import GAS_EXCEEDED_FAILURE


@pytest.fixture
def runner():
    return CliRunner()


def test_version(runner):
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "near-deploy" in result.output


@patch("near_deploy.cli.dev_deploy")
def test_dev_deploy_defaults(mock_dev_deploy, runner):
    result = runner.invoke(cli, ["dev-deploy"])

    assert result.exit_code == 0, result.output
    options = mock_dev_deploy.call_args[0][0]
    assert isinstance(options, DevDeployOptions)
    assert options.network_id == "testnet"
    assert options.node_url == "https://rpc.testnet.near.org"
    assert options.helper_url == "https://helper.testnet.near.org"
    assert options.wasm_file == "./out/main.wasm"
    assert options.init_gas == DEFAULT_FUNCTION_CALL_GAS
    assert options.init_deposit == "0"
    assert options.initial_balance == "100"
    assert options.init is False
    assert options.project_key_directory == "./neardev"


@patch("near_deploy.cli.dev_deploy")
def test_dev_deploy_flags(mock_dev_deploy, runner):
    result = runner.invoke(cli, [
        "dev-deploy",
        "--wasmFile", "build/contract.wasm",
        "--initFunction", "init",
        "--initArgs", '{"owner": "me"}',
        "--initGas", "100000000000000",
        "--initDeposit", "2",
        "-f",
        "--networkId", "betanet",
        "--masterAccount", "master.betanet",
    ])

    assert result.exit_code == 0, result.output
    options = mock_dev_deploy.call_args[0][0]
    assert options.wasm_file == "build/contract.wasm"
    assert options.init_function == "init"
    assert options.init_args == '{"owner": "me"}'
    assert options.init_gas == 100000000000000
    assert options.init_deposit == "2"
    assert options.init is True
    assert options.network_id == "betanet"
    assert options.master_account == "master.betanet"


def test_dev_deploy_mainnet_exits_non_zero(runner):
    result = runner.invoke(cli, ["dev-deploy", "--networkId", "mainnet"])

    assert result.exit_code == 1
    assert "MainNet doesn't support dev-deploy" in result.output


def test_network_from_environment(runner):
    with patch("near_deploy.cli.js_remove") as mock_remove:
        result = runner.invoke(cli, ["js", "remove", "--accountId", "alice.betanet"], env={"NEAR_ENV": "betanet"})

    assert result.exit_code == 0, result.output
    assert mock_remove.call_args[0][0].network_id == "betanet"


@patch("near_deploy.cli.js_deploy")
def test_js_deploy_flags(mock_js_deploy, runner):
    result = runner.invoke(cli, [
        "js", "deploy",
        "--accountId", "alice.testnet",
        "--base64File", "contract.base64",
        "--deposit", "1",
        "--depositYocto", "5",
        "--jsvm", "my-jsvm.testnet",
    ])

    assert result.exit_code == 0, result.output
    options = mock_js_deploy.call_args[0][0]
    assert isinstance(options, JsDeployOptions)
    assert options.account_id == "alice.testnet"
    assert options.base64_file == "contract.base64"
    assert options.deposit == "1"
    assert options.deposit_yocto == "5"
    assert options.jsvm == "my-jsvm.testnet"
    assert options.gas == DEFAULT_FUNCTION_CALL_GAS


def test_js_deploy_requires_base64_file(runner):
    result = runner.invoke(cli, ["js", "deploy", "--accountId", "alice.testnet"])
    assert result.exit_code == 2


def test_js_remove_requires_account(runner):
    result = runner.invoke(cli, ["js", "remove"])
    assert result.exit_code == 2


@patch("near_deploy.cli.js_remove")
def test_js_remove_flags(mock_js_remove, runner):
    result = runner.invoke(cli, ["js", "remove", "--accountId", "alice.testnet", "--gas", "5"])

    assert result.exit_code == 0, result.output
    options = mock_js_remove.call_args[0][0]
    assert isinstance(options, JsRemoveOptions)
    assert options.gas == 5
    assert options.jsvm is None


def test_js_remove_gas_failure_still_exits_zero(runner, mock_near, tmp_path):
    """Enclave failures are reported but do not change the exit code"""
    mock_near.account.return_value.function_call.side_effect = RemoteExecutionError(GAS_EXCEEDED_FAILURE)

    with patch("near_deploy.commands.js.connect", return_value=mock_near), \
         patch("near_deploy.commands.js.check_credentials"):
        result = runner.invoke(cli, ["js", "remove", "--accountId", "alice.testnet"])

    assert result.exit_code == 0, result.output
    function_call = mock_near.account.return_value.function_call
    function_call.assert_called_once_with("jsvm.testnet", "remove_js_contract", b"", DEFAULT_FUNCTION_CALL_GAS, "0")
    assert "attached gas" in result.output


def test_js_remove_strict_exits_non_zero(runner, mock_near):
    mock_near.account.return_value.function_call.side_effect = RemoteExecutionError(GAS_EXCEEDED_FAILURE)

    with patch("near_deploy.commands.js.connect", return_value=mock_near), \
         patch("near_deploy.commands.js.check_credentials"):
        result = runner.invoke(cli, ["js", "remove", "--accountId", "alice.testnet", "--strict"])

    assert result.exit_code == 1
    assert "Error:" in result.output


def test_unknown_network_exits_non_zero(runner):
    result = runner.invoke(cli, ["js", "remove", "--accountId", "alice.testnet", "--networkId", "nowhere"])

    assert result.exit_code == 1
    assert "Unknown network id 'nowhere'" in result.output


def test_unknown_network_with_overrides_reaches_enclave(runner, mock_near, base64_file):
    """A network missing from the bundled table works once its node and enclave are named"""
    with patch("near_deploy.commands.js.connect", return_value=mock_near) as mock_connect, \
         patch("near_deploy.commands.js.check_credentials"):
        result = runner.invoke(cli, [
            "js", "deploy", "--accountId", "alice.sandbox", "--base64File", str(base64_file),
            "--networkId", "sandbox", "--nodeUrl", "http://127.0.0.1:3030", "--jsvm", "jsvm.sandbox",
        ])

    assert result.exit_code == 0, result.output
    options = mock_connect.call_args[0][0]
    assert options.network_id == "sandbox"
    assert options.node_url == "http://127.0.0.1:3030"
    assert options.helper_url is None
    assert options.explorer_url is None
    assert mock_near.account.return_value.function_call.call_args[0][:2] == ("jsvm.sandbox", "deploy_js_contract")


def test_unknown_network_without_jsvm_has_no_default(runner, mock_near):
    with patch("near_deploy.commands.js.connect", return_value=mock_near) as mock_connect, \
         patch("near_deploy.commands.js.check_credentials"):
        result = runner.invoke(cli, [
            "js", "remove", "--accountId", "alice.sandbox",
            "--networkId", "sandbox", "--nodeUrl", "http://127.0.0.1:3030",
        ])

    assert result.exit_code == 1
    assert "Cannot find a default JSVM contract for network id sandbox" in result.output
    mock_connect.assert_not_called()
