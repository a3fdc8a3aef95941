"""
near-deploy command line interface.

Usage:
    near-deploy dev-deploy [--wasmFile FILE] [--initFunction NAME] [--initArgs JSON] ...
    near-deploy js deploy --accountId ID --base64File FILE [--deposit NEAR] ...
    near-deploy js remove --accountId ID [--gas GAS]
"""
import functools
import logging
from typing import Callable, Optional

import click

from .commands import dev_deploy, js_deploy, js_remove
from .config import DEFAULT_FUNCTION_CALL_GAS, PROJECT_KEY_DIR, NetworkConfig, Settings, resolve_network_id
from .models import DevDeployOptions, JsDeployOptions, JsRemoveOptions
from .version import __version__

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s"
    )


def exit_on_error(fn: Callable) -> Callable:
    """Turn any uncaught error into a non-zero exit with the message on stderr"""
    @functools.wraps(fn)
    def wrapper(*args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except click.ClickException:
            raise
        except Exception as e:
            logger.debug("Command failed", exc_info=True)
            raise click.ClickException(str(e)) from e
    return wrapper


def common_options(fn: Callable) -> Callable:
    """Network and output options accepted by every command"""
    options = [
        click.option("--networkId", "network_id", envvar="NEAR_ENV", default=None,
                     help="Network to use (default: testnet)"),
        click.option("--nodeUrl", "node_url", default=None, help="JSON-RPC endpoint of the network"),
        click.option("--helperUrl", "helper_url", default=None, help="Account creation helper service"),
        click.option("--explorerUrl", "explorer_url", default=None, help="Transaction explorer"),
        click.option("--masterAccount", "master_account", envvar="NEAR_MASTER_ACCOUNT", default=None,
                     help="Account used to create and fund new accounts"),
        click.option("--verbose", "-v", is_flag=True, default=False, help="Print full responses"),
        click.option("--strict", is_flag=True, default=False,
                     help="Exit with an error when an enclave call fails"),
    ]
    for option in reversed(options):
        fn = option(fn)
    return fn


def _connection_fields(
    network_id: Optional[str],
    node_url: Optional[str],
    helper_url: Optional[str],
    explorer_url: Optional[str],
    master_account: Optional[str],
    verbose: bool,
    strict: bool
) -> dict:
    configure_logging(verbose)
    network_id = resolve_network_id(network_id)
    return dict(
        network_id=network_id,
        node_url=NetworkConfig.get_node_url(network_id, node_url),
        helper_url=NetworkConfig.get_helper_url(network_id, helper_url),
        explorer_url=NetworkConfig.get_explorer_url(network_id, explorer_url),
        master_account=master_account,
        verbose=verbose,
        strict=strict,
    )


@click.group()
@click.version_option(version=__version__, prog_name="near-deploy")
def cli():
    """Deploy and initialize contracts on NEAR networks."""
    pass


@cli.command("dev-deploy")
@common_options
@click.option("--wasmFile", "wasm_file", default="./out/main.wasm", show_default=True,
              help="Path to wasm file to deploy")
@click.option("--initFunction", "init_function", default=None, help="Initialization method")
@click.option("--initArgs", "init_args", default=None, help="Initialization arguments")
@click.option("--initGas", "init_gas", type=int, default=DEFAULT_FUNCTION_CALL_GAS, show_default=True,
              help="Gas for initialization call")
@click.option("--initDeposit", "init_deposit", default="0", show_default=True,
              help="Deposit in NEAR to send for initialization call")
@click.option("--initialBalance", "initial_balance", default="100", show_default=True,
              help="Number of tokens to transfer to newly created account")
@click.option("--init", "--force", "-f", "init", is_flag=True, default=False,
              help="Create new account for deploy (even if there is one already available)")
@click.option("--projectKeyDirectory", "project_key_directory", default=PROJECT_KEY_DIR, show_default=True,
              help="Directory used for the dev account keys")
@exit_on_error
def dev_deploy_cmd(network_id, node_url, helper_url, explorer_url, master_account, verbose, strict, **kwargs):
    """Deploy your smart contract using a temporary account (TestNet only)."""
    fields = _connection_fields(network_id, node_url, helper_url, explorer_url, master_account, verbose, strict)
    options = DevDeployOptions(**fields, **kwargs)
    settings = Settings(project_key_directory=options.project_key_directory)
    dev_deploy(options, settings=settings)


@cli.group("js")
def js():
    """Manage scripts on the JSVM enclave contract."""
    pass


@js.command("deploy")
@common_options
@click.option("--base64File", "base64_file", required=True, help="Path to base64 encoded contract file to deploy")
@click.option("--accountId", "account_id", required=True,
              help="Unique identifier for the account that will be used to sign this call")
@click.option("--gas", type=int, default=DEFAULT_FUNCTION_CALL_GAS, show_default=True,
              help="Gas for deployment call")
@click.option("--deposit", default=None, help="Deposit in NEAR to maintain the contract storage on the enclave")
@click.option("--depositYocto", "deposit_yocto", default=None,
              help="Deposit in yoctoNEAR to maintain the contract storage on the enclave")
@click.option("--initFunction", "init_function", default=None, help="Initialization method")
@click.option("--jsvm", default=None, help="JSVM enclave contract id")
@exit_on_error
def js_deploy_cmd(network_id, node_url, helper_url, explorer_url, master_account, verbose, strict, **kwargs):
    """Deploy a script to the enclave."""
    fields = _connection_fields(network_id, node_url, helper_url, explorer_url, master_account, verbose, strict)
    js_deploy(JsDeployOptions(**fields, **kwargs))


@js.command("remove")
@common_options
@click.option("--accountId", "account_id", required=True,
              help="The id of the account that will be removed from the enclave")
@click.option("--gas", type=int, default=DEFAULT_FUNCTION_CALL_GAS, show_default=True,
              help="Gas used to remove the contract from the enclave")
@exit_on_error
def js_remove_cmd(network_id, node_url, helper_url, explorer_url, master_account, verbose, strict, **kwargs):
    """Remove your script from the enclave."""
    fields = _connection_fields(network_id, node_url, helper_url, explorer_url, master_account, verbose, strict)
    js_remove(JsRemoveOptions(**fields, **kwargs))


if __name__ == "__main__":
    cli()
