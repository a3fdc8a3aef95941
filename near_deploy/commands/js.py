"""
Deploy scripts to, and remove them from, the JSVM enclave contract.
"""
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import click

from ..config import Settings
from ..connection import connect
from ..credentials import check_credentials
from ..error_handlers import handle_exceeded_prepaid_gas_error
from ..exceptions import (
    ConfigurationError, EnclaveCallFailed, PrepaidGasExceeded, RemoteExecutionError, UsageError
)
from ..inspect_response import format_response, get_transaction_last_result, pretty_print_response
from ..key_store import create_key_store
from ..models import CommandOptions, EnclaveDeploymentRequest, JsDeployOptions, JsRemoveOptions
from ..units import format_near_amount, parse_near_amount

logger = logging.getLogger(__name__)

DEPLOY_METHOD = "deploy_js_contract"
REMOVE_METHOD = "remove_js_contract"


def resolve_jsvm_contract_id(network_id: str, jsvm: Optional[str] = None, settings: Optional[Settings] = None) -> str:
    """
    Pick the enclave contract to talk to.

    An explicit id always wins, testnet has a default and every other
    network must be given one.

    Raises:
        ConfigurationError: If there is no default for the network
    """
    settings = settings or Settings()
    if jsvm is not None:
        return jsvm

    if network_id == settings.production_network_id:
        raise ConfigurationError("No current default jsvm contract for mainnet")

    if network_id == "testnet":
        return settings.testnet_jsvm_contract_id

    raise ConfigurationError(f"Cannot find a default JSVM contract for network id {network_id}")


def resolve_deposit(deposit: Optional[str], deposit_yocto: Optional[str]) -> str:
    """A yoctoNEAR deposit is used verbatim, otherwise ``deposit`` is converted from NEAR"""
    if deposit_yocto is not None:
        if not (deposit_yocto.isascii() and deposit_yocto.isdigit()):
            raise UsageError(f"--depositYocto must be a whole number of yoctoNEAR, got '{deposit_yocto}'")
        return deposit_yocto
    return parse_near_amount(deposit) or "0"


def _report_failure(error: Exception, gas: int, options: CommandOptions) -> None:
    if isinstance(error, RemoteExecutionError) and isinstance(error.kind, PrepaidGasExceeded):
        handle_exceeded_prepaid_gas_error(error, gas, options)
    else:
        logger.debug(f"Enclave call failed: {error!r}")
        click.echo(f"Enclave call failed: {error}", err=True)

    if options.strict:
        raise EnclaveCallFailed(str(error)) from error


def _call_enclave(
    request: EnclaveDeploymentRequest,
    method_name: str,
    options: CommandOptions,
    key_store
) -> Optional[Dict[str, Any]]:
    near = connect(options, key_store)
    account = near.account(request.caller_id)

    try:
        response = account.function_call(
            request.enclave_id,
            method_name,
            request.payload,
            request.gas,
            request.deposit,
        )
    except Exception as e:  # node, network and execution failures alike
        _report_failure(e, request.gas, options)
        return None

    pretty_print_response(response, options)
    click.echo(format_response(get_transaction_last_result(response)))
    return response


def deploy(
    options: JsDeployOptions,
    settings: Optional[Settings] = None,
    key_store=None
) -> Optional[Dict[str, Any]]:
    """
    Deploy a base64 encoded script to the enclave on behalf of ``options.account_id``.

    Returns:
        The outcome of the call, or None if it failed and strict mode is off
    """
    settings = settings or Settings()
    if key_store is None:
        key_store = create_key_store(settings.project_key_directory, settings.credentials_directory)
    check_credentials(options.account_id, options.network_id, key_store)

    jsvm_id = resolve_jsvm_contract_id(options.network_id, options.jsvm, settings)
    deposit = resolve_deposit(options.deposit, options.deposit_yocto)
    payload = Path(options.base64_file).read_bytes()
    if options.init_function:
        logger.warning(f"--initFunction {options.init_function} is ignored by js deploy")

    click.echo(
        f"Starting deployment. Account id: {options.account_id}, JSVM: {jsvm_id}, file: {options.base64_file}"
    )
    logger.debug(f"Attaching {format_near_amount(deposit)} NEAR for enclave storage")

    request = EnclaveDeploymentRequest(
        caller_id=options.account_id,
        enclave_id=jsvm_id,
        payload=payload,
        gas=options.gas,
        deposit=deposit,
    )
    return _call_enclave(request, DEPLOY_METHOD, options, key_store)


def remove(
    options: JsRemoveOptions,
    settings: Optional[Settings] = None,
    key_store=None
) -> Optional[Dict[str, Any]]:
    """
    Remove the script ``options.account_id`` deployed to the enclave.

    Returns:
        The outcome of the call, or None if it failed and strict mode is off
    """
    settings = settings or Settings()
    if key_store is None:
        key_store = create_key_store(settings.project_key_directory, settings.credentials_directory)
    check_credentials(options.account_id, options.network_id, key_store)

    jsvm_id = resolve_jsvm_contract_id(options.network_id, options.jsvm, settings)
    request = EnclaveDeploymentRequest(
        caller_id=options.account_id,
        enclave_id=jsvm_id,
        payload=b"",
        gas=options.gas,
        deposit="0",
    )
    return _call_enclave(request, REMOVE_METHOD, options, key_store)
