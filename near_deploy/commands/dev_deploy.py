"""
Deploy a contract to a throwaway development account.
"""
import logging
from pathlib import Path
from typing import Any, List, Optional

import click
from near_api import transactions

from ..config import Settings
from ..connection import connect
from ..dev_account import create_dev_account_if_needed
from ..event_tracking import EVENT_ID_DEPLOY_END, EventTracker
from ..exceptions import ConfigurationError, UsageError
from ..inspect_response import pretty_print_response
from ..key_store import create_key_store
from ..models import DeploymentRequest, DevDeployOptions, ExecutionResult
from ..units import parse_near_amount

logger = logging.getLogger(__name__)

MISSING_INIT_ARGS_ERROR = "Must add initialization arguments"
MISSING_INIT_ARGS_USAGE = (
    "Must add initialization arguments.\n"
    "Example: near-deploy dev-deploy --initFunction \"new\" --initArgs '{\"key\": \"value\"}'"
)


def resolve_init_function(init_function: Optional[str], init_args: Optional[str], settings: Settings) -> Optional[str]:
    """Arguments without a method name call the conventional constructor"""
    if init_args and not init_function:
        return settings.default_init_function
    return init_function


def build_actions(request: DeploymentRequest) -> List[Any]:
    """Deploy action, followed by the initialization call if there is one"""
    actions = [transactions.create_deploy_contract_action(request.code)]
    if request.init_method:
        actions.append(transactions.create_function_call_action(
            request.init_method,
            request.init_args,
            request.gas,
            request.deposit
        ))
    return actions


def dev_deploy(
    options: DevDeployOptions,
    settings: Optional[Settings] = None,
    tracker: Optional[EventTracker] = None,
    key_store=None
) -> ExecutionResult:
    """
    Deploy ``options.wasm_file`` to a dev account, initializing it if asked.

    Deployment and initialization are submitted as a single transaction.

    Raises:
        ConfigurationError: On the production network, or when accounts cannot be created
        UsageError: When an init method is given without init arguments
        OSError: When the contract file cannot be read
    """
    settings = settings or Settings()
    tracker = tracker or EventTracker(settings.settings_path)

    if options.network_id == settings.production_network_id:
        raise ConfigurationError(
            "MainNet doesn't support dev-deploy. Use export NEAR_ENV=testnet to switch to TestNet"
        )
    tracker.ask_for_consent_if_needed(options)

    if not options.helper_url and not options.master_account:
        raise ConfigurationError(
            "Cannot create account as neither helperUrl nor masterAccount is specified "
            f"in config for network {options.network_id}"
        )

    init_function = resolve_init_function(options.init_function, options.init_args, settings)
    if init_function and not options.init_args:
        tracker.track(EVENT_ID_DEPLOY_END, {"success": False, "error": MISSING_INIT_ARGS_ERROR}, options)
        raise UsageError(MISSING_INIT_ARGS_USAGE)

    code = Path(options.wasm_file).read_bytes()

    if key_store is None:
        key_store = create_key_store(options.project_key_directory, settings.credentials_directory)
    near = connect(options, key_store)
    account_id = create_dev_account_if_needed(near, options)
    account = near.account(account_id)
    prev_code_hash = account.state().get("code_hash")

    click.echo(
        f"Starting deployment. Account id: {account_id}, node: {options.node_url}, "
        f"helper: {options.helper_url}, file: {options.wasm_file}"
    )

    request = DeploymentRequest(
        account_id=account_id,
        code=code,
        init_method=init_function,
        init_args=options.init_args.encode("utf8") if options.init_args else None,
        gas=options.init_gas,
        deposit=int(parse_near_amount(options.init_deposit) or 0),
    )
    outcome = account.sign_and_send_transaction(account_id, build_actions(request))
    pretty_print_response(outcome, options)

    code_hash = account.state().get("code_hash")
    tracker.track(EVENT_ID_DEPLOY_END, {
        "success": True,
        "code_hash": code_hash,
        "is_same_contract": prev_code_hash == code_hash,
        "contract_id": account_id,
    }, options)
    tracker.track_deployed_contract()

    click.echo(f"Done deploying {'and initializing' if request.init_method else 'to'} {account_id}")
    return ExecutionResult(outcome=outcome, code_hash_before=prev_code_hash, code_hash_after=code_hash)
