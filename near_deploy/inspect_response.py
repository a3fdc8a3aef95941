"""
Formatting of transaction outcomes for the terminal.
"""
import base64
import binascii
import json
import logging
import pprint
from typing import Any, Dict, Optional

import click

from .models import CommandOptions

logger = logging.getLogger(__name__)


def format_response(response: Any) -> str:
    """Render a response or decoded result for display"""
    if isinstance(response, str):
        return response
    return pprint.pformat(response, width=100, sort_dicts=False)


def get_transaction_last_result(outcome: Dict[str, Any]) -> Any:
    """
    Decode the return value of the last receipt.

    Returns:
        The JSON decoded ``SuccessValue``, the raw string if it is not JSON,
        or None when the outcome carries no value
    """
    status = outcome.get("status")
    if not isinstance(status, dict) or not isinstance(status.get("SuccessValue"), str):
        return None

    try:
        value = base64.b64decode(status["SuccessValue"]).decode("utf8")
    except (binascii.Error, UnicodeDecodeError) as e:
        logger.warning(f"Could not decode SuccessValue: {e}")
        return status["SuccessValue"]

    try:
        return json.loads(value)
    except ValueError:
        return value


def get_transaction_id(response: Dict[str, Any]) -> Optional[str]:
    transaction = response.get("transaction") or {}
    if transaction.get("hash"):
        return transaction["hash"]
    return (response.get("transaction_outcome") or {}).get("id")


def explorer_transaction_url(options: CommandOptions, transaction_id: str) -> Optional[str]:
    if not options.explorer_url:
        return None
    return f"{options.explorer_url.rstrip('/')}/transactions/{transaction_id}"


def pretty_print_response(response: Dict[str, Any], options: CommandOptions) -> None:
    """Print the outcome and where to find the transaction in the explorer"""
    if options.verbose:
        click.echo(format_response(response))

    transaction_id = get_transaction_id(response)
    if not transaction_id:
        return

    click.echo(f"Transaction Id {transaction_id}")
    url = explorer_transaction_url(options, transaction_id)
    if url:
        click.echo("To see the transaction in the transaction explorer, please open this url in your browser")
        click.echo(url)
