"""
Explanations for well-known remote execution failures.
"""
import logging

import click

from .exceptions import RemoteExecutionError
from .inspect_response import explorer_transaction_url
from .models import CommandOptions

logger = logging.getLogger(__name__)


def handle_exceeded_prepaid_gas_error(error: RemoteExecutionError, gas: int, options: CommandOptions) -> None:
    """Explain that the call ran out of the gas attached to it"""
    transaction_id = error.transaction_id
    if transaction_id is None:
        click.echo(click.style(f"\nTransaction had {gas} of attached gas but ran out of it", bold=True))
        return

    click.echo(click.style(
        f"\nTransaction {transaction_id} had {gas} of attached gas but used {error.gas_burnt} of gas",
        bold=True
    ))
    url = explorer_transaction_url(options, transaction_id)
    if url:
        click.echo("View this transaction in explorer: " + click.style(url, fg="blue"))
