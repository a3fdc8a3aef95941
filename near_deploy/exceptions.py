"""
Exceptions for near-deploy.

Remote execution failures carry the structured failure returned by the node.
Its ``kind`` is decoded into one of a small set of variants so callers can
dispatch on it with ``isinstance``.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union


PREPAID_GAS_EXCEEDED_MESSAGE = "Exceeded the prepaid gas."


class NearDeployError(Exception):
    """Base exception for all near-deploy errors."""
    pass


class ConfigurationError(NearDeployError):
    """Raised when the network, endpoints or accounts are misconfigured."""
    pass


class UsageError(NearDeployError):
    """Raised when command arguments are inconsistent."""
    pass


class CredentialsError(NearDeployError):
    """Raised when no key is stored for the signing account."""
    pass


class AccountCreationError(NearDeployError):
    """Raised when the helper service or master account fails to create an account."""
    pass


@dataclass(frozen=True)
class PrepaidGasExceeded:
    """The call ran out of the gas attached to it."""
    message: str = PREPAID_GAS_EXCEEDED_MESSAGE


@dataclass(frozen=True)
class UnclassifiedFailure:
    """Any failure shape without a dedicated handler."""
    raw: Any = field(default=None)


ErrorKind = Union[PrepaidGasExceeded, UnclassifiedFailure]


def extract_error_kind(failure: Any) -> Any:
    """
    Pull the innermost ``kind`` out of a transaction failure structure.

    ``{"ActionError": {"kind": {"FunctionCallError": {...}}}}`` yields the
    ``FunctionCallError`` payload, other action errors yield their ``kind``
    and transaction-level errors yield their payload.
    """
    if not isinstance(failure, dict):
        return failure

    if "ActionError" in failure:
        kind = failure["ActionError"].get("kind")
        if isinstance(kind, dict) and "FunctionCallError" in kind:
            return kind["FunctionCallError"]
        return kind

    if "InvalidTxError" in failure:
        return failure["InvalidTxError"]

    return failure


def decode_error_kind(failure: Any) -> ErrorKind:
    """Decode a raw failure structure into an ``ErrorKind`` variant."""
    kind = extract_error_kind(failure)
    if kind == {"ExecutionError": PREPAID_GAS_EXCEEDED_MESSAGE}:
        return PrepaidGasExceeded()
    return UnclassifiedFailure(raw=kind)


class RemoteExecutionError(NearDeployError):
    """Raised when a submitted transaction fails on chain."""

    def __init__(self, failure: Any, outcome: Optional[Dict[str, Any]] = None):
        self.failure = failure
        self.outcome = outcome
        super().__init__(f"Transaction failed: {failure}")

    @property
    def kind(self) -> ErrorKind:
        return decode_error_kind(self.failure)

    @property
    def transaction_id(self) -> Optional[str]:
        if not self.outcome:
            return None
        return self.outcome.get("transaction_outcome", {}).get("id")

    @property
    def gas_burnt(self) -> Optional[int]:
        if not self.outcome:
            return None
        return self.outcome.get("transaction_outcome", {}).get("outcome", {}).get("gas_burnt")


class EnclaveCallFailed(NearDeployError):
    """Raised in strict mode after a failed enclave call has been reported."""
    pass
