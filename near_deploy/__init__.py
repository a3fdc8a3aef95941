"""
near-deploy: deploy and initialize contracts on NEAR networks.
"""
from .config import NetworkConfig, Settings, resolve_network_id
from .connection import Near, NearAccount, connect
from .exceptions import (
    NearDeployError, ConfigurationError, UsageError, CredentialsError,
    AccountCreationError, RemoteExecutionError, EnclaveCallFailed,
    PrepaidGasExceeded, UnclassifiedFailure, decode_error_kind
)
from .models import (
    AccountKey, DeploymentRequest, EnclaveDeploymentRequest, ExecutionResult,
    CommandOptions, DevDeployOptions, JsDeployOptions, JsRemoveOptions
)
from .version import __version__

__all__ = [
    'NetworkConfig',
    'Settings',
    'resolve_network_id',
    'Near',
    'NearAccount',
    'connect',
    'NearDeployError',
    'ConfigurationError',
    'UsageError',
    'CredentialsError',
    'AccountCreationError',
    'RemoteExecutionError',
    'EnclaveCallFailed',
    'PrepaidGasExceeded',
    'UnclassifiedFailure',
    'decode_error_kind',
    'AccountKey',
    'DeploymentRequest',
    'EnclaveDeploymentRequest',
    'ExecutionResult',
    'CommandOptions',
    'DevDeployOptions',
    'JsDeployOptions',
    'JsRemoveOptions',
    '__version__',
]
