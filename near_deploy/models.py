"""
Data models for near-deploy.
"""
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, model_validator

from .config import DEFAULT_FUNCTION_CALL_GAS, DEFAULT_INIT_FUNCTION, PROJECT_KEY_DIR


class AccountKey(BaseModel):
    """Credential file contents for a single account"""
    account_id: str
    public_key: str
    private_key: str


class DeploymentRequest(BaseModel):
    """Deploy plus optional initialization call, submitted as one transaction"""
    account_id: str
    code: bytes
    init_method: Optional[str] = None
    init_args: Optional[bytes] = None
    gas: int = DEFAULT_FUNCTION_CALL_GAS
    deposit: int = 0

    @model_validator(mode="after")
    def _check_init_call(self) -> "DeploymentRequest":
        if self.init_args and not self.init_method:
            self.init_method = DEFAULT_INIT_FUNCTION
        if self.init_method and not self.init_args:
            raise ValueError("Must add initialization arguments.")
        return self


class EnclaveDeploymentRequest(BaseModel):
    """Function call against the JSVM enclave contract"""
    caller_id: str
    enclave_id: str
    payload: bytes = b""
    gas: int = DEFAULT_FUNCTION_CALL_GAS
    deposit: str = "0"


class ExecutionResult(BaseModel):
    """Outcome of a deployment with the code hash before and after it"""
    outcome: Dict[str, Any]
    code_hash_before: Optional[str] = None
    code_hash_after: Optional[str] = None

    @property
    def code_changed(self) -> bool:
        return self.code_hash_before != self.code_hash_after


class CommandOptions(BaseModel):
    """Options shared by every command"""
    network_id: str
    node_url: str
    helper_url: Optional[str] = None
    explorer_url: Optional[str] = None
    master_account: Optional[str] = None
    initial_balance: str = "100"
    verbose: bool = False
    strict: bool = False


class DevDeployOptions(CommandOptions):
    wasm_file: str = "./out/main.wasm"
    init_function: Optional[str] = None
    init_args: Optional[str] = None
    init_gas: int = DEFAULT_FUNCTION_CALL_GAS
    init_deposit: str = "0"
    init: bool = Field(False, description="Create a new account even if one exists")
    project_key_directory: str = PROJECT_KEY_DIR


class JsDeployOptions(CommandOptions):
    base64_file: str
    account_id: str
    gas: int = DEFAULT_FUNCTION_CALL_GAS
    deposit: Optional[str] = None
    deposit_yocto: Optional[str] = None
    init_function: Optional[str] = None
    jsvm: Optional[str] = None


class JsRemoveOptions(CommandOptions):
    account_id: str
    gas: int = DEFAULT_FUNCTION_CALL_GAS
    jsvm: Optional[str] = None
