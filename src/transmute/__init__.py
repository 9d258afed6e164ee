__all__ = [
    # Types
    "Address",
    "CallIntent",
    "ChainState",
    "Signature",
    "SignedTransaction",
    "TransactionOutcome",
    "UnsignedTransaction",
    # Config
    "Config",
    "load_config",
    # ABI
    "FunctionSpec",
    "decode_result",
    "encode_call",
    "function_selector",
    # Clients
    "CancelToken",
    "ExecutionClient",
    "QueryClient",
    "RpcClient",
    "TransactionBuilder",
    # Swap math
    "min_output",
    # Identity
    "SigningIdentity",
    "load_private_key",
    # Errors
    "Cancelled",
    "ConfigurationError",
    "ConfirmationTimeout",
    "EncodingError",
    "EstimationFailed",
    "InvalidKey",
    "InvalidSlippage",
    "MalformedResponse",
    "NodeUnavailable",
    "RpcError",
    "SubmissionRejected",
    "TransactionReverted",
    "TransmuteError",
]

from .config import Config, load_config
from .errors import (
    Cancelled,
    ConfigurationError,
    ConfirmationTimeout,
    EncodingError,
    EstimationFailed,
    InvalidKey,
    InvalidSlippage,
    MalformedResponse,
    NodeUnavailable,
    RpcError,
    SubmissionRejected,
    TransactionReverted,
    TransmuteError,
)
from .pneuma.abi import FunctionSpec, decode_result, encode_call, function_selector
from .pneuma.cancel import CancelToken
from .pneuma.client import ExecutionClient
from .pneuma.query import QueryClient
from .pneuma.rpc import RpcClient
from .pneuma.slippage import min_output
from .pneuma.tx import TransactionBuilder
from .pneuma.types import (
    Address,
    CallIntent,
    ChainState,
    Signature,
    SignedTransaction,
    TransactionOutcome,
    UnsignedTransaction,
)
from .sigil.eth import SigningIdentity, load_private_key
