"""
Transmute error taxonomy.

Every failure raised by the core derives from ``TransmuteError`` and
carries enough context (operation, target, node message) to diagnose it
without re-deriving chain state.  ``exit_code`` is what the CLI exits with.
"""

from __future__ import annotations

from typing import Any, Optional


class TransmuteError(RuntimeError):
    exit_code: int = 1

    def __init__(
        self,
        message: str,
        *,
        operation: Optional[str] = None,
        target: Optional[str] = None,
        node_message: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.target = target
        self.node_message = node_message

    def __str__(self) -> str:
        parts = [self.message]
        if self.operation:
            parts.append(f"operation={self.operation}")
        if self.target:
            parts.append(f"target={self.target}")
        if self.node_message:
            parts.append(f"node: {self.node_message}")
        return " | ".join(parts)


class ConfigurationError(TransmuteError):
    exit_code = 2


class InvalidKey(ConfigurationError):
    pass


class EncodingError(TransmuteError):
    exit_code = 3


class MalformedResponse(TransmuteError):
    exit_code = 4


class RpcError(TransmuteError):
    """The node answered a JSON-RPC request with an error object."""

    exit_code = 5

    def __init__(
        self,
        message: str,
        *,
        method: Optional[str] = None,
        code: Optional[int] = None,
        data: Any = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.method = method
        self.code = code
        self.data = data


class NodeUnavailable(RpcError):
    """The node could not be reached or returned a non-JSON-RPC reply."""


class EstimationFailed(TransmuteError):
    exit_code = 6


class SubmissionRejected(TransmuteError):
    exit_code = 7


class TransactionReverted(TransmuteError):
    exit_code = 8

    def __init__(self, message: str, *, outcome: Any = None, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.outcome = outcome


class ConfirmationTimeout(TransmuteError):
    exit_code = 9

    def __init__(self, message: str, *, tx_hash: Optional[str] = None, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.tx_hash = tx_hash


class Cancelled(TransmuteError):
    exit_code = 10


class InvalidSlippage(TransmuteError, ValueError):
    exit_code = 11
