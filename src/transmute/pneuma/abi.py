"""
ABI Codec - function selectors, call encoding and result decoding.

Functions are described by ``FunctionSpec`` records instead of ABI JSON.
The router / token surface used by the swap workflow is declared once in
this module so the selector and argument types live in one place.

Encoding and decoding are delegated to eth-abi; its errors are mapped
onto ``EncodingError`` / ``MalformedResponse``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

import eth_abi
from eth_abi.exceptions import DecodingError as AbiDecodingError
from eth_abi.exceptions import EncodingError as AbiEncodingError
from eth_hash.auto import keccak

from ..errors import EncodingError, MalformedResponse
from .types import Address

SUPPORTED_TYPES = frozenset({"address", "uint256", "bool", "address[]", "uint256[]"})

WORD_SIZE = 32


@dataclass(frozen=True)
class FunctionSpec:
    name: str
    inputs: tuple[str, ...] = ()
    outputs: tuple[str, ...] = ()
    payable: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "inputs", tuple(self.inputs))
        object.__setattr__(self, "outputs", tuple(self.outputs))
        for abi_type in self.inputs + self.outputs:
            if abi_type not in SUPPORTED_TYPES:
                raise EncodingError(f"Unsupported ABI type {abi_type!r} in {self.name}")

    @property
    def signature(self) -> str:
        return f"{self.name}({','.join(self.inputs)})"

    @property
    def selector(self) -> bytes:
        return function_selector(self)


# ============ Contract surface ============

DEPOSIT = FunctionSpec("deposit", payable=True)
APPROVE = FunctionSpec("approve", ("address", "uint256"), ("bool",))
BALANCE_OF = FunctionSpec("balanceOf", ("address",), ("uint256",))
SWAP_EXACT_TOKENS_FOR_TOKENS = FunctionSpec(
    "swapExactTokensForTokens",
    ("uint256", "uint256", "address[]", "address", "uint256"),
    ("uint256[]",),
)
GET_AMOUNTS_OUT = FunctionSpec("getAmountsOut", ("uint256", "address[]"), ("uint256[]",))

REGISTRY: dict[str, FunctionSpec] = {
    spec.name: spec
    for spec in (DEPOSIT, APPROVE, BALANCE_OF, SWAP_EXACT_TOKENS_FOR_TOKENS, GET_AMOUNTS_OUT)
}


def lookup(name: str) -> FunctionSpec:
    try:
        return REGISTRY[name]
    except KeyError:
        raise EncodingError(f"Function {name} is not registered") from None


def function_selector(spec: FunctionSpec) -> bytes:
    # NOTE: Keccak-256 != SHA3-256 (NIST). Never use hashlib.sha3_256 here.
    return keccak(spec.signature.encode("utf-8"))[:4]


def encode_call(spec: FunctionSpec, args: Sequence[Any]) -> bytes:
    """
    ABI-encode a function call.

    Args:
        spec: Function description
        args: Arguments in declaration order (Address or hex str for addresses)

    Returns:
        4-byte selector followed by the encoded argument words

    Raises:
        EncodingError: On arity mismatch or a value the type cannot hold
    """
    args = list(args)
    if len(args) != len(spec.inputs):
        raise EncodingError(
            f"{spec.signature} takes {len(spec.inputs)} arguments, got {len(args)}"
        )

    values = [_to_abi_value(t, v, spec) for t, v in zip(spec.inputs, args)]
    if not values:
        return function_selector(spec)

    try:
        encoded = eth_abi.encode(list(spec.inputs), values)
    except (AbiEncodingError, TypeError, ValueError) as exc:
        raise EncodingError(f"Cannot encode arguments for {spec.signature}: {exc}") from exc

    return function_selector(spec) + encoded


def decode_result(spec: FunctionSpec, data: bytes) -> tuple:
    """
    ABI-decode the return data of ``spec``.

    Returns:
        Tuple of decoded values, one per declared output.  Addresses come
        back as ``Address`` and arrays as tuples.

    Raises:
        MalformedResponse: If the data is too short or not a valid encoding
    """
    return decode(spec.outputs, data, context=spec.signature)


def decode(output_types: Sequence[str], data: bytes, context: str = "result") -> tuple:
    output_types = list(output_types)
    if not output_types:
        return ()

    # Each output occupies at least one head word (value or offset).
    head_size = WORD_SIZE * len(output_types)
    if len(data) < head_size:
        raise MalformedResponse(
            f"{context}: expected at least {head_size} bytes, got {len(data)}"
        )

    try:
        decoded = eth_abi.decode(output_types, data)
    except AbiDecodingError as exc:
        raise MalformedResponse(f"{context}: cannot decode return data: {exc}") from exc

    return tuple(_from_abi_value(t, v) for t, v in zip(output_types, decoded))


def _to_abi_value(abi_type: str, value: Any, spec: FunctionSpec) -> Any:
    if abi_type == "address":
        return _address_arg(value, spec)
    if abi_type == "address[]":
        if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
            raise EncodingError(f"{spec.signature}: address[] argument must be a sequence")
        return [_address_arg(item, spec) for item in value]
    if abi_type == "uint256[]":
        if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
            raise EncodingError(f"{spec.signature}: uint256[] argument must be a sequence")
        return [_uint_arg(item, spec) for item in value]
    if abi_type == "uint256":
        return _uint_arg(value, spec)
    if abi_type == "bool":
        if not isinstance(value, bool):
            raise EncodingError(f"{spec.signature}: bool argument must be True or False")
        return value
    raise EncodingError(f"Unsupported ABI type {abi_type!r}")


def _address_arg(value: Any, spec: FunctionSpec) -> str:
    try:
        return Address.coerce(value).checksum
    except EncodingError as exc:
        raise EncodingError(f"{spec.signature}: {exc.message}") from None


def _uint_arg(value: Any, spec: FunctionSpec) -> int:
    # bool is an int subclass; reject it so True never encodes as 1.
    if not isinstance(value, int) or isinstance(value, bool):
        raise EncodingError(f"{spec.signature}: uint256 argument must be an int, got {value!r}")
    if value < 0 or value >= 2**256:
        raise EncodingError(f"{spec.signature}: uint256 argument out of range")
    return value


def _from_abi_value(abi_type: str, value: Any) -> Any:
    if abi_type == "address":
        return Address.from_hex(value)
    if abi_type == "address[]":
        return tuple(Address.from_hex(item) for item in value)
    if abi_type == "uint256[]":
        return tuple(value)
    return value
