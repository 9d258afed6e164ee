"""
Value types shared by the codec, builder and clients.

All of them are immutable.  Amounts are plain Python ints.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Union

from eth_utils import is_hex_address, remove_0x_prefix, to_checksum_address

from ..errors import EncodingError


@dataclass(frozen=True)
class Address:
    """A 20-byte account or contract address.  Equality is byte-exact."""

    raw: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.raw, bytes) or len(self.raw) != 20:
            raise EncodingError("Address must be exactly 20 bytes")

    @classmethod
    def from_hex(cls, value: str) -> "Address":
        """Parse a hex address, with or without 0x (any letter case)."""
        if not isinstance(value, str) or not is_hex_address(value):
            raise EncodingError(f"Not a valid hex address: {value!r}")
        return cls(bytes.fromhex(remove_0x_prefix(value)))

    @classmethod
    def coerce(cls, value: Union["Address", str, bytes]) -> "Address":
        if isinstance(value, Address):
            return value
        if isinstance(value, bytes):
            return cls(value)
        return cls.from_hex(value)

    @property
    def checksum(self) -> str:
        """EIP-55 checksummed hex form."""
        return to_checksum_address(self.raw)

    def __str__(self) -> str:
        return self.checksum

    def __repr__(self) -> str:
        return f"Address({self.checksum})"


@dataclass(frozen=True)
class CallIntent:
    """Call ``function`` on ``target`` with ``args`` (in declaration order)."""

    target: Address
    function: Any  # abi.FunctionSpec
    args: tuple = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "args", tuple(self.args))


@dataclass(frozen=True)
class ChainState:
    """
    What the node reported for one transaction.

    Exactly one of ``estimated_gas`` / ``fixed_gas_limit`` is set.
    """

    nonce: int
    gas_price: int
    estimated_gas: Optional[int] = None
    fixed_gas_limit: Optional[int] = None

    def __post_init__(self) -> None:
        if (self.estimated_gas is None) == (self.fixed_gas_limit is None):
            raise ValueError("Exactly one of estimated_gas or fixed_gas_limit must be set")


@dataclass(frozen=True)
class UnsignedTransaction:
    nonce: int
    to: Optional[Address]
    value: int
    gas: int
    gas_price: int
    data: bytes

    def as_dict(self, chain_id: int) -> dict[str, Any]:
        """Legacy (EIP-155) transaction dict in the form eth-account signs."""
        tx: dict[str, Any] = {
            "nonce": self.nonce,
            "value": self.value,
            "gas": self.gas,
            "gasPrice": self.gas_price,
            "data": "0x" + self.data.hex(),
            "chainId": chain_id,
        }
        if self.to is not None:
            tx["to"] = self.to.checksum
        return tx


@dataclass(frozen=True)
class Signature:
    r: int
    s: int
    v: int


@dataclass(frozen=True)
class SignedTransaction:
    unsigned: UnsignedTransaction
    signature: Signature
    raw: bytes = field(repr=False)
    hash: str

    @property
    def raw_hex(self) -> str:
        return "0x" + self.raw.hex()


@dataclass(frozen=True)
class TransactionOutcome:
    tx_hash: str
    success: bool
    gas_used: int
    block_number: int
    block_hash: Optional[str] = None
