"""
Query Client - read-only contract calls through eth_call.

No nonce, no signature, no gas paid.  Used for balances and router quotes.
"""

from __future__ import annotations

from typing import Optional, Sequence, Union

from ..errors import EncodingError, MalformedResponse, RpcError
from .abi import BALANCE_OF, GET_AMOUNTS_OUT, decode_result, encode_call
from .cancel import CancelToken
from .rpc import RpcClient, call_object
from .types import Address, CallIntent

AddressLike = Union[Address, str]


class QueryClient:
    """
    Args:
        rpc: Node client
        router: Router contract used for quotes
        account: Default owner for balance lookups
    """

    def __init__(
        self,
        rpc: RpcClient,
        router: AddressLike,
        account: Optional[AddressLike] = None,
    ) -> None:
        self.rpc = rpc
        self.router = Address.coerce(router)
        self.account = Address.coerce(account) if account is not None else None

    def call(self, intent: CallIntent, cancel: Optional[CancelToken] = None) -> tuple:
        """Simulate ``intent`` against the latest block and decode the result."""
        spec = intent.function
        calldata = encode_call(spec, intent.args)
        try:
            raw = self.rpc.call(call_object(intent.target, calldata), cancel=cancel)
        except RpcError as exc:
            exc.operation = exc.operation or spec.name
            exc.target = exc.target or intent.target.checksum
            raise

        if spec.outputs and not raw:
            raise MalformedResponse(
                "Empty return data", operation=spec.name, target=intent.target.checksum
            )
        try:
            return decode_result(spec, raw)
        except MalformedResponse as exc:
            exc.operation = spec.name
            exc.target = intent.target.checksum
            raise

    def balance_of(
        self,
        token: AddressLike,
        owner: Optional[AddressLike] = None,
        cancel: Optional[CancelToken] = None,
    ) -> int:
        """ERC-20 balance of ``owner`` (default: this client's account)."""
        owner_address = self._owner(owner)
        (balance,) = self.call(
            CallIntent(Address.coerce(token), BALANCE_OF, (owner_address,)), cancel=cancel
        )
        return balance

    def native_balance(
        self, owner: Optional[AddressLike] = None, cancel: Optional[CancelToken] = None
    ) -> int:
        return self.rpc.get_balance(self._owner(owner), cancel=cancel)

    def get_amounts_out(
        self,
        amount_in: int,
        path: Sequence[AddressLike],
        cancel: Optional[CancelToken] = None,
    ) -> tuple[int, ...]:
        """
        Router quote for every hop of ``path``.

        Raises:
            EncodingError: Path shorter than two tokens
            MalformedResponse: Quote length differs from the path length
        """
        path = [Address.coerce(token) for token in path]
        if len(path) < 2:
            raise EncodingError(
                "Swap path needs at least two token addresses", operation=GET_AMOUNTS_OUT.name
            )

        (amounts,) = self.call(CallIntent(self.router, GET_AMOUNTS_OUT, (amount_in, path)), cancel=cancel)
        if len(amounts) != len(path):
            raise MalformedResponse(
                f"Quote returned {len(amounts)} amounts for a path of {len(path)} tokens",
                operation=GET_AMOUNTS_OUT.name,
                target=self.router.checksum,
            )
        return amounts

    def expected_amount_out(
        self,
        amount_in: int,
        path: Sequence[AddressLike],
        cancel: Optional[CancelToken] = None,
    ) -> int:
        """Final output amount of swapping ``amount_in`` along ``path``."""
        return self.get_amounts_out(amount_in, path, cancel=cancel)[-1]

    def _owner(self, owner: Optional[AddressLike]) -> Address:
        if owner is not None:
            return Address.coerce(owner)
        if self.account is None:
            raise ValueError("No owner given and no default account configured")
        return self.account
