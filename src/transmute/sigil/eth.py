"""
ECDSA / secp256k1 signing identity.

The private key is handed to ``SigningIdentity`` explicitly and stays
inside it for the life of the process.  Nothing else in the package reads
key material; ``load_private_key`` exists only for the CLI, which reads
PRIVATE_KEY from the environment or ~/.transmute/.env.

Dependencies: eth-account (transaction signing), eth-keys (raw digests)
"""

from __future__ import annotations

import os
import re
import secrets
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from eth_account import Account
from eth_keys import keys
from eth_keys.exceptions import ValidationError as KeyValidationError

from ..errors import ConfigurationError, InvalidKey
from ..pneuma.types import Address, Signature, SignedTransaction, UnsignedTransaction


# Default config directory
TRANSMUTE_DIR = Path.home() / ".transmute"
TRANSMUTE_ENV = TRANSMUTE_DIR / ".env"

_HEX_KEY = re.compile(r"^(0x)?[0-9a-fA-F]{64}$")

# Order of the secp256k1 group; valid keys are in [1, n).
SECP256K1_N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141


class SigningIdentity:
    """Holds one private key and the address derived from it."""

    __slots__ = ("_account", "_address")

    def __init__(self, private_key: str) -> None:
        if not isinstance(private_key, str) or not private_key.strip():
            raise InvalidKey("Private key is empty")
        private_key = private_key.strip()
        if not _HEX_KEY.match(private_key):
            raise InvalidKey("Private key must be 32 bytes of hex")
        if not private_key.startswith("0x"):
            private_key = "0x" + private_key
        if not 0 < int(private_key, 16) < SECP256K1_N:
            raise InvalidKey("Private key is not a valid secp256k1 scalar")

        try:
            account = Account.from_key(private_key)
        except (ValueError, KeyValidationError):
            # Chaining would carry the key bytes into the traceback.
            raise InvalidKey("Private key is not a valid secp256k1 scalar") from None

        self._account = account
        self._address = Address.from_hex(account.address)

    @classmethod
    def from_key(cls, private_key: str) -> "SigningIdentity":
        return cls(private_key)

    @classmethod
    def generate(cls) -> "SigningIdentity":
        """Fresh random identity.  Useful for tests and dry runs."""
        return cls("0x" + secrets.token_hex(32))

    @property
    def address(self) -> Address:
        return self._address

    def sign_hash(self, digest: bytes) -> Signature:
        """
        Sign a 32-byte digest with the raw secp256k1 key.

        Returns:
            Signature with ``v`` as the recovery id (0 or 1)
        """
        if not isinstance(digest, bytes) or len(digest) != 32:
            raise ValueError("Digest must be exactly 32 bytes")
        signature = keys.PrivateKey(bytes(self._account.key)).sign_msg_hash(digest)
        return Signature(r=signature.r, s=signature.s, v=signature.v)

    def sign_transaction(self, tx: UnsignedTransaction, chain_id: int) -> SignedTransaction:
        """Sign a legacy transaction with EIP-155 replay protection."""
        signed = self._account.sign_transaction(tx.as_dict(chain_id))
        return SignedTransaction(
            unsigned=tx,
            signature=Signature(r=signed.r, s=signed.s, v=signed.v),
            raw=bytes(signed.raw_transaction),
            hash="0x" + bytes(signed.hash).hex(),
        )

    def __repr__(self) -> str:
        return f"SigningIdentity(address={self._address.checksum})"


def load_private_key(env_path: Optional[Path] = None) -> str:
    """
    Load private key from the environment or a .env file.

    Args:
        env_path: Path to .env file (default: ~/.transmute/.env)

    Returns:
        0x-prefixed hex private key

    Raises:
        ConfigurationError: If PRIVATE_KEY is not set anywhere
    """
    env_path = env_path or TRANSMUTE_ENV

    if env_path.exists():
        load_dotenv(env_path, override=False)

    private_key = os.environ.get("PRIVATE_KEY", "").strip()
    if not private_key:
        raise ConfigurationError(f"PRIVATE_KEY not found. Set it in the environment or in {env_path}")

    if not private_key.startswith("0x"):
        private_key = "0x" + private_key

    return private_key
