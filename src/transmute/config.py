"""
Client configuration.

Three options are recognized and nothing else:

- gas_limit_buffer:  gas units added on top of every node estimate
- swap_gas_limit:    fixed gas ceiling used for swaps instead of estimation
- deadline_duration: how long a submitted swap stays executable on-chain

Values are read once when a client is constructed and never change after.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import Any, Mapping, Optional

from dotenv import load_dotenv

from .errors import ConfigurationError
from .sigil import eth as sigil_eth


DEFAULT_GAS_LIMIT_BUFFER = 50_000
DEFAULT_SWAP_GAS_LIMIT = 1_000_000
DEFAULT_DEADLINE_DURATION = timedelta(minutes=15)

_KEY_ALIASES = {
    "gas_limit_buffer": "gas_limit_buffer",
    "gasLimitBuffer": "gas_limit_buffer",
    "swap_gas_limit": "swap_gas_limit",
    "swapGasLimit": "swap_gas_limit",
    "deadline_duration": "deadline_duration",
    "deadlineDuration": "deadline_duration",
}


@dataclass(frozen=True)
class Config:
    gas_limit_buffer: int = DEFAULT_GAS_LIMIT_BUFFER
    swap_gas_limit: int = DEFAULT_SWAP_GAS_LIMIT
    deadline_duration: timedelta = DEFAULT_DEADLINE_DURATION

    def __post_init__(self) -> None:
        if not _is_int(self.gas_limit_buffer) or self.gas_limit_buffer < 0:
            raise ConfigurationError(
                f"gas_limit_buffer must be a non-negative integer, got {self.gas_limit_buffer!r}"
            )
        if not _is_int(self.swap_gas_limit) or self.swap_gas_limit <= 0:
            raise ConfigurationError(
                f"swap_gas_limit must be a positive integer, got {self.swap_gas_limit!r}"
            )
        if not isinstance(self.deadline_duration, timedelta):
            raise ConfigurationError("deadline_duration must be a timedelta")
        if self.deadline_duration <= timedelta(0):
            raise ConfigurationError("deadline_duration must be positive")

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "Config":
        """
        Build a Config from a plain mapping.

        Keys may be snake_case or camelCase.  ``deadline_duration`` may be a
        timedelta or a number of seconds.

        Raises:
            ConfigurationError: On unknown keys or invalid values
        """
        kwargs: dict[str, Any] = {}
        for key, value in values.items():
            field_name = _KEY_ALIASES.get(key)
            if field_name is None:
                raise ConfigurationError(f"Unknown configuration option: {key}")
            if field_name in kwargs:
                raise ConfigurationError(f"Configuration option given twice: {field_name}")
            kwargs[field_name] = value

        duration = kwargs.get("deadline_duration")
        if duration is not None and not isinstance(duration, timedelta):
            kwargs["deadline_duration"] = timedelta(seconds=_parse_int("deadline_duration", duration))
        for name in ("gas_limit_buffer", "swap_gas_limit"):
            if name in kwargs:
                kwargs[name] = _parse_int(name, kwargs[name])

        return cls(**kwargs)


def load_config(env_path: Optional[Path] = None) -> Config:
    """
    Load Config from the environment.

    Reads TRANSMUTE_GAS_LIMIT_BUFFER, TRANSMUTE_SWAP_GAS_LIMIT and
    TRANSMUTE_DEADLINE_SECONDS, after loading the .env file (default:
    ~/.transmute/.env) if it exists.  Unset variables keep their defaults.
    """
    env_path = env_path or sigil_eth.TRANSMUTE_ENV
    if env_path.exists():
        load_dotenv(env_path, override=False)

    values: dict[str, Any] = {}
    env_map = {
        "TRANSMUTE_GAS_LIMIT_BUFFER": "gas_limit_buffer",
        "TRANSMUTE_SWAP_GAS_LIMIT": "swap_gas_limit",
        "TRANSMUTE_DEADLINE_SECONDS": "deadline_duration",
    }
    for env_name, field_name in env_map.items():
        raw = os.environ.get(env_name)
        if raw:
            values[field_name] = raw

    return Config.from_mapping(values)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _parse_int(name: str, value: Any) -> int:
    if _is_int(value):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip(), 10)
        except ValueError:
            pass
    raise ConfigurationError(f"{name} must be an integer, got {value!r}")
