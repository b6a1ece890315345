"""
Runtime configuration and logging setup.

Configuration is a frozen dataclass; it can be built directly, from the
environment (`PAIRSWAP_*` variables), or from a YAML mapping.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping, Union

import structlog
import yaml


DEFAULT_PRICE_SCALE = 10**18
DEFAULT_MAX_RESERVE_BITS = 112

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_LOG_FORMATS = ("console", "json")


def _env_int(name: str, default: int, *, lo: int, hi: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return int(default)
    try:
        v = int(raw.strip())
    except ValueError:
        return int(default)
    if v < lo:
        return int(lo)
    if v > hi:
        return int(hi)
    return int(v)


def _env_str(name: str, default: str) -> str:
    raw = os.environ.get(name)
    if raw is None:
        return default
    v = raw.strip()
    return v if v else default


@dataclass(frozen=True)
class PoolConfig:
    """
    Pool engine settings.

    Attributes:
        price_scale: Fixed-point scale used by `get_price` (10**18 by default)
        max_reserve_bits: Width of each reserve; reserves above 2**bits - 1 overflow
        log_level: structlog level filter
        log_format: "console" or "json"
    """

    price_scale: int = DEFAULT_PRICE_SCALE
    max_reserve_bits: int = DEFAULT_MAX_RESERVE_BITS
    log_level: str = "INFO"
    log_format: str = "console"

    def __post_init__(self) -> None:
        if not isinstance(self.price_scale, int) or isinstance(self.price_scale, bool) or self.price_scale <= 0:
            raise ValueError(f"price_scale must be a positive int: {self.price_scale!r}")
        if (
            not isinstance(self.max_reserve_bits, int)
            or isinstance(self.max_reserve_bits, bool)
            or not (1 <= self.max_reserve_bits <= 256)
        ):
            raise ValueError(f"max_reserve_bits must be in [1, 256]: {self.max_reserve_bits!r}")
        if self.log_level.upper() not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {_LOG_LEVELS}: {self.log_level!r}")
        if self.log_format not in _LOG_FORMATS:
            raise ValueError(f"log_format must be one of {_LOG_FORMATS}: {self.log_format!r}")

    @property
    def max_reserve(self) -> int:
        return (1 << self.max_reserve_bits) - 1

    @classmethod
    def from_env(cls) -> "PoolConfig":
        return cls(
            price_scale=_env_int("PAIRSWAP_PRICE_SCALE", DEFAULT_PRICE_SCALE, lo=1, hi=10**36),
            max_reserve_bits=_env_int("PAIRSWAP_MAX_RESERVE_BITS", DEFAULT_MAX_RESERVE_BITS, lo=1, hi=256),
            log_level=_env_str("PAIRSWAP_LOG_LEVEL", "INFO").upper(),
            log_format=_env_str("PAIRSWAP_LOG_FORMAT", "console").lower(),
        )

    @classmethod
    def from_mapping(cls, obj: Mapping[str, Any]) -> "PoolConfig":
        if not isinstance(obj, Mapping):
            raise TypeError("config must be a mapping")
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(obj) - known)
        if unknown:
            raise ValueError(f"unknown config keys: {unknown}")
        return cls(**dict(obj))

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "PoolConfig":
        obj = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
        if obj is None:
            return cls()
        return cls.from_mapping(obj)


def configure_logging(config: PoolConfig = PoolConfig()) -> None:
    """Install structlog processors for the configured level and format."""
    renderer = (
        structlog.processors.JSONRenderer()
        if config.log_format == "json"
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, config.log_level.upper())
        ),
        cache_logger_on_first_use=False,
    )
