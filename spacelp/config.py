"""
Runtime configuration for the pool, router and token ledger.

Configs are frozen dataclasses validated on construction. They can be loaded
from a YAML file and overridden from the environment:

    pool:
      fee_numerator: 99
      fee_denominator: 100
    router:
      fallback_eth: 1
      fallback_spc: 5
    token:
      tax_bps: 200
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Mapping

import yaml

from .state.balances import require_int


BPS_DENOM = 10_000


@dataclass(frozen=True)
class PoolConfig:
    """
    Swap fee as a retained fraction: the pool prices `amount_in * num // den`.

    The fee must be non-zero so every swap strictly grows the constant product.
    """

    fee_numerator: int = 99
    fee_denominator: int = 100

    def __post_init__(self) -> None:
        require_int("fee_numerator", self.fee_numerator)
        require_int("fee_denominator", self.fee_denominator)
        if self.fee_denominator <= 0:
            raise ValueError(f"fee_denominator must be positive: {self.fee_denominator}")
        if not (0 < self.fee_numerator < self.fee_denominator):
            raise ValueError(
                f"fee_numerator must be in (0, {self.fee_denominator}): {self.fee_numerator}"
            )


@dataclass(frozen=True)
class RouterConfig:
    """Deposit ratio suggested by the router while the pool is empty (ETH:SPC)."""

    fallback_eth: int = 1
    fallback_spc: int = 5

    def __post_init__(self) -> None:
        for name, v in (("fallback_eth", self.fallback_eth), ("fallback_spc", self.fallback_spc)):
            require_int(name, v)
            if v <= 0:
                raise ValueError(f"{name} must be positive: {v}")


@dataclass(frozen=True)
class TokenConfig:
    tax_bps: int = 200

    def __post_init__(self) -> None:
        require_int("tax_bps", self.tax_bps)
        if not (0 <= self.tax_bps <= BPS_DENOM):
            raise ValueError(f"tax_bps must be in [0, {BPS_DENOM}]: {self.tax_bps}")


@dataclass(frozen=True)
class SpaceLPConfig:
    pool: PoolConfig = field(default_factory=PoolConfig)
    router: RouterConfig = field(default_factory=RouterConfig)
    token: TokenConfig = field(default_factory=TokenConfig)


_SECTIONS = {
    "pool": PoolConfig,
    "router": RouterConfig,
    "token": TokenConfig,
}


def config_from_mapping(obj: Mapping[str, Any]) -> SpaceLPConfig:
    """Build a config from a parsed mapping; unknown sections or keys are rejected."""
    if not isinstance(obj, Mapping):
        raise TypeError("config must be a mapping")
    unknown = sorted(set(obj) - set(_SECTIONS))
    if unknown:
        raise ValueError(f"unknown config sections: {unknown}")

    sections = {}
    for name, cls in _SECTIONS.items():
        raw = obj.get(name) or {}
        if not isinstance(raw, Mapping):
            raise TypeError(f"config section {name!r} must be a mapping")
        allowed = set(cls.__dataclass_fields__)
        extra = sorted(set(raw) - allowed)
        if extra:
            raise ValueError(f"unknown keys in {name!r}: {extra}")
        sections[name] = cls(**dict(raw))
    return SpaceLPConfig(**sections)


def load_config(path: str | Path) -> SpaceLPConfig:
    """Load a YAML config file. An empty file yields the defaults."""
    obj = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    if obj is None:
        return SpaceLPConfig()
    return config_from_mapping(obj)


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


def config_from_env(base: SpaceLPConfig | None = None) -> SpaceLPConfig:
    """
    Apply `SPACELP_*` environment overrides on top of `base`.

    Unparseable values fall back to the base value; out-of-range values are clamped.
    """
    cfg = base or SpaceLPConfig()
    fee_den = _env_int("SPACELP_FEE_DENOMINATOR", cfg.pool.fee_denominator, lo=2, hi=10**18)
    fee_num = _env_int("SPACELP_FEE_NUMERATOR", cfg.pool.fee_numerator, lo=1, hi=fee_den - 1)
    return replace(
        cfg,
        pool=PoolConfig(fee_numerator=fee_num, fee_denominator=fee_den),
        router=RouterConfig(
            fallback_eth=_env_int("SPACELP_FALLBACK_ETH", cfg.router.fallback_eth, lo=1, hi=10**18),
            fallback_spc=_env_int("SPACELP_FALLBACK_SPC", cfg.router.fallback_spc, lo=1, hi=10**18),
        ),
        token=TokenConfig(tax_bps=_env_int("SPACELP_TAX_BPS", cfg.token.tax_bps, lo=0, hi=BPS_DENOM)),
    )
