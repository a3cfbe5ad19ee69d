"""
spacelp: ETH/SPC constant-product liquidity pool with a slippage-guarding router
"""

from .chain import Chain, SpaceCoin
from .config import PoolConfig, RouterConfig, SpaceLPConfig, TokenConfig, config_from_env, load_config
from .core import SpaceLP, SpaceRouter
from .errors import SpaceLPError

__all__ = [
    "Chain",
    "PoolConfig",
    "RouterConfig",
    "SpaceCoin",
    "SpaceLP",
    "SpaceLPConfig",
    "SpaceLPError",
    "SpaceRouter",
    "TokenConfig",
    "config_from_env",
    "load_config",
]
