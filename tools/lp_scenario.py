#!/usr/bin/env python3

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from spacelp.chain import ONE_SPC, Chain, SpaceCoin
from spacelp.config import SpaceLPConfig, config_from_env, load_config
from spacelp.core import SpaceLP, SpaceRouter, event_to_dict, optimal_deposit_eth


logger = logging.getLogger("lp_scenario")

OWNER = "owner"
TREASURY = "treasury"
PROVIDER = "provider"
TRADER = "trader"


@dataclass
class Deployment:
    chain: Chain
    token: SpaceCoin
    pool: SpaceLP
    router: SpaceRouter


def deploy(cfg: SpaceLPConfig, *, provider_spc: int, provider_eth: int, trader_eth: int) -> Deployment:
    chain = Chain()
    token = SpaceCoin(
        chain,
        owner=OWNER,
        treasury=TREASURY,
        initial_balances={PROVIDER: provider_spc},
        config=cfg.token,
    )
    pool = SpaceLP(chain, token, config=cfg.pool)
    router = SpaceRouter(chain, pool, token, config=cfg.router)
    chain.mint_native(PROVIDER, provider_eth)
    chain.mint_native(TRADER, trader_eth)
    return Deployment(chain=chain, token=token, pool=pool, router=router)


def run_scenario(
    cfg: SpaceLPConfig,
    *,
    spc: int,
    eth: Optional[int],
    swaps: int,
    swap_eth: int,
    tax: bool,
) -> Dict[str, Any]:
    """
    Seed a pool through the router, then alternate ETH->SPC and SPC->ETH swaps.

    `spc`, `eth` and `swap_eth` are base units. When `eth` is None the seed
    deposit uses the router's fallback ratio.
    """
    if spc <= 0:
        raise ValueError("spc must be positive")
    if swaps < 0 or swap_eth <= 0:
        raise ValueError("swaps must be >= 0 and swap_eth positive")

    seed_eth = optimal_deposit_eth(spc, 0, 0, cfg.router) if eth is None else eth

    d = deploy(cfg, provider_spc=spc, provider_eth=seed_eth, trader_eth=swap_eth * swaps)
    d.token.approve(PROVIDER, d.router.address, spc)
    shares = d.router.add_liquidity(PROVIDER, spc, value=seed_eth)
    logger.info("seeded pool eth=%d spc=%d shares=%d", seed_eth, spc, shares)

    if tax:
        d.token.set_tax_transfers(OWNER, True)

    trades: List[Dict[str, int]] = []
    last_spc = 0
    for i in range(swaps):
        if i % 2 == 0 or last_spc == 0:
            quote = d.router.get_maximum_spc_amount_out(swap_eth)
            min_out = quote - d.token.compute_tax(quote)
            out = d.router.swap_eth_for_spc(TRADER, min_out, value=swap_eth)
            trades.append({"eth_in": swap_eth, "spc_out": out})
            last_spc = out
        else:
            delivered = last_spc - d.token.compute_tax(last_spc)
            min_out = d.router.get_maximum_eth_amount_out(delivered)
            d.token.approve(TRADER, d.router.address, last_spc)
            out = d.router.swap_spc_for_eth(TRADER, last_spc, min_out)
            trades.append({"spc_in": last_spc, "eth_out": out})
            last_spc = 0

    reserve_eth, reserve_spc = d.pool.get_reserves()
    return {
        "schema": "spacelp/scenario/v1",
        "config": asdict(cfg),
        "tax_transfers": d.token.tax_transfers,
        "reserves": {"eth": reserve_eth, "spc": reserve_spc},
        "k": d.pool.state.get_constant_product(),
        "total_shares": d.pool.shares.total_supply,
        "provider_shares": d.pool.shares.balance_of(PROVIDER),
        "trader": {"eth": d.chain.balance_of(TRADER), "spc": d.token.balance_of(TRADER)},
        "treasury_spc": d.token.balance_of(TREASURY),
        "trades": trades,
        "events": [event_to_dict(e) for e in d.pool.events],
    }


def main(argv: Optional[Sequence[str]] = None) -> int:
    ap = argparse.ArgumentParser(
        description="Deploy an ETH/SPC pool, seed it through the router and replay alternating swaps."
    )
    ap.add_argument("--config", type=str, default="", help="YAML config file (pool/router/token sections)")
    ap.add_argument("--spc", type=int, default=100_000, help="seed SPC in whole tokens")
    ap.add_argument("--eth", type=int, default=None, help="seed ETH in whole units (default: router fallback ratio)")
    ap.add_argument("--swaps", type=int, default=4)
    ap.add_argument("--swap-eth", type=int, default=ONE_SPC, help="ETH per ETH->SPC swap, in base units")
    ap.add_argument("--tax", action="store_true", help="enable the SPC transfer tax after seeding")
    ap.add_argument("--log-level", type=str, default="WARNING")
    args = ap.parse_args(argv)

    level = getattr(logging, str(args.log_level).upper(), None)
    if not isinstance(level, int):
        raise SystemExit(f"unknown log level: {args.log_level}")
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    if args.spc <= 0:
        raise SystemExit("spc must be positive")
    if args.eth is not None and args.eth <= 0:
        raise SystemExit("eth must be positive")
    if args.swaps < 0:
        raise SystemExit("swaps must be >= 0")
    if args.swap_eth <= 0:
        raise SystemExit("swap-eth must be positive")

    cfg = load_config(args.config) if args.config else SpaceLPConfig()
    cfg = config_from_env(cfg)

    report = run_scenario(
        cfg,
        spc=args.spc * ONE_SPC,
        eth=None if args.eth is None else args.eth * ONE_SPC,
        swaps=args.swaps,
        swap_eth=args.swap_eth,
        tax=args.tax,
    )
    print(json.dumps(report, indent=2, sort_keys=True))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
