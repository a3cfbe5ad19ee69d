from __future__ import annotations

import logging

import pytest

from spacelp.chain import Chain, SpaceCoin
from spacelp.config import PoolConfig
from spacelp.core import SpaceLP, Swapped
from spacelp.errors import (
    EthTransferFailed,
    InsufficientInputAmount,
    InsufficientLiquidity,
    ReentrancyLockEngaged,
)

E18 = 10**18
ALICE = "alice"
TRADER = "trader"


def _deploy(config: PoolConfig = PoolConfig()):
    chain = Chain()
    token = SpaceCoin(
        chain,
        owner="owner",
        treasury="treasury",
        initial_balances={ALICE: 500_000 * E18, TRADER: 10_000 * E18},
    )
    pool = SpaceLP(chain, token, config=config)
    chain.mint_native(ALICE, 100_000 * E18)
    chain.mint_native(TRADER, 1_000 * E18)
    return chain, token, pool


def _seed(token: SpaceCoin, pool: SpaceLP) -> None:
    token.transfer(ALICE, pool.address, 100_000 * E18)
    pool.deposit(ALICE, ALICE, value=20_000 * E18)


def _expected_out(amount_in: int, reserve_in: int, reserve_out: int) -> int:
    after_fee = amount_in * 99 // 100
    return reserve_out * after_fee // (reserve_in + after_fee)


def test_swap_eth_for_spc_follows_floor_formula() -> None:
    chain, token, pool = _deploy()
    _seed(token, pool)

    out = pool.swap(TRADER, TRADER, True, value=E18)

    assert out == _expected_out(E18, 20_000 * E18, 100_000 * E18)
    assert 4_949 * 10**15 < out < 4_950 * 10**15
    assert token.balance_of(TRADER) == 10_000 * E18 + out
    assert chain.balance_of(TRADER) == 999 * E18
    # The full input, fee included, stays in the reserves.
    assert pool.get_reserves() == (20_001 * E18, 100_000 * E18 - out)
    assert pool.events[-1] == Swapped(trader=TRADER, eth_in=E18, spc_in=0, eth_out=0, spc_out=out)


def test_swap_spc_for_eth_follows_floor_formula() -> None:
    chain, token, pool = _deploy()
    _seed(token, pool)

    token.transfer(TRADER, pool.address, E18)
    out = pool.swap(TRADER, TRADER, False)

    assert out == _expected_out(E18, 100_000 * E18, 20_000 * E18)
    assert 1_979 * 10**14 < out < 1_981 * 10**14
    assert chain.balance_of(TRADER) == 1_000 * E18 + out
    assert pool.get_reserves() == (20_000 * E18 - out, 100_001 * E18)
    assert pool.events[-1] == Swapped(trader=TRADER, eth_in=0, spc_in=E18, eth_out=out, spc_out=0)


def test_swap_strictly_increases_k() -> None:
    _, token, pool = _deploy()
    _seed(token, pool)
    k0 = pool.state.get_constant_product()
    pool.swap(TRADER, TRADER, True, value=3 * E18)
    k1 = pool.state.get_constant_product()
    token.transfer(TRADER, pool.address, 7 * E18)
    pool.swap(TRADER, TRADER, False)
    k2 = pool.state.get_constant_product()
    assert k0 < k1 < k2


def test_swap_without_input_raises() -> None:
    _, token, pool = _deploy()
    _seed(token, pool)
    with pytest.raises(InsufficientInputAmount):
        pool.swap(TRADER, TRADER, True)
    with pytest.raises(InsufficientInputAmount):
        pool.swap(TRADER, TRADER, False)


def test_swap_on_empty_pool_raises_and_refunds() -> None:
    chain, _, pool = _deploy()
    with pytest.raises(InsufficientLiquidity):
        pool.swap(TRADER, TRADER, True, value=E18)
    assert chain.balance_of(TRADER) == 1_000 * E18
    assert chain.balance_of(pool.address) == 0


def test_dust_swap_with_zero_output_raises() -> None:
    chain, token, pool = _deploy()
    _seed(token, pool)
    with pytest.raises(InsufficientLiquidity):
        pool.swap(TRADER, TRADER, True, value=1)
    assert pool.get_reserves() == (20_000 * E18, 100_000 * E18)
    assert chain.balance_of(TRADER) == 1_000 * E18


def test_output_side_donation_deepens_the_pool() -> None:
    _, token, pool = _deploy()
    _seed(token, pool)
    token.transfer(ALICE, pool.address, 100 * E18)

    out = pool.swap(TRADER, TRADER, True, value=E18)

    assert out == _expected_out(E18, 20_000 * E18, 100_100 * E18)
    assert 49_546 * 10**14 < out < 49_548 * 10**14
    assert pool.get_reserves() == (20_001 * E18, 100_100 * E18 - out)


def test_input_side_donation_counts_as_input() -> None:
    chain, token, pool = _deploy()
    _seed(token, pool)
    chain.force_feed(ALICE, pool.address, E18)

    out = pool.swap(TRADER, TRADER, True)

    assert out == _expected_out(E18, 20_000 * E18, 100_000 * E18)
    assert chain.balance_of(TRADER) == 1_000 * E18


def test_swap_to_contract_without_receive_hook_reverts() -> None:
    chain, token, pool = _deploy()
    _seed(token, pool)
    chain.register_contract("vault")
    token.transfer(TRADER, pool.address, E18)

    with pytest.raises(EthTransferFailed):
        pool.swap(TRADER, "vault", False)

    assert pool.get_reserves() == (20_000 * E18, 100_000 * E18)
    assert chain.balance_of("vault") == 0
    # Pushed input is still in custody and can be swapped by the next call.
    assert token.balance_of(pool.address) == 100_001 * E18


def test_fee_config_changes_pricing() -> None:
    _, token, pool = _deploy(PoolConfig(fee_numerator=997, fee_denominator=1000))
    _seed(token, pool)
    out = pool.swap(TRADER, TRADER, True, value=E18)
    after_fee = E18 * 997 // 1000
    assert out == 100_000 * E18 * after_fee // (20_000 * E18 + after_fee)


def test_quote_matches_execution() -> None:
    _, token, pool = _deploy()
    _seed(token, pool)
    quote = pool.get_maximum_amount_out(5 * E18, is_eth_in=True)
    assert pool.swap(TRADER, TRADER, True, value=5 * E18) == quote


def test_swap_logs_execution_and_folded_donation(caplog) -> None:  # type: ignore[no-untyped-def]
    _, token, pool = _deploy()
    _seed(token, pool)
    token.transfer(ALICE, pool.address, 100 * E18)

    with caplog.at_level(logging.DEBUG, logger="spacelp.core.pool"):
        pool.swap(TRADER, TRADER, True, value=E18)

    messages = [r.getMessage() for r in caplog.records if r.name == "spacelp.core.pool"]
    assert any(m.startswith("folding 100000000000000000000 unrecognized") for m in messages)
    assert any(m.startswith("swap to=trader ETH->SPC") for m in messages)


def test_reentrant_swap_from_receive_hook_is_locked_out() -> None:
    chain, token, pool = _deploy()
    _seed(token, pool)
    blocked = []

    def receive(sender: str, amount: int) -> None:
        try:
            pool.swap("attacker", "attacker", False)
        except ReentrancyLockEngaged as exc:
            blocked.append(exc)

    chain.register_contract("attacker", receiver=receive)
    token.transfer(TRADER, pool.address, E18)

    out = pool.swap(TRADER, "attacker", False)

    assert len(blocked) == 1
    assert out == _expected_out(E18, 100_000 * E18, 20_000 * E18)
    assert chain.balance_of("attacker") == out
    assert pool.get_reserves() == (20_000 * E18 - out, 100_001 * E18)
    assert pool.state.locked is False
    assert len(pool.events) == 2


def test_reentrant_deposit_from_receive_hook_is_locked_out() -> None:
    chain, token, pool = _deploy()
    _seed(token, pool)
    chain.mint_native("attacker", 10 * E18)
    blocked = []

    def receive(sender: str, amount: int) -> None:
        try:
            pool.deposit("attacker", "attacker", value=E18)
        except ReentrancyLockEngaged as exc:
            blocked.append(exc)

    chain.register_contract("attacker", receiver=receive)
    token.transfer(TRADER, pool.address, E18)

    out = pool.swap(TRADER, "attacker", False)

    assert len(blocked) == 1
    assert chain.balance_of("attacker") == 10 * E18 + out
    assert pool.shares.balance_of("attacker") == 0
    assert pool.get_reserves() == (20_000 * E18 - out, 100_001 * E18)
    assert pool.state.locked is False
