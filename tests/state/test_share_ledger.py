from __future__ import annotations

import pytest

from spacelp.errors import InsufficientAllowance, InsufficientBalance
from spacelp.state import BalanceTable, ShareLedger


def test_mint_and_burn_track_supply() -> None:
    ledger = ShareLedger("pool")
    ledger.mint("alice", 100)
    ledger.mint("bob", 50)
    ledger.burn("alice", 30)

    assert ledger.total_supply == 120
    assert ledger.balance_of("alice") == 70
    assert ledger.verify_supply()


def test_transfer_moves_balance() -> None:
    ledger = ShareLedger("pool")
    ledger.mint("alice", 10)
    assert ledger.transfer("alice", "pool", 4) is True
    assert ledger.balance_of("alice") == 6
    assert ledger.balance_of("pool") == 4
    assert ledger.total_supply == 10


def test_transfer_over_balance_raises() -> None:
    ledger = ShareLedger("pool")
    ledger.mint("alice", 10)
    with pytest.raises(InsufficientBalance, match="exceeds balance"):
        ledger.transfer("alice", "bob", 11)


def test_transfer_from_spends_allowance() -> None:
    ledger = ShareLedger("pool")
    ledger.mint("alice", 10)
    ledger.approve("alice", "router", 7)

    assert ledger.transfer_from("router", "alice", "pool", 5) is True
    assert ledger.allowance("alice", "router") == 2
    with pytest.raises(InsufficientAllowance):
        ledger.transfer_from("router", "alice", "pool", 3)


def test_snapshot_restore_round_trip() -> None:
    ledger = ShareLedger("pool")
    ledger.mint("alice", 10)
    snap = ledger.snapshot()
    ledger.burn("alice", 10)
    ledger.restore(snap)
    assert ledger.balance_of("alice") == 10
    assert ledger.total_supply == 10


def test_balance_table_drops_zero_entries() -> None:
    a = BalanceTable()
    b = BalanceTable()
    a.credit("x", 5)
    a.debit("x", 5)
    assert a == b
    assert a.get_all_balances() == {}


def test_balance_table_rejects_negative_amounts() -> None:
    t = BalanceTable()
    with pytest.raises(ValueError, match="non-negative"):
        t.credit("x", -1)
