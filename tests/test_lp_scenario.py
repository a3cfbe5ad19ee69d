from __future__ import annotations

import json

import pytest

from spacelp.chain import ONE_SPC
from spacelp.config import SpaceLPConfig
from tools.lp_scenario import main, run_scenario


def test_run_scenario_seeds_at_fallback_ratio_and_grows_k() -> None:
    report = run_scenario(SpaceLPConfig(), spc=100_000 * ONE_SPC, eth=None, swaps=4, swap_eth=ONE_SPC, tax=False)

    seed = report["events"][0]
    assert seed["event"] == "LiquidityAdded"
    assert (seed["eth_in"], seed["spc_in"]) == (20_000 * ONE_SPC, 100_000 * ONE_SPC)
    assert [e["event"] for e in report["events"][1:]] == ["Swapped"] * 4
    assert report["k"] > 20_000 * ONE_SPC * 100_000 * ONE_SPC
    assert report["total_shares"] == report["provider_shares"]
    assert report["treasury_spc"] == 0
    assert report["reserves"]["eth"] * report["reserves"]["spc"] == report["k"]


def test_run_scenario_with_tax_pays_treasury() -> None:
    report = run_scenario(SpaceLPConfig(), spc=100_000 * ONE_SPC, eth=None, swaps=2, swap_eth=ONE_SPC, tax=True)
    assert report["tax_transfers"] is True
    assert report["treasury_spc"] > 0
    assert report["trader"]["spc"] == 0


def test_run_scenario_rejects_bad_arguments() -> None:
    with pytest.raises(ValueError):
        run_scenario(SpaceLPConfig(), spc=0, eth=None, swaps=1, swap_eth=1, tax=False)


def test_main_prints_json_report(capsys) -> None:  # type: ignore[no-untyped-def]
    assert main(["--spc", "5000", "--eth", "1000", "--swaps", "3"]) == 0
    report = json.loads(capsys.readouterr().out)
    assert report["schema"] == "spacelp/scenario/v1"
    assert len(report["trades"]) == 3
    assert report["config"]["pool"]["fee_numerator"] == 99


def test_main_reads_yaml_config(tmp_path, capsys, monkeypatch) -> None:  # type: ignore[no-untyped-def]
    monkeypatch.delenv("SPACELP_FEE_NUMERATOR", raising=False)
    monkeypatch.delenv("SPACELP_FEE_DENOMINATOR", raising=False)
    path = tmp_path / "cfg.yaml"
    path.write_text("pool:\n  fee_numerator: 997\n  fee_denominator: 1000\n", encoding="utf-8")
    assert main(["--config", str(path), "--swaps", "1"]) == 0
    report = json.loads(capsys.readouterr().out)
    assert report["config"]["pool"] == {"fee_numerator": 997, "fee_denominator": 1000}


def test_main_rejects_negative_swaps() -> None:
    with pytest.raises(SystemExit):
        main(["--swaps", "-1"])
