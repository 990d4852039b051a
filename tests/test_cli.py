import os

import pytest
from click.testing import CliRunner

from python_clmm.cli import clmm_cli
from python_clmm.clmm import ClmmPool

POOL_FILE = "pool.json"


def load_snapshot(pool_file: str = POOL_FILE) -> ClmmPool:
    with open(pool_file, "r") as f:
        return ClmmPool.load_pool(f)


def test_tick_to_price():
    runner = CliRunner()
    result = runner.invoke(clmm_cli, ["tick-to-price", "0"])

    assert result.exit_code == 0
    assert f"Sqrt Price X64: {2**64}" in result.output
    assert "Price: 1\n" in result.output


def test_tick_to_price_with_decimals():
    runner = CliRunner()
    result = runner.invoke(clmm_cli, ["tick-to-price", "0", "--decimals-a", "9", "--decimals-b", "6"])

    assert result.exit_code == 0
    assert "Price: 1000\n" in result.output


@pytest.mark.parametrize("price, tick", [("1.0", 0), ("2.0", 6931), ("0.5", -6932)])
def test_price_to_tick(price, tick):
    runner = CliRunner()
    result = runner.invoke(clmm_cli, ["price-to-tick", price])

    assert result.exit_code == 0
    assert f"Tick: {tick}" in result.output


def test_price_to_tick_rejects_non_positive_price():
    runner = CliRunner()
    result = runner.invoke(clmm_cli, ["price-to-tick", "0"])

    assert result.exit_code == 2
    assert "Price must be positive" in result.output


def test_pool_lifecycle():
    runner = CliRunner()

    with runner.isolated_filesystem():
        create = runner.invoke(
            clmm_cli, ["pool", "create", "-f", POOL_FILE, "--symbol-a", "SOL", "--symbol-b", "USDC"]
        )
        assert create.exit_code == 0
        assert "Created pool SOL <-> USDC @ 30.0 bips" in create.output

        empty_liquidity = runner.invoke(clmm_cli, ["pool", "liquidity", "-f", POOL_FILE])
        assert empty_liquidity.exit_code == 0
        assert "Pool has no initialized ticks" in empty_liquidity.output

        deposit = runner.invoke(
            clmm_cli, ["pool", "deposit", "-f", POOL_FILE, "--owner", "alice", "--", "-11264", "11264", "1000000000"]
        )
        assert deposit.exit_code == 0
        assert "Position: " in deposit.output
        assert "Deposited " in deposit.output

        pool = load_snapshot()
        assert pool.state.liquidity == 10**9
        assert len(pool.positions) == 1
        assert next(iter(pool.positions.values())).owner == "alice"

        info = runner.invoke(clmm_cli, ["pool", "info", "-f", POOL_FILE])
        assert info.exit_code == 0
        assert "Current Tick" in info.output

        liquidity = runner.invoke(clmm_cli, ["pool", "liquidity", "-f", POOL_FILE])
        assert liquidity.exit_code == 0
        assert "Active Liquidity" in liquidity.output

        quote = runner.invoke(clmm_cli, ["pool", "quote", "-f", POOL_FILE, "1000000"])
        assert quote.exit_code == 0
        assert "End Tick" in quote.output
        # Quotes are not written back without --commit
        assert load_snapshot().state.sqrt_price == 2**64

        commit = runner.invoke(clmm_cli, ["pool", "quote", "-f", POOL_FILE, "--b-to-a", "--commit", "1000000"])
        assert commit.exit_code == 0
        assert load_snapshot().state.sqrt_price > 2**64


def test_quote_on_empty_pool_reverts():
    runner = CliRunner()

    with runner.isolated_filesystem():
        runner.invoke(clmm_cli, ["pool", "create", "-f", POOL_FILE])
        result = runner.invoke(clmm_cli, ["pool", "quote", "-f", POOL_FILE, "1000"])

    assert result.exit_code == 1


def test_create_rejects_invalid_config():
    runner = CliRunner()

    with runner.isolated_filesystem():
        result = runner.invoke(clmm_cli, ["pool", "create", "-f", POOL_FILE, "--tick-spacing", "7"])
        assert result.exit_code != 0
        assert not os.path.exists(POOL_FILE)


@pytest.mark.skipif("CLMM_POOL_FILE" in os.environ, reason="Pool file configured through the environment")
def test_missing_pool_file():
    runner = CliRunner()
    result = runner.invoke(clmm_cli, ["pool", "info"])

    assert result.exit_code == 1
