import logging

import click

from .utils import (
    b_to_a_option,
    decimals_a_option,
    decimals_b_option,
    exact_output_option,
    fee_rate_option,
    group_options,
    pool_file_option,
    reverse_tokens_option,
    tick_spacing_option,
)

root_logger = logging.getLogger("python_clmm")
logger = root_logger.getChild("cli").getChild("pool")

# isort: skip_file
# pylint: disable=too-many-arguments,import-outside-toplevel,too-many-locals


def _load_pool(pool_file: str):
    from python_clmm.clmm import ClmmPool

    with open(pool_file, "r") as read_file:
        return ClmmPool.load_pool(read_file)


def _save_pool(pool, pool_file: str):
    with open(pool_file, "w") as write_file:
        pool.save_pool(write_file)


@click.group("pool", short_help="Simulate swaps & liquidity on a pool snapshot")
def pool_group():
    """
    Create, inspect & simulate concentrated liquidity pools stored as JSON snapshots
    """


@pool_group.command()
@group_options(
    pool_file_option,
    fee_rate_option,
    tick_spacing_option,
    decimals_a_option,
    decimals_b_option,
)
@click.option("--initial-tick", "initial_tick", type=int, default=0, show_default=True, help="Starting tick")
@click.option("--protocol-fee-rate", type=int, default=0, show_default=True, help="Protocol fee in basis points")
@click.option("--symbol-a", default="TOKEN_A", show_default=True, help="Symbol of Token A")
@click.option("--symbol-b", default="TOKEN_B", show_default=True, help="Symbol of Token B")
def create(
    pool_file: str,
    fee_rate: int | None,
    tick_spacing: int | None,
    decimals_a: int,
    decimals_b: int,
    initial_tick: int,
    protocol_fee_rate: int,
    symbol_a: str,
    symbol_b: str,
):
    """Create an empty pool snapshot"""
    from python_clmm.cli.utils import cli_logger_config, require_pool_file
    from python_clmm.clmm import ClmmPool
    from python_clmm.types import Token

    console = cli_logger_config(root_logger)
    pool_file = require_pool_file(pool_file)

    pool_kwargs = {
        "initial_tick": initial_tick,
        "protocol_fee_rate": protocol_fee_rate,
        "token_a": Token(symbol=symbol_a, decimals=decimals_a),
        "token_b": Token(symbol=symbol_b, decimals=decimals_b),
    }
    if fee_rate is not None:
        pool_kwargs["fee_rate"] = fee_rate
    if tick_spacing is not None:
        pool_kwargs["tick_spacing"] = tick_spacing

    pool = ClmmPool(**pool_kwargs)
    _save_pool(pool, pool_file)

    console.print(f"[green]Created pool {pool} at tick {pool.state.tick_current_index}")


@pool_group.command()
@group_options(pool_file_option, reverse_tokens_option)
def info(pool_file: str, reverse_tokens: bool):
    """Print the state of a pool snapshot"""
    from rich.table import Table
    from python_clmm.cli.utils import cli_logger_config, require_pool_file

    console = cli_logger_config(root_logger)
    pool = _load_pool(require_pool_file(pool_file))

    state_table = Table(title=f"Pool State: {pool}", min_width=80)
    state_table.add_column("Key")
    state_table.add_column("Value", justify="right")

    state_table.add_row("Price", pool.get_formatted_price_at_sqrt_price(pool.state.sqrt_price, reverse_tokens))
    state_table.add_row("Sqrt Price X64", f"{pool.state.sqrt_price}")
    state_table.add_row("Current Tick", f"{pool.state.tick_current_index}")
    state_table.add_row("Tick Spacing", f"{pool.state.tick_spacing}")
    state_table.add_row("Active Liquidity", f"{pool.state.liquidity:,}")
    state_table.add_row("Vault A", f"{pool.vault_a:,}")
    state_table.add_row("Vault B", f"{pool.vault_b:,}")
    state_table.add_row("Protocol Fees A", f"{pool.state.protocol_fee_owed_a:,}")
    state_table.add_row("Protocol Fees B", f"{pool.state.protocol_fee_owed_b:,}")
    state_table.add_row("Positions", f"{len(pool.positions)}")
    state_table.add_row("Tick Arrays", f"{len(pool.tick_arrays)}")
    console.print(state_table)


@pool_group.command()
@group_options(pool_file_option)
@click.argument("tick_lower", type=int)
@click.argument("tick_upper", type=int)
@click.argument("liquidity", type=int)
@click.option("--owner", default=None, help="Owner identifier stored on the position")
def deposit(pool_file: str, tick_lower: int, tick_upper: int, liquidity: int, owner: str | None):
    """
    Open a position over [TICK_LOWER, TICK_UPPER] and deposit LIQUIDITY into it.  The updated pool is
    written back to the snapshot
    """
    from python_clmm.cli.utils import cli_logger_config, require_pool_file
    from python_clmm.math import U64_MAX

    console = cli_logger_config(root_logger)
    pool_file = require_pool_file(pool_file)
    pool = _load_pool(pool_file)

    position = pool.open_position(tick_lower, tick_upper, owner=owner)
    amount_a, amount_b = pool.increase_liquidity(position.position_mint, liquidity, U64_MAX, U64_MAX)
    _save_pool(pool, pool_file)

    console.print(f"Position: {position.position_mint}")
    console.print(f"Deposited {amount_a:,} {pool.token_a.symbol} & {amount_b:,} {pool.token_b.symbol}")


@pool_group.command()
@group_options(pool_file_option, b_to_a_option, exact_output_option)
@click.argument("amount", type=int)
@click.option(
    "--commit",
    is_flag=True,
    default=False,
    help="If provided, the swap is executed & the updated pool is written back to the snapshot",
)
def quote(pool_file: str, b_to_a: bool, exact_output: bool, amount: int, commit: bool):
    """Quote a swap of AMOUNT raw tokens against the pool snapshot"""
    from rich.table import Table
    from python_clmm.cli.utils import cli_logger_config, require_pool_file
    from python_clmm.exceptions import ClmmRevert
    from python_clmm.math import U64_MAX

    console = cli_logger_config(root_logger)
    pool_file = require_pool_file(pool_file)
    pool = _load_pool(pool_file)

    a_to_b = not b_to_a
    amount_specified_is_input = not exact_output
    start_price = pool.get_formatted_price_at_sqrt_price(pool.state.sqrt_price)

    try:
        amount_a, amount_b = pool.swap(
            amount,
            0 if amount_specified_is_input else U64_MAX,
            amount_specified_is_input=amount_specified_is_input,
            a_to_b=a_to_b,
            committing=True,
        )
    except ClmmRevert as exc:
        logger.error(f"Swap Reverted: {exc.error_code.name}")
        raise SystemExit(1) from exc

    quote_table = Table(title=f"Swap Quote: {pool}", min_width=80)
    quote_table.add_column("Key")
    quote_table.add_column("Value", justify="right")
    quote_table.add_row(f"{pool.token_a.symbol} {'In' if a_to_b else 'Out'}", f"{amount_a:,}")
    quote_table.add_row(f"{pool.token_b.symbol} {'Out' if a_to_b else 'In'}", f"{amount_b:,}")
    quote_table.add_row("Start Price", start_price)
    quote_table.add_row("End Price", pool.get_formatted_price_at_sqrt_price(pool.state.sqrt_price))
    quote_table.add_row("End Tick", f"{pool.state.tick_current_index}")
    console.print(quote_table)

    if commit:
        _save_pool(pool, pool_file)
        console.print("[green]Swap committed to pool snapshot")


@pool_group.command()
@group_options(pool_file_option, reverse_tokens_option)
@click.option(
    "--compress",
    is_flag=True,
    default=False,
    help="If provided, only prints ticks where active liquidity changes by more than 10%",
)
def liquidity(pool_file: str, reverse_tokens: bool, compress: bool):
    """Print the active liquidity at each initialized tick"""
    from rich.table import Table
    from python_clmm.cli.utils import cli_logger_config, require_pool_file

    console = cli_logger_config(root_logger)
    pool = _load_pool(require_pool_file(pool_file))

    liquidity_df = pool.compute_liquidity_at_price(reverse_tokens=reverse_tokens, compress=compress)
    if liquidity_df.empty:
        console.print("[yellow]Pool has no initialized ticks")
        return

    liquidity_table = Table(title=f"Liquidity Distribution: {pool}", min_width=80)
    liquidity_table.add_column("Tick", justify="right")
    liquidity_table.add_column("Price", justify="right")
    liquidity_table.add_column("Active Liquidity", justify="right")

    for row in liquidity_df.itertuples(index=False):
        liquidity_table.add_row(f"{row.tick}", f"{row.price:.6g}", f"{row.active_liquidity:,.0f}")
    console.print(liquidity_table)
