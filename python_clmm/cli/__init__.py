import math

import click

from python_clmm.cli.pool import pool_group
from python_clmm.cli.utils import decimals_a_option, decimals_b_option, group_options, reverse_tokens_option
from python_clmm.clmm import ClmmPool
from python_clmm.math import MAX_SQRT_PRICE_X64, MIN_SQRT_PRICE_X64, Q64, TickMathModule
from python_clmm.types import Token


@click.group()
def clmm_cli():
    """Command Line Interface for python-clmm"""


def _conversion_pool(decimals_a: int, decimals_b: int) -> ClmmPool:
    return ClmmPool(token_a=Token(decimals=decimals_a), token_b=Token(decimals=decimals_b), initial_timestamp=0)


@clmm_cli.command(name="tick-to-price")
@group_options(decimals_a_option, decimals_b_option, reverse_tokens_option)
@click.argument("tick", type=int)
def tick_to_price(tick: int, decimals_a: int, decimals_b: int, reverse_tokens: bool):
    """
    Convert a tick index to its sqrt price & human-readable price
    """
    pool = _conversion_pool(decimals_a, decimals_b)
    sqrt_price = TickMathModule.sqrt_price_from_tick_index(tick)

    click.echo(f"Sqrt Price X64: {sqrt_price}")
    click.echo(f"Price: {pool.get_price_at_sqrt_price(sqrt_price, reverse_tokens):.10g}")


@clmm_cli.command(name="price-to-tick")
@group_options(decimals_a_option, decimals_b_option)
@click.argument("price", type=float)
def price_to_tick(price: float, decimals_a: int, decimals_b: int):
    """
    Convert a human-readable price of Token A in Token B to the tick containing it
    """
    if price <= 0:
        raise click.BadParameter("Price must be positive", param_hint="PRICE")

    raw_price = price / 10 ** (decimals_a - decimals_b)
    sqrt_price = int(math.sqrt(raw_price) * Q64)
    sqrt_price = min(max(sqrt_price, MIN_SQRT_PRICE_X64), MAX_SQRT_PRICE_X64)

    click.echo(f"Tick: {TickMathModule.tick_index_from_sqrt_price(sqrt_price)}")


# Adding Command Groups
clmm_cli.add_command(pool_group, name="pool")
