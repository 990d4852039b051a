import logging
import os
from logging import Logger

import click
from rich.console import Console
from rich.logging import RichHandler

root_logger = logging.getLogger("python_clmm")
logger = root_logger.getChild("cli")


def cli_logger_config(instrument_logger: Logger) -> Console:
    rich_console = Console()
    instrument_logger.handlers.clear()

    instrument_logger.addHandler(RichHandler(show_path=False, console=rich_console))
    instrument_logger.setLevel(logging.INFO)
    return rich_console


def group_options(*options):
    """Decorator to group multiple click options together"""

    def wrapper(function):
        for option in reversed(options):
            function = option(function)
        return function

    return wrapper


# -------------------------------------------------------
#    Pool Snapshot Configuration
# -------------------------------------------------------
pool_file_option = click.option(
    "--pool-file",
    "-f",
    "pool_file",
    type=click.Path(dir_okay=False),
    default=os.environ.get("CLMM_POOL_FILE"),
    help="JSON pool snapshot created by `clmm pool create`.  If not provided, will use the CLMM_POOL_FILE "
    "environment variable",
)

# -------------------------------------------------------
#    Pool Parameters
# -------------------------------------------------------
fee_rate_option = click.option(
    "--fee-rate",
    "fee_rate",
    type=int,
    default=None,
    help="Fee rate in hundredths of a basis point.  Defaults to the fee rate of the tick spacing",
)
tick_spacing_option = click.option(
    "--tick-spacing",
    "tick_spacing",
    type=int,
    default=None,
    help="Tick spacing of the pool.  Defaults to the tick spacing of the fee rate",
)
decimals_a_option = click.option(
    "--decimals-a",
    "decimals_a",
    type=int,
    default=0,
    show_default=True,
    help="Decimals of Token A, used when formatting prices",
)
decimals_b_option = click.option(
    "--decimals-b",
    "decimals_b",
    type=int,
    default=0,
    show_default=True,
    help="Decimals of Token B, used when formatting prices",
)
reverse_tokens_option = click.option(
    "--reverse-tokens",
    is_flag=True,
    default=False,
    help="If provided, prices are quoted as Token A per Token B",
)

# -------------------------------------------------------
#    Swap Parameters
# -------------------------------------------------------
b_to_a_option = click.option(
    "--b-to-a",
    is_flag=True,
    default=False,
    help="If provided, swaps Token B for Token A.  By default, Token A is sold for Token B",
)
exact_output_option = click.option(
    "--exact-output",
    is_flag=True,
    default=False,
    help="If provided, the amount is the exact output of the swap instead of the exact input",
)


def require_pool_file(pool_file: str | None) -> str:
    """Exits the CLI if no pool file was provided"""

    if pool_file is None:
        logger.error(
            "Pool file not specified... Set with '--pool-file' option or 'CLMM_POOL_FILE' environment variable"
        )
        raise SystemExit(1)

    return pool_file
