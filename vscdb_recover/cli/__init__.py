"""
Click-based command line interface.

Usage: ``python -m vscdb_recover <command>``.
"""
import logging

import click

from vscdb_recover.cli.commands.extract import extract, search, tables
from vscdb_recover.cli.commands.misc import info, serve


class CLIContext:
    """Shared state passed between commands via ``ctx.obj``."""

    def __init__(self, verbose: bool = False):
        self.verbose = verbose


def configure_logging(verbose: bool) -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
@click.pass_context
def cli(ctx, verbose):
    """Recover chat conversations from IDE state databases."""
    configure_logging(verbose)
    ctx.obj = CLIContext(verbose=verbose)


cli.add_command(extract)
cli.add_command(tables)
cli.add_command(search)
cli.add_command(info)
cli.add_command(serve)


def main():
    """Entry point for the console script and ``python -m``."""
    return cli(obj=None)
