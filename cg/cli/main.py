"""Main CLI entry point for CG."""

import sys

import click
from colorama import init
from loguru import logger

from cg import __version__
from cg.cli.output import BANNER
from cg.cli.commands import (init_cmd, add_cmd, commit_cmd, status_cmd,
                             log_cmd, branch_cmd, checkout_cmd)

# Initialize colorama for cross-platform colored output
init(autoreset=True)


class CgGroup(click.Group):
    """Custom Group class to display banner before help."""

    def format_help(self, ctx, formatter):
        """Override to add banner before help text."""
        click.echo(BANNER)
        super().format_help(ctx, formatter)


def configure_logging(verbose: bool) -> None:
    """Send loguru output to stderr, DEBUG when verbose and WARNING otherwise."""
    logger.remove()
    logger.add(
        sys.stderr,
        level='DEBUG' if verbose else 'WARNING',
        format="{time:HH:mm:ss} | {level: <7} | {message}",
        backtrace=False,
        diagnose=False,
    )


@click.group(cls=CgGroup)
@click.version_option(version=__version__, prog_name='cg')
@click.option('-v', '--verbose', is_flag=True, help='Trace object store calls on stderr')
def cli(verbose):
    configure_logging(verbose)


# Register commands
cli.add_command(init_cmd)
cli.add_command(status_cmd)
cli.add_command(add_cmd)
cli.add_command(commit_cmd)
cli.add_command(log_cmd)
cli.add_command(branch_cmd)
cli.add_command(checkout_cmd)


def main():
    """Main entry point."""
    cli()


if __name__ == '__main__':
    main()
