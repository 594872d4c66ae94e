"""Checkout command - switch branches or commits."""

import click
from cg.core.repository import Repository
from cg.core.errors import CgError
from cg.operations.checkout import checkout_target
from cg.cli.output import error, warning


@click.command('checkout')
@click.argument('target')
def checkout_cmd(target):
    """
    Switch to a branch or commit.

    The working tree is updated by git; afterwards the staging area is
    reset to the new HEAD.

    Examples:
        cg checkout main
        cg checkout abc1234
    """
    repo = Repository.find_repository()
    if not repo:
        click.echo(error("not inside a CG repository"))
        raise click.Abort()

    try:
        result = checkout_target(repo, target)
    except CgError as e:
        click.echo(error(str(e)))
        raise click.Abort()

    if result.output:
        click.echo(result.output, nl=not result.output.endswith('\n'))
    if result.resync_warning:
        click.echo(warning(f"warning: {result.resync_warning}"))
