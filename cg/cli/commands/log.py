"""Log command - show commit history."""

import click
from cg.core.repository import Repository
from cg.cli.output import error, info


@click.command('log')
def log_cmd():
    """
    Show the commit history of the current branch.

    Examples:
        cg log
    """
    repo = Repository.find_repository()
    if not repo:
        click.echo(error("not inside a CG repository"))
        raise click.Abort()

    output = repo.store.log()
    if not output.strip():
        click.echo(info("No commits yet."))
        return

    click.echo(output, nl=not output.endswith('\n'))
