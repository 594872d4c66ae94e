"""Branch command - list, create or delete branches."""

import click
from cg.core.repository import Repository
from cg.core.errors import CgError
from cg.cli.output import error


@click.command('branch')
@click.argument('name', required=False)
@click.option('-d', '--delete', 'delete', metavar='NAME', help='Delete a branch')
def branch_cmd(name, delete):
    """
    List, create, or delete branches.

    Examples:
        cg branch                  # List all branches
        cg branch feature          # Create new branch
        cg branch -d feature       # Delete branch
    """
    if name and delete:
        click.echo(error("usage: cg branch [name] | cg branch -d <name>"))
        raise click.Abort()

    repo = Repository.find_repository()
    if not repo:
        click.echo(error("not inside a CG repository"))
        raise click.Abort()

    store = repo.store
    try:
        if delete:
            output = store.delete_branch(delete)
        elif name:
            output = store.create_branch(name)
        else:
            output = store.list_branches()
    except CgError as e:
        click.echo(error(str(e)))
        raise click.Abort()

    if output:
        click.echo(output, nl=not output.endswith('\n'))
