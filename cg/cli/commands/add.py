"""Add command - stage files for commit."""

import click
from cg.core.repository import Repository
from cg.core.errors import CgError
from cg.operations.stage import stage_paths
from cg.cli.output import success, error, info


@click.command('add')
@click.argument('paths', nargs=-1, required=True)
def add_cmd(paths):
    """
    Add file contents to the staging area.

    Each PATH may be a file or a directory; directories are added
    recursively. Modified files must be added again to stage the new
    changes. Either every path is staged or none is.

    Examples:
        cg add file.txt
        cg add src
        cg add .
    """
    repo = Repository.find_repository()
    if not repo:
        click.echo(error("not inside a CG repository"))
        raise click.Abort()

    try:
        staged = stage_paths(repo, paths)
    except CgError as e:
        click.echo(error(str(e)))
        raise click.Abort()

    click.echo(success(f"staged {len(staged)} file(s)"))
    for path in staged:
        click.echo(info(f"  {path}"))
