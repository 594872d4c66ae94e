"""Commit command - create a commit from staged changes."""

import click
from cg.core.config import Identity
from cg.core.repository import Repository
from cg.core.errors import CgError
from cg.operations.commit import commit_staged
from cg.cli.output import error, warning


@click.command('commit')
@click.option('-m', '--message', help='Commit message')
@click.option('--author', help='Author name and email (format: "Name <email>")')
def commit_cmd(message, author):
    """
    Record changes to the repository.

    Creates a commit from everything in the staging area, moves the
    current branch to it and resets the staging area to the new HEAD.

    Examples:
        cg commit -m "Initial commit"
        cg commit -m "Add feature" --author "Jane <jane@example.com>"
    """
    repo = Repository.find_repository()
    if not repo:
        click.echo(error("not inside a CG repository"))
        raise click.Abort()

    if not message:
        click.echo(error("commit message is required. Use -m \"message\""))
        raise click.Abort()

    identity = None
    if author:
        try:
            identity = Identity.parse(author)
        except ValueError as e:
            click.echo(error(str(e)))
            raise click.Abort()

    try:
        result = commit_staged(repo, message, author=identity)
    except CgError as e:
        click.echo(error(str(e)))
        raise click.Abort()

    if result.resync_warning:
        click.echo(warning(f"warning: {result.resync_warning}"))

    branch = result.branch or 'detached HEAD'
    root = ' (root-commit)' if result.is_root else ''
    click.echo(f"[{branch}{root} {result.commit_hash[:7]}] {message}")
