"""Initialize a new CG repository."""

import click
from cg.core.repository import Repository
from cg.core.errors import RepositoryExistsError
from cg.cli.output import success, error, info


@click.command('init')
@click.argument('directory', default='.')
def init_cmd(directory):
    """
    Create an empty CG repository.

    Creates DIRECTORY if it does not exist, then a .git directory holding
    the git object database, HEAD pointing at main and an empty staging
    index.

    Examples:
        cg init                    # Initialize in current directory
        cg init my-project         # Initialize in my-project directory
    """
    repo = Repository(directory)

    try:
        repo.init()
    except RepositoryExistsError as e:
        click.echo(error(str(e)))
        raise click.Abort()
    except OSError as e:
        click.echo(error(f"cannot create repository in '{directory}': {e}"))
        raise click.Abort()

    click.echo(success(f"Initialized empty CG repository in {repo.git_dir}"))
    click.echo(info("Start tracking files with 'cg add <file>'"))
