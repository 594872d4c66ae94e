"""Status command - show working tree status."""

import click
from colorama import Fore, Style
from cg.core.repository import Repository
from cg.core.errors import CgError
from cg.operations.status import compute_status
from cg.cli.output import success, error, info


def echo_branch(store):
    """Print the 'On branch' header."""
    branch = store.current_branch()
    if branch:
        click.echo(f"On branch {Fore.CYAN}{branch}{Style.RESET_ALL}")
        return

    head = store.resolve_head()
    if head:
        click.echo(f"{Fore.YELLOW}HEAD detached at {head[:7]}{Style.RESET_ALL}")
    else:
        click.echo(f"{Fore.YELLOW}HEAD detached{Style.RESET_ALL}")


def echo_report(report):
    """Print the categories of a StatusReport."""
    if report.has_staged:
        click.echo(Fore.GREEN + "Changes to be committed:" + Style.RESET_ALL)
        for path in report.staged_new:
            click.echo(f"  {Fore.GREEN}new file:   {path}{Style.RESET_ALL}")
        for path in report.staged_modified:
            click.echo(f"  {Fore.GREEN}modified:   {path}{Style.RESET_ALL}")
        for path in report.staged_deleted:
            click.echo(f"  {Fore.GREEN}deleted:    {path}{Style.RESET_ALL}")
        click.echo()

    if report.has_unstaged:
        click.echo(Fore.YELLOW + "Changes not staged for commit:" + Style.RESET_ALL)
        click.echo(info("  (use \"cg add <file>...\" to update what will be committed)"))
        for path in report.unstaged_modified:
            click.echo(f"  {Fore.YELLOW}modified:   {path}{Style.RESET_ALL}")
        for path in report.unstaged_deleted:
            click.echo(f"  {Fore.YELLOW}deleted:    {path}{Style.RESET_ALL}")
        click.echo()

    if report.untracked:
        click.echo(Fore.RED + "Untracked files:" + Style.RESET_ALL)
        click.echo(info("  (use \"cg add <file>...\" to include in what will be committed)"))
        for path in report.untracked:
            click.echo(f"  {Fore.RED}{path}{Style.RESET_ALL}")
        click.echo()

    if report.is_clean:
        click.echo(success("nothing to commit, working tree clean"))


@click.command('status')
def status_cmd():
    """
    Show the working tree status.

    Displays:
    - Changes staged for commit (index vs HEAD)
    - Changes not staged for commit (working tree vs index)
    - Untracked files (in neither HEAD nor the index)

    Examples:
        cg status
    """
    repo = Repository.find_repository()
    if not repo:
        click.echo(error("not inside a CG repository"))
        raise click.Abort()

    try:
        report = compute_status(repo)
    except CgError as e:
        click.echo(error(f"cannot read repository state: {e}"))
        raise click.Abort()

    echo_branch(repo.store)
    click.echo()
    echo_report(report)
