"""CLI commands for CG."""

from cg.cli.commands.init import init_cmd
from cg.cli.commands.add import add_cmd
from cg.cli.commands.commit import commit_cmd
from cg.cli.commands.status import status_cmd
from cg.cli.commands.log import log_cmd
from cg.cli.commands.branch import branch_cmd
from cg.cli.commands.checkout import checkout_cmd

__all__ = ['init_cmd', 'add_cmd', 'commit_cmd', 'status_cmd', 'log_cmd',
           'branch_cmd', 'checkout_cmd']
