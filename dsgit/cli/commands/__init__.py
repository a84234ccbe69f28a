"""CLI commands for dsgit."""

from dsgit.cli.commands.init import init_cmd
from dsgit.cli.commands.plumbing import hash_object_cmd, cat_object_cmd, write_tree_cmd, read_tree_cmd
from dsgit.cli.commands.commit import commit_cmd
from dsgit.cli.commands.log import log_cmd, show_cmd
from dsgit.cli.commands.status import status_cmd
from dsgit.cli.commands.diff import diff_cmd
from dsgit.cli.commands.branch import branch_cmd, tag_cmd
from dsgit.cli.commands.switch import switch_cmd, reset_cmd
from dsgit.cli.commands.refs import show_ref_cmd

__all__ = ['init_cmd', 'hash_object_cmd', 'cat_object_cmd', 'write_tree_cmd', 'read_tree_cmd',
           'commit_cmd', 'log_cmd', 'show_cmd', 'status_cmd', 'diff_cmd', 'branch_cmd',
           'tag_cmd', 'switch_cmd', 'reset_cmd', 'show_ref_cmd']
