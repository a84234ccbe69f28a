"""Diff command - show changes between commits and the work tree."""

import click

from dsgit.core.errors import DsgitError
from dsgit.cli.output import error, info, require_repository


@click.command('diff')
@click.option('--name-only', is_flag=True, help='Only list changed paths')
@click.option('--no-color', is_flag=True, help='Disable colored output')
@click.argument('commit1', required=False)
@click.argument('commit2', required=False)
def diff_cmd(name_only, no_color, commit1, commit2):
    """
    Show changes between commits and the work tree.

    With no arguments, compares HEAD to the work tree.
    With one commit, compares that commit to the work tree.
    With two commits, compares the first to the second.

    Examples:
        dsgit diff                  # HEAD vs work tree
        dsgit diff v1.0             # Tag v1.0 vs work tree
        dsgit diff main feature     # Changes between branches
    """
    repo = require_repository()
    engine = repo.diff

    try:
        use_color = not no_color and repo.config.get_bool('color', 'ui', True)
        if commit2:
            old = repo.refs.resolve_name_to_oid(commit1)
            new = repo.refs.resolve_name_to_oid(commit2)
            diffs = engine.diff_commits(old, new)
        elif commit1:
            diffs = engine.diff_working(repo.refs.resolve_name_to_oid(commit1))
        else:
            diffs = engine.diff_working()
    except DsgitError as e:
        click.echo(error(f"Diff failed: {e}"))
        raise click.Abort()

    if not diffs:
        click.echo(info("No changes to display"))
        return

    if name_only:
        for diff in diffs:
            click.echo(diff.path)
        return

    click.echo(engine.format_diff(diffs, color=use_color))
