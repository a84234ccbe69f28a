"""Commit command - record a snapshot of the work tree."""

import click

from dsgit.core.errors import DsgitError
from dsgit.cli.output import success, error, short, require_repository


@click.command('commit')
@click.option('-m', '--message', required=True, help='Commit message')
def commit_cmd(message):
    """
    Snapshot the work tree and record it on the current branch.

    There is no staging area: every non-ignored file is committed.
    With a detached HEAD the commit moves HEAD only.

    Examples:
        dsgit commit -m "Add training split"
    """
    repo = require_repository()

    try:
        oid = repo.commits.commit(message)
    except DsgitError as e:
        click.echo(error(f"Commit failed: {e}"))
        raise click.Abort()

    branch = repo.refs.current_branch()
    location = branch if branch else 'detached HEAD'
    click.echo(success(f"[{location} {short(oid)}] {message.splitlines()[0] if message else ''}"))
