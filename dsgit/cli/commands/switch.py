"""Switch and reset commands - move HEAD."""

import click

from dsgit.core.errors import DsgitError
from dsgit.cli.output import success, error, warning, short, require_repository


@click.command('switch')
@click.argument('name')
def switch_cmd(name):
    """
    Check out a branch, tag or commit.

    The work tree is replaced with the target's snapshot. Switching to a
    branch attaches HEAD to it; anything else detaches HEAD.

    Examples:
        dsgit switch main          # Switch to 'main' branch
        dsgit switch v1.0          # Detached HEAD at tag v1.0
    """
    repo = require_repository()

    try:
        oid = repo.refs.switch(name)
    except DsgitError as e:
        click.echo(error(f"Switch failed: {e}"))
        raise click.Abort()

    branch = repo.refs.current_branch()
    if branch:
        click.echo(success(f"Switched to branch '{branch}'"))
    else:
        click.echo(warning(f"HEAD is now detached at {short(oid)}"))


@click.command('reset')
@click.argument('name')
def reset_cmd(name):
    """
    Point HEAD directly at a commit.

    HEAD is detached from any branch. The work tree is not touched.

    Examples:
        dsgit reset v1.0
    """
    repo = require_repository()

    try:
        oid = repo.refs.resolve_name_to_oid(name)
        repo.refs.reset(oid)
    except DsgitError as e:
        click.echo(error(f"Reset failed: {e}"))
        raise click.Abort()

    click.echo(success(f"HEAD is now at {short(oid)}"))
