"""Status command - show work tree changes against HEAD."""

import click
from colorama import Fore, Style

from dsgit.core.errors import DsgitError
from dsgit.cli.output import error, info, short, require_repository


@click.command('status')
def status_cmd():
    """
    Show which files changed since the last commit.

    Lists modified, created and removed paths, comparing the work tree to
    the tree of the HEAD commit.
    """
    repo = require_repository()

    try:
        branch = repo.refs.current_branch()
        head = repo.refs.head_oid()
        changes = repo.diff.status()
    except DsgitError as e:
        click.echo(error(str(e)))
        raise click.Abort()

    if branch:
        click.echo(f"On branch {branch}")
    elif head:
        click.echo(f"HEAD detached at {short(head)}")
    if head is None:
        click.echo("\nNo commits yet")

    if not changes:
        click.echo(info("Nothing to commit, working tree clean"))
        return

    sections = [
        ('modified', changes.modified, Fore.YELLOW),
        ('created', changes.created, Fore.GREEN),
        ('removed', changes.removed, Fore.RED),
    ]
    click.echo()
    for label, paths, tint in sections:
        for path in paths:
            click.echo(f"\t{tint}{label}:   {path}{Style.RESET_ALL}")
