"""show-ref command - list references."""

import click

from dsgit.core.errors import DsgitError
from dsgit.cli.output import error, require_repository


@click.command('show-ref')
@click.option('--symbolic', is_flag=True, help='Show symbolic targets instead of resolving them')
@click.option('--heads', is_flag=True, help='Only show branches')
@click.option('--tags', is_flag=True, help='Only show tags')
def show_ref_cmd(symbolic, heads, tags):
    """
    List HEAD and every ref with the value it points to.

    Examples:
        dsgit show-ref
        dsgit show-ref --symbolic
        dsgit show-ref --tags
    """
    repo = require_repository()

    prefix = ''
    if heads:
        prefix = 'refs/heads/'
    elif tags:
        prefix = 'refs/tags/'

    try:
        refs = repo.refs.list_refs(deref=not symbolic, prefix=prefix)
    except DsgitError as e:
        click.echo(error(str(e)))
        raise click.Abort()

    for name, ref in refs:
        click.echo(f"{ref.serialize()} {name}")
