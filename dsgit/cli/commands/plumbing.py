"""Low-level object commands: hash-object, cat-object, write-tree, read-tree."""

import sys

import click

from dsgit.core.errors import DsgitError
from dsgit.core.objects import BLOB, TREE
from dsgit.cli.output import error, success, require_repository


@click.command('hash-object')
@click.argument('file', type=click.Path(exists=True, dir_okay=False))
def hash_object_cmd(file):
    """
    Store a file as a blob and print its object id.

    Examples:
        dsgit hash-object data.csv
    """
    repo = require_repository()
    try:
        with open(file, 'rb') as f:
            oid = repo.objects.put(BLOB, f.read())
    except DsgitError as e:
        click.echo(error(str(e)))
        raise click.Abort()
    click.echo(oid)


@click.command('cat-object')
@click.option('-t', '--type', 'show_type', is_flag=True, help='Show object kind instead of content')
@click.argument('name')
def cat_object_cmd(show_type, name):
    """
    Print the raw content of an object.

    NAME may be a ref, branch, tag or full object id.

    Examples:
        dsgit cat-object HEAD
        dsgit cat-object -t 4963f4ed0612f7242d9d92bf59b4fb8ac8d29ec2
    """
    repo = require_repository()
    try:
        oid = repo.refs.resolve_name_to_oid(name)
        kind, content = repo.objects.read(oid)
    except DsgitError as e:
        click.echo(error(str(e)))
        raise click.Abort()

    if show_type:
        click.echo(kind)
        return

    sys.stdout.flush()
    click.get_binary_stream('stdout').write(content)


@click.command('write-tree')
def write_tree_cmd():
    """
    Snapshot the work tree as a tree object and print its id.

    Paths matching .dsgitignore are skipped.
    """
    repo = require_repository()
    try:
        oid = repo.trees.snapshot()
    except DsgitError as e:
        click.echo(error(str(e)))
        raise click.Abort()
    click.echo(oid)


@click.command('read-tree')
@click.argument('name')
def read_tree_cmd(name):
    """
    Replace the work tree with the content of a tree object.

    HEAD is not moved. Untracked, non-ignored files are removed.

    Examples:
        dsgit read-tree 2b5bfdf7798569e0b59b16eb9602d5fa572d6038
    """
    repo = require_repository()
    try:
        oid = repo.refs.resolve_name_to_oid(name)
        if repo.objects.read_kind(oid) != TREE:
            oid = repo.commits.parse(oid).tree
        count = repo.trees.restore(oid)
    except DsgitError as e:
        click.echo(error(str(e)))
        raise click.Abort()
    click.echo(success(f"Restored {count} file(s) from tree {oid[:7]}"))
