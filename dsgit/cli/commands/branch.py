"""Branch and tag commands - create, list and delete named refs."""

import click
from colorama import Fore, Style

from dsgit.core.errors import DsgitError
from dsgit.cli.output import success, error, info, short, require_repository


@click.command('branch')
@click.option('-d', '--delete', is_flag=True, help='Delete a branch')
@click.argument('name', required=False)
@click.argument('start_point', default='HEAD')
def branch_cmd(delete, name, start_point):
    """
    List, create, or delete branches.

    Creating a branch does not switch to it.

    Examples:
        dsgit branch                    # List all branches
        dsgit branch feature            # Create branch at HEAD
        dsgit branch hotfix v1.0        # Create branch at tag v1.0
        dsgit branch -d feature         # Delete branch
    """
    repo = require_repository()
    refs = repo.refs

    try:
        if name is None:
            current = refs.current_branch()
            branches = refs.list_branches()
            if not branches:
                click.echo(info("No branches yet"))
            for branch, oid in branches:
                if branch == current:
                    click.echo(f"* {Fore.GREEN}{branch}{Style.RESET_ALL} {short(oid)}")
                else:
                    click.echo(f"  {branch} {short(oid)}")
            return

        if delete:
            if not refs.delete_branch(name):
                click.echo(error(f"Branch '{name}' not found"))
                raise click.Abort()
            click.echo(success(f"Deleted branch '{name}'"))
            return

        oid = refs.resolve_name_to_oid(start_point)
        refs.create_branch(name, oid)
        click.echo(success(f"Created branch '{name}' at {short(oid)}"))
    except DsgitError as e:
        click.echo(error(str(e)))
        raise click.Abort()


@click.command('tag')
@click.option('-d', '--delete', is_flag=True, help='Delete a tag')
@click.argument('name', required=False)
@click.argument('target', default='HEAD')
def tag_cmd(delete, name, target):
    """
    List, create, or delete tags.

    Tags always point directly at a commit.

    Examples:
        dsgit tag                       # List all tags
        dsgit tag v1.0                  # Tag HEAD
        dsgit tag v0.9 feature          # Tag the tip of feature
        dsgit tag -d v1.0               # Delete tag
    """
    repo = require_repository()
    refs = repo.refs

    try:
        if name is None:
            for tag, oid in refs.list_tags():
                click.echo(f"{tag} {short(oid)}")
            return

        if delete:
            if not refs.delete_tag(name):
                click.echo(error(f"Tag '{name}' not found"))
                raise click.Abort()
            click.echo(success(f"Deleted tag '{name}'"))
            return

        oid = refs.resolve_name_to_oid(target)
        refs.create_tag(name, oid)
        click.echo(success(f"Created tag '{name}' at {short(oid)}"))
    except DsgitError as e:
        click.echo(error(str(e)))
        raise click.Abort()
