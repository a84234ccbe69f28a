"""Initialize a new dsgit repository."""

import click
from pathlib import Path

from dsgit.core.errors import DsgitError
from dsgit.core.repository import Repository
from dsgit.cli.output import success, error, info


@click.command('init')
@click.argument('path', default='.')
def init_cmd(path):
    """
    Initialize a new dsgit repository.

    Creates a .dsgit directory holding the object store, refs and config.
    HEAD starts out attached to the (not yet existing) default branch.

    Examples:
        dsgit init                  # Initialize in current directory
        dsgit init my-dataset       # Initialize in my-dataset directory
    """
    repo_path = Path(path).resolve()

    if not repo_path.exists():
        repo_path.mkdir(parents=True)
        click.echo(info(f"Created directory {repo_path}"))

    try:
        repo = Repository(str(repo_path)).init()
    except DsgitError as e:
        click.echo(error(str(e)))
        raise click.Abort()

    click.echo(success(f"Initialized empty dsgit repository in {repo.dsgit_dir}"))
