"""Log and show commands - inspect commit history."""

import textwrap
from collections import defaultdict

import click
from colorama import Fore, Style

from dsgit.core.errors import DsgitError
from dsgit.cli.output import error, info, require_repository


def get_ref_labels(repo):
    """
    Map commit ids to the ref names pointing at them.

    Returns dict mapping commit_hash -> list of ref names
    """
    labels = defaultdict(list)
    for name, ref in repo.refs.list_refs():
        labels[ref.value].append(name)
    return labels


def format_commit(oid, commit, labels=None, color=True):
    """Format one commit header and indented message."""
    names = ', '.join(labels or [])
    decoration = f" ({names})" if names else ''

    if color:
        header = f"{Fore.YELLOW}commit {oid}{Style.RESET_ALL}{Fore.GREEN}{decoration}{Style.RESET_ALL}"
    else:
        header = f"commit {oid}{decoration}"

    lines = [header]
    if commit.parent:
        lines.append(f"parent {commit.parent}")
    lines.append('')
    lines.append(textwrap.indent(commit.message, '    '))
    lines.append('')
    return '\n'.join(lines)


@click.command('log')
@click.option('-n', '--max-count', type=int, default=None, help='Limit number of commits')
@click.option('--oneline', is_flag=True, help='Show each commit on a single line')
@click.option('--no-color', is_flag=True, help='Disable colored output')
@click.argument('name', default='HEAD')
def log_cmd(max_count, oneline, no_color, name):
    """
    Show commit history from NAME (default HEAD) back to the first commit.

    Examples:
        dsgit log
        dsgit log --oneline
        dsgit log v1.0
    """
    repo = require_repository()
    try:
        color = not no_color and repo.config.get_bool('color', 'ui', True)
        if name == 'HEAD' and repo.refs.head_oid() is None:
            click.echo(info("No commits yet"))
            return

        oid = repo.refs.resolve_name_to_oid(name)
        labels = get_ref_labels(repo)

        for count, (commit_oid, commit) in enumerate(repo.commits.iter_log(oid)):
            if max_count is not None and count >= max_count:
                break
            if oneline:
                subject = commit.message.split('\n')[0]
                click.echo(f"{commit_oid[:7]} {subject}")
            else:
                click.echo(format_commit(commit_oid, commit, labels[commit_oid], color))
    except DsgitError as e:
        click.echo(error(str(e)))
        raise click.Abort()


@click.command('show')
@click.option('--no-color', is_flag=True, help='Disable colored output')
@click.argument('name', default='HEAD')
def show_cmd(no_color, name):
    """
    Show a commit and the changes it introduced over its parent.

    Examples:
        dsgit show
        dsgit show main
    """
    repo = require_repository()
    try:
        color = not no_color and repo.config.get_bool('color', 'ui', True)
        oid = repo.refs.resolve_name_to_oid(name)
        commit = repo.commits.parse(oid)
        click.echo(format_commit(oid, commit, get_ref_labels(repo)[oid], color))

        diffs = repo.diff.diff_commits(commit.parent, oid)
        if diffs:
            click.echo(repo.diff.format_diff(diffs, color=color))
    except DsgitError as e:
        click.echo(error(str(e)))
        raise click.Abort()
