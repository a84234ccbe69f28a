"""Main CLI entry point for dsgit."""

import logging

import click
from colorama import init

from dsgit import __version__
from dsgit.cli.output import BANNER
from dsgit.cli.commands import (init_cmd, hash_object_cmd, cat_object_cmd, write_tree_cmd,
                                read_tree_cmd, commit_cmd, log_cmd, show_cmd, status_cmd,
                                diff_cmd, branch_cmd, tag_cmd, switch_cmd, reset_cmd,
                                show_ref_cmd)

# Initialize colorama for cross-platform colored output
init(autoreset=True)

LOG_LEVELS = [logging.WARNING, logging.INFO, logging.DEBUG]


class DsgitGroup(click.Group):
    """Custom Group class to display banner before help."""

    def format_help(self, ctx, formatter):
        """Override to add banner before help text."""
        click.echo(BANNER)
        super().format_help(ctx, formatter)


@click.group(cls=DsgitGroup)
@click.version_option(version=__version__)
@click.option('-v', '--verbose', count=True, help='Increase log verbosity (-v info, -vv debug)')
def cli(verbose):
    logging.basicConfig(
        level=LOG_LEVELS[min(verbose, len(LOG_LEVELS) - 1)],
        format='%(levelname)s %(name)s: %(message)s',
    )


# Register commands
cli.add_command(init_cmd)
cli.add_command(hash_object_cmd)
cli.add_command(cat_object_cmd)
cli.add_command(write_tree_cmd)
cli.add_command(read_tree_cmd)
cli.add_command(commit_cmd)
cli.add_command(log_cmd)
cli.add_command(show_cmd)
cli.add_command(status_cmd)
cli.add_command(diff_cmd)
cli.add_command(branch_cmd)
cli.add_command(tag_cmd)
cli.add_command(switch_cmd)
cli.add_command(reset_cmd)
cli.add_command(show_ref_cmd)


def main():
    """Main entry point."""
    cli()


if __name__ == '__main__':
    main()
