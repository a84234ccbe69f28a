"""CLI output utilities and formatting."""

import click
from colorama import Fore, Style

from dsgit.core.repository import Repository

BANNER = f"""
{Fore.CYAN}{Style.BRIGHT}  dsgit{Style.RESET_ALL}  {Fore.WHITE}content-addressed version control{Style.RESET_ALL}
"""


def success(message: str) -> str:
    """Format success message in green."""
    return f"{Fore.GREEN}✓ {message}{Style.RESET_ALL}"


def info(message: str) -> str:
    """Format info message in cyan."""
    return f"{Fore.CYAN}→ {message}{Style.RESET_ALL}"


def warning(message: str) -> str:
    """Format warning message in yellow."""
    return f"{Fore.YELLOW}⚠ {message}{Style.RESET_ALL}"


def error(message: str) -> str:
    """Format error message in red."""
    return f"{Fore.RED}✗ {message}{Style.RESET_ALL}"


def short(oid: str) -> str:
    """Abbreviate an object id for display."""
    return oid[:7]


def require_repository() -> Repository:
    """Find the enclosing repository or abort."""
    repo = Repository.find_repository()
    if not repo:
        click.echo(error("Not a dsgit repository"))
        raise click.Abort()
    return repo
