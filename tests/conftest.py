"""Shared pytest fixtures for dsgit tests."""

import shutil
import tempfile
from pathlib import Path

import pytest

from dsgit.core.repository import Repository


def write_files(root: Path, files: dict) -> None:
    """Write {relative path: str or bytes} under root, creating directories."""
    for rel_path, content in files.items():
        path = root / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content)


def read_files(root: Path) -> dict:
    """Read every file under root except .dsgit into {relative path: bytes}."""
    files = {}
    for path in root.rglob('*'):
        rel_path = path.relative_to(root).as_posix()
        if path.is_file() and not rel_path.startswith('.dsgit'):
            files[rel_path] = path.read_bytes()
    return files


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path_factory):
    """Keep the user's ~/.dsgitconfig and DSGIT_* variables out of tests."""
    from dsgit.core.config import Config
    home = tmp_path_factory.mktemp('home')
    monkeypatch.setattr(Config, 'GLOBAL_CONFIG_PATH', home / '.dsgitconfig')
    for key in ('DSGIT_INIT_DEFAULTBRANCH', 'DSGIT_CORE_GLOBIGNORE',
                'DSGIT_DIFF_CONTEXT', 'DSGIT_COLOR_UI'):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    yield Path(tmpdir)
    shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def repo(temp_dir):
    """Create an initialized repository."""
    return Repository(str(temp_dir)).init()


@pytest.fixture
def working_files(repo):
    """Create sample file structure in repository."""
    files = {
        'test1.txt': 'Content 1',
        'test2.txt': 'Content 2',
        'subdir/test3.txt': 'Content 3',
        'subdir/deeper/test4.txt': 'Content 4',
    }
    write_files(repo.work_tree, files)
    return files


@pytest.fixture
def repo_with_commits(repo):
    """
    Repository with two commits on main.

    Returns:
        Tuple of (repo, first commit id, second commit id)
    """
    write_files(repo.work_tree, {'a.txt': 'hello\n'})
    first = repo.commits.commit('init')

    write_files(repo.work_tree, {'a.txt': 'world\n', 'data/b.txt': 'b\n'})
    second = repo.commits.commit('update')

    return repo, first, second


@pytest.fixture
def runner():
    """Click test runner."""
    from click.testing import CliRunner
    return CliRunner()


@pytest.fixture
def in_repo(repo_with_commits, monkeypatch):
    """
    Run from inside the repository with two commits.

    Returns:
        Tuple of (repo, first commit id, second commit id)
    """
    monkeypatch.chdir(repo_with_commits[0].work_tree)
    return repo_with_commits
