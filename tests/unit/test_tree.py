"""Tree snapshot and restore tests."""

import os
from pathlib import Path

import pytest

from dsgit.core.errors import Corrupt, NotFound, TypeMismatch
from dsgit.core.hash import hash_object
from dsgit.core.repository import Repository
from conftest import read_files, write_files


def test_snapshot_serialization(repo):
    """Test the root tree lists full relative paths sorted."""
    write_files(repo.work_tree, {'b.txt': 'b', 'a.txt': 'a', 'sub/c.txt': 'c'})

    oid = repo.trees.snapshot()
    content = repo.objects.get(oid, 'tree').decode()
    lines = content.splitlines()

    assert [line.split(' ', 2)[2] for line in lines] == ['a.txt', 'b.txt', 'sub']
    assert lines[0] == f"blob {hash_object('blob', b'a')} a.txt"
    assert lines[2].startswith('tree ')

    sub_oid = lines[2].split(' ')[1]
    sub_content = repo.objects.get(sub_oid, 'tree').decode()
    assert sub_content == f"blob {hash_object('blob', b'c')} sub/c.txt\n"


def test_snapshot_skips_storage_dir(repo, working_files):
    """Test .dsgit is never snapshotted."""
    items = repo.trees.read_tree(repo.trees.snapshot())
    assert all('.dsgit' not in path for path, _ in items)
    assert sorted(path for path, _ in items) == sorted(working_files)


def test_restore_reproduces_snapshot(repo, working_files):
    """Test restore(snapshot(T)) reproduces T."""
    write_files(repo.work_tree, {'bin/data.bin': bytes(range(256))})
    before = read_files(repo.work_tree)

    oid = repo.trees.snapshot()

    write_files(repo.work_tree, {'test1.txt': 'changed', 'extra/new.txt': 'new'})
    (repo.work_tree / 'subdir' / 'test3.txt').unlink()

    repo.trees.restore(oid)
    assert read_files(repo.work_tree) == before


def test_identical_directories_hash_identically(temp_dir):
    """Test creation order does not affect the tree id."""
    files = {'z.txt': 'z', 'a/b.txt': 'b', 'a/a.txt': 'a', 'm.txt': 'm'}

    first = Repository(str(temp_dir / 'one')).init()
    write_files(first.work_tree, files)

    second = Repository(str(temp_dir / 'two')).init()
    write_files(second.work_tree, dict(reversed(list(files.items()))))

    assert first.trees.snapshot() == second.trees.snapshot()


def test_snapshot_respects_ignore_patterns(repo):
    """Test ignored paths are left out."""
    write_files(repo.work_tree, {
        '.dsgitignore': 'cache\n',
        'keep.txt': 'k',
        'cache/tmp.txt': 't',
        'data/cache_file.txt': 'c',
    })

    paths = [path for path, _ in repo.trees.read_tree(repo.trees.snapshot())]
    assert paths == ['keep.txt']


def test_snapshot_explicit_ignore_list(temp_dir):
    """Test ignore patterns can be handed to the repository directly."""
    repo = Repository(str(temp_dir), ignore_patterns=['skip']).init()
    write_files(repo.work_tree, {'skip.txt': 's', 'take.txt': 't'})

    paths = [path for path, _ in repo.trees.read_tree(repo.trees.snapshot())]
    assert paths == ['take.txt']


@pytest.mark.skipif(not hasattr(os, 'symlink'), reason='symlinks unsupported')
def test_snapshot_skips_symlinks(repo):
    """Test symlinks are not handled."""
    write_files(repo.work_tree, {'real.txt': 'r'})
    os.symlink(repo.work_tree / 'real.txt', repo.work_tree / 'link.txt')

    paths = [path for path, _ in repo.trees.read_tree(repo.trees.snapshot())]
    assert paths == ['real.txt']


def test_flatten_nested(repo, working_files):
    """Test flatten expands nested trees depth-first."""
    oid = repo.trees.snapshot()
    items = repo.trees.flatten(repo.objects.get(oid, 'tree'))

    assert [path for path, _ in items] == [
        'subdir/deeper/test4.txt', 'subdir/test3.txt', 'test1.txt', 'test2.txt',
    ]
    assert dict(items)['test1.txt'] == hash_object('blob', b'Content 1')


def test_flatten_unknown_kind(repo):
    """Test unknown entry kinds are corrupt."""
    with pytest.raises(Corrupt):
        repo.trees.flatten(f"commit {'a' * 40} x\n".encode())


def test_flatten_missing_subtree(repo):
    """Test a dangling subtree reference fails."""
    with pytest.raises(NotFound):
        repo.trees.flatten(f"tree {'a' * 40} sub\n".encode())


def test_read_tree_requires_tree(repo):
    """Test a blob id is not accepted as a tree."""
    oid = repo.objects.put('blob', b'data')
    with pytest.raises(TypeMismatch):
        repo.trees.read_tree(oid)


def test_restore_keeps_ignored_files(repo):
    """Test restore does not remove ignored entries."""
    write_files(repo.work_tree, {'.dsgitignore': 'local\n', 'a.txt': 'a'})
    oid = repo.trees.snapshot()

    write_files(repo.work_tree, {'local.cfg': 'secret'})
    repo.trees.restore(oid)

    assert (repo.work_tree / 'local.cfg').read_text() == 'secret'
    assert (repo.work_tree / 'a.txt').read_text() == 'a'
    assert repo.dsgit_dir.is_dir()


def test_restore_rejects_escaping_paths(repo):
    """Test restore refuses tree entries outside the work tree."""
    blob = repo.objects.put('blob', b'x')
    tree = repo.objects.put('tree', f"blob {blob} ../outside.txt\n".encode())
    write_files(repo.work_tree, {'a.txt': 'a'})

    with pytest.raises(Corrupt):
        repo.trees.restore(tree)
    assert (repo.work_tree / 'a.txt').exists()


def test_restore_missing_tree_leaves_work_tree(repo):
    """Test a bad tree id fails before anything is removed."""
    write_files(repo.work_tree, {'a.txt': 'a'})
    with pytest.raises(NotFound):
        repo.trees.restore('f' * 40)
    assert (repo.work_tree / 'a.txt').exists()


def test_working_tree_does_not_store(repo):
    """Test hashing the work tree writes no objects."""
    write_files(repo.work_tree, {'a.txt': 'a', 'd/b.txt': 'b'})

    items = repo.trees.working_tree()
    assert items == [('a.txt', hash_object('blob', b'a')), ('d/b.txt', hash_object('blob', b'b'))]
    assert list(repo.objects_dir.iterdir()) == []


def test_empty_directory_snapshot(repo):
    """Test an empty directory yields an empty subtree."""
    (repo.work_tree / 'empty').mkdir()
    oid = repo.trees.snapshot()
    content = repo.objects.get(oid, 'tree').decode()

    assert content == f"tree {hash_object('tree', b'')} empty\n"
    assert repo.trees.read_tree(oid) == []


@pytest.mark.parametrize('name', [
    'a\rb.txt', 'a\x0bb.txt', 'a\x0cb.txt', 'a\x1cb.txt', 'a\x85b.txt', 'a b.txt',
])
def test_restore_reproduces_unusual_names(repo, name):
    """Test names with line-break-like characters round trip."""
    write_files(repo.work_tree, {name: 'x\n', 'plain.txt': 'y\n', f'dir/{name}': 'z\n'})
    before = read_files(repo.work_tree)

    oid = repo.trees.snapshot()
    (repo.work_tree / 'plain.txt').write_text('changed\n')
    repo.trees.restore(oid)

    assert read_files(repo.work_tree) == before
    assert name in dict(repo.trees.read_tree(oid))


def test_snapshot_skips_newline_names(repo):
    """Test a name that cannot be written as a tree line is left out."""
    write_files(repo.work_tree, {'bad\nname.txt': 'b', 'ok.txt': 'o'})

    oid = repo.trees.snapshot()
    assert [path for path, _ in repo.trees.read_tree(oid)] == ['ok.txt']
    assert [path for path, _ in repo.trees.working_tree()] == ['ok.txt']

    repo.trees.restore(oid)
    assert (repo.work_tree / 'bad\nname.txt').read_text() == 'b'


def test_snapshot_relative_directory(repo, tmp_path, monkeypatch):
    """Test a relative directory is taken from the work tree root."""
    monkeypatch.chdir(tmp_path)
    write_files(repo.work_tree, {'sub/c.txt': 'c'})

    oid = repo.trees.snapshot(Path('sub'))
    assert repo.objects.get(oid, 'tree').decode() == f"blob {hash_object('blob', b'c')} sub/c.txt\n"
    assert [rel for rel, _ in repo.trees.iter_files(directory=Path('sub'))] == ['sub/c.txt']
