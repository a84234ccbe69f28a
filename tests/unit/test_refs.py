"""Reference management tests."""

import pytest

from dsgit.core.errors import (
    CycleDetected, NameResolutionFailure, NotFound, RepositoryError, TypeMismatch,
)
from dsgit.core.refs import RefValue, is_ref_name
from conftest import read_files, write_files


def test_is_ref_name():
    """Test which names may be stored as refs."""
    assert is_ref_name('HEAD')
    assert is_ref_name('refs/heads/main')
    assert is_ref_name('refs/tags/v1.0')
    assert not is_ref_name('main')
    assert not is_ref_name('refs/heads/../../config')
    assert not is_ref_name('refs//main')
    assert not is_ref_name('refs/heads/')


def test_update_and_resolve_direct(repo):
    """Test writing and reading a direct ref."""
    repo.refs.update('refs/heads/feature', RefValue(False, 'a' * 40))

    ref = repo.refs.resolve('refs/heads/feature')
    assert ref == RefValue(False, 'a' * 40)
    assert ref.name == 'refs/heads/feature'
    assert (repo.heads_dir / 'feature').read_text() == 'a' * 40


def test_symbolic_ref_on_disk(repo):
    """Test symbolic refs are stored with the ref: marker."""
    repo.refs.update('refs/alias', RefValue(True, 'refs/heads/main'), deref=False)
    assert (repo.refs_dir / 'alias').read_text() == 'ref:refs/heads/main'


def test_resolve_follows_symbolic_chain(repo):
    """Test deref follows symbolic refs to the direct ref."""
    repo.refs.update('refs/heads/main', RefValue(False, 'b' * 40))

    assert repo.refs.resolve('HEAD') == RefValue(False, 'b' * 40)
    assert repo.refs.resolve('HEAD').name == 'refs/heads/main'
    assert repo.refs.resolve('HEAD', deref=False) == RefValue(True, 'refs/heads/main')


def test_resolve_missing(repo):
    """Test missing refs resolve to None."""
    assert repo.refs.resolve('refs/heads/nope') is None
    assert repo.refs.resolve('HEAD') is None


def test_update_through_symbolic_ref(repo):
    """Test deref update writes the end of the chain."""
    target = repo.refs.update('HEAD', RefValue(False, 'c' * 40), deref=True)

    assert target == 'refs/heads/main'
    assert repo.head_file.read_text() == 'ref:refs/heads/main'
    assert (repo.heads_dir / 'main').read_text() == 'c' * 40


def test_update_without_deref_replaces_head(repo):
    """Test a non-deref update overwrites HEAD itself."""
    repo.refs.update('HEAD', RefValue(False, 'c' * 40), deref=False)

    assert repo.head_file.read_text() == 'c' * 40
    assert not (repo.heads_dir / 'main').exists()


def test_update_rejects_empty_value(repo):
    """Test empty values are refused."""
    with pytest.raises(ValueError):
        repo.refs.update('refs/heads/x', RefValue(False, ''))


def test_update_rejects_invalid_name(repo):
    """Test names outside refs/ are refused."""
    with pytest.raises(NameResolutionFailure):
        repo.refs.update('config', RefValue(False, 'a' * 40))


def test_cycle_detected(repo):
    """Test a symbolic loop is reported instead of followed forever."""
    repo.refs.update('refs/a', RefValue(True, 'refs/b'), deref=False)
    repo.refs.update('refs/b', RefValue(True, 'refs/a'), deref=False)

    with pytest.raises(CycleDetected) as excinfo:
        repo.refs.resolve('refs/a')
    assert excinfo.value.chain == ['refs/a', 'refs/b', 'refs/a']


def test_resolution_order(repo_with_commits):
    """Test tags win over branches of the same name."""
    repo, first, second = repo_with_commits
    repo.refs.create_branch('v1', second)
    repo.refs.create_tag('v1', first)

    assert repo.refs.resolve_name_to_oid('v1') == first
    assert repo.refs.resolve_name_to_oid('heads/v1') == second
    assert repo.refs.resolve_name_to_oid('refs/heads/v1') == second


def test_resolve_name_variants(repo_with_commits):
    """Test HEAD, @, branch names and raw ids all resolve."""
    repo, first, second = repo_with_commits

    assert repo.refs.resolve_name_to_oid('HEAD') == second
    assert repo.refs.resolve_name_to_oid('@') == second
    assert repo.refs.resolve_name_to_oid('main') == second
    assert repo.refs.resolve_name_to_oid(first) == first


def test_resolve_unknown_name(repo_with_commits):
    """Test names that match nothing fail."""
    repo, _, _ = repo_with_commits
    with pytest.raises(NameResolutionFailure, match='Not a valid object name'):
        repo.refs.resolve_name_to_oid('nonexistent')


def test_raw_oid_not_checked_for_existence(repo):
    """Test a 40-hex name resolves even if no object has that id."""
    assert repo.refs.resolve_name_to_oid('d' * 40) == 'd' * 40


def test_create_branch_does_not_move_head(repo_with_commits):
    """Test creating a branch leaves HEAD alone."""
    repo, first, _ = repo_with_commits
    assert repo.refs.create_branch('feature', first) == 'refs/heads/feature'

    assert repo.refs.current_branch() == 'main'
    assert repo.refs.list_branches() == [('feature', first), ('main', repo.refs.head_oid())]


def test_create_branch_requires_commit(repo_with_commits):
    """Test branches may only point at commits."""
    repo, _, _ = repo_with_commits
    blob = repo.objects.put('blob', b'x')

    with pytest.raises(TypeMismatch):
        repo.refs.create_branch('bad', blob)
    with pytest.raises(NotFound):
        repo.refs.create_branch('bad', 'e' * 40)


def test_create_branch_invalid_name(repo_with_commits):
    """Test names escaping the refs namespace are refused."""
    repo, first, _ = repo_with_commits
    with pytest.raises(NameResolutionFailure):
        repo.refs.create_branch('../evil', first)


def test_create_and_delete_tag(repo_with_commits):
    """Test tags are direct refs that can be removed."""
    repo, first, _ = repo_with_commits
    repo.refs.create_tag('v1.0', first)

    assert (repo.tags_dir / 'v1.0').read_text() == first
    assert repo.refs.list_tags() == [('v1.0', first)]

    assert repo.refs.delete_tag('v1.0')
    assert repo.refs.list_tags() == []
    assert not repo.refs.delete_tag('v1.0')


def test_delete_current_branch_refused(repo_with_commits):
    """Test the checked out branch cannot be deleted."""
    repo, first, _ = repo_with_commits
    repo.refs.create_branch('other', first)

    with pytest.raises(RepositoryError):
        repo.refs.delete_branch('main')
    assert repo.refs.delete_branch('other')
    assert not repo.refs.is_branch('other')


def test_switch_to_branch_keeps_head_symbolic(repo_with_commits):
    """Test switching to a branch attaches HEAD and restores its tree."""
    repo, first, _ = repo_with_commits
    repo.refs.create_branch('old', first)

    assert repo.refs.switch('old') == first
    assert repo.head_file.read_text() == 'ref:refs/heads/old'
    assert repo.refs.current_branch() == 'old'
    assert read_files(repo.work_tree) == {'a.txt': b'hello\n'}


def test_switch_full_branch_name(repo_with_commits):
    """Test a full refs/heads/ name also attaches HEAD."""
    repo, first, _ = repo_with_commits
    repo.refs.create_branch('old', first)

    repo.refs.switch('refs/heads/old')
    assert repo.refs.current_branch() == 'old'


def test_switch_to_commit_detaches(repo_with_commits):
    """Test switching to a raw id detaches HEAD."""
    repo, first, second = repo_with_commits

    repo.refs.switch(first)
    assert repo.refs.is_detached()
    assert repo.head_file.read_text() == first
    assert repo.refs.current_branch() is None

    repo.refs.switch('main')
    assert not repo.refs.is_detached()
    assert read_files(repo.work_tree) == {'a.txt': b'world\n', 'data/b.txt': b'b\n'}


def test_switch_to_tag_detaches(repo_with_commits):
    """Test switching to a tag detaches HEAD at the tagged commit."""
    repo, first, _ = repo_with_commits
    repo.refs.create_tag('v1', first)

    repo.refs.switch('v1')
    assert repo.head_file.read_text() == first


def test_switch_unknown_name(repo_with_commits):
    """Test switching to an unknown name changes nothing."""
    repo, _, _ = repo_with_commits
    before = read_files(repo.work_tree)

    with pytest.raises(NameResolutionFailure):
        repo.refs.switch('nowhere')
    assert read_files(repo.work_tree) == before
    assert repo.refs.current_branch() == 'main'


def test_reset_detaches_without_touching_work_tree(repo_with_commits):
    """Test reset moves HEAD only."""
    repo, first, second = repo_with_commits
    write_files(repo.work_tree, {'local.txt': 'local'})
    before = read_files(repo.work_tree)

    repo.refs.reset(first)

    assert repo.head_file.read_text() == first
    assert repo.refs.resolve('refs/heads/main').value == second
    assert read_files(repo.work_tree) == before


def test_reset_requires_commit(repo_with_commits):
    """Test reset refuses objects that are not commits."""
    repo, _, _ = repo_with_commits
    with pytest.raises(NotFound):
        repo.refs.reset('f' * 40)


def test_list_refs(repo_with_commits):
    """Test HEAD and every ref under refs/ are listed, sorted."""
    repo, first, second = repo_with_commits
    repo.refs.create_tag('v1', first)

    refs = repo.refs.list_refs()
    assert [name for name, _ in refs] == ['HEAD', 'refs/heads/main', 'refs/tags/v1']
    assert [ref.value for _, ref in refs] == [second, second, first]

    symbolic = dict(repo.refs.list_refs(deref=False))
    assert symbolic['HEAD'] == RefValue(True, 'refs/heads/main')


def test_list_refs_unborn_branch(repo):
    """Test an unborn HEAD is left out when dereferencing."""
    assert repo.refs.list_refs() == []
    assert [name for name, _ in repo.refs.list_refs(deref=False)] == ['HEAD']
