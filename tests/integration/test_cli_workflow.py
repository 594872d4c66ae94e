"""Integration tests for the cg command line, backed by the in-memory store."""

import pytest
from pathlib import Path
from click.testing import CliRunner
from loguru import logger

from cg import __version__
from cg.cli.main import cli


@pytest.fixture
def runner():
    """Create CLI runner."""
    yield CliRunner()
    # The CLI binds a log sink to the runner's stderr, which is gone now
    logger.remove()


@pytest.fixture
def committed_repo(runner, cli_repo):
    """Repository with a.txt committed on main."""
    Path('a.txt').write_text('hi')
    assert runner.invoke(cli, ['add', 'a.txt']).exit_code == 0
    assert runner.invoke(cli, ['commit', '-m', 'first']).exit_code == 0
    return cli_repo


class TestInit:
    """Tests for cg init."""

    def test_init_current_directory(self, runner, temp_dir, monkeypatch):
        """Test init in an empty directory."""
        monkeypatch.chdir(temp_dir)

        result = runner.invoke(cli, ['init'])

        assert result.exit_code == 0
        assert 'Initialized empty CG repository' in result.output
        assert (temp_dir / '.git' / 'cg-index').exists()

    def test_init_named_directory(self, runner, temp_dir, monkeypatch):
        """Test init creates the named directory."""
        monkeypatch.chdir(temp_dir)

        result = runner.invoke(cli, ['init', 'project'])

        assert result.exit_code == 0
        assert (temp_dir / 'project' / '.git' / 'HEAD').read_text() == 'ref: refs/heads/main\n'

    def test_init_twice_fails(self, runner, temp_dir, monkeypatch):
        """Test a second init reports the existing repository."""
        monkeypatch.chdir(temp_dir)
        runner.invoke(cli, ['init'])

        result = runner.invoke(cli, ['init'])

        assert result.exit_code == 1
        assert 'already exists' in result.output


class TestGlobal:
    """Tests for top-level options and usage errors."""

    def test_version(self, runner):
        result = runner.invoke(cli, ['--version'])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help_shows_commands(self, runner):
        result = runner.invoke(cli, ['--help'])
        assert result.exit_code == 0
        for command in ('init', 'add', 'status', 'commit', 'log', 'branch', 'checkout'):
            assert command in result.output

    def test_unknown_command(self, runner):
        result = runner.invoke(cli, ['frobnicate'])
        assert result.exit_code == 2

    def test_add_without_paths(self, runner, cli_repo):
        result = runner.invoke(cli, ['add'])
        assert result.exit_code == 2

    @pytest.mark.parametrize('args', [['status'], ['add', 'x'], ['commit', '-m', 'x'], ['log']])
    def test_outside_repository(self, runner, temp_dir, monkeypatch, args):
        """Test every repository command fails outside a repository."""
        monkeypatch.chdir(temp_dir)

        result = runner.invoke(cli, args)

        assert result.exit_code == 1
        assert 'not inside a CG repository' in result.output

    def test_verbose_flag(self, runner, cli_repo):
        result = runner.invoke(cli, ['-v', 'status'])
        assert result.exit_code == 0


class TestStatusScenarios:
    """The add/commit/status round trips users see most."""

    def test_empty_repository_is_clean(self, runner, cli_repo):
        result = runner.invoke(cli, ['status'])

        assert result.exit_code == 0
        assert 'On branch main' in result.output
        assert 'nothing to commit, working tree clean' in result.output

    def test_added_file_is_new(self, runner, cli_repo):
        Path('a.txt').write_text('hi')

        add = runner.invoke(cli, ['add', 'a.txt'])
        status = runner.invoke(cli, ['status'])

        assert add.exit_code == 0
        assert 'staged 1 file(s)' in add.output
        assert 'Changes to be committed:' in status.output
        assert 'new file:   a.txt' in status.output
        assert 'Changes not staged' not in status.output

    def test_edit_after_commit_is_unstaged(self, runner, committed_repo):
        Path('a.txt').write_text('bye')

        result = runner.invoke(cli, ['status'])

        assert 'Changes not staged for commit:' in result.output
        assert 'modified:   a.txt' in result.output
        assert 'Changes to be committed:' not in result.output

    def test_readd_after_edit_is_staged(self, runner, committed_repo):
        Path('a.txt').write_text('bye')
        runner.invoke(cli, ['add', 'a.txt'])

        result = runner.invoke(cli, ['status'])

        assert 'Changes to be committed:' in result.output
        assert 'modified:   a.txt' in result.output
        assert 'Changes not staged' not in result.output

    def test_deleted_after_staging(self, runner, cli_repo):
        Path('a.txt').write_text('hi')
        runner.invoke(cli, ['add', 'a.txt'])
        Path('a.txt').unlink()

        result = runner.invoke(cli, ['status'])

        assert 'new file:   a.txt' in result.output
        assert 'deleted:    a.txt' in result.output

    def test_untracked_files(self, runner, committed_repo):
        Path('notes').mkdir()
        Path('notes', 'todo.txt').write_text('later')

        result = runner.invoke(cli, ['status'])

        assert 'Untracked files:' in result.output
        assert 'notes/todo.txt' in result.output

    def test_status_from_subdirectory(self, runner, committed_repo, monkeypatch):
        sub = committed_repo.work_tree / 'sub'
        sub.mkdir()
        monkeypatch.chdir(sub)
        (sub / 'inner.txt').write_text('x')

        assert runner.invoke(cli, ['add', 'inner.txt']).exit_code == 0
        result = runner.invoke(cli, ['status'])

        assert 'new file:   sub/inner.txt' in result.output


class TestAddCommand:
    """Tests for cg add errors."""

    def test_add_missing_file(self, runner, cli_repo):
        result = runner.invoke(cli, ['add', 'missing.txt'])
        assert result.exit_code == 1
        assert 'path not found' in result.output

    def test_add_empty_directory(self, runner, cli_repo):
        Path('empty').mkdir()
        result = runner.invoke(cli, ['add', 'empty'])
        assert result.exit_code == 1
        assert 'no files matched' in result.output

    def test_add_metadata(self, runner, cli_repo):
        result = runner.invoke(cli, ['add', '.git'])
        assert result.exit_code == 1
        assert len(cli_repo.load_index()) == 0


class TestCommitCommand:
    """Tests for cg commit."""

    def test_commit_output(self, runner, cli_repo, store):
        Path('a.txt').write_text('hi')
        runner.invoke(cli, ['add', 'a.txt'])

        result = runner.invoke(cli, ['commit', '-m', 'first'])

        head = store.resolve_head()
        assert result.exit_code == 0
        assert f'[main (root-commit) {head[:7]}] first' in result.output

    def test_second_commit_is_not_root(self, runner, committed_repo):
        Path('a.txt').write_text('two')
        runner.invoke(cli, ['add', 'a.txt'])

        result = runner.invoke(cli, ['commit', '-m', 'second'])

        assert result.exit_code == 0
        assert 'root-commit' not in result.output
        assert 'second' in result.output

    def test_commit_without_message(self, runner, cli_repo):
        """Test a missing message fails and leaves the staged file staged."""
        Path('a.txt').write_text('hi')
        runner.invoke(cli, ['add', 'a.txt'])
        before = cli_repo.index_file.read_bytes()

        result = runner.invoke(cli, ['commit'])

        assert result.exit_code == 1
        assert 'commit message is required' in result.output
        assert cli_repo.index_file.read_bytes() == before

    def test_commit_empty_message(self, runner, cli_repo, store):
        """Test an explicitly empty message fails and leaves the index alone."""
        Path('a.txt').write_text('hi')
        runner.invoke(cli, ['add', 'a.txt'])
        before = cli_repo.index_file.read_bytes()

        result = runner.invoke(cli, ['commit', '-m', ''])

        assert result.exit_code == 1
        assert 'commit message is required' in result.output
        assert cli_repo.index_file.read_bytes() == before
        assert store.commits == {}

    def test_commit_nothing_staged(self, runner, cli_repo):
        result = runner.invoke(cli, ['commit', '-m', 'empty'])
        assert result.exit_code == 1
        assert 'nothing staged' in result.output

    def test_commit_with_author(self, runner, cli_repo, store):
        Path('a.txt').write_text('hi')
        runner.invoke(cli, ['add', 'a.txt'])

        result = runner.invoke(cli, ['commit', '-m', 'first', '--author', 'Jane Doe <jane@example.com>'])

        assert result.exit_code == 0
        author = store.commits[store.resolve_head()]['author']
        assert str(author) == 'Jane Doe <jane@example.com>'

    def test_commit_with_bad_author(self, runner, cli_repo, store):
        Path('a.txt').write_text('hi')
        runner.invoke(cli, ['add', 'a.txt'])

        result = runner.invoke(cli, ['commit', '-m', 'first', '--author', 'Jane'])

        assert result.exit_code == 1
        assert store.commits == {}

    def test_commit_resync_warning(self, runner, cli_repo, store):
        Path('a.txt').write_text('hi')
        runner.invoke(cli, ['add', 'a.txt'])
        store.failing.add('read_head_tree')

        result = runner.invoke(cli, ['commit', '-m', 'first'])

        assert result.exit_code == 0
        assert 'failed to sync cg-index with HEAD' in result.output
        assert '(root-commit)' in result.output

    def test_commit_then_clean(self, runner, committed_repo):
        result = runner.invoke(cli, ['status'])
        assert 'nothing to commit, working tree clean' in result.output


class TestHistoryCommands:
    """Tests for log, branch and checkout."""

    def test_log_empty(self, runner, cli_repo):
        result = runner.invoke(cli, ['log'])
        assert result.exit_code == 0
        assert 'No commits yet.' in result.output

    def test_log_shows_commits(self, runner, committed_repo):
        result = runner.invoke(cli, ['log'])
        assert result.exit_code == 0
        assert 'first' in result.output

    def test_branch_create_and_list(self, runner, committed_repo):
        assert runner.invoke(cli, ['branch', 'feature']).exit_code == 0

        result = runner.invoke(cli, ['branch'])

        assert '* main' in result.output
        assert 'feature' in result.output

    def test_branch_delete(self, runner, committed_repo):
        runner.invoke(cli, ['branch', 'feature'])

        result = runner.invoke(cli, ['branch', '-d', 'feature'])

        assert result.exit_code == 0
        assert 'Deleted branch feature' in result.output

    def test_branch_delete_unknown(self, runner, committed_repo):
        result = runner.invoke(cli, ['branch', '-d', 'nope'])
        assert result.exit_code == 1

    def test_branch_without_commits(self, runner, cli_repo):
        result = runner.invoke(cli, ['branch', 'feature'])
        assert result.exit_code == 1

    def test_checkout_branch(self, runner, committed_repo):
        runner.invoke(cli, ['branch', 'feature'])
        Path('b.txt').write_text('b')
        runner.invoke(cli, ['add', 'b.txt'])
        runner.invoke(cli, ['commit', '-m', 'second'])

        result = runner.invoke(cli, ['checkout', 'feature'])
        status = runner.invoke(cli, ['status'])

        assert result.exit_code == 0
        assert not Path('b.txt').exists()
        assert 'On branch feature' in status.output
        assert 'nothing to commit, working tree clean' in status.output

    def test_checkout_detached(self, runner, committed_repo, store):
        head = store.resolve_head()

        runner.invoke(cli, ['checkout', head])
        status = runner.invoke(cli, ['status'])

        assert f'HEAD detached at {head[:7]}' in status.output

    def test_checkout_unknown(self, runner, committed_repo):
        result = runner.invoke(cli, ['checkout', 'nope'])
        assert result.exit_code == 1
