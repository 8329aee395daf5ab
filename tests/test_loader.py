"""Tests for snapshot/loader.py - working trees and git revisions."""

import shutil
import subprocess

import pytest

from arcsight.exceptions import InvalidPathError
from arcsight.snapshot.loader import first_parent, git_diff, load_directory, load_git_revision


def _write(root, mapping):
    for rel, text in mapping.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")


class TestLoadDirectory:
    def test_reads_files_sorted(self, tmp_path):
        _write(tmp_path, {"src/b.ts": "b", "src/a.ts": "a", "README.md": "# x"})
        files = load_directory(tmp_path)
        assert [f.path for f in files] == ["README.md", "src/a.ts", "src/b.ts"]
        assert files[1].content == b"a"

    def test_skips_vendored_dirs(self, tmp_path):
        _write(tmp_path, {"src/a.ts": "a", "node_modules/x/index.js": "x", ".git/HEAD": "ref"})
        assert [f.path for f in load_directory(tmp_path)] == ["src/a.ts"]

    def test_skips_symlinks(self, tmp_path):
        _write(tmp_path, {"src/a.ts": "a"})
        try:
            (tmp_path / "src" / "link.ts").symlink_to(tmp_path / "src" / "a.ts")
        except OSError:
            pytest.skip("symlinks not supported")
        assert [f.path for f in load_directory(tmp_path)] == ["src/a.ts"]

    def test_not_a_directory(self, tmp_path):
        with pytest.raises(InvalidPathError):
            load_directory(tmp_path / "missing")


@pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")
class TestGitRevisions:
    @pytest.fixture
    def repo(self, tmp_path):
        def git(*args):
            subprocess.run(["git", *args], cwd=tmp_path, check=True, capture_output=True)

        git("init", "-q")
        git("config", "user.email", "dev@example.com")
        git("config", "user.name", "Dev")
        _write(tmp_path, {"src/a.ts": "import { b } from './b';\n", "src/b.ts": "export const b = 2;\n"})
        git("add", ".")
        git("commit", "-q", "-m", "base")
        _write(tmp_path, {"src/b.ts": "import { a } from './a';\nexport const b = 2;\n"})
        git("commit", "-q", "-am", "head")
        return tmp_path

    def test_load_revision(self, repo):
        files = load_git_revision(repo, "HEAD")
        assert [f.path for f in files] == ["src/a.ts", "src/b.ts"]
        assert files[1].content.startswith(b"import { a }")

    def test_first_parent(self, repo):
        parent = first_parent(repo, "HEAD")
        assert parent is not None
        assert first_parent(repo, parent) is None

    def test_diff(self, repo):
        diff = git_diff(repo, "HEAD~1", "HEAD")
        assert "+import { a } from './a';" in diff

    def test_unknown_revision(self, repo):
        with pytest.raises(InvalidPathError):
            load_git_revision(repo, "no-such-revision")
