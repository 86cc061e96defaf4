"""Tests for tidy.py and hash.py."""

import hashlib

import pytest

from gospace.modules.command import CommandError
from gospace.modules.hash import Hash, sha256sum
from gospace.modules.manifest import exec_command
from gospace.modules.tidy import IsTidy, NotTidyError


class TestHash:
    def test_hash_of_mod_and_sum(self, common, repo_dir, capsys):
        (repo_dir / "go.sum").write_bytes(b"sum-line\n")
        expected = sha256sum([str(repo_dir / "go.mod"), str(repo_dir / "go.sum")])

        digest = Hash(common).exec()

        assert digest == expected
        assert capsys.readouterr().out.strip() == expected

    def test_missing_go_sum_hashes_as_empty(self, common, repo_dir):
        gomod = repo_dir / "go.mod"
        expected = hashlib.sha256(f"go.mod\0{len(gomod.read_bytes())}\0".encode()
                                  + gomod.read_bytes() + b"go.sum\x000\0").hexdigest()
        assert Hash(common).exec() == expected

    def test_changes_when_go_sum_changes(self, common, repo_dir):
        before = Hash(common).exec()
        (repo_dir / "go.sum").write_text("new dependency\n")
        assert Hash(common).exec() != before

    def test_file_boundary_is_part_of_the_digest(self, common, repo_dir):
        gomod = repo_dir / "go.mod"
        gosum = repo_dir / "go.sum"
        content = gomod.read_bytes()
        gosum.write_bytes(b"tail\n")
        before = Hash(common).exec()

        gomod.write_bytes(content + b"tail\n")
        gosum.write_bytes(b"")
        assert Hash(common).exec() != before

    def test_missing_go_mod(self, common):
        with pytest.raises(CommandError, match="go.mod not found"):
            Hash(common).exec()

    def test_sha256sum_missing_file(self, tmp_path):
        assert sha256sum([str(tmp_path / "none")]) == hashlib.sha256(b"none\x000\0").hexdigest()


class TestIsTidy:
    def test_tidy_module(self, common, repo_dir, toolchain):
        (repo_dir / "go.sum").write_text("sum\n")
        IsTidy(common).exec()
        assert toolchain.commands == [["go", "mod", "tidy"]]
        assert toolchain.calls[0][1] == str(repo_dir)

    def test_changed_go_sum_is_reported_and_restored(self, common, repo_dir, toolchain):
        gosum = repo_dir / "go.sum"
        gosum.write_text("sum\n")
        toolchain.on("go", "mod", "tidy", effect=lambda cmd, cwd: gosum.write_text("sum\nextra\n"))

        with pytest.raises(NotTidyError, match="go.sum"):
            IsTidy(common).exec()
        assert gosum.read_text() == "sum\n"

    def test_created_go_sum_is_removed(self, common, repo_dir, toolchain):
        gosum = repo_dir / "go.sum"
        toolchain.on("go", "mod", "tidy", effect=lambda cmd, cwd: gosum.write_text("new\n"))

        with pytest.raises(NotTidyError):
            IsTidy(common).exec()
        assert not gosum.exists()

    def test_changed_go_mod_restored_by_guard(self, common, repo_dir, toolchain):
        gomod = repo_dir / "go.mod"
        original = gomod.read_bytes()
        toolchain.on("go", "mod", "tidy", effect=lambda cmd, cwd: gomod.write_bytes(original + b"require x v1\n"))

        with pytest.raises(NotTidyError, match="go.mod"):
            exec_command(IsTidy(common))
        assert gomod.read_bytes() == original

    def test_missing_go_mod(self, common, toolchain):
        with pytest.raises(CommandError, match="go.mod not found"):
            IsTidy(common).exec()
        assert toolchain.calls == []

    def test_toolchain_failure_propagates(self, common, repo_dir, monkeypatch):
        from gospace.modules.command import Command

        def failing(self, cmd, cwd=None, env=None):
            raise CommandError("Command failed: go mod tidy")

        monkeypatch.setattr(Command, "run", failing)
        with pytest.raises(CommandError, match="go mod tidy"):
            IsTidy(common).exec()
