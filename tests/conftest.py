"""Shared fixtures: an isolated environment, a workspace root and a fake toolchain."""

from pathlib import Path

import pytest

from gospace.modules import logger as _logger
from gospace.modules.command import Command
from gospace.modules.config import Common, GospaceConfig

PKG = "example.com/app"
REPO = "https://example.com/app.git"
GOMOD = b"module example.com/app\n\ngo 1.21\n"
GOSUM = b"github.com/foo/bar v1.0.0 h1:abc=\n"


@pytest.fixture(autouse=True)
def _isolate(monkeypatch):
    for name in ("GOSPACE_ROOT", "GOSPACE_PKG", "GOSPACE_REPO"):
        monkeypatch.delenv(name, raising=False)
    yield
    _logger.configure_console()


@pytest.fixture
def empty_config() -> GospaceConfig:
    return GospaceConfig(locations=[])


@pytest.fixture
def common(tmp_path: Path) -> Common:
    return Common(root=str(tmp_path), root_abs=str(tmp_path), package=PKG, repo=REPO)


@pytest.fixture
def repo_dir(common: Common) -> Path:
    """<root>/src/example.com/app with a go.mod."""
    d = Path(common.repo_dir())
    d.mkdir(parents=True)
    (d / "go.mod").write_bytes(GOMOD)
    return d


@pytest.fixture
def environ(tmp_path: Path) -> dict:
    return {"GOSPACE_ROOT": str(tmp_path), "GOSPACE_PKG": PKG, "GOSPACE_REPO": REPO}


class FakeToolchain:
    """Stands in for Command.run: records calls and applies side effects by argv prefix."""

    def __init__(self):
        self.calls = []
        self.effects = []

    def on(self, *prefix, effect):
        self.effects.append((prefix, effect))

    def __call__(self, cmd, cwd=None, env=None):
        self.calls.append((list(cmd), cwd, env))
        for prefix, effect in self.effects:
            if tuple(cmd[:len(prefix)]) == prefix:
                effect(cmd, cwd)
        return ""

    @property
    def commands(self):
        return [c for c, _, _ in self.calls]


@pytest.fixture
def toolchain(monkeypatch) -> FakeToolchain:
    fake = FakeToolchain()
    monkeypatch.setattr(Command, "run", fake)
    return fake


def write_vendor(repo_dir: Path, files: dict) -> Path:
    vendor = repo_dir / "vendor"
    for rel, content in files.items():
        p = vendor / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(content)
    return vendor


@pytest.fixture
def make_vendor():
    return write_vendor
