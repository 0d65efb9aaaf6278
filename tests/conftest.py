"""Global test fixtures and configuration."""

from __future__ import annotations

import os
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

FULL_HASH = "abcdef1234567890abcdef1234567890abcdef12"

RepoFactory = Callable[..., Path]


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep tests away from real config files, environment overrides and the loader singleton."""
    from githashprop.utils.config_loader import ConfigLoader

    for env_var in list(os.environ):
        if env_var.startswith("GITHASHPROP_"):
            monkeypatch.delenv(env_var)

    xdg_home = tmp_path / "xdg"
    xdg_home.mkdir()
    monkeypatch.setattr("githashprop.utils.config_loader.xdg_config_home", str(xdg_home))

    cwd = tmp_path / "cwd"
    cwd.mkdir()
    monkeypatch.chdir(cwd)

    ConfigLoader._instance = None
    yield
    ConfigLoader._instance = None


@pytest.fixture
def make_repo(tmp_path: Path) -> RepoFactory:
    """
    Build a working directory with a hand-written .git directory.

    ``head`` is written verbatim to .git/HEAD (None skips the file) and
    ``refs`` maps ref paths such as ``refs/heads/main`` to file contents.
    """

    def _make_repo(
        head: str | None = "ref: refs/heads/main\n",
        refs: dict[str, str] | None = None,
        name: str = "repo",
    ) -> Path:
        repo_root = tmp_path / name
        git_dir = repo_root / ".git"
        git_dir.mkdir(parents=True)
        if head is not None:
            (git_dir / "HEAD").write_text(head, encoding="utf-8")
        for ref_path, content in (refs or {}).items():
            ref_file = git_dir / ref_path
            ref_file.parent.mkdir(parents=True, exist_ok=True)
            ref_file.write_text(content, encoding="utf-8")
        return repo_root

    return _make_repo


@pytest.fixture
def main_repo(make_repo: RepoFactory) -> Path:
    """A repository checked out on ``main`` at FULL_HASH."""
    return make_repo(refs={"refs/heads/main": f"{FULL_HASH}\n"})
