from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from ghpages_deploy.errors import VcsCommandFailure
from ghpages_deploy.workspace.git_ops import run_git


def init_repo(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    run_git("init", cwd=path)
    run_git("config", "user.email", "test@test.com", cwd=path)
    run_git("config", "user.name", "Test", cwd=path)
    return path


@pytest.fixture()
def project_repo(tmp_path: Path) -> Path:
    """A project with a committed source file and a built ``dist`` directory."""
    repo = init_repo(tmp_path / "project")
    (repo / "README.md").write_text("# Project\n")
    (repo / "src").mkdir()
    (repo / "src" / "app.js").write_text("console.log('app');\n")
    run_git("add", "-A", cwd=repo)
    run_git("commit", "-m", "Initial commit", cwd=repo)

    dist = repo / "dist"
    (dist / "assets").mkdir(parents=True)
    (dist / "index.html").write_text("<h1>Hello</h1>\n")
    (dist / "assets" / "fixture.css").write_text("body { color: red; }\n")
    return repo


@pytest.fixture()
def bare_remote(tmp_path: Path) -> Path:
    bare = tmp_path / "remote.git"
    bare.mkdir()
    run_git("init", "--bare", cwd=bare)
    return bare


class RecordingEmitter:
    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, Any]]] = []

    def emit(self, event_type: str, **data: Any) -> None:
        self.events.append((event_type, data))

    @property
    def types(self) -> list[str]:
        return [event_type for event_type, _ in self.events]


@pytest.fixture()
def emitter() -> RecordingEmitter:
    return RecordingEmitter()


class FakeVcsClient:
    """In-memory VcsClient that records every call.

    ``fail_on`` maps a method name to the exception it should raise.
    """

    def __init__(
        self,
        root: Path,
        *,
        branches: set[str] | None = None,
        current: str | None = "main",
        remotes: dict[str, str] | None = None,
        remote_branches: set[str] | None = None,
        fail_on: dict[str, Exception] | None = None,
        repo: bool = True,
    ) -> None:
        self.root = root
        self.branches = set(branches or {"main"})
        self.current = current
        self.remotes = dict(remotes or {})
        self.remote_branches = set(remote_branches or set())
        self.fail_on = dict(fail_on or {})
        self.repo = repo
        self.tracked: list[str] = ["README.md"]
        self.upstreams: dict[str, str] = {}
        self.pushed: list[tuple[str, str, bool]] = []
        self.commits: list[tuple[str, bool]] = []
        self.calls: list[str] = []

    def _record(self, name: str) -> None:
        self.calls.append(name)
        if name in self.fail_on:
            raise self.fail_on[name]

    def is_repo(self) -> bool:
        self._record("is_repo")
        return self.repo

    def init(self) -> None:
        self._record("init")
        self.repo = True

    def configure_identity(self, name: str, email: str) -> None:
        self._record("configure_identity")

    def current_branch(self) -> str | None:
        self._record("current_branch")
        return self.current

    def branch_exists(self, name: str) -> bool:
        self._record("branch_exists")
        return name in self.branches

    def delete_branch(self, name: str) -> None:
        self._record("delete_branch")
        if name == self.current:
            raise VcsCommandFailure(["git", "branch", "-D", name], 1, "cannot delete checked out branch")
        self.branches.discard(name)

    def detach_head(self) -> None:
        self._record("detach_head")
        self.current = None

    def checkout_orphan(self, name: str) -> None:
        self._record("checkout_orphan")
        self.current = name

    def remove_all(self) -> list[str]:
        self._record("remove_all")
        removed, self.tracked = self.tracked, []
        return removed

    def tracked_files(self) -> list[str]:
        self._record("tracked_files")
        return list(self.tracked)

    def stage_all(self) -> None:
        self._record("stage_all")

    def commit(self, message: str, *, allow_empty: bool = False) -> str:
        self._record("commit")
        self.commits.append((message, allow_empty))
        if self.current is not None:
            self.branches.add(self.current)
        return f"{len(self.commits):040x}"

    def remote_url(self, name: str) -> str | None:
        self._record("remote_url")
        return self.remotes.get(name)

    def add_remote(self, name: str, url: str) -> None:
        self._record("add_remote")
        if name in self.remotes:
            raise VcsCommandFailure(["git", "remote", "add", name, url], 3, f"remote {name} already exists")
        self.remotes[name] = url

    def set_remote_url(self, name: str, url: str) -> None:
        self._record("set_remote_url")
        self.remotes[name] = url

    def remote_branch_exists(self, remote: str, branch: str) -> bool:
        self._record("remote_branch_exists")
        return f"{remote}/{branch}" in self.remote_branches

    def fetch(self, remote: str, branch: str) -> None:
        self._record("fetch")

    def set_upstream(self, branch: str, remote: str) -> None:
        self._record("set_upstream")
        if f"{remote}/{branch}" not in self.remote_branches:
            raise VcsCommandFailure(["git", "branch", "--set-upstream-to"], 128, "no such remote branch")
        self.upstreams[branch] = f"{remote}/{branch}"

    def push(self, branch: str, remote: str, *, set_upstream: bool = False) -> None:
        self._record("push")
        self.pushed.append((branch, remote, set_upstream))
        self.remote_branches.add(f"{remote}/{branch}")
        if set_upstream:
            self.upstreams[branch] = f"{remote}/{branch}"
