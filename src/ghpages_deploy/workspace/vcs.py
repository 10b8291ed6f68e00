from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from ghpages_deploy.workspace import git_ops


@runtime_checkable
class VcsClient(Protocol):
    """Version-control operations the publish workflow depends on.

    Existence checks (``branch_exists``, ``remote_url``, ``remote_branch_exists``)
    report absence as a normal value. Every other failure raises
    :class:`~ghpages_deploy.errors.VcsCommandFailure`.
    """

    root: Path

    def is_repo(self) -> bool: ...

    def init(self) -> None: ...

    def configure_identity(self, name: str, email: str) -> None: ...

    def current_branch(self) -> str | None: ...

    def branch_exists(self, name: str) -> bool: ...

    def delete_branch(self, name: str) -> None: ...

    def detach_head(self) -> None: ...

    def checkout_orphan(self, name: str) -> None: ...

    def remove_all(self) -> list[str]: ...

    def tracked_files(self) -> list[str]: ...

    def stage_all(self) -> None: ...

    def commit(self, message: str, *, allow_empty: bool = False) -> str: ...

    def remote_url(self, name: str) -> str | None: ...

    def add_remote(self, name: str, url: str) -> None: ...

    def set_remote_url(self, name: str, url: str) -> None: ...

    def remote_branch_exists(self, remote: str, branch: str) -> bool: ...

    def fetch(self, remote: str, branch: str) -> None: ...

    def set_upstream(self, branch: str, remote: str) -> None: ...

    def push(self, branch: str, remote: str, *, set_upstream: bool = False) -> None: ...


class GitClient:
    """VcsClient backed by the ``git`` executable."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def is_repo(self) -> bool:
        return git_ops.is_git_repo(self.root)

    def init(self) -> None:
        git_ops.init(cwd=self.root)

    def configure_identity(self, name: str, email: str) -> None:
        if name:
            git_ops.set_config("user.name", name, cwd=self.root)
        if email:
            git_ops.set_config("user.email", email, cwd=self.root)

    def current_branch(self) -> str | None:
        return git_ops.current_branch(cwd=self.root)

    def branch_exists(self, name: str) -> bool:
        return git_ops.branch_exists(name, cwd=self.root)

    def delete_branch(self, name: str) -> None:
        git_ops.branch_delete(name, cwd=self.root)

    def detach_head(self) -> None:
        git_ops.detach_head(cwd=self.root)

    def checkout_orphan(self, name: str) -> None:
        git_ops.checkout_orphan(name, cwd=self.root)

    def remove_all(self) -> list[str]:
        return git_ops.remove_all(cwd=self.root)

    def tracked_files(self) -> list[str]:
        return git_ops.tracked_files(cwd=self.root)

    def stage_all(self) -> None:
        git_ops.add_all(cwd=self.root)

    def commit(self, message: str, *, allow_empty: bool = False) -> str:
        return git_ops.commit(message, allow_empty=allow_empty, cwd=self.root)

    def remote_url(self, name: str) -> str | None:
        return git_ops.remote_url(name, cwd=self.root)

    def add_remote(self, name: str, url: str) -> None:
        git_ops.remote_add(name, url, cwd=self.root)

    def set_remote_url(self, name: str, url: str) -> None:
        git_ops.remote_set_url(name, url, cwd=self.root)

    def remote_branch_exists(self, remote: str, branch: str) -> bool:
        return git_ops.remote_branch_exists(remote, branch, cwd=self.root)

    def fetch(self, remote: str, branch: str) -> None:
        git_ops.fetch(remote, branch, cwd=self.root)

    def set_upstream(self, branch: str, remote: str) -> None:
        git_ops.set_upstream(branch, remote, cwd=self.root)

    def push(self, branch: str, remote: str, *, set_upstream: bool = False) -> None:
        git_ops.push(branch, remote, force=True, set_upstream=set_upstream, cwd=self.root)
