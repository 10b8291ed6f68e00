from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from ghpages_deploy.errors import VcsCommandFailure

logger = logging.getLogger(__name__)


def run_git(*args: str, cwd: Path) -> str:
    cmd = ["git", *args]
    logger.debug("Running %s in %s", " ".join(cmd), cwd)
    try:
        result = subprocess.run(
            cmd,
            cwd=cwd,
            capture_output=True,
            encoding="utf-8",
            errors="surrogateescape",
        )
    except OSError as e:
        # git missing from PATH or an unusable cwd
        raise VcsCommandFailure(cmd, -1, str(e)) from e
    if result.returncode != 0:
        raise VcsCommandFailure(cmd, result.returncode, result.stderr.strip())
    return result.stdout.strip()


def init(*, cwd: Path) -> None:
    run_git("init", cwd=cwd)


def is_git_repo(path: Path) -> bool:
    """True only when ``path`` is the top level of its own repository."""
    try:
        toplevel = run_git("rev-parse", "--show-toplevel", cwd=path)
    except VcsCommandFailure:
        return False
    return Path(toplevel).resolve() == path.resolve()


def rev_parse(ref: str, *, cwd: Path) -> str:
    return run_git("rev-parse", ref, cwd=cwd)


def current_branch(*, cwd: Path) -> str | None:
    # symbolic-ref also names an unborn branch; exit 1 means detached HEAD.
    try:
        return run_git("symbolic-ref", "--short", "-q", "HEAD", cwd=cwd) or None
    except VcsCommandFailure as e:
        if e.returncode == 1:
            return None
        raise


def branch_exists(name: str, *, cwd: Path) -> bool:
    try:
        run_git("show-ref", "--verify", "--quiet", f"refs/heads/{name}", cwd=cwd)
    except VcsCommandFailure as e:
        if e.returncode == 1:
            return False
        raise
    return True


def branch_delete(name: str, *, cwd: Path) -> None:
    run_git("branch", "-D", name, cwd=cwd)


def checkout_orphan(name: str, *, cwd: Path) -> None:
    run_git("checkout", "--orphan", name, cwd=cwd)


def detach_head(*, cwd: Path) -> None:
    run_git("checkout", "--detach", cwd=cwd)


def remove_all(*, cwd: Path) -> list[str]:
    removed = run_git("rm", "-r", "-f", "--ignore-unmatch", "--", ".", cwd=cwd)
    cleaned = run_git("clean", "-ffdx", cwd=cwd)
    return [line for line in (removed + "\n" + cleaned).splitlines() if line.strip()]


def tracked_files(*, cwd: Path) -> list[str]:
    output = run_git("ls-files", cwd=cwd)
    return output.splitlines() if output else []


def add_all(*, cwd: Path) -> None:
    run_git("add", "-A", cwd=cwd)


def commit(message: str, *, allow_empty: bool = False, cwd: Path) -> str:
    args = ["commit", "-m", message]
    if allow_empty:
        args.append("--allow-empty")
    run_git(*args, cwd=cwd)
    return rev_parse("HEAD", cwd=cwd)


def set_config(key: str, value: str, *, cwd: Path) -> None:
    run_git("config", key, value, cwd=cwd)


def remote_url(name: str, *, cwd: Path) -> str | None:
    try:
        return run_git("config", "--get", f"remote.{name}.url", cwd=cwd)
    except VcsCommandFailure as e:
        if e.returncode == 1:
            return None
        raise


def remote_add(name: str, url: str, *, cwd: Path) -> None:
    run_git("remote", "add", name, url, cwd=cwd)


def remote_set_url(name: str, url: str, *, cwd: Path) -> None:
    run_git("remote", "set-url", name, url, cwd=cwd)


def remote_branch_exists(remote: str, branch: str, *, cwd: Path) -> bool:
    # --exit-code makes ls-remote return 2 when no ref matches.
    try:
        run_git("ls-remote", "--exit-code", "--heads", remote, f"refs/heads/{branch}", cwd=cwd)
    except VcsCommandFailure as e:
        if e.returncode == 2:
            return False
        raise
    return True


def fetch(remote: str, branch: str, *, cwd: Path) -> None:
    run_git(
        "fetch",
        remote,
        f"+refs/heads/{branch}:refs/remotes/{remote}/{branch}",
        cwd=cwd,
    )


def set_upstream(branch: str, remote: str, *, cwd: Path) -> None:
    run_git("branch", f"--set-upstream-to={remote}/{branch}", branch, cwd=cwd)


def upstream_of(branch: str, *, cwd: Path) -> str | None:
    try:
        return run_git("rev-parse", "--abbrev-ref", f"{branch}@{{upstream}}", cwd=cwd)
    except VcsCommandFailure:
        return None


def push(branch: str, remote: str, *, force: bool = True, set_upstream: bool = False, cwd: Path) -> None:
    args = ["push"]
    if force:
        args.append("--force")
    if set_upstream:
        args.append("--set-upstream")
    args.extend([remote, branch])
    run_git(*args, cwd=cwd)
