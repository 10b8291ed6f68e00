from __future__ import annotations

import asyncio
import logging
import shutil
from pathlib import Path, PurePosixPath

from ghpages_deploy.errors import CopyFailure
from ghpages_deploy.workspace.vcs import VcsClient

logger = logging.getLogger(__name__)


def collect_output_files(dist_dir: Path) -> list[str]:
    """Relative POSIX paths of every regular file under ``dist_dir``."""
    if not dist_dir.is_dir():
        raise CopyFailure(f"Build output directory not found: {dist_dir}")
    return sorted(
        p.relative_to(dist_dir).as_posix()
        for p in dist_dir.rglob("*")
        if p.is_file()
    )


def _resolve_inside(base: Path, relative: str) -> Path:
    rel = PurePosixPath(relative)
    if rel.is_absolute() or ".." in rel.parts or not rel.parts:
        raise CopyFailure(f"Output path must be relative to the build directory: {relative!r}")
    return base.joinpath(*rel.parts)


def _copy_one(source_dir: Path, relative: str, dest_dir: Path) -> None:
    src = _resolve_inside(source_dir, relative)
    dst = _resolve_inside(dest_dir, relative)
    try:
        dst.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(src, dst)
    except OSError as e:
        raise CopyFailure(f"Failed to copy {src} to {dst}: {e}") from e


async def _copy_all(source_dir: Path, relative_files: list[str], dest_dir: Path) -> list[BaseException | None]:
    loop = asyncio.get_running_loop()
    tasks = [
        loop.run_in_executor(None, _copy_one, source_dir, rel, dest_dir)
        for rel in relative_files
    ]
    return await asyncio.gather(*tasks, return_exceptions=True)


def copy_artifacts(source_dir: Path, relative_files: list[str], dest_dir: Path) -> None:
    """Copy build outputs into the working copy concurrently.

    Every copy is allowed to finish; the first failure (in input order) is
    raised as :class:`CopyFailure`.
    """
    if not relative_files:
        return
    results = asyncio.run(_copy_all(source_dir, relative_files, dest_dir))
    for item in results:
        if isinstance(item, CopyFailure):
            raise item
        if isinstance(item, BaseException):
            raise CopyFailure(f"Failed to copy build output: {item}") from item


class ArtifactPublisher:
    def __init__(self, vcs: VcsClient) -> None:
        self._vcs = vcs

    def copy_artifacts(self, source_dir: Path, relative_files: list[str]) -> None:
        copy_artifacts(source_dir, relative_files, self._vcs.root)

    def stage_all(self) -> None:
        self._vcs.stage_all()

    def commit(self, message: str) -> str:
        return self._vcs.commit(message)

    def publish(self, source_dir: Path, relative_files: list[str], message: str) -> str:
        self.copy_artifacts(source_dir, relative_files)
        logger.info("Copied %d build outputs into %s", len(relative_files), self._vcs.root)
        self.stage_all()
        sha = self.commit(message)
        logger.info("Committed build outputs as %s", sha[:8])
        return sha
