from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Iterable

from ghpages_deploy.errors import CopyFailure, IOFailure

logger = logging.getLogger(__name__)


def ensure_scratch_space(path: Path) -> Path:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise IOFailure(f"Cannot create scratch directory {path}: {e}") from e
    return path


def remove_scratch_space(path: Path) -> bool:
    """Delete the scratch working copy. Returns False if it was already gone."""
    if not path.exists() and not path.is_symlink():
        return False
    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink()
    except OSError as e:
        raise IOFailure(f"Cannot remove scratch directory {path}: {e}") from e
    return True


def _is_within(path: Path, parent: Path) -> bool:
    try:
        path.relative_to(parent)
    except ValueError:
        return False
    return True


def _build_ignore(excluded: list[Path], names: Iterable[str]):
    by_name = shutil.ignore_patterns(*names)

    def ignore(directory: str, entries: list[str]) -> set[str]:
        skipped = set(by_name(directory, entries))
        base = Path(directory).resolve()
        for entry in entries:
            candidate = base / entry
            if any(_is_within(candidate, ex) for ex in excluded):
                skipped.add(entry)
        if skipped:
            logger.debug("Skipping %s in %s", sorted(skipped), base)
        return skipped

    return ignore


def clone_project_tree(
    source: Path,
    destination: Path,
    exclude_paths: Iterable[Path | str] = (),
    exclude_names: Iterable[str] = (),
) -> None:
    """Copy ``source`` into ``destination``, skipping excluded subtrees.

    Relative exclusion entries are resolved against ``source``; entries in
    ``exclude_names`` are matched by name at any depth. The destination
    is always excluded so a scratch directory nested inside the source is never
    copied into itself. Existing files in ``destination`` are overwritten.
    Partial copies are left in place on failure.
    """
    source = source.resolve()
    destination = destination.resolve()
    if not source.is_dir():
        raise CopyFailure(f"Source directory not found: {source}")

    excluded = [destination]
    for entry in exclude_paths:
        entry_path = Path(entry)
        if not entry_path.is_absolute():
            entry_path = source / entry_path
        excluded.append(entry_path.resolve())

    try:
        shutil.copytree(
            source,
            destination,
            symlinks=True,
            ignore=_build_ignore(excluded, exclude_names),
            dirs_exist_ok=True,
        )
    except shutil.Error as e:
        failures = e.args[0] if e.args else []
        first = failures[0] if failures else e
        raise CopyFailure(
            f"Failed to copy {source} to {destination}: {first}"
        ) from e
    except OSError as e:
        raise CopyFailure(f"Failed to copy {source} to {destination}: {e}") from e
