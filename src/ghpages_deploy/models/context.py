from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ghpages_deploy.models.outcome import Stage
    from ghpages_deploy.workspace.vcs import VcsClient


@dataclass
class WorkingCopy:
    root: Path
    vcs: VcsClient


@dataclass
class PublishContext:
    project_root: Path
    dist_dir: Path
    output_files: list[str] = field(default_factory=list)
    working_copy: WorkingCopy | None = None
    upstream_needed: bool = False
    commit_sha: str = ""
    completed_stages: list[Stage] = field(default_factory=list)
