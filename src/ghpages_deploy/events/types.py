from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field


class Event(BaseModel):
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    event_type: str


class DeployStarted(Event):
    event_type: str = "DeployStarted"
    branch: str
    remote_name: str
    project_root: str = ""


class DeployCompleted(Event):
    event_type: str = "DeployCompleted"
    branch: str
    commit_sha: str = ""
    duration_ms: int = 0


class DeployFailed(Event):
    event_type: str = "DeployFailed"
    branch: str
    error: str = ""
    duration_ms: int = 0


class StageStarted(Event):
    event_type: str = "StageStarted"
    stage: str


class StageCompleted(Event):
    event_type: str = "StageCompleted"
    stage: str
    duration_ms: int = 0


class StageFailed(Event):
    event_type: str = "StageFailed"
    stage: str
    error_kind: str = ""
    error: str = ""


class ScratchPrepared(Event):
    event_type: str = "ScratchPrepared"
    scratch_path: str
    initialized: bool = False


class BranchReset(Event):
    event_type: str = "BranchReset"
    branch: str
    replaced: bool = False


class ArtifactsCommitted(Event):
    event_type: str = "ArtifactsCommitted"
    branch: str
    sha: str
    file_count: int = 0


class RemoteLinked(Event):
    event_type: str = "RemoteLinked"
    remote_name: str
    action: str = ""
    upstream_needed: bool = False


class BranchPushed(Event):
    event_type: str = "BranchPushed"
    branch: str
    remote_name: str
    set_upstream: bool = False


class ScratchRemoved(Event):
    event_type: str = "ScratchRemoved"
    scratch_path: str
    existed: bool = True


EVENT_TYPE_MAP: dict[str, type[Event]] = {
    "DeployStarted": DeployStarted,
    "DeployCompleted": DeployCompleted,
    "DeployFailed": DeployFailed,
    "StageStarted": StageStarted,
    "StageCompleted": StageCompleted,
    "StageFailed": StageFailed,
    "ScratchPrepared": ScratchPrepared,
    "BranchReset": BranchReset,
    "ArtifactsCommitted": ArtifactsCommitted,
    "RemoteLinked": RemoteLinked,
    "BranchPushed": BranchPushed,
    "ScratchRemoved": ScratchRemoved,
}
