from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class OutcomeStatus(str, Enum):
    SUCCESS = "SUCCESS"
    FAIL = "FAIL"
    SKIPPED = "SKIPPED"


class ErrorKind(str, Enum):
    IO_FAILURE = "io_failure"
    COPY_FAILURE = "copy_failure"
    VCS_COMMAND_FAILURE = "vcs_command_failure"
    CONFIGURATION_ERROR = "configuration_error"


class Stage(str, Enum):
    SETUP = "setup"
    BUILD_COMPLETE = "on_build_complete"
    BEFORE_UPLOAD = "before_upload"
    UPLOAD = "upload"
    TEARDOWN = "teardown"


STAGE_ORDER: tuple[Stage, ...] = (
    Stage.SETUP,
    Stage.BUILD_COMPLETE,
    Stage.BEFORE_UPLOAD,
    Stage.UPLOAD,
    Stage.TEARDOWN,
)


class StageOutcome(BaseModel):
    stage: Stage
    status: OutcomeStatus
    error_kind: ErrorKind | None = None
    failure_reason: str = ""
    notes: str = ""

    @property
    def succeeded(self) -> bool:
        return self.status == OutcomeStatus.SUCCESS


class DeployResult(BaseModel):
    outcomes: list[StageOutcome] = Field(default_factory=list)
    commit_sha: str = ""

    def outcome_for(self, stage: Stage) -> StageOutcome | None:
        for outcome in self.outcomes:
            if outcome.stage == stage:
                return outcome
        return None

    @property
    def succeeded(self) -> bool:
        """A deployment only counts when the push went through and nothing else failed."""
        upload = self.outcome_for(Stage.UPLOAD)
        if upload is None or not upload.succeeded:
            return False
        return all(o.status != OutcomeStatus.FAIL for o in self.outcomes)

    @property
    def failures(self) -> list[StageOutcome]:
        return [o for o in self.outcomes if o.status == OutcomeStatus.FAIL]
