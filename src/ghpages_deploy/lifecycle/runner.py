from __future__ import annotations

import logging
import time
from pathlib import Path

from ghpages_deploy.config.settings import DeployConfig, validate_config
from ghpages_deploy.errors import ConfigurationError
from ghpages_deploy.lifecycle import stages
from ghpages_deploy.lifecycle.error_policies import ErrorPolicy
from ghpages_deploy.lifecycle.stages import EventEmitter, VcsFactory
from ghpages_deploy.models.context import PublishContext
from ghpages_deploy.models.outcome import (
    DeployResult,
    STAGE_ORDER,
    OutcomeStatus,
    Stage,
    StageOutcome,
)
from ghpages_deploy.workspace.vcs import GitClient

logger = logging.getLogger(__name__)


class DeployRunner:
    """Drive the five lifecycle stages in order for one deployment attempt.

    Under ``fail_fast`` the first failed stage stops the pipeline; under
    ``continue`` later stages still run and fail on their own if the working
    copy is in a bad state. Teardown always runs unless ``keep_scratch`` is set.
    """

    def __init__(
        self,
        config: DeployConfig,
        event_emitter: EventEmitter,
        vcs_factory: VcsFactory = GitClient,
        keep_scratch: bool = False,
    ) -> None:
        self._config = config
        self._emitter = event_emitter
        self._vcs_factory = vcs_factory
        self._keep_scratch = keep_scratch

    def run(
        self,
        *,
        project_root: Path,
        dist_dir: Path,
        output_files: list[str],
    ) -> DeployResult:
        context = PublishContext(
            project_root=project_root.resolve(),
            dist_dir=dist_dir.resolve(),
            output_files=list(output_files),
        )
        result = DeployResult()
        policy = self._config.error_policy
        start = time.monotonic()

        self._emitter.emit(
            "DeployStarted",
            branch=self._config.branch,
            remote_name=self._config.git_remote_name,
            project_root=str(context.project_root),
        )

        try:
            validate_config(self._config)
        except ConfigurationError as e:
            # nothing has touched the disk yet, so there is nothing to tear down
            logger.error("Refusing to deploy: %s", e)
            self._emitter.emit(
                "StageFailed",
                stage=Stage.SETUP.value,
                error_kind=e.kind.value,
                error=str(e),
            )
            result.outcomes.append(
                StageOutcome(
                    stage=Stage.SETUP,
                    status=OutcomeStatus.FAIL,
                    error_kind=e.kind,
                    failure_reason=str(e),
                )
            )
            return self._finish(result, context, start)

        try:
            for stage in STAGE_ORDER:
                if stage == Stage.TEARDOWN:
                    continue
                outcome = self._run_stage(stage, context)
                result.outcomes.append(outcome)
                if outcome.status == OutcomeStatus.FAIL and policy == ErrorPolicy.FAIL_FAST:
                    logger.warning("Stopping after failed stage '%s'", stage.value)
                    break
        finally:
            if self._keep_scratch:
                result.outcomes.append(
                    StageOutcome(
                        stage=Stage.TEARDOWN,
                        status=OutcomeStatus.SKIPPED,
                        notes="scratch working copy kept",
                    )
                )
            else:
                result.outcomes.append(self._run_stage(Stage.TEARDOWN, context))

        return self._finish(result, context, start)

    def _finish(self, result: DeployResult, context: PublishContext, start: float) -> DeployResult:
        result.commit_sha = context.commit_sha
        duration_ms = int((time.monotonic() - start) * 1000)
        if result.succeeded:
            self._emitter.emit(
                "DeployCompleted",
                branch=self._config.branch,
                commit_sha=result.commit_sha,
                duration_ms=duration_ms,
            )
        else:
            self._emitter.emit(
                "DeployFailed",
                branch=self._config.branch,
                error=self._describe_failure(result),
                duration_ms=duration_ms,
            )
        return result

    def _run_stage(self, stage: Stage, context: PublishContext) -> StageOutcome:
        if stage == Stage.SETUP:
            return stages.setup(self._config, context, self._emitter, self._vcs_factory)
        return stages.STAGE_HOOKS[stage](self._config, context, self._emitter)

    @staticmethod
    def _describe_failure(result: DeployResult) -> str:
        if result.failures:
            first = result.failures[0]
            return f"{first.stage.value}: {first.failure_reason}"
        return "branch was not pushed"
