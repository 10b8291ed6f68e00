"""Lifecycle hooks for publishing a build to an orphan branch.

Hosts call the hooks in this order::

    setup -> on_build_complete -> before_upload -> upload -> teardown

Each hook takes the resolved :class:`DeployConfig`, the shared
:class:`PublishContext` and an event emitter, and returns a
:class:`StageOutcome`. Component failures never escape a hook; they come back
as a FAIL outcome carrying the :class:`ErrorKind`, and the host decides whether
to keep going.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any, Callable, Protocol

from ghpages_deploy.config.settings import DeployConfig
from ghpages_deploy.errors import ConfigurationError, DeployError
from ghpages_deploy.models.context import PublishContext, WorkingCopy
from ghpages_deploy.models.outcome import OutcomeStatus, Stage, StageOutcome
from ghpages_deploy.workspace.branch_reset import BranchResetter
from ghpages_deploy.workspace.publisher import ArtifactPublisher
from ghpages_deploy.workspace.pusher import Pusher
from ghpages_deploy.workspace.remote_link import RemoteLinker
from ghpages_deploy.workspace.stager import (
    clone_project_tree,
    ensure_scratch_space,
    remove_scratch_space,
)
from ghpages_deploy.workspace.vcs import GitClient, VcsClient

logger = logging.getLogger(__name__)

VcsFactory = Callable[[Path], VcsClient]


class EventEmitter(Protocol):
    def emit(self, event_type: str, **data: Any) -> None: ...


def _guarded(
    stage: Stage,
    context: PublishContext,
    emitter: EventEmitter,
    body: Callable[[], str],
) -> StageOutcome:
    emitter.emit("StageStarted", stage=stage.value)
    start = time.monotonic()
    try:
        notes = body()
    except DeployError as e:
        logger.error("Stage '%s' failed: %s", stage.value, e)
        emitter.emit(
            "StageFailed",
            stage=stage.value,
            error_kind=e.kind.value,
            error=str(e),
        )
        return StageOutcome(
            stage=stage,
            status=OutcomeStatus.FAIL,
            error_kind=e.kind,
            failure_reason=str(e),
        )

    duration_ms = int((time.monotonic() - start) * 1000)
    context.completed_stages.append(stage)
    emitter.emit("StageCompleted", stage=stage.value, duration_ms=duration_ms)
    return StageOutcome(stage=stage, status=OutcomeStatus.SUCCESS, notes=notes or "")


def _require_working_copy(context: PublishContext, stage: Stage) -> WorkingCopy:
    if context.working_copy is None:
        raise ConfigurationError(
            f"Stage '{stage.value}' needs a working copy; run '{Stage.SETUP.value}' first"
        )
    return context.working_copy


def setup(
    config: DeployConfig,
    context: PublishContext,
    emitter: EventEmitter,
    vcs_factory: VcsFactory = GitClient,
) -> StageOutcome:
    """Stage a copy of the project and reset the target branch to an empty orphan."""

    def body() -> str:
        project_root = context.project_root
        scratch = config.scratch_path(project_root)

        excluded = config.exclude_paths(project_root)
        git_marker = project_root / ".git"
        if git_marker.is_file():
            # Worktrees and submodules point .git at a shared git dir.
            logger.warning("%s is a linked git checkout; not copying its .git file", project_root)
            excluded.append(git_marker)

        ensure_scratch_space(scratch)
        logger.info("Cloning project repository to %s", scratch)
        clone_project_tree(project_root, scratch, excluded, config.exclude_names())

        vcs = vcs_factory(scratch)
        initialized = False
        if not vcs.is_repo():
            logger.warning("%s is not a git repository; initializing one", scratch)
            vcs.init()
            initialized = True
        if config.git_user_name or config.git_user_email:
            vcs.configure_identity(config.git_user_name, config.git_user_email)

        context.working_copy = WorkingCopy(root=scratch, vcs=vcs)
        emitter.emit("ScratchPrepared", scratch_path=str(scratch), initialized=initialized)

        resetter = BranchResetter(vcs)
        resetter.reset(config.branch)
        # Give the orphan a head commit so later staging has a branch to land on.
        vcs.commit(f"Reset '{config.branch}' branch", allow_empty=True)
        emitter.emit("BranchReset", branch=config.branch, replaced=resetter.previously_existed)
        return f"branch '{config.branch}' reset in {scratch}"

    return _guarded(Stage.SETUP, context, emitter, body)


def on_build_complete(
    config: DeployConfig,
    context: PublishContext,
    emitter: EventEmitter,
) -> StageOutcome:
    """Copy the build outputs into the working copy and commit them."""

    def body() -> str:
        working_copy = _require_working_copy(context, Stage.BUILD_COMPLETE)
        publisher = ArtifactPublisher(working_copy.vcs)
        sha = publisher.publish(context.dist_dir, context.output_files, config.commit_message)
        context.commit_sha = sha
        emitter.emit(
            "ArtifactsCommitted",
            branch=config.branch,
            sha=sha,
            file_count=len(context.output_files),
        )
        return f"committed {len(context.output_files)} files as {sha}"

    return _guarded(Stage.BUILD_COMPLETE, context, emitter, body)


def before_upload(
    config: DeployConfig,
    context: PublishContext,
    emitter: EventEmitter,
) -> StageOutcome:
    """Point the remote at the configured URL and work out upstream tracking."""

    def body() -> str:
        working_copy = _require_working_copy(context, Stage.BEFORE_UPLOAD)
        if not config.git_remote_url:
            raise ConfigurationError("gitRemoteUrl is required")
        linker = RemoteLinker(working_copy.vcs)
        result = linker.link(config.branch, config.git_remote_name, config.git_remote_url)
        context.upstream_needed = result.upstream_needed
        emitter.emit(
            "RemoteLinked",
            remote_name=result.remote_name,
            action=result.action,
            upstream_needed=result.upstream_needed,
        )
        return f"remote {result.action}"

    return _guarded(Stage.BEFORE_UPLOAD, context, emitter, body)


def upload(
    config: DeployConfig,
    context: PublishContext,
    emitter: EventEmitter,
) -> StageOutcome:
    """Force-push the branch; the deployment has only happened if this succeeds."""

    def body() -> str:
        working_copy = _require_working_copy(context, Stage.UPLOAD)
        Pusher(working_copy.vcs).push(
            config.branch,
            config.git_remote_name,
            create_upstream=context.upstream_needed,
        )
        emitter.emit(
            "BranchPushed",
            branch=config.branch,
            remote_name=config.git_remote_name,
            set_upstream=context.upstream_needed,
        )
        return f"pushed to {config.git_remote_name}"

    return _guarded(Stage.UPLOAD, context, emitter, body)


def teardown(
    config: DeployConfig,
    context: PublishContext,
    emitter: EventEmitter,
) -> StageOutcome:
    """Remove the scratch working copy. Safe to call when it is already gone."""

    def body() -> str:
        scratch = config.scratch_path(context.project_root)
        existed = remove_scratch_space(scratch)
        context.working_copy = None
        emitter.emit("ScratchRemoved", scratch_path=str(scratch), existed=existed)
        return "removed" if existed else "already absent"

    return _guarded(Stage.TEARDOWN, context, emitter, body)


STAGE_HOOKS: dict[Stage, Callable[[DeployConfig, PublishContext, EventEmitter], StageOutcome]] = {
    Stage.SETUP: setup,
    Stage.BUILD_COMPLETE: on_build_complete,
    Stage.BEFORE_UPLOAD: before_upload,
    Stage.UPLOAD: upload,
    Stage.TEARDOWN: teardown,
}
