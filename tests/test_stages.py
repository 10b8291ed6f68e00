from pathlib import Path

import pytest

from conftest import FakeVcsClient, RecordingEmitter
from ghpages_deploy.config.settings import DeployConfig
from ghpages_deploy.errors import VcsCommandFailure
from ghpages_deploy.lifecycle.stages import (
    before_upload,
    on_build_complete,
    setup,
    teardown,
    upload,
)
from ghpages_deploy.models.context import PublishContext, WorkingCopy
from ghpages_deploy.models.outcome import ErrorKind, OutcomeStatus, Stage
from ghpages_deploy.workspace.git_ops import branch_exists, current_branch, run_git


@pytest.fixture()
def config() -> DeployConfig:
    return DeployConfig(git_remote_name="origin-pages", git_remote_url="git@host:user/repo.git")


@pytest.fixture()
def project(tmp_path: Path) -> Path:
    root = tmp_path / "project"
    (root / "dist" / "assets").mkdir(parents=True)
    (root / "dist" / "index.html").write_text("<h1>Hello</h1>\n")
    (root / "dist" / "assets" / "fixture.css").write_text("body {}\n")
    (root / "node_modules" / "dep").mkdir(parents=True)
    (root / "node_modules" / "dep" / "index.js").write_text("dep\n")
    return root


@pytest.fixture()
def context(project: Path) -> PublishContext:
    return PublishContext(
        project_root=project,
        dist_dir=project / "dist",
        output_files=["index.html", "assets/fixture.css"],
    )


def _bound(context: PublishContext, config: DeployConfig, **kwargs) -> FakeVcsClient:
    scratch = config.scratch_path(context.project_root)
    scratch.mkdir(parents=True, exist_ok=True)
    vcs = FakeVcsClient(scratch, **kwargs)
    context.working_copy = WorkingCopy(root=scratch, vcs=vcs)
    return vcs


class TestSetup:
    def test_binds_working_copy_and_resets_branch(
        self, config: DeployConfig, context: PublishContext, emitter: RecordingEmitter
    ) -> None:
        created: list[FakeVcsClient] = []

        def factory(root: Path) -> FakeVcsClient:
            created.append(FakeVcsClient(root))
            return created[0]

        outcome = setup(config, context, emitter, factory)

        assert outcome.status == OutcomeStatus.SUCCESS
        scratch = context.project_root / "tmp" / "gh-pages"
        assert context.working_copy is not None
        assert context.working_copy.root == scratch
        assert (scratch / "dist" / "index.html").exists()
        assert not (scratch / "node_modules").exists()
        assert not (scratch / "tmp").exists()
        vcs = created[0]
        assert vcs.current == "gh-pages"
        assert vcs.commits == [("Reset 'gh-pages' branch", True)]
        assert Stage.SETUP in context.completed_stages
        assert emitter.types == ["StageStarted", "ScratchPrepared", "BranchReset", "StageCompleted"]

    def test_initializes_repository_when_missing(
        self, config: DeployConfig, context: PublishContext, emitter: RecordingEmitter
    ) -> None:
        config.git_user_name = "Deploy Bot"
        vcs_holder: list[FakeVcsClient] = []

        def factory(root: Path) -> FakeVcsClient:
            vcs_holder.append(FakeVcsClient(root, repo=False))
            return vcs_holder[0]

        outcome = setup(config, context, emitter, factory)

        assert outcome.succeeded
        assert vcs_holder[0].calls[:3] == ["is_repo", "init", "configure_identity"]
        prepared = dict(emitter.events)["ScratchPrepared"]
        assert prepared["initialized"] is True

    def test_vcs_failure_becomes_fail_outcome(
        self, config: DeployConfig, context: PublishContext, emitter: RecordingEmitter
    ) -> None:
        failure = VcsCommandFailure(["git", "checkout", "--orphan", "gh-pages"], 128, "boom")

        outcome = setup(
            config,
            context,
            emitter,
            lambda root: FakeVcsClient(root, fail_on={"checkout_orphan": failure}),
        )

        assert outcome.status == OutcomeStatus.FAIL
        assert outcome.error_kind == ErrorKind.VCS_COMMAND_FAILURE
        assert "boom" in outcome.failure_reason
        assert "StageFailed" in emitter.types
        assert Stage.SETUP not in context.completed_stages
        # the working copy was bound before the reset failed
        assert context.working_copy is not None

    def test_scratch_failure_becomes_fail_outcome(
        self, config: DeployConfig, tmp_path: Path, emitter: RecordingEmitter
    ) -> None:
        context = PublishContext(project_root=tmp_path / "missing", dist_dir=tmp_path / "missing" / "dist")
        (tmp_path / "missing").write_text("not a directory\n")

        outcome = setup(config, context, emitter, FakeVcsClient)

        assert outcome.status == OutcomeStatus.FAIL
        assert outcome.error_kind == ErrorKind.IO_FAILURE
        assert context.working_copy is None

    def test_missing_git_becomes_fail_outcome(
        self,
        config: DeployConfig,
        context: PublishContext,
        emitter: RecordingEmitter,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        empty_bin = tmp_path / "empty-bin"
        empty_bin.mkdir()
        monkeypatch.setenv("PATH", str(empty_bin))

        outcome = setup(config, context, emitter)

        assert outcome.status == OutcomeStatus.FAIL
        assert outcome.error_kind == ErrorKind.VCS_COMMAND_FAILURE
        assert "StageFailed" in emitter.types

    def test_skips_nested_dependency_directories(
        self, config: DeployConfig, context: PublishContext, emitter: RecordingEmitter
    ) -> None:
        nested = context.project_root / "packages" / "web" / "node_modules"
        nested.mkdir(parents=True)
        (nested / "big.js").write_text("dep\n")

        outcome = setup(config, context, emitter, FakeVcsClient)

        assert outcome.succeeded
        scratch = config.scratch_path(context.project_root)
        assert (scratch / "packages" / "web").is_dir()
        assert not (scratch / "packages" / "web" / "node_modules").exists()

    def test_linked_worktree_gets_its_own_repository(
        self, project_repo: Path, tmp_path: Path, emitter: RecordingEmitter
    ) -> None:
        worktree = tmp_path / "worktree"
        run_git("worktree", "add", "-b", "feature", str(worktree), cwd=project_repo)
        (worktree / "dist").mkdir()
        (worktree / "dist" / "index.html").write_text("<h1>Hello</h1>\n")
        config = DeployConfig(
            git_remote_url="git@host:user/repo.git",
            git_user_name="Deploy Bot",
            git_user_email="bot@example.com",
        )
        context = PublishContext(
            project_root=worktree, dist_dir=worktree / "dist", output_files=["index.html"]
        )

        outcome = setup(config, context, emitter)

        assert outcome.succeeded, outcome.failure_reason
        scratch = config.scratch_path(worktree)
        assert (scratch / ".git").is_dir()
        assert dict(emitter.events)["ScratchPrepared"]["initialized"] is True
        assert current_branch(cwd=scratch) == "gh-pages"
        # the shared repository behind the worktree is untouched
        assert not branch_exists("gh-pages", cwd=project_repo)
        assert current_branch(cwd=worktree) == "feature"


class TestOnBuildComplete:
    def test_requires_working_copy(
        self, config: DeployConfig, context: PublishContext, emitter: RecordingEmitter
    ) -> None:
        outcome = on_build_complete(config, context, emitter)

        assert outcome.status == OutcomeStatus.FAIL
        assert outcome.error_kind == ErrorKind.CONFIGURATION_ERROR
        assert "setup" in outcome.failure_reason

    def test_copies_and_commits(
        self, config: DeployConfig, context: PublishContext, emitter: RecordingEmitter
    ) -> None:
        vcs = _bound(context, config)

        outcome = on_build_complete(config, context, emitter)

        assert outcome.succeeded
        assert (vcs.root / "assets" / "fixture.css").read_text() == "body {}\n"
        assert vcs.commits == [(config.commit_message, False)]
        assert context.commit_sha == f"{1:040x}"
        committed = dict(emitter.events)["ArtifactsCommitted"]
        assert committed["file_count"] == 2

    def test_missing_artifact_is_copy_failure(
        self, config: DeployConfig, context: PublishContext, emitter: RecordingEmitter
    ) -> None:
        vcs = _bound(context, config)
        context.output_files.append("missing.js")

        outcome = on_build_complete(config, context, emitter)

        assert outcome.error_kind == ErrorKind.COPY_FAILURE
        assert "stage_all" not in vcs.calls


class TestBeforeUpload:
    def test_first_publish_sets_upstream_flag(
        self, config: DeployConfig, context: PublishContext, emitter: RecordingEmitter
    ) -> None:
        _bound(context, config)

        outcome = before_upload(config, context, emitter)

        assert outcome.succeeded
        assert context.upstream_needed is True

    def test_existing_remote_branch_leaves_flag_unset(
        self, config: DeployConfig, context: PublishContext, emitter: RecordingEmitter
    ) -> None:
        vcs = _bound(context, config, remote_branches={"origin-pages/gh-pages"})

        outcome = before_upload(config, context, emitter)

        assert outcome.succeeded
        assert context.upstream_needed is False
        assert vcs.upstreams == {"gh-pages": "origin-pages/gh-pages"}

    def test_missing_remote_url(
        self, context: PublishContext, emitter: RecordingEmitter
    ) -> None:
        config = DeployConfig()
        _bound(context, config)

        outcome = before_upload(config, context, emitter)

        assert outcome.error_kind == ErrorKind.CONFIGURATION_ERROR


class TestUpload:
    def test_push_with_upstream(
        self, config: DeployConfig, context: PublishContext, emitter: RecordingEmitter
    ) -> None:
        vcs = _bound(context, config)
        context.upstream_needed = True

        outcome = upload(config, context, emitter)

        assert outcome.succeeded
        assert vcs.pushed == [("gh-pages", "origin-pages", True)]

    def test_push_failure_is_reported(
        self, config: DeployConfig, context: PublishContext, emitter: RecordingEmitter
    ) -> None:
        failure = VcsCommandFailure(["git", "push"], 128, "Permission denied (publickey)")
        _bound(context, config, fail_on={"push": failure})

        outcome = upload(config, context, emitter)

        assert outcome.status == OutcomeStatus.FAIL
        assert "Permission denied" in outcome.failure_reason
        failed = dict(emitter.events)["StageFailed"]
        assert failed["stage"] == "upload"
        assert failed["error_kind"] == "vcs_command_failure"


class TestTeardown:
    def test_removes_scratch_and_is_idempotent(
        self, config: DeployConfig, context: PublishContext, emitter: RecordingEmitter
    ) -> None:
        _bound(context, config)
        scratch = config.scratch_path(context.project_root)

        first = teardown(config, context, emitter)
        second = teardown(config, context, emitter)

        assert first.succeeded and second.succeeded
        assert first.notes == "removed"
        assert second.notes == "already absent"
        assert not scratch.exists()
        assert context.working_copy is None
