from __future__ import annotations

import logging
from typing import Protocol

import typer

from ghpages_deploy.events.types import (
    ArtifactsCommitted,
    BranchPushed,
    BranchReset,
    DeployCompleted,
    DeployFailed,
    DeployStarted,
    Event,
    RemoteLinked,
    ScratchPrepared,
    ScratchRemoved,
    StageCompleted,
    StageFailed,
    StageStarted,
)


class EventObserver(Protocol):
    def on_event(self, event: Event) -> None: ...


class StdoutObserver:
    def on_event(self, event: Event) -> None:
        if isinstance(event, DeployStarted):
            typer.echo(f"[Deploy] Started: '{event.branch}' -> {event.remote_name}")
        elif isinstance(event, DeployCompleted):
            typer.secho(
                f"[Deploy] Completed: '{event.branch}' at {event.commit_sha[:8]} ({event.duration_ms}ms)",
                fg=typer.colors.GREEN,
            )
        elif isinstance(event, DeployFailed):
            typer.secho(f"[Deploy] FAILED: '{event.branch}': {event.error}", fg=typer.colors.RED)
        elif isinstance(event, StageStarted):
            typer.echo(f"  [Stage] Started: {event.stage}")
        elif isinstance(event, StageCompleted):
            typer.echo(f"  [Stage] Completed: {event.stage} ({event.duration_ms}ms)")
        elif isinstance(event, StageFailed):
            typer.secho(f"  [Stage] FAILED: {event.stage} [{event.error_kind}] {event.error}", fg=typer.colors.RED)
        elif isinstance(event, ScratchPrepared):
            suffix = " (initialized new repository)" if event.initialized else ""
            typer.echo(f"    cloned project repository to {event.scratch_path}{suffix}")
        elif isinstance(event, BranchReset):
            verb = "replaced" if event.replaced else "created"
            typer.echo(f"    {verb} orphan branch '{event.branch}', all files removed")
        elif isinstance(event, ArtifactsCommitted):
            typer.echo(f"    [Commit] {event.sha[:8]} on '{event.branch}' ({event.file_count} files)")
        elif isinstance(event, RemoteLinked):
            upstream = "upstream set on push" if event.upstream_needed else "upstream linked"
            typer.echo(f"    remote '{event.remote_name}' {event.action}; {upstream}")
        elif isinstance(event, BranchPushed):
            typer.echo(f"    pushed '{event.branch}' to {event.remote_name}")
        elif isinstance(event, ScratchRemoved):
            if event.existed:
                typer.echo(f"    removed {event.scratch_path}")


class LoggingObserver:
    """Mirror events into the ``logging`` tree for non-interactive runs."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger("ghpages_deploy.events")

    def on_event(self, event: Event) -> None:
        level = logging.INFO
        if isinstance(event, (StageFailed, DeployFailed)):
            level = logging.ERROR
        self._logger.log(
            level,
            "%s %s",
            event.event_type,
            event.model_dump(exclude={"timestamp", "event_type"}),
        )
