from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from ghpages_deploy.config.settings import load_config, validate_config
from ghpages_deploy.errors import ConfigurationError, CopyFailure
from ghpages_deploy.events.dispatcher import EventDispatcher
from ghpages_deploy.events.observer import LoggingObserver, StdoutObserver
from ghpages_deploy.lifecycle.runner import DeployRunner
from ghpages_deploy.workspace.publisher import collect_output_files


def deploy(
    dist: Optional[Path] = typer.Option(None, "--dist", help="Build output directory (defaults to distDir from config)"),
    root: Optional[Path] = typer.Option(None, "--root", help="Project root (defaults to the config file's directory)"),
    remote_url: Optional[str] = typer.Option(None, "--remote-url", help="Override gitRemoteUrl"),
    branch: Optional[str] = typer.Option(None, "--branch", help="Override the target branch"),
    keep_scratch: bool = typer.Option(False, "--keep-scratch", help="Leave the scratch working copy in place"),
) -> None:
    """Publish a built site to the configured branch and push it."""
    try:
        config = load_config(start=root)
    except ConfigurationError as e:
        typer.echo(f"Configuration error: {e}")
        raise typer.Exit(code=1)

    if remote_url is not None:
        config.git_remote_url = remote_url
    if branch is not None:
        config.branch = branch

    try:
        validate_config(config)
    except ConfigurationError as e:
        typer.echo(f"Configuration error: {e}")
        raise typer.Exit(code=1)

    project_root = root.resolve() if root is not None else config.project_root()
    dist_dir = dist if dist is not None else Path(config.dist_dir)
    if not dist_dir.is_absolute():
        dist_dir = project_root / dist_dir

    try:
        output_files = collect_output_files(dist_dir)
    except CopyFailure as e:
        typer.echo(f"Error: {e}")
        raise typer.Exit(code=1)

    if not output_files:
        typer.echo(f"Error: no build outputs found in {dist_dir}")
        raise typer.Exit(code=1)

    dispatcher = EventDispatcher(StdoutObserver(), LoggingObserver())

    runner = DeployRunner(config=config, event_emitter=dispatcher, keep_scratch=keep_scratch)
    result = runner.run(
        project_root=project_root,
        dist_dir=dist_dir,
        output_files=output_files,
    )

    if not result.succeeded:
        raise typer.Exit(code=1)
