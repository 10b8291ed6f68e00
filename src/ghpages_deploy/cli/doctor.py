from __future__ import annotations

import shutil
from pathlib import Path
from typing import Optional

import typer

from ghpages_deploy.config.settings import load_config, validate_config
from ghpages_deploy.errors import ConfigurationError
from ghpages_deploy.workspace import git_ops


def doctor(
    root: Optional[Path] = typer.Option(None, "--root", help="Project root (defaults to the config file's directory)"),
) -> None:
    """Check configuration and git availability before deploying."""
    try:
        config = load_config(start=root)
    except ConfigurationError as e:
        typer.echo(f"Config: FAILED: {e}")
        raise typer.Exit(code=1)

    project_root = root.resolve() if root is not None else config.project_root()
    typer.echo(f"Project root: {project_root}")
    typer.echo(f"Branch: {config.branch}")
    typer.echo(f"Remote: {config.git_remote_name} -> {config.git_remote_url or '(unset)'}")
    typer.echo(f"Scratch: {config.scratch_path(project_root)}")

    failed = False
    try:
        validate_config(config)
        typer.echo("Config: OK")
    except ConfigurationError as e:
        typer.echo(f"Config: FAILED: {e}")
        failed = True

    if shutil.which("git") is None:
        typer.echo("git: NOT FOUND on PATH")
        failed = True
    else:
        typer.echo("git: OK")
        if git_ops.is_git_repo(project_root):
            typer.echo("Repository: OK")
        else:
            typer.echo("Repository: not a git repository (a fresh one will be initialized)")

    if failed:
        raise typer.Exit(code=1)
