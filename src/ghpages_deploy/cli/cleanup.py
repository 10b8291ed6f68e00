from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from ghpages_deploy.config.settings import load_config
from ghpages_deploy.errors import ConfigurationError
from ghpages_deploy.events.dispatcher import EventDispatcher
from ghpages_deploy.events.observer import StdoutObserver
from ghpages_deploy.lifecycle.stages import teardown
from ghpages_deploy.models.context import PublishContext


def cleanup(
    root: Optional[Path] = typer.Option(None, "--root", help="Project root (defaults to the config file's directory)"),
) -> None:
    """Remove a scratch working copy left behind by an interrupted deploy."""
    try:
        config = load_config(start=root)
    except ConfigurationError as e:
        typer.echo(f"Configuration error: {e}")
        raise typer.Exit(code=1)

    project_root = root.resolve() if root is not None else config.project_root()
    context = PublishContext(project_root=project_root, dist_dir=project_root / config.dist_dir)

    dispatcher = EventDispatcher()
    dispatcher.add_observer(StdoutObserver())
    outcome = teardown(config, context, dispatcher)

    if not outcome.succeeded:
        raise typer.Exit(code=1)
    if outcome.notes == "already absent":
        typer.echo("Nothing to clean up.")
