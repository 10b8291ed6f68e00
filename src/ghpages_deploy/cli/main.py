import logging

import typer

from ghpages_deploy.cli.cleanup import cleanup as cleanup_command
from ghpages_deploy.cli.deploy import deploy as deploy_command
from ghpages_deploy.cli.doctor import doctor as doctor_command

app = typer.Typer(name="ghpages-deploy", help="Publish a built static site to an orphan git branch")
app.command(name="deploy")(deploy_command)
app.command(name="doctor")(doctor_command)
app.command(name="cleanup")(cleanup_command)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())


if __name__ == "__main__":
    app()
