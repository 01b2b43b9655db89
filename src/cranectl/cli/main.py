# src/cranectl/cli/main.py
"""
Entry point of the cranectl command line.
"""

import logging
from typing import Optional

import typer
from typing_extensions import Annotated

from .. import __version__
from ..core.config import config
from . import pod, recommend, rule, workload

logging.basicConfig(
    level=config.LOG_LEVEL.upper(),
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


app = typer.Typer(
    name="cranectl",
    help="Compare Crane recommendations with live workloads and adopt them.",
    add_completion=False,
)


def _print_version(value: bool):
    if value:
        typer.echo(f"cranectl version: {__version__}")
        raise typer.Exit()


@app.command()
def version():
    """Print the cranectl version."""
    _print_version(True)


@app.callback()
def main(
    show_version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=_print_version, is_eager=True, help="Print the version and exit."),
    ] = None,
):
    logger.debug(f"cranectl {__version__} talking to {config.RECOMMENDATION_API_VERSION}")


app.add_typer(recommend.app, name="recommend")
app.add_typer(rule.app, name="recommendationrule")
app.add_typer(rule.app, name="rr", hidden=True)
app.add_typer(workload.app, name="workload")
app.add_typer(pod.app, name="pod")


if __name__ == "__main__":
    app()
