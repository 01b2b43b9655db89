# src/cranectl/cli/pod.py
"""
Implements the `pod` command: resource recommendations inherited from each pod's owner.
"""

import logging
import traceback
from typing import Optional

import typer
from typing_extensions import Annotated

from ..core.exceptions import CraneCtlError
from ..reporters.console_reporter import ConsoleReporter
from .utils import resolve_namespace, run_with_processor

logger = logging.getLogger(__name__)

app = typer.Typer(help="View pod resource recommendations.", add_completion=False)


@app.callback(invoke_without_command=True)
def pod(
    ctx: typer.Context,
    namespace: Annotated[Optional[str], typer.Option("--namespace", "-n", help="Namespace to inspect.")] = None,
    all_namespaces: Annotated[
        bool, typer.Option("--all-namespaces", "-A", help="List pods across all namespaces.")
    ] = False,
):
    """
    Compare pod container requests with the recommendation of their owner.
    """
    if ctx.invoked_subcommand is not None:
        return

    target_namespace = resolve_namespace(namespace, all_namespaces)
    try:
        rows = run_with_processor(lambda processor: processor.pod_diffs(target_namespace))
        ConsoleReporter().report_pods(rows, all_namespaces=all_namespaces)
    except typer.Exit:
        raise
    except CraneCtlError as e:
        logger.error(str(e))
        raise typer.Exit(code=1)
    except Exception as e:
        logger.error(f"Failed to get pods: {e}")
        logger.error(traceback.format_exc())
        raise typer.Exit(code=1)
