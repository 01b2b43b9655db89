# src/cranectl/cli/workload.py
"""
Implements the `workload` command: resource, replica and HPA recommendations per workload.
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

app = typer.Typer(help="View workload resource/replicas recommendations.", add_completion=False)


@app.callback(invoke_without_command=True)
def workload(
    ctx: typer.Context,
    namespace: Annotated[Optional[str], typer.Option("--namespace", "-n", help="Namespace to inspect.")] = None,
    all_namespaces: Annotated[
        bool, typer.Option("--all-namespaces", "-A", help="List workloads across all namespaces.")
    ] = False,
    kind: Annotated[str, typer.Option(help="Workload kind [Deployment, StatefulSet].")] = "Deployment",
):
    """
    Compare workload requests and replicas with their recommendations.
    """
    if ctx.invoked_subcommand is not None:
        return

    target_namespace = resolve_namespace(namespace, all_namespaces)
    try:
        rows = run_with_processor(lambda processor: processor.workload_diffs(kind, target_namespace))
        ConsoleReporter().report_workloads(rows, all_namespaces=all_namespaces)
    except typer.Exit:
        raise
    except CraneCtlError as e:
        logger.error(str(e))
        raise typer.Exit(code=1)
    except Exception as e:
        logger.error(f"Failed to get workloads: {e}")
        logger.error(traceback.format_exc())
        raise typer.Exit(code=1)
