# src/cranectl/cli/recommend.py
"""
Implements the `recommend` commands: list, view, adopt and trigger.
"""

import logging
import traceback
from typing import Optional

import typer
from pydantic import ValidationError
from typing_extensions import Annotated

from ..core.exceptions import CraneCtlError
from ..core.query import RecommendationQuery
from ..models.adoption import Outcome
from ..models.recommendation import WorkloadRef
from ..reporters.console_reporter import ConsoleReporter
from .utils import resolve_namespace, run_with_processor

logger = logging.getLogger(__name__)
app = typer.Typer(name="recommend", help="View, adopt and trigger recommendations.", add_completion=False)


def _fail(command: str, e: Exception):
    if isinstance(e, CraneCtlError):
        logger.error(str(e))
    else:
        logger.error(f"Error in recommend {command} command: {e}")
        logger.error(traceback.format_exc())
    raise typer.Exit(code=1)


@app.command("list")
def list_recommendations(
    namespace: Annotated[
        Optional[str], typer.Option("--namespace", "-n", help="Namespace to list; all namespaces if omitted.")
    ] = None,
    rec_type: Annotated[
        str, typer.Option("--type", help="Recommender type [Resource, Replicas, IdleNode].")
    ] = "Resource",
    name: Annotated[Optional[str], typer.Option(help="Only show recommendations whose name contains this.")] = None,
    target_kind: Annotated[Optional[str], typer.Option("--target-kind", help="Only show this target kind.")] = None,
):
    """
    View recommendation results.
    """
    try:
        query = RecommendationQuery(name=name, rec_type=rec_type, target_kind=target_kind)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--type")

    try:
        records = run_with_processor(
            lambda processor: processor.list_recommendations(query, resolve_namespace(namespace, default=""))
        )
        ConsoleReporter().report_recommendations(records)
    except typer.Exit:
        raise
    except Exception as e:
        _fail("list", e)


@app.command("view")
def view_recommendations(
    selector: Annotated[
        str,
        typer.Option(
            help='Target selector, e.g. \'{"apiVersion":"apps/v1","kind":"Deployment","name":"web","namespace":"default"}\'.'
        ),
    ],
):
    """
    View the recommendations of one target object.
    """
    try:
        target_ref = WorkloadRef.model_validate_json(selector)
    except ValidationError:
        raise typer.BadParameter("please check the recommender target is valid", param_hint="--selector")

    try:
        records = run_with_processor(lambda processor: processor.view_recommendations(target_ref))
        ConsoleReporter().report_recommendations(records)
    except typer.Exit:
        raise
    except Exception as e:
        _fail("view", e)


@app.command("adopt")
def adopt(
    name: Annotated[str, typer.Option(help="Name of the recommendation to adopt.")],
    namespace: Annotated[Optional[str], typer.Option("--namespace", "-n", help="Namespace of the recommendation.")] = None,
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Validate the patch without persisting it.")] = False,
):
    """
    Adopt a recommendation by patching its target.
    """
    if not name:
        raise typer.BadParameter("please specify an existing recommendation name", param_hint="--name")

    try:
        result = run_with_processor(
            lambda processor: processor.adoption.adopt(name, resolve_namespace(namespace), dry_run=dry_run)
        )
    except typer.Exit:
        raise
    except Exception as e:
        _fail("adopt", e)

    if result.outcome == Outcome.DRY_RUN and result.object:
        ConsoleReporter().print_object(result.object)
    elif result.outcome == Outcome.UNKNOWN:
        typer.echo(f"Adoption of {result.name} was sent but not confirmed; check {result.target.kind} {result.target.name}.")
    else:
        typer.echo(f"Adopted recommendation {result.name} on {result.target.kind} {result.target.namespace}/{result.target.name}.")


@app.command("trigger")
def trigger(
    name: Annotated[str, typer.Option(help="Name of the recommendation to trigger.")],
    namespace: Annotated[Optional[str], typer.Option("--namespace", "-n", help="Namespace of the recommendation.")] = None,
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Validate the update without persisting it.")] = False,
):
    """
    Manually trigger a recommendation.
    """
    if not name:
        raise typer.BadParameter("please specify the recommendation name", param_hint="--name")
    if not namespace:
        raise typer.BadParameter("please specify the recommendation namespace", param_hint="--namespace")

    try:
        result = run_with_processor(lambda processor: processor.adoption.trigger(name, namespace, dry_run=dry_run))
    except typer.Exit:
        raise
    except Exception as e:
        _fail("trigger", e)

    if result.outcome == Outcome.DRY_RUN and result.record is not None:
        obj = dict(result.record.raw) or result.record.model_dump(exclude={"raw"})
        obj.setdefault("kind", "Recommendation")
        ConsoleReporter().print_object(obj)
    elif result.outcome == Outcome.UNKNOWN:
        typer.echo(f"Trigger of {name} was sent but not confirmed.")
    else:
        typer.echo(f"Triggered recommendation {name}.")
