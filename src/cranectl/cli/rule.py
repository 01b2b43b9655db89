# src/cranectl/cli/rule.py
"""
Implements the `recommendationrule` (alias `rr`) commands: list and create.
"""

import logging
import traceback
from typing import Optional

import typer
from typing_extensions import Annotated

from ..core.config import config
from ..core.exceptions import CraneCtlError
from ..core.rules import RecommendationRuleQuery, build_rule
from ..reporters.console_reporter import ConsoleReporter
from .utils import run_with_processor

logger = logging.getLogger(__name__)
app = typer.Typer(name="recommendationrule", help="Manage recommendation rules.", add_completion=False)

CREATE_EXAMPLE = """
Examples:

  # a rule for the kube-system namespace
  cranectl rr create --name sys --namespace kube-system --target '[{"kind": "Deployment", "apiVersion": "apps/v1"}]' --run-interval 4h

  # a rule for every namespace with both the Resource and Replicas recommenders
  cranectl rr create --name all --namespace Any --recommender Resource,Replicas --target '[{"kind": "Deployment", "apiVersion": "apps/v1"}]' --run-interval 4h
"""


def _fail(command: str, e: Exception):
    if isinstance(e, CraneCtlError):
        logger.error(str(e))
    else:
        logger.error(f"Error in recommendationrule {command} command: {e}")
        logger.error(traceback.format_exc())
    raise typer.Exit(code=1)


@app.command("list")
def list_rules(
    name: Annotated[Optional[str], typer.Option(help="Only show rules whose name contains this.")] = None,
    recommender: Annotated[Optional[str], typer.Option(help="Only show rules using this recommender.")] = None,
):
    """
    View recommendation rules.
    """
    query = RecommendationRuleQuery(name=name, recommender=recommender)
    try:
        rules = run_with_processor(lambda processor: processor.list_recommendation_rules(query))
        ConsoleReporter().report_recommendation_rules(rules)
    except typer.Exit:
        raise
    except Exception as e:
        _fail("list", e)


@app.command("create", epilog=CREATE_EXAMPLE)
def create_rule(
    name: Annotated[str, typer.Option(help="Name of the recommendation rule.")] = "",
    target: Annotated[
        str, typer.Option(help='Resource selectors as JSON, e.g. \'[{"kind": "Deployment", "apiVersion": "apps/v1"}]\'.')
    ] = "",
    recommender: Annotated[
        str, typer.Option(help="Recommender types, separated with ',' if more than one.")
    ] = "Resource",
    run_interval: Annotated[str, typer.Option("--run-interval", help="How often the rule runs, e.g. 4h.")] = "",
    namespace: Annotated[
        Optional[str],
        typer.Option("--namespace", "-n", help="Namespaces to analyse, comma separated; 'Any' or empty for all."),
    ] = None,
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Validate the rule without creating it.")] = False,
):
    """
    Create a simple recommendation rule.
    """
    try:
        rule = build_rule(name, target, run_interval, recommender=recommender, namespace=namespace)
    except ValueError as e:
        raise typer.BadParameter(str(e))

    try:
        created = run_with_processor(lambda processor: processor.create_recommendation_rule(rule, dry_run=dry_run))
    except typer.Exit:
        raise
    except Exception as e:
        _fail("create", e)

    if dry_run:
        obj = dict(created.raw) or rule.to_k8s(config.RECOMMENDATION_API_VERSION)
        obj["kind"] = "RecommendationRule"
        obj["apiVersion"] = config.RECOMMENDATION_API_VERSION
        ConsoleReporter().print_object(obj)
    else:
        typer.echo(f"the recommendation rule {created.name or rule.name} created successfully")
