# src/cranectl/reporters/console_reporter.py
"""
A reporter that displays recommendations and diffs in formatted tables in the console.
"""

import logging
from typing import Any, Dict, List

import yaml
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from ..core.diff import ResourceTotals, format_quantity, format_replicas
from ..core.query import current_and_recommended
from ..models.diff import ContainerDiff
from ..models.recommendation import RecommendationRecord
from ..models.rule import RecommendationRule
from .base_reporter import BaseReporter

logger = logging.getLogger(__name__)


class ConsoleReporter(BaseReporter):
    """
    Renders cranectl data to the console using the 'rich' library.
    """

    def __init__(self):
        self.console = Console()

    def report_recommendations(self, records: List[RecommendationRecord]):
        if not records:
            self.console.print("No recommendations found.", style="yellow")
            return

        table = Table(title="Recommendations", header_style="bold magenta", show_lines=True)
        table.add_column("NAME", style="cyan", min_width=6, max_width=24)
        table.add_column("RECOMMEND SOURCE", style="cyan")
        table.add_column("NAMESPACE", style="cyan")
        table.add_column("TARGET")
        table.add_column("CURRENT RESOURCE", style="blue")
        table.add_column("RECOMMEND RESOURCE", style="green")
        table.add_column("CREATED TIME", style="dim")
        table.add_column("UPDATED TIME", style="dim")

        for record in records:
            current, recommended = current_and_recommended(record)
            table.add_row(
                record.name,
                record.target_ref.name,
                record.namespace,
                record.target_ref.kind,
                current,
                recommended,
                record.creation_timestamp or "",
                record.last_update_time or "",
            )

        self.console.print(table)

    def report_recommendation_rules(self, rules: List[RecommendationRule]):
        if not rules:
            self.console.print("No recommendation rules found.", style="yellow")
            return

        table = Table(title="Recommendation Rules", header_style="bold magenta", show_lines=True)
        table.add_column("NAME", style="cyan", min_width=6, max_width=24)
        table.add_column("RECOMMENDER", style="green")
        table.add_column("TARGET")
        table.add_column("NAMESPACE", style="cyan")
        table.add_column("RUN INTERVAL", justify="right")
        table.add_column("LAST UPDATE TIME", style="dim")
        table.add_column("CREATE TIME", style="dim")

        for rule in rules:
            table.add_row(
                rule.name,
                ",".join(rule.recommenders),
                ",".join(selector.kind for selector in rule.resource_selectors),
                rule.namespace_selector.display(),
                rule.run_interval,
                rule.last_update_time or "",
                rule.creation_timestamp or "",
            )

        self.console.print(table)

    def _diff_table(self, title: str, rows: List[ContainerDiff], all_namespaces: bool, with_replicas: bool) -> Table:
        totals = ResourceTotals().add_all(rows)

        table = Table(title=title, header_style="bold magenta", show_footer=True)
        if all_namespaces:
            table.add_column("NAMESPACE", style="cyan")
        table.add_column("NAME", style="cyan", footer="Total", min_width=6, max_width=24)
        table.add_column("CONTAINER", style="cyan", min_width=6, max_width=24)
        if with_replicas:
            table.add_column("TYPE")
        table.add_column("CPU", style="blue", justify="right", footer=format_quantity(totals.cpu))
        table.add_column("MEMORY", style="blue", justify="right", footer=format_quantity(totals.memory))
        table.add_column(
            "RECOMMEND CPU", style="green", justify="right", footer=format_quantity(totals.recommended_cpu)
        )
        table.add_column(
            "RECOMMEND MEMORY", style="green", justify="right", footer=format_quantity(totals.recommended_memory)
        )
        table.add_column("CPU DIFF", style="yellow", justify="right", footer=format_quantity(totals.cpu_diff))
        table.add_column("MEMORY DIFF", style="yellow", justify="right", footer=format_quantity(totals.memory_diff))
        if with_replicas:
            table.add_column("REPLICAS", justify="right")
            table.add_column("RECOMMEND REPLICAS", style="green", justify="right")
            table.add_column("REPLICAS DIFF", style="yellow", justify="right")

        previous = None
        for row in rows:
            owner = (row.namespace, row.name)
            if previous is not None and owner != previous:
                table.add_section()
            previous = owner

            cells = [row.namespace] if all_namespaces else []
            cells.extend([row.name, row.container])
            if with_replicas:
                cells.append(row.kind or "")
            cells.extend(
                [
                    format_quantity(row.cpu.observed),
                    format_quantity(row.memory.observed),
                    format_quantity(row.cpu.recommended),
                    format_quantity(row.memory.recommended),
                    format_quantity(row.cpu.delta),
                    format_quantity(row.memory.delta),
                ]
            )
            if with_replicas:
                replicas = row.replicas
                cells.extend(
                    [
                        "" if replicas is None or replicas.observed is None else str(replicas.observed),
                        format_replicas(replicas.recommended if replicas else None),
                        format_replicas(replicas.delta if replicas else None),
                    ]
                )
            table.add_row(*cells)
        return table

    def report_workloads(self, rows: List[ContainerDiff], all_namespaces: bool = False):
        if not rows:
            self.console.print("No workloads found.", style="yellow")
            return
        self.console.print(self._diff_table("Workload Recommendations", rows, all_namespaces, with_replicas=True))

    def report_pods(self, rows: List[ContainerDiff], all_namespaces: bool = False):
        if not rows:
            self.console.print("No pods found.", style="yellow")
            return
        self.console.print(self._diff_table("Pod Recommendations", rows, all_namespaces, with_replicas=False))

    def print_object(self, obj: Dict[str, Any]):
        """Prints an API object as YAML, e.g. the server echo of a dry run."""
        text = yaml.safe_dump(obj, sort_keys=False, default_flow_style=False)
        self.console.print(Syntax(text, "yaml", background_color="default"))
