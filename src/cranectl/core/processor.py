# src/cranectl/core/processor.py
import logging
from typing import List, Optional

from ..gateways.base_gateway import RecommendationGateway
from ..models.diff import ContainerDiff
from ..models.recommendation import RecommendationRecord, WorkloadRef
from ..models.rule import RecommendationRule
from .adoption import AdoptionController
from .diff import DiffEngine
from .index import RecommendationIndex
from .query import RecommendationQuery, filter_by_target
from .resolver import RecommendationResolver
from .rules import RecommendationRuleQuery

logger = logging.getLogger(__name__)


class RecommendationProcessor:
    """Orchestrates listing, matching and diffing of recommendations against live objects."""

    def __init__(self, gateway: RecommendationGateway, engine: Optional[DiffEngine] = None):
        self.gateway = gateway
        self.engine = engine or DiffEngine()
        self.adoption = AdoptionController(gateway)

    async def _build_resolver(self) -> RecommendationResolver:
        # Recommendations for any namespace may target the listed objects
        records = await self.gateway.list_recommendations("", "")
        return RecommendationResolver(RecommendationIndex.build(records))

    async def list_recommendations(self, query: RecommendationQuery, namespace: str = "") -> List[RecommendationRecord]:
        records = await self.gateway.list_recommendations(namespace, query.label_selector())
        selected = query.filter(records)
        logger.info(f"Found {len(selected)} recommendations matching the query.")
        return selected

    async def view_recommendations(self, target_ref: WorkloadRef) -> List[RecommendationRecord]:
        records = await self.gateway.list_recommendations(target_ref.namespace, "")
        return filter_by_target(records, target_ref)

    async def workload_diffs(self, kind: str, namespace: str = "") -> List[ContainerDiff]:
        workloads = await self.gateway.list_workloads(kind, namespace)
        resolver = await self._build_resolver()

        rows: List[ContainerDiff] = []
        for workload in workloads:
            proposal = resolver.resolve_by_meta(workload.kind, workload.api_version, workload.namespace, workload.name)
            rows.extend(self.engine.compare_workload(workload, proposal))
        return rows

    async def pod_diffs(self, namespace: str = "") -> List[ContainerDiff]:
        pods = await self.gateway.list_pods(namespace)
        resolver = await self._build_resolver()

        rows: List[ContainerDiff] = []
        for pod in pods:
            rows.extend(self.engine.compare_pod(pod, resolver.resolve_by_owner(pod)))
        return rows

    async def list_recommendation_rules(self, query: RecommendationRuleQuery) -> List[RecommendationRule]:
        return query.filter(await self.gateway.list_recommendation_rules())

    async def create_recommendation_rule(self, rule: RecommendationRule, dry_run: bool = False) -> RecommendationRule:
        created = await self.gateway.create_recommendation_rule(rule, dry_run=dry_run)
        if not dry_run:
            logger.info(f"the recommendation rule {rule.name} created successfully")
        return created
