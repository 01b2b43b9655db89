# src/cranectl/gateways/base_gateway.py
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Union

from ..models.api import APIResourceDescriptor, PatchStrategy
from ..models.recommendation import RecommendationRecord
from ..models.rule import RecommendationRule
from ..models.workload import Pod, Workload


class RecommendationGateway(ABC):
    """
    Abstract base class for cluster access.
    Defines the narrow contract the recommendation engine needs from the control plane.
    An empty namespace means all namespaces for list calls.
    """

    @abstractmethod
    async def list_recommendations(self, namespace: str = "", label_selector: str = "") -> List[RecommendationRecord]:
        """
        Lists recommendation records.

        Args:
            namespace: Namespace to list from, or "" for all namespaces.
            label_selector: Kubernetes label selector, e.g. "a=b,c=d".
        """
        pass

    @abstractmethod
    async def get_recommendation(self, namespace: str, name: str) -> RecommendationRecord:
        """
        Fetches a single recommendation.

        Raises:
            NotFoundError: if the recommendation does not exist.
        """
        pass

    @abstractmethod
    async def update_recommendation(self, record: RecommendationRecord, dry_run: bool = False) -> RecommendationRecord:
        """
        Persists the record's metadata (labels and annotations). Under dry run the
        server validates and echoes the update without storing it.
        """
        pass

    @abstractmethod
    async def list_recommendation_rules(self) -> List[RecommendationRule]:
        """Lists every recommendation rule. Rules are cluster scoped."""
        pass

    @abstractmethod
    async def create_recommendation_rule(self, rule: RecommendationRule, dry_run: bool = False) -> RecommendationRule:
        """
        Creates a rule and returns it as stored (or as it would be, under dry run).

        Raises:
            AlreadyExistsError: if a rule with the same name exists.
        """
        pass

    @abstractmethod
    async def list_workloads(self, kind: str, namespace: str = "") -> List[Workload]:
        pass

    @abstractmethod
    async def list_pods(self, namespace: str = "") -> List[Pod]:
        pass

    @abstractmethod
    async def resolve_api_resource(self, api_version: str, kind: str) -> APIResourceDescriptor:
        """
        Raises:
            UnresolvableTargetError: if the server does not serve the kind.
        """
        pass

    @abstractmethod
    async def patch_target(
        self,
        descriptor: APIResourceDescriptor,
        namespace: str,
        name: str,
        body: Union[Dict[str, Any], List[Any]],
        strategy: PatchStrategy,
        dry_run: bool = False,
    ) -> Dict[str, Any]:
        """
        Patches the target object and returns it as stored (or as it would be, under dry run).
        """
        pass

    async def close(self):
        """
        Clean up resources (e.g., close API clients).
        """
        pass
