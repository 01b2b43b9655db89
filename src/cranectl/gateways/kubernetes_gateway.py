# src/cranectl/gateways/kubernetes_gateway.py
"""
Cluster access through kubernetes_asyncio: recommendations as custom
objects, workloads and pods through the typed APIs, and arbitrary targets
through API discovery plus raw PATCH requests.
"""

import copy
import logging
from typing import Any, Dict, List, Optional, Union

from kubernetes_asyncio import client
from kubernetes_asyncio.client.rest import ApiException

from ..core.config import config
from ..core.exceptions import AlreadyExistsError, CraneCtlError, NotFoundError, UnresolvableTargetError
from ..core.k8s_client import get_api_client
from ..models.api import APIResourceDescriptor, PatchStrategy, split_api_version
from ..models.recommendation import OwnerRef, RecommendationRecord
from ..models.rule import RecommendationRule
from ..models.workload import ContainerRequest, Pod, Workload
from .base_gateway import RecommendationGateway

logger = logging.getLogger(__name__)

_AUTH_SETTINGS = ["BearerToken"]


def _container_requests(containers) -> List[ContainerRequest]:
    result = []
    for container in containers or []:
        requests = {}
        if container.resources and container.resources.requests:
            requests = container.resources.requests
        result.append(
            ContainerRequest(
                name=container.name,
                cpu=_quantity_str(requests.get("cpu")),
                memory=_quantity_str(requests.get("memory")),
            )
        )
    return result


def _quantity_str(value) -> Optional[str]:
    if value is None:
        return None
    return str(value)


class KubernetesGateway(RecommendationGateway):
    """
    Talks to the API server. The client is created lazily on first use.
    """

    WORKLOAD_KINDS = {
        "Deployment": ("list_namespaced_deployment", "list_deployment_for_all_namespaces"),
        "StatefulSet": ("list_namespaced_stateful_set", "list_stateful_set_for_all_namespaces"),
    }

    def __init__(self, api_client: Optional[client.ApiClient] = None):
        self._api_client = api_client

    async def _ensure_client(self) -> client.ApiClient:
        """Lazily initialize the Kubernetes client."""
        if self._api_client:
            return self._api_client

        self._api_client = await get_api_client()
        if not self._api_client:
            raise CraneCtlError("Kubernetes configuration could not be loaded; check KUBECONFIG or KUBE_CONTEXT.")
        logger.debug("KubernetesGateway initialized with centralized config.")
        return self._api_client

    async def _custom_objects(self) -> client.CustomObjectsApi:
        return client.CustomObjectsApi(await self._ensure_client())

    async def list_recommendations(self, namespace: str = "", label_selector: str = "") -> List[RecommendationRecord]:
        api = await self._custom_objects()
        kwargs: Dict[str, Any] = {"_request_timeout": config.K8S_REQUEST_TIMEOUT}
        if label_selector:
            kwargs["label_selector"] = label_selector

        if namespace:
            response = await api.list_namespaced_custom_object(
                config.RECOMMENDATION_GROUP,
                config.RECOMMENDATION_VERSION,
                namespace,
                config.RECOMMENDATION_PLURAL,
                **kwargs,
            )
        else:
            response = await api.list_cluster_custom_object(
                config.RECOMMENDATION_GROUP,
                config.RECOMMENDATION_VERSION,
                config.RECOMMENDATION_PLURAL,
                **kwargs,
            )

        records = [RecommendationRecord.from_k8s(item) for item in (response or {}).get("items", [])]
        logger.debug(f"Listed {len(records)} recommendations (namespace='{namespace}', selector='{label_selector}').")
        return records

    async def get_recommendation(self, namespace: str, name: str) -> RecommendationRecord:
        api = await self._custom_objects()
        try:
            obj = await api.get_namespaced_custom_object(
                config.RECOMMENDATION_GROUP,
                config.RECOMMENDATION_VERSION,
                namespace,
                config.RECOMMENDATION_PLURAL,
                name,
                _request_timeout=config.K8S_REQUEST_TIMEOUT,
            )
        except ApiException as e:
            if e.status == 404:
                raise NotFoundError(f"recommendation {namespace}/{name} not found") from e
            raise
        return RecommendationRecord.from_k8s(obj)

    async def update_recommendation(self, record: RecommendationRecord, dry_run: bool = False) -> RecommendationRecord:
        body = copy.deepcopy(record.raw) if record.raw else {
            "apiVersion": config.RECOMMENDATION_API_VERSION,
            "kind": "Recommendation",
            "metadata": {"name": record.name, "namespace": record.namespace},
        }
        metadata = body.setdefault("metadata", {})
        metadata["annotations"] = dict(record.annotations)
        metadata["labels"] = dict(record.labels)

        kwargs: Dict[str, Any] = {"_request_timeout": config.K8S_REQUEST_TIMEOUT}
        if dry_run:
            kwargs["dry_run"] = "All"

        api = await self._custom_objects()
        try:
            obj = await api.replace_namespaced_custom_object(
                config.RECOMMENDATION_GROUP,
                config.RECOMMENDATION_VERSION,
                record.namespace,
                config.RECOMMENDATION_PLURAL,
                record.name,
                body,
                **kwargs,
            )
        except ApiException as e:
            if e.status == 404:
                raise NotFoundError(f"recommendation {record.namespace}/{record.name} not found") from e
            raise
        return RecommendationRecord.from_k8s(obj)

    async def list_recommendation_rules(self) -> List[RecommendationRule]:
        api = await self._custom_objects()
        response = await api.list_cluster_custom_object(
            config.RECOMMENDATION_GROUP,
            config.RECOMMENDATION_VERSION,
            config.RECOMMENDATION_RULE_PLURAL,
            _request_timeout=config.K8S_REQUEST_TIMEOUT,
        )
        rules = [RecommendationRule.from_k8s(item) for item in (response or {}).get("items", [])]
        logger.debug(f"Listed {len(rules)} recommendation rules.")
        return rules

    async def create_recommendation_rule(self, rule: RecommendationRule, dry_run: bool = False) -> RecommendationRule:
        kwargs: Dict[str, Any] = {"_request_timeout": config.K8S_REQUEST_TIMEOUT}
        if dry_run:
            kwargs["dry_run"] = "All"

        api = await self._custom_objects()
        try:
            obj = await api.create_cluster_custom_object(
                config.RECOMMENDATION_GROUP,
                config.RECOMMENDATION_VERSION,
                config.RECOMMENDATION_RULE_PLURAL,
                rule.to_k8s(config.RECOMMENDATION_API_VERSION),
                **kwargs,
            )
        except ApiException as e:
            if e.status == 409:
                raise AlreadyExistsError(f"the recommendation rule {rule.name} already exists") from e
            raise
        return RecommendationRule.from_k8s(obj)

    async def list_workloads(self, kind: str, namespace: str = "") -> List[Workload]:
        if kind not in self.WORKLOAD_KINDS:
            raise UnresolvableTargetError(
                f"listing workloads of kind '{kind}' is not supported, use one of {', '.join(self.WORKLOAD_KINDS)}"
            )
        namespaced_call, cluster_call = self.WORKLOAD_KINDS[kind]
        api = client.AppsV1Api(await self._ensure_client())
        if namespace:
            response = await getattr(api, namespaced_call)(namespace, _request_timeout=config.K8S_REQUEST_TIMEOUT)
        else:
            response = await getattr(api, cluster_call)(_request_timeout=config.K8S_REQUEST_TIMEOUT)

        workloads = []
        for item in response.items:
            pod_spec = item.spec.template.spec if item.spec and item.spec.template else None
            workloads.append(
                Workload(
                    kind=kind,
                    api_version="apps/v1",
                    namespace=item.metadata.namespace,
                    name=item.metadata.name,
                    replicas=item.spec.replicas if item.spec else None,
                    containers=_container_requests(pod_spec.containers if pod_spec else None),
                )
            )
        logger.debug(f"Listed {len(workloads)} {kind} objects.")
        return workloads

    async def list_pods(self, namespace: str = "") -> List[Pod]:
        api = client.CoreV1Api(await self._ensure_client())
        if namespace:
            response = await api.list_namespaced_pod(namespace, _request_timeout=config.K8S_REQUEST_TIMEOUT)
        else:
            response = await api.list_pod_for_all_namespaces(_request_timeout=config.K8S_REQUEST_TIMEOUT)

        pods = []
        for item in response.items:
            owners = [
                OwnerRef(kind=ref.kind, api_version=ref.api_version, name=ref.name, controller=bool(ref.controller))
                for ref in (item.metadata.owner_references or [])
            ]
            pods.append(
                Pod(
                    namespace=item.metadata.namespace,
                    name=item.metadata.name,
                    owner_references=owners,
                    containers=_container_requests(item.spec.containers if item.spec else None),
                )
            )
        return pods

    async def resolve_api_resource(self, api_version: str, kind: str) -> APIResourceDescriptor:
        if not api_version or not kind:
            raise UnresolvableTargetError(f"target '{api_version}/{kind}' is incomplete")
        group, version = split_api_version(api_version)
        path = f"/apis/{group}/{version}" if group else f"/api/{version}"

        api_client = await self._ensure_client()
        try:
            resource_list = await api_client.call_api(
                path,
                "GET",
                response_types_map={200: "V1APIResourceList"},
                auth_settings=_AUTH_SETTINGS,
                _return_http_data_only=True,
                _request_timeout=config.K8S_REQUEST_TIMEOUT,
            )
        except ApiException as e:
            raise UnresolvableTargetError(f"the server does not serve {api_version}: {e.reason}") from e
        except Exception as e:
            # Connection failures and timeouts during discovery
            raise UnresolvableTargetError(f"could not look up {kind} in {api_version}: {e}") from e

        for resource in getattr(resource_list, "resources", None) or []:
            # Subresources such as "deployments/scale" share the parent's kind
            if resource.kind == kind and "/" not in resource.name:
                return APIResourceDescriptor(
                    group=group,
                    version=version,
                    kind=kind,
                    plural=resource.name,
                    namespaced=bool(resource.namespaced),
                )
        raise UnresolvableTargetError(f"no resource of kind '{kind}' in {api_version}")

    async def patch_target(
        self,
        descriptor: APIResourceDescriptor,
        namespace: str,
        name: str,
        body: Union[Dict[str, Any], List[Any]],
        strategy: PatchStrategy,
        dry_run: bool = False,
    ) -> Dict[str, Any]:
        api_client = await self._ensure_client()
        query_params = [("dryRun", "All")] if dry_run else []
        try:
            return await api_client.call_api(
                descriptor.path(namespace, name),
                "PATCH",
                query_params=query_params,
                header_params={"Content-Type": strategy.value, "Accept": "application/json"},
                body=body,
                response_types_map={200: "object"},
                auth_settings=_AUTH_SETTINGS,
                _return_http_data_only=True,
                _request_timeout=config.K8S_REQUEST_TIMEOUT,
            )
        except ApiException as e:
            if e.status == 404:
                raise NotFoundError(f"{descriptor.kind} {namespace}/{name} not found") from e
            raise

    async def close(self):
        """Close the Kubernetes API client if it exists."""
        if self._api_client:
            await self._api_client.close()
            logger.debug("KubernetesGateway Kubernetes client closed.")
            self._api_client = None
