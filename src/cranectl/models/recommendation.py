# src/cranectl/models/recommendation.py
"""
Pydantic models for recommendation records and the proposals decoded from
their payloads. Records are read from the cluster as plain dictionaries and
converted here so the rest of the engine never touches the raw schema.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RecommendationType(str, Enum):
    """Recommender types known to the cluster component."""

    RESOURCE = "Resource"
    REPLICAS = "Replicas"
    IDLE_NODE = "IdleNode"


ADOPTABLE_TYPES = frozenset({RecommendationType.RESOURCE.value, RecommendationType.REPLICAS.value})


class WorkloadRef(BaseModel):
    """Identity of an object that can receive a recommendation."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    kind: str = ""
    api_version: str = Field("", alias="apiVersion")
    namespace: str = ""
    name: str = ""


class OwnerRef(BaseModel):
    """An owner reference as found on a pod. The namespace comes from the pod."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    kind: str
    api_version: str = Field(..., alias="apiVersion")
    name: str
    controller: bool = False


class RecommendationRecord(BaseModel):
    """A recommendation object as stored by the control plane."""

    name: str
    namespace: str = ""
    type: str = ""
    target_ref: WorkloadRef = Field(default_factory=WorkloadRef)
    recommended_value: str = ""
    recommended_patch: str = ""
    current_info: str = ""
    labels: Dict[str, str] = Field(default_factory=dict)
    annotations: Dict[str, str] = Field(default_factory=dict)
    creation_timestamp: Optional[str] = None
    last_update_time: Optional[str] = None
    raw: Dict[str, Any] = Field(default_factory=dict, repr=False)

    @classmethod
    def from_k8s(cls, obj: Dict[str, Any]) -> "RecommendationRecord":
        """
        Builds a record from a custom object dictionary.

        Both status layouts are accepted: the flat one
        (``status.recommendedValue``) and the nested one
        (``status.recommendationContent.recommendedValue``).
        """
        metadata = obj.get("metadata") or {}
        spec = obj.get("spec") or {}
        status = obj.get("status") or {}
        content = status.get("recommendationContent") or {}

        def _status_field(key: str) -> str:
            return content.get(key) or status.get(key) or ""

        target = spec.get("targetRef") or {}
        return cls(
            name=metadata.get("name", ""),
            namespace=metadata.get("namespace") or "",
            type=str(spec.get("type") or ""),
            target_ref=WorkloadRef(
                kind=target.get("kind") or "",
                api_version=target.get("apiVersion") or "",
                namespace=target.get("namespace") or "",
                name=target.get("name") or "",
            ),
            recommended_value=_status_field("recommendedValue"),
            recommended_patch=_status_field("recommendedInfo"),
            current_info=_status_field("currentInfo"),
            labels=dict(metadata.get("labels") or {}),
            annotations=dict(metadata.get("annotations") or {}),
            creation_timestamp=timestamp_str(metadata.get("creationTimestamp")),
            last_update_time=timestamp_str(status.get("lastUpdateTime")),
            raw=obj,
        )


def timestamp_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)


class ContainerRecommendation(BaseModel):
    """Target requests for a single container."""

    model_config = ConfigDict(populate_by_name=True)

    container_name: str = Field("", alias="containerName")
    target: Dict[str, str] = Field(default_factory=dict)

    @field_validator("target", mode="before")
    @classmethod
    def _stringify_quantities(cls, value):
        # "memory: 1024" parses as a number in YAML but is still a quantity
        if value is None:
            return {}
        if isinstance(value, dict):
            return {str(k): str(v) for k, v in value.items() if v is not None}
        return value


class ResourceRequestRecommendation(BaseModel):
    containers: List[ContainerRecommendation] = Field(default_factory=list)

    def for_container(self, name: str) -> Optional[ContainerRecommendation]:
        """Returns the last entry for the container, mirroring map overwrite order."""
        found = None
        for container in self.containers:
            if container.container_name == name:
                found = container
        return found


class ReplicasRecommendation(BaseModel):
    replicas: Optional[int] = None


class EffectiveHorizontalPodAutoscalerRecommendation(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    min_replicas: Optional[int] = Field(None, alias="minReplicas")
    max_replicas: Optional[int] = Field(None, alias="maxReplicas")
    metrics: List[Dict[str, Any]] = Field(default_factory=list)
    prediction: Optional[Dict[str, Any]] = None


class ProposedRecommendation(BaseModel):
    """
    Decoded proposal. Fields that do not apply to the record's type stay
    ``None`` rather than zero-valued.
    """

    model_config = ConfigDict(populate_by_name=True)

    resource_request: Optional[ResourceRequestRecommendation] = Field(None, alias="resourceRequest")
    replicas_recommendation: Optional[ReplicasRecommendation] = Field(None, alias="replicasRecommendation")
    effective_hpa: Optional[EffectiveHorizontalPodAutoscalerRecommendation] = Field(None, alias="effectiveHPA")

    @property
    def is_empty(self) -> bool:
        return self.resource_request is None and self.replicas_recommendation is None and self.effective_hpa is None

    @property
    def recommended_replicas(self) -> Optional[int]:
        if self.replicas_recommendation is None:
            return None
        return self.replicas_recommendation.replicas
