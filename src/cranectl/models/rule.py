# src/cranectl/models/rule.py
"""
Models for RecommendationRule objects. A rule tells the recommender which
objects to analyse, with which recommenders and how often.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .recommendation import timestamp_str


class ResourceSelector(BaseModel):
    """Selects target objects by kind, optionally narrowed by name or labels."""

    model_config = ConfigDict(populate_by_name=True)

    kind: str
    api_version: str = Field("", alias="apiVersion")
    name: str = ""
    label_selector: Optional[Dict[str, Any]] = Field(None, alias="labelSelector")


class NamespaceSelector(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    any: bool = False
    match_names: List[str] = Field(default_factory=list, alias="matchNames")

    def display(self) -> str:
        if self.any:
            return "Any"
        return ",".join(self.match_names)


class RecommendationRule(BaseModel):
    """A cluster-scoped recommendation rule."""

    name: str
    recommenders: List[str] = Field(default_factory=list)
    resource_selectors: List[ResourceSelector] = Field(default_factory=list)
    namespace_selector: NamespaceSelector = Field(default_factory=NamespaceSelector)
    run_interval: str = ""
    creation_timestamp: Optional[str] = None
    last_update_time: Optional[str] = None
    raw: Dict[str, Any] = Field(default_factory=dict, repr=False)

    @classmethod
    def from_k8s(cls, obj: Dict[str, Any]) -> "RecommendationRule":
        metadata = obj.get("metadata") or {}
        spec = obj.get("spec") or {}
        status = obj.get("status") or {}
        return cls(
            name=metadata.get("name", ""),
            recommenders=[r.get("name", "") for r in spec.get("recommenders") or []],
            resource_selectors=[ResourceSelector.model_validate(s) for s in spec.get("resourceSelectors") or []],
            namespace_selector=NamespaceSelector.model_validate(spec.get("namespaceSelector") or {}),
            run_interval=spec.get("runInterval") or "",
            creation_timestamp=timestamp_str(metadata.get("creationTimestamp")),
            last_update_time=timestamp_str(status.get("lastUpdateTime")),
            raw=obj,
        )

    def to_k8s(self, api_version: str) -> Dict[str, Any]:
        """Builds the custom object body sent to the API server."""
        namespace_selector: Dict[str, Any] = {"any": True}
        if not self.namespace_selector.any:
            namespace_selector = {"matchNames": list(self.namespace_selector.match_names)}
        return {
            "apiVersion": api_version,
            "kind": "RecommendationRule",
            "metadata": {"name": self.name},
            "spec": {
                "recommenders": [{"name": recommender} for recommender in self.recommenders],
                "resourceSelectors": [
                    s.model_dump(by_alias=True, exclude_defaults=True) for s in self.resource_selectors
                ],
                "namespaceSelector": namespace_selector,
                "runInterval": self.run_interval,
            },
        }
