# src/cranectl/core/query.py
"""
Filtering helpers for listing recommendations and summarising their
current/recommended state.
"""

import json
import logging
from typing import Dict, Iterable, List, Optional

from ..models.recommendation import RecommendationRecord, RecommendationType, WorkloadRef

logger = logging.getLogger(__name__)

RECOMMENDER_LABEL = "analysis.crane.io/recommendation-rule-recommender"
TARGET_KIND_LABEL = "analysis.crane.io/recommendation-target-kind"

SUPPORTED_RECOMMENDERS = tuple(t.value for t in RecommendationType)


class RecommendationQuery:
    """
    Server-side label selection plus client-side name filtering.
    """

    def __init__(self, name: Optional[str] = None, rec_type: Optional[str] = None, target_kind: Optional[str] = None):
        if rec_type and rec_type not in SUPPORTED_RECOMMENDERS:
            raise ValueError(f"the recommender only support {', '.join(SUPPORTED_RECOMMENDERS)}")
        self.name = name
        self.rec_type = rec_type
        self.target_kind = target_kind

    @property
    def labels(self) -> Dict[str, str]:
        labels = {}
        if self.rec_type:
            labels[RECOMMENDER_LABEL] = self.rec_type
        if self.target_kind:
            labels[TARGET_KIND_LABEL] = self.target_kind
        return labels

    def label_selector(self) -> str:
        return ",".join(f"{label}={value}" for label, value in self.labels.items())

    def matches(self, record: RecommendationRecord) -> bool:
        if self.name and self.name not in record.name:
            return False
        return True

    def filter(self, records: Iterable[RecommendationRecord]) -> List[RecommendationRecord]:
        return [record for record in records if self.matches(record)]


def filter_by_target(records: Iterable[RecommendationRecord], target_ref: WorkloadRef) -> List[RecommendationRecord]:
    """Keeps the records whose target reference equals ``target_ref`` exactly."""
    return [record for record in records if record.target_ref == target_ref]


def _summarise(info: str, rec_type: str) -> str:
    if not info:
        return ""
    try:
        obj = json.loads(info)
    except (TypeError, ValueError):
        return ""
    if not isinstance(obj, dict):
        return ""
    spec = obj.get("spec") or {}

    if rec_type == RecommendationType.RESOURCE.value:
        containers = ((spec.get("template") or {}).get("spec") or {}).get("containers") or []
        lines = []
        for container in containers:
            requests = (container.get("resources") or {}).get("requests") or {}
            cpu = requests.get("cpu") or "0"
            memory = requests.get("memory") or "0"
            lines.append(f"{container.get('name', '')}/{cpu}/{memory}")
        return "\n".join(lines)
    if rec_type == RecommendationType.REPLICAS.value:
        replicas = spec.get("replicas")
        return "" if replicas is None else str(replicas)
    return ""


def current_and_recommended(record: RecommendationRecord):
    """
    Returns (current, recommended) summaries built from the record's
    currentInfo and recommendedInfo snapshots.
    """
    return (
        _summarise(record.current_info, record.type),
        _summarise(record.recommended_patch, record.type),
    )
