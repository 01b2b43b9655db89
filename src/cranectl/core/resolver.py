# src/cranectl/core/resolver.py

import logging
from typing import Optional

from ..models.recommendation import (
    ProposedRecommendation,
    RecommendationType,
    ResourceRequestRecommendation,
)
from ..models.workload import Pod
from .decoder import PayloadDecoder
from .exceptions import MalformedPayloadError
from .index import RecommendationIndex
from .keys import CanonicalKey, object_key, owner_key

logger = logging.getLogger(__name__)


class RecommendationResolver:
    """
    Answers "what is recommended for this object" over a pre-built index.

    Both query paths are read-only and tolerate bad records: a record that
    cannot be decoded is logged and treated as no recommendation.
    """

    def __init__(self, index: RecommendationIndex, decoder: Optional[PayloadDecoder] = None):
        self.index = index
        self.decoder = decoder or PayloadDecoder()

    def _decode(self, key: CanonicalKey) -> Optional[ProposedRecommendation]:
        record = self.index.lookup(key)
        if record is None:
            return None
        try:
            return self.decoder.decode(record)
        except MalformedPayloadError as e:
            logger.warning(f"Skipping recommendation {record.namespace}/{record.name}: {e}")
            return None

    def resolve_by_owner(self, pod: Pod) -> Optional[ResourceRequestRecommendation]:
        """
        Walks the pod's owner references in order and returns the resource
        proposal of the first owner that has a usable one.
        """
        for ref in pod.owner_references:
            key = owner_key(RecommendationType.RESOURCE.value, ref, pod.namespace)
            proposal = self._decode(key)
            if proposal is None or proposal.resource_request is None:
                continue
            logger.debug(f"Pod {pod.namespace}/{pod.name} matched recommendation key {key}")
            return proposal.resource_request
        return None

    def resolve_by_meta(self, kind: str, api_version: str, namespace: str, name: str) -> ProposedRecommendation:
        """
        Merges the Resource and Replicas recommendations of one workload.
        A failure on one side leaves only that side's fields absent.
        """
        recommendation = ProposedRecommendation()

        resource = self._decode(object_key(RecommendationType.RESOURCE.value, kind, api_version, namespace, name))
        if resource is not None:
            recommendation.resource_request = resource.resource_request

        replicas = self._decode(object_key(RecommendationType.REPLICAS.value, kind, api_version, namespace, name))
        if replicas is not None:
            recommendation.replicas_recommendation = replicas.replicas_recommendation
            recommendation.effective_hpa = replicas.effective_hpa

        return recommendation
