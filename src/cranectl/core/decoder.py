# src/cranectl/core/decoder.py
"""
Turns the free-form ``recommendedValue`` payload of a recommendation into a
typed ProposedRecommendation. Which sub-fields are read depends on the
record's declared type.
"""

import logging
from typing import Any, Callable, Dict

import yaml
from pydantic import ValidationError

from ..models.recommendation import (
    EffectiveHorizontalPodAutoscalerRecommendation,
    ProposedRecommendation,
    RecommendationRecord,
    RecommendationType,
    ReplicasRecommendation,
    ResourceRequestRecommendation,
)
from .exceptions import MalformedPayloadError

logger = logging.getLogger(__name__)

Document = Dict[str, Any]


def _decode_resource(document: Document) -> ProposedRecommendation:
    return ProposedRecommendation(
        resource_request=_optional(ResourceRequestRecommendation, document.get("resourceRequest")),
    )


def _decode_replicas(document: Document) -> ProposedRecommendation:
    return ProposedRecommendation(
        replicas_recommendation=_optional(ReplicasRecommendation, document.get("replicasRecommendation")),
        effective_hpa=_optional(EffectiveHorizontalPodAutoscalerRecommendation, document.get("effectiveHPA")),
    )


def _decode_any(document: Document) -> ProposedRecommendation:
    return ProposedRecommendation.model_validate(document)


def _optional(model, value):
    if value is None:
        return None
    return model.model_validate(value)


class PayloadDecoder:
    """
    Decodes recommendation payloads with a dispatch table keyed by type.
    Types without an entry (extension recommenders) are decoded generically.
    """

    DECODERS: Dict[str, Callable[[Document], ProposedRecommendation]] = {
        RecommendationType.RESOURCE.value: _decode_resource,
        RecommendationType.REPLICAS.value: _decode_replicas,
    }

    def decode(self, record: RecommendationRecord) -> ProposedRecommendation:
        """
        Returns an empty proposal when the payload has not been computed yet.

        Raises:
            MalformedPayloadError: if the payload is present but cannot be decoded.
        """
        payload = record.recommended_value
        if not payload or not payload.strip():
            return ProposedRecommendation()

        try:
            document = yaml.safe_load(payload)
        except yaml.YAMLError as e:
            raise MalformedPayloadError(
                f"recommendation {record.namespace}/{record.name} has an unparsable payload: {e}"
            ) from e

        if document is None:
            return ProposedRecommendation()
        if not isinstance(document, dict):
            raise MalformedPayloadError(
                f"recommendation {record.namespace}/{record.name} payload is a "
                f"{type(document).__name__}, expected a mapping"
            )

        decoder = self.DECODERS.get(record.type, _decode_any)
        try:
            return decoder(document)
        except ValidationError as e:
            raise MalformedPayloadError(
                f"recommendation {record.namespace}/{record.name} payload has an unexpected shape: {e}"
            ) from e
