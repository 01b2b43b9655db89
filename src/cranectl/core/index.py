# src/cranectl/core/index.py

import logging
from typing import Dict, Iterable, Optional

from ..models.recommendation import RecommendationRecord
from .keys import CanonicalKey, target_key

logger = logging.getLogger(__name__)


class RecommendationIndex:
    """
    Maps canonical keys to recommendation records for O(1) matching.
    """

    def __init__(self, entries: Optional[Dict[CanonicalKey, RecommendationRecord]] = None):
        self._entries: Dict[CanonicalKey, RecommendationRecord] = entries or {}

    @staticmethod
    def key_for(record: RecommendationRecord) -> CanonicalKey:
        """
        Keys a record by its declared type and target reference. A target
        without a namespace lives in the recommendation's own namespace.
        """
        target = record.target_ref
        if not target.namespace and record.namespace:
            target = target.model_copy(update={"namespace": record.namespace})
        return target_key(record.type, target)

    @classmethod
    def build(cls, records: Iterable[RecommendationRecord]) -> "RecommendationIndex":
        entries: Dict[CanonicalKey, RecommendationRecord] = {}
        for record in records:
            key = cls.key_for(record)
            previous = entries.get(key)
            if previous is not None:
                logger.debug(
                    "Recommendation %s/%s replaces %s/%s for key %s",
                    record.namespace,
                    record.name,
                    previous.namespace,
                    previous.name,
                    key,
                )
            entries[key] = record
        logger.debug(f"Indexed {len(entries)} recommendations.")
        return cls(entries)

    def lookup(self, key: CanonicalKey) -> Optional[RecommendationRecord]:
        return self._entries.get(key)

    def __contains__(self, key) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
