"""
Factory functions to instantiate core components like the RecommendationProcessor
and the cluster gateway.
"""

import logging

from ..gateways.base_gateway import RecommendationGateway
from ..gateways.kubernetes_gateway import KubernetesGateway
from .processor import RecommendationProcessor

logger = logging.getLogger(__name__)


def get_gateway() -> RecommendationGateway:
    """
    Returns the gateway used to reach the cluster. The client behind it is
    bound to the running event loop, so each command gets its own.
    """
    return KubernetesGateway()


def get_processor(gateway: RecommendationGateway = None) -> RecommendationProcessor:
    logger.debug("Initializing recommendation processor...")
    return RecommendationProcessor(gateway or get_gateway())
