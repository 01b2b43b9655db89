from .base_gateway import RecommendationGateway
from .kubernetes_gateway import KubernetesGateway

__all__ = [
    "KubernetesGateway",
    "RecommendationGateway",
]
