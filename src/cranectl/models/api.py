# src/cranectl/models/api.py
"""
REST mapping for a target kind and the patch strategies the API server accepts.
"""

from enum import Enum

from pydantic import BaseModel


class PatchStrategy(str, Enum):
    """Patch flavours, valued by their request content type."""

    JSON = "application/json-patch+json"
    MERGE = "application/merge-patch+json"
    STRATEGIC_MERGE = "application/strategic-merge-patch+json"


class APIResourceDescriptor(BaseModel):
    """Where a kind lives on the API server."""

    group: str
    version: str
    kind: str
    plural: str
    namespaced: bool = True

    @property
    def api_version(self) -> str:
        return f"{self.group}/{self.version}" if self.group else self.version

    def path(self, namespace: str, name: str) -> str:
        prefix = f"/apis/{self.group}/{self.version}" if self.group else f"/api/{self.version}"
        if self.namespaced:
            return f"{prefix}/namespaces/{namespace}/{self.plural}/{name}"
        return f"{prefix}/{self.plural}/{name}"


def split_api_version(api_version: str):
    """Splits "apps/v1" into ("apps", "v1") and "v1" into ("", "v1")."""
    if "/" in api_version:
        group, _, version = api_version.partition("/")
        return group, version
    return "", api_version
