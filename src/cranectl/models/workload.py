# src/cranectl/models/workload.py
"""
Minimal views of the workloads and pods that recommendations are compared
against. Only the identity, owner chain and container requests are kept.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from .recommendation import OwnerRef, WorkloadRef


class ContainerRequest(BaseModel):
    """Resource requests for one container, as written in the object spec."""

    name: str = Field(..., description="The name of the container.")
    cpu: Optional[str] = Field(None, description="CPU request as a quantity string.")
    memory: Optional[str] = Field(None, description="Memory request as a quantity string.")


class Workload(BaseModel):
    """A replicated workload such as a Deployment or StatefulSet."""

    kind: str
    api_version: str
    namespace: str
    name: str
    replicas: Optional[int] = None
    containers: List[ContainerRequest] = Field(default_factory=list)

    @property
    def ref(self) -> WorkloadRef:
        return WorkloadRef(kind=self.kind, api_version=self.api_version, namespace=self.namespace, name=self.name)


class Pod(BaseModel):
    namespace: str
    name: str
    owner_references: List[OwnerRef] = Field(default_factory=list)
    containers: List[ContainerRequest] = Field(default_factory=list)
