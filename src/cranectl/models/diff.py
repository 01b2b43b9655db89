# src/cranectl/models/diff.py
"""
Result models produced by the diff engine and consumed by reporters.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict

from ..utils.quantity import Quantity


class QuantityDiff(BaseModel):
    """
    (observed, recommended, delta) for one resource dimension. ``delta`` is
    ``None`` whenever there is no usable recommendation.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    observed: Quantity
    recommended: Optional[Quantity] = None
    delta: Optional[Quantity] = None


class ReplicaDiff(BaseModel):
    observed: Optional[int] = None
    recommended: Optional[int] = None
    delta: Optional[int] = None


class ContainerDiff(BaseModel):
    """One report row: a container of a workload or pod."""

    namespace: str
    name: str
    container: str
    kind: Optional[str] = None
    cpu: QuantityDiff
    memory: QuantityDiff
    replicas: Optional[ReplicaDiff] = None
