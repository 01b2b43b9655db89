# src/cranectl/core/diff.py
"""
Compares observed requests and replica counts with recommended ones.

A recommended value of exactly zero is treated the same as no
recommendation at all. That policy lives in ``has_recommendation`` and
nowhere else.
"""

import logging
from typing import List, Optional, Union

from ..models.diff import ContainerDiff, QuantityDiff, ReplicaDiff
from ..models.recommendation import ProposedRecommendation, ResourceRequestRecommendation
from ..models.workload import ContainerRequest, Pod, Workload
from ..utils.quantity import Quantity, QuantityFormat

logger = logging.getLogger(__name__)

CPU = "cpu"
MEMORY = "memory"

# Formats used for zero values, matching how each resource is usually written
_DEFAULT_FORMATS = {CPU: QuantityFormat.DECIMAL_SI, MEMORY: QuantityFormat.BINARY_SI}


def has_recommendation(value: Union[Quantity, int, None]) -> bool:
    """True when ``value`` is an actual recommendation (present and non-zero)."""
    if value is None:
        return False
    if isinstance(value, Quantity):
        return not value.is_zero()
    return value != 0


def diff_quantity(observed: Optional[Quantity], recommended: Optional[Quantity]) -> Optional[Quantity]:
    """observed - recommended, or None when nothing is recommended."""
    if not has_recommendation(recommended):
        return None
    if observed is None:
        observed = Quantity.zero(recommended.format)
    return observed - recommended


def diff_replicas(observed: Optional[int], recommended: Optional[int]) -> Optional[int]:
    if not has_recommendation(recommended):
        return None
    return (observed or 0) - recommended


def format_quantity(quantity: Optional[Quantity]) -> str:
    if quantity is None or quantity.is_zero():
        return ""
    return str(quantity)


def format_replicas(replicas: Optional[int]) -> str:
    if not replicas:
        return ""
    return str(replicas)


def _observed(value: Optional[str], resource: str) -> Quantity:
    if not value:
        return Quantity.zero(_DEFAULT_FORMATS[resource])
    try:
        return Quantity.parse(value)
    except ValueError:
        logger.warning(f"Ignoring unparsable {resource} request '{value}'.")
        return Quantity.zero(_DEFAULT_FORMATS[resource])


def _recommended(value: Optional[str], resource: str) -> Optional[Quantity]:
    if value is None or value == "":
        return None
    try:
        return Quantity.parse(value)
    except ValueError:
        logger.warning(f"Ignoring unparsable recommended {resource} '{value}'.")
        return None


class ResourceTotals:
    """
    Running totals over a batch of rows. Sums are taken on quantities, so an
    absent value simply adds zero.
    """

    def __init__(self):
        self.cpu = Quantity.zero(QuantityFormat.DECIMAL_SI)
        self.memory = Quantity.zero(QuantityFormat.BINARY_SI)
        self.recommended_cpu = Quantity.zero(QuantityFormat.DECIMAL_SI)
        self.recommended_memory = Quantity.zero(QuantityFormat.BINARY_SI)
        self.cpu_diff = Quantity.zero(QuantityFormat.DECIMAL_SI)
        self.memory_diff = Quantity.zero(QuantityFormat.BINARY_SI)

    def add(self, row: ContainerDiff) -> None:
        self.cpu = self.cpu + row.cpu.observed
        self.memory = self.memory + row.memory.observed
        if row.cpu.recommended is not None:
            self.recommended_cpu = self.recommended_cpu + row.cpu.recommended
        if row.memory.recommended is not None:
            self.recommended_memory = self.recommended_memory + row.memory.recommended
        if row.cpu.delta is not None:
            self.cpu_diff = self.cpu_diff + row.cpu.delta
        if row.memory.delta is not None:
            self.memory_diff = self.memory_diff + row.memory.delta

    def add_all(self, rows: List[ContainerDiff]) -> "ResourceTotals":
        for row in rows:
            self.add(row)
        return self


class DiffEngine:
    """
    Builds per-container diff rows for workloads and pods.
    """

    def compare_container(
        self,
        container: ContainerRequest,
        resource_request: Optional[ResourceRequestRecommendation],
    ):
        observed_cpu = _observed(container.cpu, CPU)
        observed_memory = _observed(container.memory, MEMORY)

        recommended_cpu = recommended_memory = None
        if resource_request is not None:
            target = resource_request.for_container(container.name)
            if target is not None:
                recommended_cpu = _recommended(target.target.get(CPU), CPU)
                recommended_memory = _recommended(target.target.get(MEMORY), MEMORY)

        cpu = QuantityDiff(
            observed=observed_cpu,
            recommended=recommended_cpu,
            delta=diff_quantity(observed_cpu, recommended_cpu),
        )
        memory = QuantityDiff(
            observed=observed_memory,
            recommended=recommended_memory,
            delta=diff_quantity(observed_memory, recommended_memory),
        )
        return cpu, memory

    def compare_workload(self, workload: Workload, proposal: Optional[ProposedRecommendation]) -> List[ContainerDiff]:
        proposal = proposal or ProposedRecommendation()
        recommended_replicas = proposal.recommended_replicas
        replicas = ReplicaDiff(
            observed=workload.replicas,
            recommended=recommended_replicas,
            delta=diff_replicas(workload.replicas, recommended_replicas),
        )

        rows = []
        for container in workload.containers:
            cpu, memory = self.compare_container(container, proposal.resource_request)
            rows.append(
                ContainerDiff(
                    namespace=workload.namespace,
                    name=workload.name,
                    container=container.name,
                    kind=workload.kind,
                    cpu=cpu,
                    memory=memory,
                    replicas=replicas,
                )
            )
        return rows

    def compare_pod(self, pod: Pod, resource_request: Optional[ResourceRequestRecommendation]) -> List[ContainerDiff]:
        rows = []
        for container in pod.containers:
            cpu, memory = self.compare_container(container, resource_request)
            rows.append(
                ContainerDiff(namespace=pod.namespace, name=pod.name, container=container.name, cpu=cpu, memory=memory)
            )
        return rows
