# src/cranectl/core/keys.py
"""
Canonical lookup keys for matching recommendations to workloads.

The same key must come out whether it is built from a recommendation's
target reference (when the index is populated) or from a pod's owner
reference (when it is queried). Keys are tuples, so a dash inside a name
can never make two different identities collide.
"""

from typing import NamedTuple

from ..models.recommendation import OwnerRef, WorkloadRef


class CanonicalKey(NamedTuple):
    rec_type: str
    kind: str
    api_version: str
    namespace: str
    name: str

    def __str__(self) -> str:
        return "-".join(self)


def object_key(rec_type: str, kind: str, api_version: str, namespace: str, name: str) -> CanonicalKey:
    return CanonicalKey(str(rec_type), kind or "", api_version or "", namespace or "", name or "")


def owner_key(rec_type: str, owner_ref: OwnerRef, namespace: str) -> CanonicalKey:
    return object_key(rec_type, owner_ref.kind, owner_ref.api_version, namespace, owner_ref.name)


def target_key(rec_type: str, target_ref: WorkloadRef) -> CanonicalKey:
    return object_key(rec_type, target_ref.kind, target_ref.api_version, target_ref.namespace, target_ref.name)
