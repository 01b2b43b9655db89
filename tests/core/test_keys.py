# tests/core/test_keys.py

import pytest

from cranectl.core.keys import CanonicalKey, object_key, owner_key, target_key
from cranectl.models.recommendation import OwnerRef, WorkloadRef

IDENTITIES = [
    ("Resource", "Deployment", "apps/v1", "default", "web"),
    ("Replicas", "StatefulSet", "apps/v1", "kube-system", "db-0"),
    ("Resource", "Rollout", "argoproj.io/v1alpha1", "prod", "api"),
    ("IdleNode", "Node", "v1", "", "node-1"),
]


@pytest.mark.parametrize("rec_type, kind, api_version, namespace, name", IDENTITIES)
def test_all_entry_points_agree(rec_type, kind, api_version, namespace, name):
    """A target reference and the equivalent owner reference produce the same key."""
    from_object = object_key(rec_type, kind, api_version, namespace, name)
    from_target = target_key(
        rec_type, WorkloadRef(kind=kind, api_version=api_version, namespace=namespace, name=name)
    )
    from_owner = owner_key(rec_type, OwnerRef(kind=kind, api_version=api_version, name=name), namespace)

    assert from_object == from_target == from_owner
    assert hash(from_object) == hash(from_owner)


def test_string_form():
    key = object_key("Resource", "Deployment", "apps/v1", "default", "web")
    assert str(key) == "Resource-Deployment-apps/v1-default-web"


def test_dashes_in_fields_do_not_collide():
    first = object_key("Resource", "Deployment", "apps/v1", "a-b", "c")
    second = object_key("Resource", "Deployment", "apps/v1", "a", "b-c")
    assert str(first) == str(second)
    assert first != second


def test_type_is_part_of_the_key():
    resource = object_key("Resource", "Deployment", "apps/v1", "default", "web")
    replicas = object_key("Replicas", "Deployment", "apps/v1", "default", "web")
    assert resource != replicas


def test_missing_fields_are_empty_strings():
    assert object_key("Resource", None, None, None, None) == CanonicalKey("Resource", "", "", "", "")
