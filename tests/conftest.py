# tests/conftest.py

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from cranectl.gateways.base_gateway import RecommendationGateway
from cranectl.models.recommendation import RecommendationRecord


@pytest.fixture(autouse=True)
def mock_settings_env_vars(monkeypatch):
    """
    Pytest fixture to mock environment variables for the config module.

    This fixture runs automatically for every test (`autouse=True`) so the
    configuration never points at a real cluster or kubeconfig.
    """
    monkeypatch.setenv("LOG_LEVEL", "INFO")
    monkeypatch.setenv("CRANE_NAMESPACE", "default")
    monkeypatch.delenv("KUBECONFIG", raising=False)
    monkeypatch.delenv("KUBE_CONTEXT", raising=False)


def make_record(
    name="web-resource",
    namespace="default",
    rec_type="Resource",
    kind="Deployment",
    api_version="apps/v1",
    target_namespace="default",
    target_name="web",
    recommended_value="",
    recommended_info="",
    current_info="",
    annotations=None,
    labels=None,
) -> RecommendationRecord:
    """Builds a record the way the gateway does, from a custom object dict."""
    return RecommendationRecord.from_k8s(
        {
            "apiVersion": "analysis.crane.io/v1alpha1",
            "kind": "Recommendation",
            "metadata": {
                "name": name,
                "namespace": namespace,
                "annotations": annotations or {},
                "labels": labels or {},
                "creationTimestamp": "2024-05-01T10:00:00Z",
            },
            "spec": {
                "type": rec_type,
                "targetRef": {
                    "kind": kind,
                    "apiVersion": api_version,
                    "namespace": target_namespace,
                    "name": target_name,
                },
            },
            "status": {
                "recommendedValue": recommended_value,
                "recommendedInfo": recommended_info,
                "currentInfo": current_info,
                "lastUpdateTime": "2024-05-02T10:00:00Z",
            },
        }
    )


def resource_payload(containers):
    """containers: list of (name, cpu, memory)"""
    return json.dumps(
        {
            "resourceRequest": {
                "containers": [
                    {"containerName": name, "target": {"cpu": cpu, "memory": memory}}
                    for name, cpu, memory in containers
                ]
            }
        }
    )


@pytest.fixture
def record_factory():
    return make_record


@pytest.fixture
def fake_gateway():
    """A gateway whose every call is an AsyncMock."""
    gateway = MagicMock(spec=RecommendationGateway)
    gateway.list_recommendations = AsyncMock(return_value=[])
    gateway.get_recommendation = AsyncMock()
    gateway.update_recommendation = AsyncMock()
    gateway.list_recommendation_rules = AsyncMock(return_value=[])
    gateway.create_recommendation_rule = AsyncMock()
    gateway.list_workloads = AsyncMock(return_value=[])
    gateway.list_pods = AsyncMock(return_value=[])
    gateway.resolve_api_resource = AsyncMock()
    gateway.patch_target = AsyncMock(return_value={})
    gateway.close = AsyncMock()
    return gateway


@pytest.fixture
def payload_factory():
    return resource_payload
