# tests/core/test_decoder.py

import pytest

from cranectl.core.decoder import PayloadDecoder
from cranectl.core.exceptions import MalformedPayloadError


@pytest.fixture
def decoder():
    return PayloadDecoder()


@pytest.mark.parametrize("payload", ["", "   ", "\n"])
def test_empty_payload_means_no_recommendation_yet(decoder, record_factory, payload):
    proposal = decoder.decode(record_factory(recommended_value=payload))

    assert proposal.is_empty
    assert proposal.resource_request is None
    assert proposal.replicas_recommendation is None
    assert proposal.effective_hpa is None


def test_decodes_resource_request(decoder, record_factory, payload_factory):
    record = record_factory(recommended_value=payload_factory([("app", "500m", "256Mi")]))
    proposal = decoder.decode(record)

    container = proposal.resource_request.containers[0]
    assert container.container_name == "app"
    assert container.target == {"cpu": "500m", "memory": "256Mi"}
    assert proposal.replicas_recommendation is None


def test_decodes_yaml_payload(decoder, record_factory):
    payload = """
resourceRequest:
  containers:
  - containerName: app
    target:
      cpu: 250m
      memory: 1024
"""
    proposal = decoder.decode(record_factory(recommended_value=payload))
    assert proposal.resource_request.containers[0].target == {"cpu": "250m", "memory": "1024"}


def test_decodes_replicas_and_effective_hpa(decoder, record_factory):
    payload = (
        '{"replicasRecommendation": {"replicas": 3},'
        ' "effectiveHPA": {"minReplicas": 2, "maxReplicas": 6,'
        ' "metrics": [{"type": "Resource"}], "prediction": {"predictionWindowSeconds": 3600}}}'
    )
    proposal = decoder.decode(record_factory(rec_type="Replicas", recommended_value=payload))

    assert proposal.recommended_replicas == 3
    assert proposal.effective_hpa.min_replicas == 2
    assert proposal.effective_hpa.max_replicas == 6
    assert proposal.effective_hpa.prediction == {"predictionWindowSeconds": 3600}
    assert proposal.resource_request is None


def test_only_fields_of_the_declared_type_are_populated(decoder, record_factory, payload_factory):
    payload = '{"replicasRecommendation": {"replicas": 3}, "resourceRequest": {"containers": []}}'

    resource = decoder.decode(record_factory(rec_type="Resource", recommended_value=payload))
    replicas = decoder.decode(record_factory(rec_type="Replicas", recommended_value=payload))

    assert resource.replicas_recommendation is None
    assert resource.resource_request is not None
    assert replicas.resource_request is None
    assert replicas.recommended_replicas == 3


def test_unknown_fields_are_ignored(decoder, record_factory):
    payload = '{"replicasRecommendation": {"replicas": 4, "confidence": 0.9}, "somethingNew": {"a": 1}}'
    proposal = decoder.decode(record_factory(rec_type="Replicas", recommended_value=payload))
    assert proposal.recommended_replicas == 4


def test_extension_type_decodes_generically(decoder, record_factory):
    payload = '{"replicasRecommendation": {"replicas": 1}}'
    proposal = decoder.decode(record_factory(rec_type="IdleNode", recommended_value=payload))
    assert proposal.recommended_replicas == 1


@pytest.mark.parametrize(
    "payload",
    [
        "{not: valid: yaml",
        "just a string",
        "- a\n- list",
        '{"replicasRecommendation": {"replicas": "many"}}',
    ],
)
def test_malformed_payload_raises(decoder, record_factory, payload):
    with pytest.raises(MalformedPayloadError):
        decoder.decode(record_factory(rec_type="Replicas", recommended_value=payload))
