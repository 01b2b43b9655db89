# tests/core/test_adoption.py

import asyncio
import json
import logging

import pytest

from cranectl.core.adoption import (
    RUN_NUMBER_ANNOTATION,
    TRIGGER_SENTINEL,
    AdoptionController,
    select_patch_strategy,
)
from cranectl.core.exceptions import (
    MalformedPayloadError,
    NotFoundError,
    PatchFailedError,
    UnresolvableTargetError,
    UnsupportedTypeError,
)
from cranectl.models.adoption import AdoptionState, Outcome
from cranectl.models.api import APIResourceDescriptor, PatchStrategy

DEPLOYMENTS = APIResourceDescriptor(group="apps", version="v1", kind="Deployment", plural="deployments")

PATCH = json.dumps(
    {"spec": {"template": {"spec": {"containers": [{"name": "app", "resources": {"requests": {"cpu": "500m"}}}]}}}}
)


@pytest.fixture
def controller(fake_gateway):
    fake_gateway.resolve_api_resource.return_value = DEPLOYMENTS
    return AdoptionController(fake_gateway)


@pytest.mark.asyncio
async def test_adopt_patches_target(controller, fake_gateway, record_factory):
    fake_gateway.get_recommendation.return_value = record_factory(recommended_info=PATCH)
    fake_gateway.patch_target.return_value = {"metadata": {"name": "web"}}

    result = await controller.adopt("web-resource", "default")

    fake_gateway.resolve_api_resource.assert_awaited_once_with("apps/v1", "Deployment")
    fake_gateway.patch_target.assert_awaited_once_with(
        DEPLOYMENTS, "default", "web", json.loads(PATCH), PatchStrategy.STRATEGIC_MERGE, dry_run=False
    )
    assert result.state == AdoptionState.REPORTED
    assert result.outcome == Outcome.APPLIED
    assert result.target.name == "web"


@pytest.mark.asyncio
async def test_adopt_dry_run_returns_server_echo(controller, fake_gateway, record_factory):
    fake_gateway.get_recommendation.return_value = record_factory(rec_type="Replicas", recommended_info='{"spec": {"replicas": 3}}')
    fake_gateway.patch_target.return_value = {"spec": {"replicas": 3}}

    result = await controller.adopt("web-replicas", "default", dry_run=True)

    assert fake_gateway.patch_target.await_args.kwargs == {"dry_run": True}
    assert result.outcome == Outcome.DRY_RUN
    assert result.object == {"spec": {"replicas": 3}}


@pytest.mark.asyncio
async def test_adopt_unknown_record(controller, fake_gateway):
    fake_gateway.get_recommendation.side_effect = NotFoundError("missing")

    with pytest.raises(NotFoundError, match="doesn't exist"):
        await controller.adopt("nope", "default")
    fake_gateway.patch_target.assert_not_awaited()


@pytest.mark.asyncio
async def test_adopt_unsupported_type_never_patches(controller, fake_gateway, record_factory):
    fake_gateway.get_recommendation.return_value = record_factory(
        name="idle-node-rec", rec_type="IdleNode", kind="Node", api_version="v1", recommended_info=PATCH
    )

    with pytest.raises(UnsupportedTypeError):
        await controller.adopt("idle-node-rec", "default", dry_run=False)

    fake_gateway.patch_target.assert_not_awaited()
    fake_gateway.resolve_api_resource.assert_not_awaited()


@pytest.mark.asyncio
@pytest.mark.parametrize("patch", ["", "not a mapping", "{broken"])
async def test_adopt_requires_usable_patch(controller, fake_gateway, record_factory, patch):
    fake_gateway.get_recommendation.return_value = record_factory(recommended_info=patch)

    with pytest.raises(MalformedPayloadError):
        await controller.adopt("web-resource", "default")
    fake_gateway.patch_target.assert_not_awaited()


@pytest.mark.asyncio
async def test_adopt_unresolvable_target(controller, fake_gateway, record_factory):
    fake_gateway.get_recommendation.return_value = record_factory(recommended_info=PATCH)
    fake_gateway.resolve_api_resource.side_effect = UnresolvableTargetError("no such kind")

    with pytest.raises(UnresolvableTargetError):
        await controller.adopt("web-resource", "default")
    fake_gateway.patch_target.assert_not_awaited()


@pytest.mark.asyncio
async def test_adopt_wraps_transport_errors(controller, fake_gateway, record_factory):
    fake_gateway.get_recommendation.return_value = record_factory(recommended_info=PATCH)
    boom = RuntimeError("admission webhook denied the request")
    fake_gateway.patch_target.side_effect = boom

    with pytest.raises(PatchFailedError) as excinfo:
        await controller.adopt("web-resource", "default")

    assert excinfo.value.cause is boom
    assert "admission webhook" in str(excinfo.value)


@pytest.mark.asyncio
async def test_adopt_timeout_is_unknown_outcome(controller, fake_gateway, record_factory):
    fake_gateway.get_recommendation.return_value = record_factory(recommended_info=PATCH)
    fake_gateway.patch_target.side_effect = asyncio.TimeoutError()

    result = await controller.adopt("web-resource", "default")

    assert result.outcome == Outcome.UNKNOWN
    assert result.object is None


@pytest.mark.asyncio
async def test_adopt_uses_record_namespace_when_target_has_none(controller, fake_gateway, record_factory):
    fake_gateway.get_recommendation.return_value = record_factory(
        namespace="prod", target_namespace="", recommended_info=PATCH
    )

    result = await controller.adopt("web-resource", "prod")

    assert fake_gateway.patch_target.await_args.args[1] == "prod"
    assert result.target.namespace == "prod"


def test_select_patch_strategy():
    custom = APIResourceDescriptor(group="argoproj.io", version="v1alpha1", kind="Rollout", plural="rollouts")
    assert select_patch_strategy(DEPLOYMENTS, {}) == PatchStrategy.STRATEGIC_MERGE
    assert select_patch_strategy(custom, {}) == PatchStrategy.MERGE
    assert select_patch_strategy(custom, [{"op": "replace"}]) == PatchStrategy.JSON


@pytest.mark.asyncio
async def test_trigger_sets_sentinel_annotation(controller, fake_gateway, record_factory):
    record = record_factory(name="rec-1", annotations={RUN_NUMBER_ANNOTATION: "7"})
    fake_gateway.get_recommendation.return_value = record
    fake_gateway.update_recommendation.side_effect = lambda updated, dry_run=False: updated

    result = await controller.trigger("rec-1", "default")

    sent = fake_gateway.update_recommendation.await_args.args[0]
    assert sent.annotations[RUN_NUMBER_ANNOTATION] == TRIGGER_SENTINEL
    assert result.outcome == Outcome.APPLIED
    # the fetched record itself is not mutated
    assert record.annotations[RUN_NUMBER_ANNOTATION] == "7"


@pytest.mark.asyncio
async def test_trigger_dry_run_leaves_stored_record_unchanged(fake_gateway, record_factory):
    stored = {"rec-1": record_factory(name="rec-1", annotations={RUN_NUMBER_ANNOTATION: "5"})}

    async def get_recommendation(namespace, name):
        if name not in stored:
            raise NotFoundError(name)
        return stored[name].model_copy(deep=True)

    async def update_recommendation(record, dry_run=False):
        if not dry_run:
            stored[record.name] = record
        return record.model_copy(deep=True)

    fake_gateway.get_recommendation.side_effect = get_recommendation
    fake_gateway.update_recommendation.side_effect = update_recommendation
    controller = AdoptionController(fake_gateway)

    result = await controller.trigger("rec-1", "default", dry_run=True)

    assert result.outcome == Outcome.DRY_RUN
    assert result.record.annotations[RUN_NUMBER_ANNOTATION] == TRIGGER_SENTINEL
    refetched = await fake_gateway.get_recommendation("default", "rec-1")
    assert refetched.annotations[RUN_NUMBER_ANNOTATION] == "5"


@pytest.mark.asyncio
async def test_trigger_unknown_record(controller, fake_gateway):
    fake_gateway.get_recommendation.side_effect = NotFoundError("missing")

    with pytest.raises(NotFoundError):
        await controller.trigger("rec-1", "default")
    fake_gateway.update_recommendation.assert_not_awaited()


@pytest.mark.asyncio
async def test_trigger_update_failure(controller, fake_gateway, record_factory):
    fake_gateway.get_recommendation.return_value = record_factory(name="rec-1")
    fake_gateway.update_recommendation.side_effect = RuntimeError("conflict")

    with pytest.raises(PatchFailedError, match="failed to trigger the recommendation rec-1"):
        await controller.trigger("rec-1", "default")


@pytest.mark.asyncio
async def test_adopt_marks_failed_on_unexpected_errors(controller, fake_gateway, record_factory, caplog):
    caplog.set_level(logging.DEBUG, logger="cranectl.core.adoption")
    fake_gateway.get_recommendation.return_value = record_factory(recommended_info=PATCH)
    fake_gateway.resolve_api_resource.side_effect = RuntimeError("discovery exploded")

    with pytest.raises(RuntimeError):
        await controller.adopt("web-resource", "default")

    assert "default/web-resource -> Failed" in caplog.text
    fake_gateway.patch_target.assert_not_awaited()
