# src/cranectl/core/adoption.py
"""
Single-record actions on a recommendation: adopting it (patching the target
workload with the recommended patch) and triggering it (asking the
recommender to run again ahead of schedule).

Unlike the list paths these fail fast with a typed error.
"""

import asyncio
import logging
from typing import Any, List, Union

import yaml

from ..gateways.base_gateway import RecommendationGateway
from ..models.adoption import AdoptionResult, AdoptionState, Outcome, TriggerResult
from ..models.api import APIResourceDescriptor, PatchStrategy
from ..models.recommendation import ADOPTABLE_TYPES, RecommendationRecord
from .exceptions import (
    CraneCtlError,
    MalformedPayloadError,
    NotFoundError,
    PatchFailedError,
    UnsupportedTypeError,
)

logger = logging.getLogger(__name__)

RUN_NUMBER_ANNOTATION = "analysis.crane.io/run-number"
# Lower than any run number the recommender assigns, so the next pass re-runs it
TRIGGER_SENTINEL = "0"

# API groups served by the core API server, which understand strategic merge patches
BUILTIN_GROUPS = frozenset(
    {
        "",
        "apps",
        "batch",
        "autoscaling",
        "policy",
        "extensions",
        "networking.k8s.io",
    }
)


def select_patch_strategy(descriptor: APIResourceDescriptor, body: Union[dict, list]) -> PatchStrategy:
    if isinstance(body, list):
        return PatchStrategy.JSON
    if descriptor.group in BUILTIN_GROUPS:
        return PatchStrategy.STRATEGIC_MERGE
    return PatchStrategy.MERGE


def parse_patch(record: RecommendationRecord) -> Union[dict, List[Any]]:
    """
    Raises:
        MalformedPayloadError: if the record carries no usable patch.
    """
    if not record.recommended_patch or not record.recommended_patch.strip():
        raise MalformedPayloadError(f"recommendation {record.namespace}/{record.name} has no recommended patch yet")
    try:
        body = yaml.safe_load(record.recommended_patch)
    except yaml.YAMLError as e:
        raise MalformedPayloadError(
            f"recommendation {record.namespace}/{record.name} has an unparsable patch: {e}"
        ) from e
    if not isinstance(body, (dict, list)):
        raise MalformedPayloadError(f"recommendation {record.namespace}/{record.name} patch is not an object or a list")
    return body


class AdoptionController:
    """
    Drives Fetched -> TargetResolved -> Patched -> Reported (or Failed).
    """

    def __init__(self, gateway: RecommendationGateway):
        self.gateway = gateway

    @staticmethod
    def _transition(record: RecommendationRecord, state: AdoptionState) -> AdoptionState:
        logger.debug(f"Recommendation {record.namespace}/{record.name} -> {state.value}")
        return state

    async def _fetch(self, name: str, namespace: str) -> RecommendationRecord:
        try:
            return await self.gateway.get_recommendation(namespace, name)
        except NotFoundError:
            raise NotFoundError(
                f"the recommendation {namespace}/{name} doesn't exist, please specify an existing recommendation name"
            )

    async def adopt(self, name: str, namespace: str, dry_run: bool = False) -> AdoptionResult:
        """
        Applies the recommendation's patch to its target.

        Raises:
            NotFoundError, UnsupportedTypeError, MalformedPayloadError,
            UnresolvableTargetError, PatchFailedError
        """
        record = await self._fetch(name, namespace)
        self._transition(record, AdoptionState.FETCHED)

        try:
            if record.type not in ADOPTABLE_TYPES:
                raise UnsupportedTypeError(
                    f"recommendation {record.namespace}/{record.name} has type '{record.type}', "
                    f"only {', '.join(sorted(ADOPTABLE_TYPES))} can be adopted"
                )
            body = parse_patch(record)

            target = record.target_ref
            target_namespace = target.namespace or record.namespace
            descriptor = await self.gateway.resolve_api_resource(target.api_version, target.kind)
            strategy = select_patch_strategy(descriptor, body)
            self._transition(record, AdoptionState.TARGET_RESOLVED)

            outcome = Outcome.DRY_RUN if dry_run else Outcome.APPLIED
            patched = None
            try:
                patched = await self.gateway.patch_target(
                    descriptor, target_namespace, target.name, body, strategy, dry_run=dry_run
                )
            except asyncio.TimeoutError:
                logger.warning(
                    f"Timed out waiting for the patch of {target.kind} {target_namespace}/{target.name}; "
                    "the outcome is unknown."
                )
                outcome = Outcome.UNKNOWN
            except CraneCtlError:
                raise
            except Exception as e:
                raise PatchFailedError(f"adopt the recommendation {record.name} failed because {e}", cause=e) from e
            self._transition(record, AdoptionState.PATCHED)
        except Exception:
            self._transition(record, AdoptionState.FAILED)
            raise

        if outcome == Outcome.APPLIED:
            logger.info(f"Adopted recommendation {record.name} on {target.kind} {target_namespace}/{target.name}.")
        return AdoptionResult(
            name=record.name,
            namespace=record.namespace,
            target=target.model_copy(update={"namespace": target_namespace}),
            strategy=strategy,
            dry_run=dry_run,
            state=self._transition(record, AdoptionState.REPORTED),
            outcome=outcome,
            object=patched,
        )

    async def trigger(self, name: str, namespace: str, dry_run: bool = False) -> TriggerResult:
        """
        Resets the run-number annotation so the recommender re-evaluates the record.
        Under dry run the stored record is left untouched.

        Raises:
            NotFoundError, PatchFailedError
        """
        record = await self._fetch(name, namespace)

        updated = record.model_copy(deep=True)
        updated.annotations[RUN_NUMBER_ANNOTATION] = TRIGGER_SENTINEL

        outcome = Outcome.DRY_RUN if dry_run else Outcome.APPLIED
        result_record = updated
        try:
            result_record = await self.gateway.update_recommendation(updated, dry_run=dry_run)
        except asyncio.TimeoutError:
            logger.warning(f"Timed out waiting for the update of {namespace}/{name}; the outcome is unknown.")
            outcome = Outcome.UNKNOWN
        except CraneCtlError:
            raise
        except Exception as e:
            raise PatchFailedError(f"failed to trigger the recommendation {name}, {e}", cause=e) from e

        if outcome == Outcome.APPLIED:
            logger.info(f"success to trigger the recommendation {name}")
        return TriggerResult(
            name=record.name,
            namespace=record.namespace,
            dry_run=dry_run,
            outcome=outcome,
            record=result_record,
        )
