# src/cranectl/models/adoption.py

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel

from .api import PatchStrategy
from .recommendation import RecommendationRecord, WorkloadRef


class AdoptionState(str, Enum):
    FETCHED = "Fetched"
    TARGET_RESOLVED = "TargetResolved"
    PATCHED = "Patched"
    REPORTED = "Reported"
    FAILED = "Failed"


class Outcome(str, Enum):
    APPLIED = "Applied"
    DRY_RUN = "DryRun"
    # The mutation was sent but its confirmation never arrived
    UNKNOWN = "Unknown"


class AdoptionResult(BaseModel):
    name: str
    namespace: str
    target: WorkloadRef
    strategy: PatchStrategy
    dry_run: bool = False
    state: AdoptionState = AdoptionState.REPORTED
    outcome: Outcome = Outcome.APPLIED
    object: Optional[Dict[str, Any]] = None


class TriggerResult(BaseModel):
    name: str
    namespace: str
    dry_run: bool = False
    outcome: Outcome = Outcome.APPLIED
    record: Optional[RecommendationRecord] = None
