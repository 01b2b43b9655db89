# src/cranectl/core/rules.py
"""
Building and filtering RecommendationRule objects.
"""

import json
import logging
from typing import Iterable, List, Optional

from pydantic import ValidationError

from ..models.rule import NamespaceSelector, RecommendationRule, ResourceSelector
from .query import SUPPORTED_RECOMMENDERS

logger = logging.getLogger(__name__)

ANY_NAMESPACE = "Any"


def parse_targets(target: str) -> List[ResourceSelector]:
    """
    Parses a JSON list of resource selectors, e.g.
    '[{"kind": "Deployment", "apiVersion": "apps/v1"}]'.

    Raises:
        ValueError: if the text is not a list of selectors.
    """
    try:
        items = json.loads(target or "")
    except ValueError as e:
        raise ValueError("please check the recommender target is valid") from e
    if not isinstance(items, list):
        raise ValueError("please check the recommender target is valid")
    try:
        return [ResourceSelector.model_validate(item) for item in items]
    except ValidationError as e:
        raise ValueError("please check the recommender target is valid") from e


def parse_recommenders(recommender: str) -> List[str]:
    """
    Splits a comma separated recommender list and checks every entry.

    Raises:
        ValueError: on an unknown recommender type.
    """
    recommenders = (recommender or "").split(",")
    for name in recommenders:
        if name not in SUPPORTED_RECOMMENDERS:
            raise ValueError(f"the recommender type not supported {name}")
    return recommenders


def namespace_selector(namespace: Optional[str]) -> NamespaceSelector:
    """No namespace or "Any" selects every namespace; otherwise a comma separated list."""
    if not namespace or namespace.lower() == ANY_NAMESPACE.lower():
        return NamespaceSelector(any=True)
    return NamespaceSelector(match_names=namespace.split(","))


def build_rule(
    name: str,
    target: str,
    run_interval: str,
    recommender: str = "Resource",
    namespace: Optional[str] = None,
) -> RecommendationRule:
    """
    Validates command line input and assembles a rule, checking the target,
    the recommenders, the run interval and the name in that order.

    Raises:
        ValueError: with a message meant for the user.
    """
    selectors = parse_targets(target)
    recommenders = parse_recommenders(recommender)
    if not run_interval:
        raise ValueError("please specify the runInterval with --run-interval")
    if not name:
        raise ValueError("please specify RecommendationRule name with --name")

    return RecommendationRule(
        name=name,
        recommenders=recommenders,
        resource_selectors=selectors,
        namespace_selector=namespace_selector(namespace),
        run_interval=run_interval,
    )


class RecommendationRuleQuery:
    """Client-side filters for listing rules."""

    def __init__(self, name: Optional[str] = None, recommender: Optional[str] = None):
        self.name = name
        self.recommender = recommender

    def matches(self, rule: RecommendationRule) -> bool:
        if self.name and self.name not in rule.name:
            return False
        if self.recommender:
            return any(r.lower() == self.recommender.lower() for r in rule.recommenders)
        return True

    def filter(self, rules: Iterable[RecommendationRule]) -> List[RecommendationRule]:
        selected = [rule for rule in rules if self.matches(rule)]
        logger.debug(f"{len(selected)} recommendation rules match name='{self.name}' recommender='{self.recommender}'.")
        return selected
