# src/cranectl/reporters/base_reporter.py
"""
Defines the abstract base class for all reporters.
"""
from abc import ABC, abstractmethod
from typing import List

from ..models.diff import ContainerDiff
from ..models.recommendation import RecommendationRecord
from ..models.rule import RecommendationRule


class BaseReporter(ABC):
    """
    Abstract Base Class for all reporters.
    """

    @abstractmethod
    def report_recommendations(self, records: List[RecommendationRecord]):
        pass

    @abstractmethod
    def report_recommendation_rules(self, rules: List[RecommendationRule]):
        pass

    @abstractmethod
    def report_workloads(self, rows: List[ContainerDiff], all_namespaces: bool = False):
        pass

    @abstractmethod
    def report_pods(self, rows: List[ContainerDiff], all_namespaces: bool = False):
        pass
