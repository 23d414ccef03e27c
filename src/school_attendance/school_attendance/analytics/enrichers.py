from __future__ import annotations

from abc import ABC, abstractmethod

from .model import Insight


class InsightEnricher(ABC):
    """Optional capability that decorates an Insight (e.g. with a language model).

    The pipeline never depends on an enricher succeeding.
    """

    @abstractmethod
    def enrich(self, insight: Insight, query: str) -> Insight:
        raise NotImplementedError


class NoopInsightEnricher(InsightEnricher):
    def enrich(self, insight: Insight, query: str) -> Insight:
        return insight
