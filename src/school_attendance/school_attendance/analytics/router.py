from __future__ import annotations

from typing import Callable, Iterable, Protocol

from ..core.enums import Intent


class QueryRouter(Protocol):
    """Classifies a free-text question into an Intent."""

    def classify(self, query: str) -> Intent:
        raise NotImplementedError


class KeywordQueryRouter:
    """Lower-cased substring matching; the first matching rule wins.

    Rule order matters: "attendance rate trend" is a RATE question.
    """

    rules: tuple[tuple[Intent, tuple[str, ...], Callable[[Iterable[bool]], bool]], ...] = (
        (Intent.RATE, ("rate", "percentage"), any),
        (Intent.ABSENCE, ("absent", "missing"), any),
        (Intent.TREND, ("trend", "pattern"), any),
        (Intent.STUDENT_PERFORMANCE, ("student", "performance"), all),
    )

    def classify(self, query: str) -> Intent:
        text = (query or "").lower()
        for intent, keywords, match in self.rules:
            if match(k in text for k in keywords):
                return intent
        return Intent.DEFAULT
