"""Equivalence rules that collapse feature distinctions for an accent.

A rule rewrites one feature, optionally only when other features have
given values. Rules are plain frozen records; an :class:`Accent` applies
them in order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping

from phonemodel.features.model import NOT_APPLICABLE, FeatureBundle


Condition = tuple[tuple[str, frozenset[str]], ...]


def _condition(when: Mapping[str, Iterable[str]] | Condition | None) -> Condition:
    if not when:
        return ()
    if isinstance(when, Mapping):
        items = when.items()
    else:
        items = when
    return tuple(
        (feat, frozenset([vals]) if isinstance(vals, str) else frozenset(vals))
        for feat, vals in items
    )


@dataclass(frozen=True)
class EquivalenceRule:
    """Common behaviour for rules that rewrite a single feature.

    Attributes:
        feature: The feature the rule writes.
        when: ``(feature, allowed values)`` pairs; the rule only fires when
            every one of them is present in the bundle and matches.
    """

    feature: str
    when: Condition = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "when", _condition(self.when))

    @property
    def reads(self) -> frozenset[str]:
        """Features the rule's condition inspects."""
        return frozenset(feat for feat, _ in self.when)

    def matches(self, bundle: FeatureBundle) -> bool:
        """Whether the rule fires on ``bundle``."""
        if self.feature not in bundle:
            return False
        for feat, allowed in self.when:
            value = bundle.get(feat)
            if value is None or value not in allowed:
                return False
        return True

    def values(self) -> tuple[str, ...]:
        """Feature values the rule mentions, for validation."""
        return ()

    def apply(self, bundle: FeatureBundle) -> FeatureBundle:
        raise NotImplementedError


@dataclass(frozen=True)
class Neutralize(EquivalenceRule):
    """Ignore a feature: set it to not-applicable.

    Example: ``Neutralize("aspirated")`` makes aspirated and plain stops
    indistinguishable.
    """

    def apply(self, bundle: FeatureBundle) -> FeatureBundle:
        if not self.matches(bundle) or bundle[self.feature] == NOT_APPLICABLE:
            return bundle
        return bundle.replace({self.feature: NOT_APPLICABLE})

    def __repr__(self) -> str:
        cond = f", when={dict(self.when)!r}" if self.when else ""
        return f"Neutralize({self.feature!r}{cond})"


@dataclass(frozen=True, init=False)
class Merge(EquivalenceRule):
    """Reinterpret one value of a feature as another.

    Example: ``Merge("rounded", "+", "-", when={"height": ["open"]})``
    merges rounded and unrounded open vowels.
    """

    source: str = ""
    target: str = ""

    def __init__(
        self,
        feature: str,
        source: str,
        target: str,
        when: Mapping[str, Iterable[str]] | Condition | None = None,
    ) -> None:
        object.__setattr__(self, "feature", feature)
        object.__setattr__(self, "source", source)
        object.__setattr__(self, "target", target)
        object.__setattr__(self, "when", _condition(when))

    def values(self) -> tuple[str, ...]:
        return (self.source, self.target)

    def apply(self, bundle: FeatureBundle) -> FeatureBundle:
        if not self.matches(bundle) or bundle[self.feature] != self.source:
            return bundle
        return bundle.replace({self.feature: self.target})

    def __repr__(self) -> str:
        cond = f", when={dict(self.when)!r}" if self.when else ""
        return f"Merge({self.feature!r}, {self.source!r} -> {self.target!r}{cond})"
