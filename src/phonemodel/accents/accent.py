"""Accent: a named reduction policy over the universal feature space."""

from __future__ import annotations

from collections import defaultdict
from typing import TYPE_CHECKING, Callable, Iterable

from phonemodel.errors import AccentDefinitionError
from phonemodel.features.model import NOT_APPLICABLE, FeatureBundle, FeatureModel
from phonemodel.accents.rules import EquivalenceRule, Merge
from phonemodel.symbols.symbol import Symbol

if TYPE_CHECKING:
    from phonemodel.symbols.registry import SymbolRegistry


BundlePredicate = Callable[[FeatureBundle], bool]


class Accent:
    """A dialect's equivalence rules and realizability predicate.

    Reduction applies the rules in order. The rule set is checked on
    construction so that a single pass is already a fixed point:
    reducing an already-reduced bundle never changes it.

    Args:
        name: Accent identifier (e.g., 'genam').
        rules: Equivalence rules, applied in order.
        realizable: Predicate over *reduced* bundles; True when the
            accent can produce the sound. Defaults to accepting all.
        tolerates: Predicate over reduced bundles the accent cannot
            realize; True when the gap is expected and inventory
            construction should skip it. Defaults to tolerating nothing.
        description: Human-readable description.

    Raises:
        AccentDefinitionError: If the rules are not idempotent as a set.
    """

    def __init__(
        self,
        name: str,
        rules: Iterable[EquivalenceRule] = (),
        realizable: BundlePredicate | None = None,
        tolerates: BundlePredicate | None = None,
        description: str = "",
    ) -> None:
        if not name:
            raise AccentDefinitionError("An accent needs a non-empty name")
        self._name = name
        self._rules: tuple[EquivalenceRule, ...] = tuple(rules)
        self._realizable = realizable
        self._tolerates = tolerates
        self._description = description
        _check_idempotent(name, self._rules)

    @classmethod
    def from_symbols(
        cls,
        name: str,
        registry: SymbolRegistry,
        symbols: Iterable[Symbol | str],
        rules: Iterable[EquivalenceRule] = (),
        tolerate_gaps: bool = True,
        description: str = "",
    ) -> Accent:
        """Define an accent by listing the symbols of its phonemes.

        The accent can realize exactly the reduced bundles of the listed
        symbols (and anything reducing to the same bundles).

        Args:
            name: Accent identifier.
            registry: Registry used to resolve the symbols.
            symbols: Symbol objects or written IPA symbols ('p', 'ɜ˞').
            rules: Equivalence rules, applied in order.
            tolerate_gaps: Whether sounds outside the listed set are
                expected gaps (True) or construction errors (False).
            description: Human-readable description.
        """
        rules = tuple(rules)
        probe = cls(name, rules)
        targets = set()
        for sym in symbols:
            if isinstance(sym, str):
                sym = registry.parse(sym)
            targets.add(probe.reduce_bundle(registry.resolve(sym)))
        frozen = frozenset(targets)
        return cls(
            name,
            rules,
            realizable=frozen.__contains__,
            tolerates=(lambda bundle: True) if tolerate_gaps else None,
            description=description,
        )

    @property
    def name(self) -> str:
        return self._name

    @property
    def rules(self) -> tuple[EquivalenceRule, ...]:
        return self._rules

    @property
    def description(self) -> str:
        return self._description

    def reduce_bundle(self, bundle: FeatureBundle) -> FeatureBundle:
        """Apply every equivalence rule, in order, to a bundle."""
        for rule in self._rules:
            bundle = rule.apply(bundle)
        return bundle

    def is_realizable(self, reduced: FeatureBundle) -> bool:
        """Whether the accent can produce a reduced bundle."""
        if self._realizable is None:
            return True
        return bool(self._realizable(reduced))

    def tolerates(self, reduced: FeatureBundle) -> bool:
        """Whether an unrealizable reduced bundle is an accepted gap."""
        if self._tolerates is None:
            return False
        return bool(self._tolerates(reduced))

    def validate_against(self, features: FeatureModel) -> None:
        """Check every rule's features and values against a feature model.

        Raises:
            AccentDefinitionError: If a rule names an unknown feature or
                a value outside a feature's domain.
        """
        for rule in self._rules:
            checks = [(rule.feature, v) for v in rule.values()]
            checks += [(feat, v) for feat, vals in rule.when for v in vals]
            names = {rule.feature} | rule.reads
            for feat in names:
                if feat not in features:
                    raise AccentDefinitionError(
                        f"Accent {self._name!r}: rule {rule!r} names unknown "
                        f"feature {feat!r}"
                    )
            for feat, value in checks:
                if value not in features[feat].domain:
                    raise AccentDefinitionError(
                        f"Accent {self._name!r}: rule {rule!r} uses {value!r}, "
                        f"outside the domain of {feat!r}"
                    )

    def __repr__(self) -> str:
        return f"Accent({self._name!r}, rules={len(self._rules)})"


def _check_idempotent(name: str, rules: tuple[EquivalenceRule, ...]) -> None:
    """Reject rule sets where a second reduction pass could change a bundle."""
    writes = {rule.feature for rule in rules}
    for rule in rules:
        overlap = rule.reads & writes
        if overlap:
            raise AccentDefinitionError(
                f"Accent {name!r}: rule {rule!r} depends on "
                f"{sorted(overlap)}, which another rule rewrites"
            )

    sources: dict[str, set[str]] = defaultdict(set)
    for rule in rules:
        if isinstance(rule, Merge):
            if rule.source == rule.target:
                raise AccentDefinitionError(
                    f"Accent {name!r}: {rule!r} merges a value into itself"
                )
            if rule.source == NOT_APPLICABLE:
                raise AccentDefinitionError(
                    f"Accent {name!r}: {rule!r} cannot merge the not-applicable value"
                )
            sources[rule.feature].add(rule.source)
    for rule in rules:
        if isinstance(rule, Merge) and rule.target in sources[rule.feature]:
            raise AccentDefinitionError(
                f"Accent {name!r}: {rule!r} chains into another merge on "
                f"{rule.feature!r}"
            )
