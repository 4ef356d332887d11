"""Diacritic modifiers and their composition.

A :class:`Modifier` is a small, pure transformation record: it asserts
values for a handful of features. Modifiers are never subclasses of a
symbol type; a multiply-modified symbol is just a base bundle with
several records applied in canonical order.
"""

from __future__ import annotations

from dataclasses import dataclass
from itertools import combinations
from typing import Iterable, Iterator, Mapping

from phonemodel.errors import (
    ConflictingModifiers,
    InvalidFeatureValue,
    ModifierNotApplicable,
    TableError,
    UnknownFeature,
    UnknownModifier,
)
from phonemodel.features.model import CATEGORIES, FeatureBundle, FeatureModel


@dataclass(frozen=True)
class Modifier:
    """A diacritic kind and the feature values it asserts.

    Attributes:
        name: Modifier identifier (e.g., 'aspiration', 'long').
        mark: Diacritic character(s) appended when rendering a symbol.
        priority: Canonical sort key; lower values are applied and
            rendered first.
        categories: Segment categories the modifier may be applied to.
        effects: ``(feature, value)`` pairs the modifier asserts.
        requires: ``(feature, allowed values)`` pairs the *unmodified*
            bundle must satisfy for the modifier to be legal on it.
    """

    name: str
    mark: str
    priority: int
    categories: frozenset[str]
    effects: tuple[tuple[str, str], ...]
    requires: tuple[tuple[str, frozenset[str]], ...] = ()

    @classmethod
    def define(
        cls,
        name: str,
        mark: str,
        priority: int,
        categories: Iterable[str],
        effects: Mapping[str, str],
        requires: Mapping[str, Iterable[str]] | None = None,
    ) -> Modifier:
        """Build a Modifier from plain mappings."""
        return cls(
            name=name,
            mark=mark,
            priority=priority,
            categories=frozenset(categories),
            effects=tuple(effects.items()),
            requires=tuple(
                (feat, frozenset(vals)) for feat, vals in (requires or {}).items()
            ),
        )

    @property
    def touches(self) -> frozenset[str]:
        """Names of the features this modifier writes."""
        return frozenset(name for name, _ in self.effects)

    def apply(self, bundle: FeatureBundle) -> FeatureBundle:
        """Apply this modifier's effects to a bundle.

        Total over bundles of a supported category, and idempotent:
        applying twice gives the same bundle as applying once.

        Raises:
            ModifierNotApplicable: If the bundle's category is unsupported.
        """
        if bundle.category not in self.categories:
            raise ModifierNotApplicable(
                self.name,
                f"applies to {sorted(self.categories)}, not {bundle.category!r}",
            )
        return bundle.replace(dict(self.effects))

    def check_applicable(self, bundle: FeatureBundle) -> None:
        """Check that this modifier is legal on an unmodified bundle.

        Legal means the category matches, every ``requires`` constraint
        that the category carries is satisfied, and the modifier changes
        at least one feature.

        Raises:
            ModifierNotApplicable: If any of those conditions fails.
        """
        if bundle.category not in self.categories:
            raise ModifierNotApplicable(
                self.name,
                f"applies to {sorted(self.categories)}, not {bundle.category!r}",
            )
        for feat, allowed in self.requires:
            value = bundle.get(feat)
            if value is not None and value not in allowed:
                raise ModifierNotApplicable(
                    self.name,
                    f"requires {feat} in {sorted(allowed)}, got {value!r}",
                )
        if all(bundle.get(feat) == value for feat, value in self.effects):
            raise ModifierNotApplicable(self.name, f"has no effect on {bundle!r}")

    def __repr__(self) -> str:
        return f"Modifier({self.name!r}, mark={self.mark!r}, priority={self.priority})"


class ModifierModel:
    """The closed set of modifier kinds and their composition rules.

    Args:
        modifiers: Modifier definitions.
        feature_model: If given, every effect and requirement is checked
            against it.

    Raises:
        TableError: If names, marks, or priorities repeat, if two
            modifiers assert the same value for the same feature, or if
            an effect is not declared for every category the modifier
            claims.
    """

    def __init__(
        self,
        modifiers: Iterable[Modifier],
        feature_model: FeatureModel | None = None,
    ) -> None:
        mods = sorted(modifiers, key=lambda m: m.priority)
        self._by_name: dict[str, Modifier] = {}
        self._by_mark: dict[str, Modifier] = {}
        priorities: set[int] = set()

        for mod in mods:
            if mod.name in self._by_name:
                raise TableError(f"Duplicate modifier name: {mod.name!r}")
            if mod.mark in self._by_mark:
                raise TableError(
                    f"Modifiers {self._by_mark[mod.mark].name!r} and {mod.name!r} "
                    f"share the mark {mod.mark!r}"
                )
            if mod.priority in priorities:
                raise TableError(
                    f"Modifier {mod.name!r} reuses priority {mod.priority}"
                )
            if not mod.effects:
                raise TableError(f"Modifier {mod.name!r} declares no effects")
            if not mod.categories or not mod.categories <= set(CATEGORIES):
                raise TableError(
                    f"Modifier {mod.name!r} has invalid categories "
                    f"{sorted(mod.categories)}"
                )
            self._by_name[mod.name] = mod
            self._by_mark[mod.mark] = mod
            priorities.add(mod.priority)

        self._modifiers: tuple[Modifier, ...] = tuple(mods)

        for a, b in combinations(self._modifiers, 2):
            shared = set(a.effects) & set(b.effects)
            if shared:
                feat, value = sorted(shared)[0]
                raise TableError(
                    f"Modifiers {a.name!r} and {b.name!r} both assert "
                    f"{feat}={value!r}"
                )

        if feature_model is not None:
            self._check_against(feature_model)

    def _check_against(self, feature_model: FeatureModel) -> None:
        for mod in self._modifiers:
            try:
                for feat, value in mod.effects:
                    feature = feature_model[feat]
                    feature.validate(value)
                    uncovered = mod.categories - feature.categories
                    if uncovered:
                        raise TableError(
                            f"Modifier {mod.name!r} claims {sorted(uncovered)} but "
                            f"feature {feat!r} is not declared for them"
                        )
                for feat, allowed in mod.requires:
                    feature = feature_model[feat]
                    for value in allowed:
                        feature.validate(value)
            except (UnknownFeature, InvalidFeatureValue) as exc:
                raise TableError(f"Modifier {mod.name!r}: {exc}") from exc

    @property
    def modifiers(self) -> tuple[Modifier, ...]:
        """All modifiers, sorted by priority."""
        return self._modifiers

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(m.name for m in self._modifiers)

    def __iter__(self) -> Iterator[Modifier]:
        return iter(self._modifiers)

    def __len__(self) -> int:
        return len(self._modifiers)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def get(self, name: str) -> Modifier:
        """Look up a modifier by name.

        Raises:
            UnknownModifier: If no modifier has that name.
        """
        try:
            return self._by_name[name]
        except KeyError:
            raise UnknownModifier(
                f"Unknown modifier: {name!r}. "
                f"Must be one of: {', '.join(self.names)}"
            ) from None

    def by_mark(self, mark: str) -> Modifier:
        """Look up a modifier by its diacritic mark.

        Raises:
            UnknownModifier: If no modifier uses that mark.
        """
        try:
            return self._by_mark[mark]
        except KeyError:
            raise UnknownModifier(
                f"Unknown diacritic mark: {mark!r} (U+{ord(mark[0]):04X})"
            ) from None

    @property
    def marks(self) -> tuple[str, ...]:
        """All diacritic marks, longest first for prefix matching."""
        return tuple(sorted(self._by_mark, key=len, reverse=True))

    def canonical_order(
        self, modifiers: Iterable[Modifier | str]
    ) -> tuple[Modifier, ...]:
        """Deduplicate modifiers and sort them by priority.

        Accepts Modifier objects or names, in any order.

        Raises:
            UnknownModifier: If a name is not defined.
        """
        resolved = {}
        for mod in modifiers:
            m = self.get(mod) if isinstance(mod, str) else self.get(mod.name)
            resolved[m.name] = m
        return tuple(sorted(resolved.values(), key=lambda m: m.priority))

    def find_conflict(
        self, modifiers: Iterable[Modifier | str]
    ) -> tuple[Modifier, Modifier, str] | None:
        """Return the first conflicting pair in canonical order, if any.

        Two distinct modifiers conflict when they write the same feature.
        Because no two modifiers may assert the same value for a feature,
        a shared feature is always an incompatible assertion.

        Returns:
            ``(first, second, feature)`` or None.
        """
        ordered = self.canonical_order(modifiers)
        for a, b in combinations(ordered, 2):
            shared = a.touches & b.touches
            if shared:
                return a, b, sorted(shared)[0]
        return None

    def compose(
        self, bundle: FeatureBundle, modifiers: Iterable[Modifier | str]
    ) -> FeatureBundle:
        """Apply a set of modifiers to an unmodified bundle.

        Modifiers are canonicalized first, so the same set always yields
        the same bundle regardless of the order the caller gave.

        Raises:
            UnknownModifier: If a name is not defined.
            ModifierNotApplicable: If a modifier's category does not match,
                its requirements fail, or it would change nothing.
            ConflictingModifiers: If two modifiers write the same feature.
        """
        ordered = self.canonical_order(modifiers)
        for mod in ordered:
            mod.check_applicable(bundle)

        conflict = self.find_conflict(ordered)
        if conflict is not None:
            first, second, feat = conflict
            raise ConflictingModifiers(first.name, second.name, feat)

        result = bundle
        for mod in ordered:
            result = mod.apply(result)
        return result

    def __repr__(self) -> str:
        return f"ModifierModel(modifiers={len(self._modifiers)})"
