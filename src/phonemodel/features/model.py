"""Distinctive features and feature bundles.

Pure data containers with no I/O. A :class:`FeatureModel` is the closed,
ordered set of distinctive features the library knows about; a
:class:`FeatureBundle` is a fully specified assignment of values to the
features relevant to one segment category.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Mapping

from phonemodel.errors import IncompleteBundle, InvalidFeatureValue, UnknownFeature


NOT_APPLICABLE = "0"
"""Explicit value for a feature that does not apply to a segment."""

CATEGORIES: tuple[str, ...] = ("consonant", "vowel")
"""Segment categories, in canonical order."""

_KIND_VALUES: dict[str, tuple[str, ...]] = {
    "binary": ("+", "-"),
    "unary": ("+",),
    "ternary": ("+", "-", "±"),
}
_VALID_KINDS = ("binary", "unary", "ternary", "enum")


@dataclass(frozen=True)
class Feature:
    """A named distinctive dimension with a fixed value domain.

    Attributes:
        name: Feature identifier (e.g., 'voice', 'place').
        kind: One of 'binary', 'unary', 'ternary', 'enum'.
        values: Legal marked values. Derived from ``kind`` except for enums.
        categories: Segment categories the feature is relevant to.
        suprasegmental: Whether the feature describes length or pitch
            rather than articulation.
    """

    name: str
    kind: str
    values: tuple[str, ...]
    categories: frozenset[str]
    suprasegmental: bool = False

    @classmethod
    def define(
        cls,
        name: str,
        kind: str,
        categories: Iterable[str],
        values: Iterable[str] | None = None,
        suprasegmental: bool = False,
    ) -> Feature:
        """Build a Feature, deriving the value list from its kind.

        Raises:
            ValueError: If the kind, categories, or enum values are invalid.
        """
        if kind not in _VALID_KINDS:
            raise ValueError(
                f"Invalid feature kind: {kind!r}. Must be one of {_VALID_KINDS}"
            )
        cats = frozenset(categories)
        if not cats or not cats <= set(CATEGORIES):
            raise ValueError(
                f"Feature {name!r} has invalid categories {sorted(cats)}. "
                f"Must be a non-empty subset of {CATEGORIES}"
            )
        if kind == "enum":
            vals = tuple(values or ())
            if not vals:
                raise ValueError(f"Enumerated feature {name!r} declares no values")
            if len(set(vals)) != len(vals):
                raise ValueError(f"Enumerated feature {name!r} repeats a value")
        else:
            vals = _KIND_VALUES[kind]
        if NOT_APPLICABLE in vals:
            raise ValueError(
                f"Feature {name!r} may not list {NOT_APPLICABLE!r} as a value"
            )
        return cls(
            name=name,
            kind=kind,
            values=vals,
            categories=cats,
            suprasegmental=suprasegmental,
        )

    @property
    def domain(self) -> tuple[str, ...]:
        """All legal values, including the not-applicable marker."""
        return self.values + (NOT_APPLICABLE,)

    def applies_to(self, category: str) -> bool:
        """Whether this feature is relevant to a segment category."""
        return category in self.categories

    def validate(self, value: str) -> None:
        """Check a value against the domain.

        Raises:
            InvalidFeatureValue: If ``value`` is outside the domain.
        """
        if value not in self.domain:
            raise InvalidFeatureValue(self.name, value, self.domain)


@dataclass(frozen=True, eq=False)
class FeatureBundle:
    """An immutable, total mapping from features to values for one category.

    Bundles are normally built through :meth:`FeatureModel.bundle`, which
    guarantees every relevant feature is present. Pairs are stored in the
    feature model's canonical order, so equal bundles compare and hash
    identically regardless of how they were built.

    Attributes:
        category: 'consonant' or 'vowel'.
        pairs: Ordered ``(feature, value)`` pairs.
    """

    category: str
    pairs: tuple[tuple[str, str], ...]
    _lookup: dict[str, str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_lookup", dict(self.pairs))

    def __getitem__(self, name: str) -> str:
        try:
            return self._lookup[name]
        except KeyError:
            raise UnknownFeature(
                f"Feature {name!r} is not part of this {self.category} bundle"
            ) from None

    def __contains__(self, name: object) -> bool:
        return name in self._lookup

    def __iter__(self) -> Iterator[str]:
        return iter(self._lookup)

    def __len__(self) -> int:
        return len(self.pairs)

    def get(self, name: str, default: str | None = None) -> str | None:
        """Value of ``name``, or ``default`` if the category lacks it."""
        return self._lookup.get(name, default)

    def names(self) -> tuple[str, ...]:
        """Feature names in canonical order."""
        return tuple(name for name, _ in self.pairs)

    def items(self) -> tuple[tuple[str, str], ...]:
        """``(feature, value)`` pairs in canonical order."""
        return self.pairs

    def specified(self) -> dict[str, str]:
        """Only the features whose value is not ``NOT_APPLICABLE``."""
        return {k: v for k, v in self.pairs if v != NOT_APPLICABLE}

    def replace(self, changes: Mapping[str, str]) -> FeatureBundle:
        """Return a copy with some feature values changed.

        Raises:
            UnknownFeature: If a changed feature is not in this bundle.
        """
        for name in changes:
            if name not in self._lookup:
                raise UnknownFeature(
                    f"Feature {name!r} is not part of this {self.category} bundle"
                )
        return FeatureBundle(
            category=self.category,
            pairs=tuple((k, changes.get(k, v)) for k, v in self.pairs),
        )

    def to_dict(self) -> dict[str, Any]:
        """Export as a plain dict, suitable for JSON serialization."""
        return {"category": self.category, "features": dict(self.pairs)}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FeatureBundle):
            return NotImplemented
        return self.category == other.category and self.pairs == other.pairs

    def __hash__(self) -> int:
        return hash((self.category, self.pairs))

    def __repr__(self) -> str:
        body = ", ".join(f"{k}: {v}" for k, v in self.specified().items())
        return f"FeatureBundle({self.category}; {body})"


class FeatureModel:
    """The closed, ordered set of distinctive features.

    Immutable after construction. The declaration order of ``features``
    is the canonical order used inside every :class:`FeatureBundle`.

    Args:
        features: Feature definitions, in canonical order.

    Raises:
        ValueError: If two features share a name.
    """

    def __init__(self, features: Iterable[Feature]) -> None:
        self._features: tuple[Feature, ...] = tuple(features)
        self._by_name: dict[str, Feature] = {}
        for feat in self._features:
            if feat.name in self._by_name:
                raise ValueError(f"Duplicate feature name: {feat.name!r}")
            self._by_name[feat.name] = feat
        self._by_category: dict[str, tuple[Feature, ...]] = {
            cat: tuple(f for f in self._features if f.applies_to(cat))
            for cat in CATEGORIES
        }

    @property
    def features(self) -> tuple[Feature, ...]:
        """All features in canonical order."""
        return self._features

    @property
    def names(self) -> tuple[str, ...]:
        """All feature names in canonical order."""
        return tuple(f.name for f in self._features)

    def __getitem__(self, name: str) -> Feature:
        try:
            return self._by_name[name]
        except KeyError:
            raise UnknownFeature(
                f"Unknown feature: {name!r}. "
                f"Must be one of: {', '.join(self.names)}"
            ) from None

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __iter__(self) -> Iterator[Feature]:
        return iter(self._features)

    def __len__(self) -> int:
        return len(self._features)

    def features_for(self, category: str) -> tuple[Feature, ...]:
        """Features relevant to a segment category, in canonical order.

        Raises:
            ValueError: If the category is unknown.
        """
        if category not in self._by_category:
            raise ValueError(
                f"Invalid category: {category!r}. Must be one of {CATEGORIES}"
            )
        return self._by_category[category]

    def validate(self, name: str, value: str) -> None:
        """Confirm that ``value`` belongs to feature ``name``'s domain.

        Raises:
            UnknownFeature: If the feature is not in the model.
            InvalidFeatureValue: If the value is outside the domain.
        """
        self[name].validate(value)

    def bundle(self, category: str, values: Mapping[str, str]) -> FeatureBundle:
        """Build a validated, total FeatureBundle.

        Args:
            category: 'consonant' or 'vowel'.
            values: Value for every feature relevant to the category.
                Use ``NOT_APPLICABLE`` for relevant-but-unspecified
                features; omitting one is an error.

        Returns:
            A FeatureBundle in canonical feature order.

        Raises:
            UnknownFeature: If a feature name is not in the model.
            InvalidFeatureValue: If a value is outside its domain, or the
                feature does not apply to the category.
            IncompleteBundle: If a relevant feature is missing.
        """
        relevant = self.features_for(category)
        for name, value in values.items():
            feat = self[name]
            if not feat.applies_to(category):
                raise InvalidFeatureValue(name, value)
            feat.validate(value)

        missing = [f.name for f in relevant if f.name not in values]
        if missing:
            raise IncompleteBundle(
                f"{category.capitalize()} bundle is missing features: "
                f"{', '.join(missing)}"
            )
        return FeatureBundle(
            category=category,
            pairs=tuple((f.name, values[f.name]) for f in relevant),
        )

    def __repr__(self) -> str:
        return f"FeatureModel(features={len(self._features)})"
