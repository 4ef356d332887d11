"""Exception types raised by phonemodel.

Every error derives from :class:`PhonemeModelError` and from the builtin
exception that matches its meaning, so callers can catch either.
"""

from __future__ import annotations

from typing import Any


class PhonemeModelError(Exception):
    """Base class for all phonemodel errors."""


# --- Feature model ---


class InvalidFeatureValue(PhonemeModelError, ValueError):
    """A value outside a feature's declared domain."""

    def __init__(self, feature: str, value: Any, domain: tuple[str, ...] = ()) -> None:
        self.feature = feature
        self.value = value
        self.domain = tuple(domain)
        if domain:
            msg = (
                f"Invalid value {value!r} for feature {feature!r}. "
                f"Must be one of {self.domain}"
            )
        else:
            msg = f"Feature {feature!r} does not apply here (got {value!r})"
        super().__init__(msg)


class UnknownFeature(PhonemeModelError, LookupError):
    """A feature name that is not part of the feature model."""


class IncompleteBundle(PhonemeModelError, ValueError):
    """A feature bundle that leaves a relevant feature unset."""


# --- Modifier model ---


class UnknownModifier(PhonemeModelError, LookupError):
    """A modifier name or diacritic mark that the model does not define."""


class ModifierNotApplicable(PhonemeModelError, ValueError):
    """A modifier applied to a bundle it cannot legally modify."""

    def __init__(self, modifier: str, reason: str) -> None:
        self.modifier = modifier
        self.reason = reason
        super().__init__(f"Modifier {modifier!r} is not applicable: {reason}")


class ConflictingModifiers(PhonemeModelError, ValueError):
    """Two modifiers on one symbol that assert values for the same feature."""

    def __init__(self, first: str, second: str, feature: str) -> None:
        self.first = first
        self.second = second
        self.feature = feature
        super().__init__(
            f"Modifiers {first!r} and {second!r} conflict on feature {feature!r}"
        )


# --- Symbol registry ---


class UnknownBaseGlyph(PhonemeModelError, LookupError):
    """A symbol whose base glyph is absent from the registry."""


class NoCanonicalForm(PhonemeModelError, LookupError):
    """No legal symbol in the registry produces the requested bundle."""


class TableError(PhonemeModelError, ValueError):
    """The authoritative IPA table failed load-time validation."""


# --- Accent layer ---


class AccentDefinitionError(PhonemeModelError, ValueError):
    """An accent whose equivalence rules are malformed or not idempotent."""


class UnknownAccent(PhonemeModelError, LookupError):
    """An accent name that has not been registered."""


class UnknownPhoneme(PhonemeModelError, LookupError):
    """A label, bundle, or phoneme that an accent's inventory does not hold."""


class UnrealizableInAccent(PhonemeModelError, ValueError):
    """An accent's realizability predicate rejects a bundle."""

    def __init__(self, accent: str, bundle: Any, reason: str = "") -> None:
        self.accent = accent
        self.bundle = bundle
        detail = f": {reason}" if reason else ""
        super().__init__(f"{bundle!r} is not realizable in accent {accent!r}{detail}")


class InventoryBuildFailed(PhonemeModelError, RuntimeError):
    """Inventory construction aborted on the first offending symbol."""

    def __init__(self, accent: str, symbol: Any, cause: Exception) -> None:
        self.accent = accent
        self.symbol = symbol
        self.cause = cause
        super().__init__(
            f"Building inventory for accent {accent!r} failed at {symbol!r}: {cause}"
        )


class InventoryBuildCancelled(PhonemeModelError, RuntimeError):
    """Inventory construction stopped because the caller cancelled it."""


class InventoryNotReady(PhonemeModelError, RuntimeError):
    """An accent's inventory was used before it was built."""
