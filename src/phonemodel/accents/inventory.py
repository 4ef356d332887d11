"""Phoneme and PhonemeInventory: the per-accent output of reduction.

Both are read-only. They are built by :class:`AccentMapper` when it
constructs an accent's inventory; client code looks them up but never
constructs them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Iterator

from phonemodel.errors import UnknownPhoneme
from phonemodel.features.model import FeatureBundle
from phonemodel.symbols.symbol import Symbol


@dataclass(frozen=True, eq=False)
class Phoneme:
    """An accent-specific equivalence class of feature bundles.

    Identity is the accent name plus the reduced bundle shared by every
    member of the class.

    Attributes:
        accent: Name of the owning accent.
        bundle: The reduced bundle identifying the class.
        label: IPA rendering of the first symbol that realizes it.
        index: Position in the inventory's insertion order.
        symbols: Symbols realizing the phoneme (its allophones), in
            registry enumeration order.
    """

    accent: str
    bundle: FeatureBundle
    label: str
    index: int
    symbols: tuple[Symbol, ...]

    @property
    def category(self) -> str:
        return self.bundle.category

    @property
    def is_vowel(self) -> bool:
        return self.bundle.category == "vowel"

    @property
    def is_consonant(self) -> bool:
        return self.bundle.category == "consonant"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Phoneme):
            return NotImplemented
        return self.accent == other.accent and self.bundle == other.bundle

    def __hash__(self) -> int:
        return hash((self.accent, self.bundle))

    def __repr__(self) -> str:
        return (
            f"Phoneme(/{self.label}/, accent={self.accent!r}, "
            f"symbols={len(self.symbols)})"
        )


class PhonemeInventory:
    """The deduplicated phoneme set of one accent.

    Enumeration order is insertion order from construction, which is
    deterministic for a given accent definition and registry.

    Args:
        accent: Name of the owning accent.
        phonemes: Phonemes in insertion order.
    """

    def __init__(self, accent: str, phonemes: Iterable[Phoneme]) -> None:
        self._accent = accent
        self._phonemes: tuple[Phoneme, ...] = tuple(phonemes)
        self._by_bundle: dict[FeatureBundle, Phoneme] = {
            p.bundle: p for p in self._phonemes
        }
        self._by_label: dict[str, Phoneme] = {p.label: p for p in self._phonemes}

    # --- Properties ---

    @property
    def accent(self) -> str:
        """Name of the owning accent."""
        return self._accent

    @property
    def phonemes(self) -> tuple[Phoneme, ...]:
        """All phonemes in insertion order."""
        return self._phonemes

    @property
    def labels(self) -> list[str]:
        """IPA labels in insertion order."""
        return [p.label for p in self._phonemes]

    @property
    def consonants(self) -> list[Phoneme]:
        return [p for p in self._phonemes if p.is_consonant]

    @property
    def vowels(self) -> list[Phoneme]:
        return [p for p in self._phonemes if p.is_vowel]

    @property
    def size(self) -> int:
        """Number of phonemes."""
        return len(self._phonemes)

    def __len__(self) -> int:
        return len(self._phonemes)

    def __iter__(self) -> Iterator[Phoneme]:
        return iter(self._phonemes)

    def __contains__(self, item: object) -> bool:
        if isinstance(item, Phoneme):
            return self._by_bundle.get(item.bundle) == item
        if isinstance(item, FeatureBundle):
            return item in self._by_bundle
        return False

    # --- Lookup ---

    def get(self, bundle: FeatureBundle) -> Phoneme | None:
        """Phoneme identified by a reduced bundle, or None."""
        return self._by_bundle.get(bundle)

    def phoneme_for(self, bundle: FeatureBundle) -> Phoneme:
        """Phoneme identified by a reduced bundle.

        Raises:
            UnknownPhoneme: If no phoneme has that bundle.
        """
        try:
            return self._by_bundle[bundle]
        except KeyError:
            raise UnknownPhoneme(
                f"No phoneme in accent {self._accent!r} has features {bundle!r}"
            ) from None

    def by_label(self, label: str) -> Phoneme:
        """Phoneme by its IPA label (e.g., 'p', 'ɜ˞').

        Raises:
            UnknownPhoneme: If no phoneme has that label.
        """
        try:
            return self._by_label[label]
        except KeyError:
            raise UnknownPhoneme(
                f"No phoneme labelled {label!r} in accent {self._accent!r}"
            ) from None

    def symbols_for(self, phoneme: Phoneme) -> tuple[Symbol, ...]:
        """Symbols realizing a phoneme in this accent.

        Raises:
            UnknownPhoneme: If the phoneme belongs to another inventory.
        """
        if phoneme not in self:
            raise UnknownPhoneme(
                f"{phoneme!r} is not part of accent {self._accent!r}"
            )
        return self._by_bundle[phoneme.bundle].symbols

    def phonemes_with_features(self, constraints: dict[str, str]) -> list[Phoneme]:
        """Phonemes whose reduced bundles match every constraint.

        Features a phoneme's category lacks never match.

        Args:
            constraints: Dict of {feature_name: required_value}.
        """
        if not constraints:
            return list(self._phonemes)
        return [
            p for p in self._phonemes
            if all(p.bundle.get(f) == v for f, v in constraints.items())
        ]

    # --- Serialization ---

    def to_dict(self) -> dict[str, Any]:
        """Export as a plain Python dict, suitable for JSON serialization.

        Symbols are given as ``[base, [modifier, ...]]`` pairs.
        """
        return {
            "accent": self._accent,
            "phonemes": [
                {
                    "label": p.label,
                    "index": p.index,
                    "category": p.category,
                    "features": p.bundle.specified(),
                    "symbols": [
                        [s.base, sorted(s.modifiers)] for s in p.symbols
                    ],
                }
                for p in self._phonemes
            ],
        }

    def __repr__(self) -> str:
        return (
            f"PhonemeInventory(accent={self._accent!r}, "
            f"phonemes={len(self._phonemes)}, "
            f"consonants={len(self.consonants)}, "
            f"vowels={len(self.vowels)})"
        )
