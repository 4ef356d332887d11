"""Symbol: an IPA base glyph plus a set of modifiers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from phonemodel.modifiers.model import Modifier


@dataclass(frozen=True)
class Symbol:
    """An IPA symbol as a base glyph and an unordered set of modifier names.

    Two symbols are equal iff their base glyphs match and their modifier
    sets match; the order a caller listed modifiers in never matters, and
    listing a modifier twice is the same as listing it once.

    Attributes:
        base: Base glyph (e.g., 'p', 't͡ʃ').
        modifiers: Names of the applied modifiers.
    """

    base: str
    modifiers: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        mods = self.modifiers
        if isinstance(mods, str):
            mods = (mods,)
        object.__setattr__(self, "modifiers", _names(mods))

    @classmethod
    def of(cls, base: str, *modifiers: Modifier | str) -> Symbol:
        """Convenience constructor: ``Symbol.of("p", "aspiration")``."""
        return cls(base, _names(modifiers))

    @property
    def is_bare(self) -> bool:
        """Whether the symbol carries no modifiers."""
        return not self.modifiers

    def bare(self) -> Symbol:
        """The same base glyph with no modifiers."""
        return Symbol(self.base)

    def with_modifiers(self, *modifiers: Modifier | str) -> Symbol:
        """A new symbol with extra modifiers added."""
        return Symbol(self.base, self.modifiers | _names(modifiers))

    def __repr__(self) -> str:
        if not self.modifiers:
            return f"Symbol({self.base!r})"
        mods = ", ".join(sorted(self.modifiers))
        return f"Symbol({self.base!r}, {{{mods}}})"


def _names(modifiers: Iterable[Modifier | str]) -> frozenset[str]:
    return frozenset(m if isinstance(m, str) else m.name for m in modifiers)
