"""SymbolRegistry: accent-independent catalog of IPA symbols.

Maps every legal (base glyph, modifier set) pair to exactly one feature
bundle, and each such bundle back to its canonical symbol. The registry
never refers to accents; the accent layer holds a reference to it.
"""

from __future__ import annotations

import itertools
import logging
import unicodedata
from dataclasses import dataclass
from typing import Iterator, Mapping

from phonemodel.errors import (
    NoCanonicalForm,
    PhonemeModelError,
    TableError,
    UnknownBaseGlyph,
)
from phonemodel.features.model import FeatureBundle, FeatureModel
from phonemodel.modifiers.model import Modifier, ModifierModel
from phonemodel.symbols.symbol import Symbol
from phonemodel.symbols.table import IPATable, load_table


logger = logging.getLogger(__name__)

_TIE_BAR = "͡"

# Common keyboard stand-ins for IPA glyphs
_ALIASES = {"g": "ɡ"}

# Shared across registries so a generation number is never reused
_generations = itertools.count(1)


@dataclass(frozen=True)
class _RegistryState:
    """Everything derived from one table, swapped in as a single unit."""

    table: IPATable
    symbols: tuple[Symbol, ...]
    bundles: Mapping[Symbol, FeatureBundle]
    inverse: Mapping[FeatureBundle, Symbol]
    parse_index: Mapping[str, str]
    generation: int


class SymbolRegistry:
    """Read-only catalog of legal IPA symbols and their feature bundles.

    On construction the registry enumerates the entire legal symbol space
    once (every base glyph with every conflict-free set of applicable
    modifiers), verifies that no two symbols share a bundle, and keeps
    the results as its resolve cache and inverse index. Nothing is
    mutated afterwards, so concurrent reads need no locking.

    Args:
        table: The authoritative table. Defaults to the bundled one.

    Raises:
        TableError: If the table yields two symbols with the same bundle.
    """

    def __init__(self, table: IPATable | None = None) -> None:
        if table is None:
            table = load_table()
        self._state = _build_state(table)

    def reload(self, table: IPATable) -> None:
        """Replace the whole table.

        The new state is built completely before it replaces the old one,
        so readers see either the old table or the new one, never a mix.
        If the new table fails validation, the old one stays in place.
        Every successful reload advances :attr:`generation`, which lets
        holders of derived data (such as accent inventories) notice that
        their data was built from an older table.

        Raises:
            TableError: If the new table is invalid.
        """
        state = _build_state(table)
        self._state = state
        logger.info(
            "Registry reloaded with IPA table %s (generation %d)",
            table.version, state.generation,
        )

    # --- Properties ---

    @property
    def table(self) -> IPATable:
        return self._state.table

    @property
    def generation(self) -> int:
        """Identifies the current table state; changes on every reload."""
        return self._state.generation

    @property
    def features(self) -> FeatureModel:
        """The feature model behind the current table."""
        return self._state.table.features

    @property
    def modifiers(self) -> ModifierModel:
        """The modifier model behind the current table."""
        return self._state.table.modifiers

    @property
    def base_glyphs(self) -> tuple[str, ...]:
        """All base glyphs in table order."""
        return tuple(self._state.table.glyphs)

    def __len__(self) -> int:
        """Number of legal symbols, bare and modified."""
        return len(self._state.symbols)

    def __contains__(self, symbol: object) -> bool:
        """Whether ``symbol`` is a legal symbol in this registry."""
        return symbol in self._state.bundles

    # --- Enumeration ---

    def symbols(self) -> Iterator[Symbol]:
        """Iterate over every legal symbol in canonical order.

        Order: fewer modifiers first, then base glyph table order, then
        the modifiers' canonical priority order. Stable across runs.
        """
        return iter(self._state.symbols)

    def bare_symbols(self) -> Iterator[Symbol]:
        """Iterate over the unmodified symbol of each base glyph."""
        return (Symbol(glyph) for glyph in self._state.table.glyphs)

    # --- Resolution ---

    def bare_bundle(self, glyph: str) -> FeatureBundle:
        """The feature bundle of an unmodified base glyph.

        Raises:
            UnknownBaseGlyph: If the glyph is not in the table.
        """
        try:
            return self._state.table.glyphs[glyph]
        except KeyError:
            raise UnknownBaseGlyph(
                f"Unknown base glyph: {glyph!r}. "
                f"Use base_glyphs to list available glyphs."
            ) from None

    def resolve(self, symbol: Symbol) -> FeatureBundle:
        """Resolve a symbol to its feature bundle.

        A pure function of the base glyph and the modifier set.

        Raises:
            UnknownBaseGlyph: If the base glyph is not in the table.
            UnknownModifier: If a modifier name is not defined.
            ModifierNotApplicable: If a modifier is illegal on this base.
            ConflictingModifiers: If two modifiers write the same feature.
        """
        state = self._state
        cached = state.bundles.get(symbol)
        if cached is not None:
            return cached
        bare = self.bare_bundle(symbol.base)
        return state.table.modifiers.compose(bare, symbol.modifiers)

    def is_legal(self, symbol: Symbol) -> bool:
        """Whether ``symbol`` resolves without error."""
        return symbol in self._state.bundles

    def canonical_symbol_for(self, bundle: FeatureBundle) -> Symbol:
        """Find the one legal symbol whose resolution is ``bundle``.

        Raises:
            NoCanonicalForm: If no legal symbol produces this bundle.
        """
        try:
            return self._state.inverse[bundle]
        except KeyError:
            raise NoCanonicalForm(f"No symbol in the registry produces {bundle!r}") from None

    # --- Notation ---

    def render(self, symbol: Symbol) -> str:
        """Render a symbol as IPA text: base glyph, then marks in order.

        Raises:
            UnknownBaseGlyph: If the base glyph is not in the table.
            UnknownModifier: If a modifier name is not defined.
        """
        self.bare_bundle(symbol.base)
        ordered = self._state.table.modifiers.canonical_order(symbol.modifiers)
        return symbol.base + "".join(m.mark for m in ordered)

    def parse(self, text: str) -> Symbol:
        """Read one written IPA symbol into a base glyph and modifiers.

        The longest matching base glyph wins, so 't͡ʃ' is one affricate
        rather than 't' followed by an unknown mark. Precomposed letters
        such as 'é' are decomposed first. A tie bar may be omitted
        ('tʃ').

        Raises:
            UnknownBaseGlyph: If no base glyph starts the text.
            UnknownModifier: If a trailing mark is not a known diacritic.
        """
        state = self._state
        nfd = unicodedata.normalize("NFD", text.strip())

        glyph = None
        rest = ""
        for size in range(len(nfd), 0, -1):
            candidate = state.parse_index.get(nfd[:size])
            if candidate is not None:
                glyph, rest = candidate, nfd[size:]
                break
        if glyph is None:
            raise UnknownBaseGlyph(f"No base glyph found at the start of {text!r}")

        modifiers = state.table.modifiers
        names: list[str] = []
        while rest:
            for mark in modifiers.marks:
                if rest.startswith(mark):
                    names.append(modifiers.by_mark(mark).name)
                    rest = rest[len(mark):]
                    break
            else:
                # Raises UnknownModifier naming the offending character
                modifiers.by_mark(rest[0])
        return Symbol(glyph, frozenset(names))

    def __repr__(self) -> str:
        return (
            f"SymbolRegistry(table={self._state.table.version!r}, "
            f"glyphs={len(self._state.table.glyphs)}, "
            f"symbols={len(self._state.symbols)})"
        )


# ---------------------------------------------------------------------------
# State construction
# ---------------------------------------------------------------------------


def _build_state(table: IPATable) -> _RegistryState:
    """Enumerate the legal symbol space of a table and index it."""
    modifiers = table.modifiers
    entries = []

    for index, (glyph, bare) in enumerate(table.glyphs.items()):
        applicable = [m for m in modifiers if _legal_on(m, bare)]
        for combo in _conflict_free_subsets(applicable):
            bundle = bare
            for mod in combo:
                bundle = mod.apply(bundle)
            symbol = Symbol(glyph, frozenset(m.name for m in combo))
            key = (len(combo), index, tuple(m.priority for m in combo))
            entries.append((key, symbol, bundle))

    entries.sort(key=lambda e: e[0])

    bundles: dict[Symbol, FeatureBundle] = {}
    inverse: dict[FeatureBundle, Symbol] = {}
    for _, symbol, bundle in entries:
        if bundle in inverse:
            raise TableError(
                f"Symbols {inverse[bundle]!r} and {symbol!r} resolve to the "
                f"same features {bundle!r}"
            )
        bundles[symbol] = bundle
        inverse[bundle] = symbol

    parse_index: dict[str, str] = {}
    for glyph in table.glyphs:
        parse_index[unicodedata.normalize("NFD", glyph)] = glyph
    for glyph in table.glyphs:
        untied = unicodedata.normalize("NFD", glyph.replace(_TIE_BAR, ""))
        parse_index.setdefault(untied, glyph)
    for alias, glyph in _ALIASES.items():
        if glyph in table.glyphs:
            parse_index.setdefault(alias, glyph)

    logger.info(
        "Symbol registry built from IPA table %s: %d base glyphs, %d legal symbols",
        table.version, len(table.glyphs), len(bundles),
    )
    return _RegistryState(
        table=table,
        symbols=tuple(bundles),
        bundles=bundles,
        inverse=inverse,
        parse_index=parse_index,
        generation=next(_generations),
    )


def _legal_on(modifier: Modifier, bare: FeatureBundle) -> bool:
    try:
        modifier.check_applicable(bare)
    except PhonemeModelError:
        return False
    return True


def _conflict_free_subsets(
    modifiers: list[Modifier],
) -> Iterator[tuple[Modifier, ...]]:
    """Yield every subset of ``modifiers`` whose members touch disjoint features.

    ``modifiers`` must be in priority order; each subset keeps that order.
    """
    stack: list[tuple[int, tuple[Modifier, ...], frozenset[str]]] = [
        (0, (), frozenset())
    ]
    while stack:
        start, chosen, touched = stack.pop()
        yield chosen
        for i in range(len(modifiers) - 1, start - 1, -1):
            mod = modifiers[i]
            if mod.touches & touched:
                continue
            stack.append((i + 1, chosen + (mod,), touched | mod.touches))
