"""phonemodel: IPA symbols, distinctive features, and accent phoneme inventories."""

__version__ = "0.1.0"

from functools import lru_cache

from phonemodel.accents import (
    BUILTIN_ACCENTS,
    Accent,
    AccentMapper,
    Phoneme,
    PhonemeInventory,
)
from phonemodel.features import FeatureBundle, FeatureModel
from phonemodel.modifiers import Modifier, ModifierModel
from phonemodel.symbols import IPATable, Symbol, SymbolRegistry, load_table


@lru_cache(maxsize=None)
def default_registry() -> SymbolRegistry:
    """The shared registry built from the bundled IPA table.

    Built once on first call and reused afterwards. Tests that need an
    alternate table should construct their own ``SymbolRegistry``.
    """
    return SymbolRegistry(load_table())


@lru_cache(maxsize=None)
def default_mapper() -> AccentMapper:
    """The shared accent mapper, with every built-in accent registered."""
    registry = default_registry()
    return AccentMapper(
        registry,
        accents=[factory(registry) for factory in BUILTIN_ACCENTS.values()],
    )


def get_inventory(accent: str) -> PhonemeInventory:
    """Get the phoneme inventory of a built-in accent.

    Builds the inventory on first request; later calls return the same
    instance.

    Args:
        accent: Built-in accent name (e.g., 'genam').

    Returns:
        A PhonemeInventory.

    Raises:
        UnknownAccent: If the accent is not built in.
    """
    return default_mapper().inventory(accent)


__all__ = [
    "Accent",
    "AccentMapper",
    "FeatureBundle",
    "FeatureModel",
    "IPATable",
    "Modifier",
    "ModifierModel",
    "Phoneme",
    "PhonemeInventory",
    "Symbol",
    "SymbolRegistry",
    "__version__",
    "default_mapper",
    "default_registry",
    "get_inventory",
    "load_table",
]
