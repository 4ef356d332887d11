"""Accent layer: equivalence rules, accents, and per-accent phoneme inventories."""

from phonemodel.accents.accent import Accent
from phonemodel.accents.genam import general_american
from phonemodel.accents.inventory import Phoneme, PhonemeInventory
from phonemodel.accents.mapping import AccentMapper, InventoryState
from phonemodel.accents.rules import EquivalenceRule, Merge, Neutralize

BUILTIN_ACCENTS = {
    "genam": general_american,
}
"""Built-in accent factories, keyed by accent name."""

__all__ = [
    "Accent",
    "AccentMapper",
    "BUILTIN_ACCENTS",
    "EquivalenceRule",
    "InventoryState",
    "Merge",
    "Neutralize",
    "Phoneme",
    "PhonemeInventory",
    "general_american",
]
