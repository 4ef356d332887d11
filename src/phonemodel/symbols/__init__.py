"""IPA symbols: the authoritative table and the accent-independent registry."""

from phonemodel.symbols.registry import SymbolRegistry
from phonemodel.symbols.symbol import Symbol
from phonemodel.symbols.table import IPATable, load_table

__all__ = [
    "IPATable",
    "Symbol",
    "SymbolRegistry",
    "load_table",
]
