"""Diacritic modifiers: pure feature transformations and their composition."""

from phonemodel.modifiers.model import Modifier, ModifierModel

__all__ = ["Modifier", "ModifierModel"]
