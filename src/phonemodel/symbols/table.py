"""IPATable: the authoritative feature/glyph/modifier table.

Loads the bundled ``ipa_table.json`` (or any dict with the same shape)
and validates it: every base glyph's bare bundle must be total for its
category, and every modifier's effects must be declared for exactly the
categories it claims.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from phonemodel.errors import (
    IncompleteBundle,
    InvalidFeatureValue,
    PhonemeModelError,
    TableError,
    UnknownFeature,
)
from phonemodel.features.model import CATEGORIES, Feature, FeatureBundle, FeatureModel
from phonemodel.modifiers.model import Modifier, ModifierModel


logger = logging.getLogger(__name__)

_TABLE_FILE = Path(__file__).parent.parent / "data" / "ipa_table.json"

# JSON section holding the glyph rows for each category
_SECTIONS = {"consonant": "consonants", "vowel": "vowels"}


@dataclass(frozen=True)
class IPATable:
    """A validated, immutable IPA table.

    Attributes:
        version: Table version string.
        features: The closed feature model.
        modifiers: The closed modifier model.
        glyphs: Base glyph → bare FeatureBundle, in table order
            (consonants first, then vowels).
    """

    version: str
    features: FeatureModel
    modifiers: ModifierModel
    glyphs: Mapping[str, FeatureBundle]

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> IPATable:
        """Build and validate a table from its JSON-shaped dict.

        Expected keys: ``version``, ``features``, ``defaults`` (optional),
        ``consonants``, ``vowels``, ``modifiers``. Keys starting with ``_``
        are ignored.

        Raises:
            TableError: If any part of the table is malformed.
        """
        try:
            features = FeatureModel(
                Feature.define(
                    name=f["name"],
                    kind=f["kind"],
                    categories=f["categories"],
                    values=f.get("values"),
                    suprasegmental=f.get("suprasegmental", False),
                )
                for f in raw["features"]
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise TableError(f"Invalid feature definitions: {exc}") from exc

        defaults = raw.get("defaults", {})
        glyphs: dict[str, FeatureBundle] = {}
        owners: dict[FeatureBundle, str] = {}

        for category in CATEGORIES:
            base = dict(defaults.get(category, {}))
            for row in raw.get(_SECTIONS[category], []):
                row = dict(row)
                glyph = row.pop("glyph", None)
                if not glyph:
                    raise TableError(f"A {category} row has no glyph: {row!r}")
                if glyph in glyphs:
                    raise TableError(f"Duplicate base glyph: {glyph!r}")
                try:
                    bundle = features.bundle(category, {**base, **row})
                except (IncompleteBundle, InvalidFeatureValue, UnknownFeature) as exc:
                    raise TableError(f"Base glyph {glyph!r}: {exc}") from exc
                if bundle in owners:
                    raise TableError(
                        f"Base glyphs {owners[bundle]!r} and {glyph!r} "
                        f"have identical features"
                    )
                glyphs[glyph] = bundle
                owners[bundle] = glyph

        try:
            modifiers = ModifierModel(
                (
                    Modifier.define(
                        name=m["name"],
                        mark=m["mark"],
                        priority=int(m["priority"]),
                        categories=m["categories"],
                        effects=m["effects"],
                        requires=m.get("requires"),
                    )
                    for m in raw.get("modifiers", [])
                ),
                feature_model=features,
            )
        except TableError:
            raise
        except (KeyError, TypeError, ValueError, PhonemeModelError) as exc:
            raise TableError(f"Invalid modifier definitions: {exc}") from exc

        for glyph in glyphs:
            if any(glyph.endswith(mark) for mark in modifiers.marks):
                raise TableError(
                    f"Base glyph {glyph!r} ends in a modifier mark and "
                    f"could not be parsed unambiguously"
                )

        return cls(
            version=str(raw.get("version", "0")),
            features=features,
            modifiers=modifiers,
            glyphs=glyphs,
        )

    @property
    def size(self) -> int:
        """Number of base glyphs."""
        return len(self.glyphs)

    def __repr__(self) -> str:
        return (
            f"IPATable(version={self.version!r}, "
            f"features={len(self.features)}, "
            f"glyphs={len(self.glyphs)}, "
            f"modifiers={len(self.modifiers)})"
        )


def load_table(path: Path | str | None = None) -> IPATable:
    """Load and validate an IPA table from a JSON file.

    Args:
        path: JSON file to read. Defaults to the bundled
            ``phonemodel/data/ipa_table.json``.

    Returns:
        A validated IPATable.

    Raises:
        FileNotFoundError: If the file does not exist.
        TableError: If the contents fail validation.
    """
    if path is None:
        path = _TABLE_FILE

    with open(path, "r", encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as exc:
            raise TableError(f"IPA table {path} is not valid JSON: {exc}") from exc

    table = IPATable.from_dict(raw)
    logger.info(
        "Loaded IPA table %s from %s: %d features, %d base glyphs, %d modifiers",
        table.version, path, len(table.features), table.size, len(table.modifiers),
    )
    return table
