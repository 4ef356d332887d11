"""Shared test fixtures for phonemodel."""

import copy

import pytest

from phonemodel.symbols import IPATable, SymbolRegistry, load_table


# A pocket-sized table: six consonants, two vowels, six modifiers.
# Small enough that every legal symbol can be reasoned about by hand.
MINI_TABLE = {
    "version": "test-1",
    "features": [
        {"name": "voice", "kind": "binary", "categories": ["consonant", "vowel"]},
        {"name": "place", "kind": "enum", "categories": ["consonant"],
         "values": ["labial", "alveolar", "velar"]},
        {"name": "manner", "kind": "enum", "categories": ["consonant"],
         "values": ["stop", "nasal", "fricative"]},
        {"name": "aspirated", "kind": "unary", "categories": ["consonant"]},
        {"name": "height", "kind": "enum", "categories": ["vowel"],
         "values": ["high", "low"]},
        {"name": "nasalized", "kind": "unary", "categories": ["vowel"]},
        {"name": "length", "kind": "enum", "categories": ["consonant", "vowel"],
         "values": ["short", "long"], "suprasegmental": True},
        {"name": "tone", "kind": "enum", "categories": ["consonant", "vowel"],
         "values": ["high", "low"], "suprasegmental": True},
    ],
    "defaults": {
        "consonant": {"aspirated": "0", "length": "short", "tone": "0"},
        "vowel": {"voice": "+", "nasalized": "0", "length": "short", "tone": "0"},
    },
    "consonants": [
        {"glyph": "p", "voice": "-", "place": "labial", "manner": "stop"},
        {"glyph": "b", "voice": "+", "place": "labial", "manner": "stop"},
        {"glyph": "t", "voice": "-", "place": "alveolar", "manner": "stop"},
        {"glyph": "k", "voice": "-", "place": "velar", "manner": "stop"},
        {"glyph": "m", "voice": "+", "place": "labial", "manner": "nasal"},
        {"glyph": "s", "voice": "-", "place": "alveolar", "manner": "fricative"},
    ],
    "vowels": [
        {"glyph": "a", "height": "low"},
        {"glyph": "i", "height": "high"},
    ],
    "modifiers": [
        {"name": "voiceless", "mark": "̥", "priority": 10,
         "categories": ["consonant", "vowel"], "effects": {"voice": "-"},
         "requires": {"voice": ["+"], "manner": ["nasal"]}},
        {"name": "nasalization", "mark": "̃", "priority": 20,
         "categories": ["vowel"], "effects": {"nasalized": "+"}},
        {"name": "high_tone", "mark": "́", "priority": 40,
         "categories": ["vowel"], "effects": {"tone": "high"}},
        {"name": "low_tone", "mark": "̀", "priority": 41,
         "categories": ["vowel"], "effects": {"tone": "low"}},
        {"name": "aspiration", "mark": "ʰ", "priority": 60,
         "categories": ["consonant"], "effects": {"aspirated": "+"},
         "requires": {"manner": ["stop"]}},
        {"name": "long", "mark": "ː", "priority": 80,
         "categories": ["consonant", "vowel"], "effects": {"length": "long"}},
    ],
}

# Legal symbols in MINI_TABLE:
#   p b t k: 4 each (aspiration x long)      16
#   m:       4 (voiceless x long)             4
#   s:       2 (long)                         2
#   a i:    24 each (voiceless x nasal x 3 tones x long)  48
MINI_SYMBOL_COUNT = 70


@pytest.fixture
def mini_raw() -> dict:
    """A fresh, mutable copy of the pocket table."""
    return copy.deepcopy(MINI_TABLE)


@pytest.fixture
def mini_table(mini_raw) -> IPATable:
    return IPATable.from_dict(mini_raw)


@pytest.fixture
def mini_registry(mini_table) -> SymbolRegistry:
    """A registry over the pocket table; cheap enough to build per test."""
    return SymbolRegistry(mini_table)


@pytest.fixture(scope="session")
def ipa_table() -> IPATable:
    """The bundled IPA table, loaded once."""
    return load_table()


@pytest.fixture(scope="session")
def registry(ipa_table) -> SymbolRegistry:
    """A registry over the bundled table, shared across the session.

    Registries are read-only after construction, so sharing is safe as
    long as no test calls ``reload`` on this one.
    """
    return SymbolRegistry(ipa_table)
