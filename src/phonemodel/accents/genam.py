"""General American English.

Phoneme set for the 'General American English' accent (see
<https://en.wikipedia.org/wiki/General_American_English>). The
diphthongs /e͡ɪ a͡ɪ a͡ʊ o͡ʊ ɔ͡ɪ/ and the affricates are single segments, each
with its own base glyph.
"""

from __future__ import annotations

from phonemodel.accents.accent import Accent
from phonemodel.accents.rules import Neutralize
from phonemodel.symbols.registry import SymbolRegistry


NAME = "genam"

CONSONANTS: tuple[str, ...] = (
    "m", "n", "ŋ",
    "p", "b", "t", "d", "k", "ɡ",
    "t͡ʃ", "d͡ʒ",
    "f", "v", "θ", "ð", "s", "z", "ʃ", "ʒ", "h",
    "l", "ɹ", "j", "ʍ", "w",
)

VOWELS: tuple[str, ...] = (
    "i", "ɪ", "ɛ", "ə", "æ", "ʌ", "ɑ", "u", "ʊ", "ɔ",
    "ɜ˞", "ə˞",
    "e͡ɪ", "a͡ɪ", "a͡ʊ", "o͡ʊ", "ɔ͡ɪ",
)

# Aspiration, length, tone and vowel nasality are allophonic; so is
# voicing on nasals and laterals ('smile', 'play').
RULES = (
    Neutralize("aspirated"),
    Neutralize("length"),
    Neutralize("tone"),
    Neutralize("nasalized"),
    Neutralize("voice", when={"manner": ["nasal", "lateral_approximant"]}),
)


def general_american(registry: SymbolRegistry) -> Accent:
    """Build the General American accent against a registry.

    Sounds outside the GenAm set are tolerated gaps, so the accent's
    inventory builds over the full symbol space.
    """
    return Accent.from_symbols(
        NAME,
        registry,
        CONSONANTS + VOWELS,
        rules=RULES,
        tolerate_gaps=True,
        description="General American English",
    )
