"""Natural classes of segments, tested from their feature bundles.

Use these predicates rather than ad hoc feature checks when the question
is "is this sound an X (vowel, nasal, fricative, ...)". Each one reads only
the bundle, so they work equally on registry bundles and on bundles that
an accent has already reduced.
"""

from __future__ import annotations

from phonemodel.features.model import NOT_APPLICABLE, FeatureBundle


_APPROXIMANT_MANNERS = frozenset({"approximant", "lateral_approximant"})
# Places where a central approximant is a glide rather than a consonantal
# constriction: j, w, ʍ and their kin.
_GLIDE_PLACES = frozenset({"palatal", "labial_velar", "labial_palatal", "velar"})
_HIGH = frozenset({"close", "near_close"})
_MID = frozenset({"close_mid", "mid", "open_mid"})
_LOW = frozenset({"near_open", "open"})


def is_vowel(bundle: FeatureBundle) -> bool:
    """A vowel sits in the nucleus of a syllable."""
    return bundle.category == "vowel"


def is_consonant(bundle: FeatureBundle) -> bool:
    """Anything that is not a vowel, glides included."""
    return not is_vowel(bundle)


def is_semivowel(bundle: FeatureBundle) -> bool:
    """A glide: a non-syllabic, non-consonantal sonorant such as j or w."""
    return (
        is_consonant(bundle)
        and bundle.get("sonorant") == "+"
        and bundle.get("manner") == "approximant"
        and bundle.get("place") in _GLIDE_PLACES
    )


def is_voiced(bundle: FeatureBundle) -> bool:
    return bundle.get("voice") == "+"


def is_sonorant(bundle: FeatureBundle) -> bool:
    return bundle.get("sonorant") == "+"


def is_stop(bundle: FeatureBundle) -> bool:
    """An obstruent with full oral closure: (-sonorant, -continuant).

    Nasals are sonorants and are not stops; affricates have their own class.
    """
    return bundle.get("manner") == "stop"


def is_fricative(bundle: FeatureBundle) -> bool:
    return bundle.get("manner") == "fricative"


def is_affricate(bundle: FeatureBundle) -> bool:
    return bundle.get("manner") == "affricate"


def is_nasal(bundle: FeatureBundle) -> bool:
    """Nasal consonants and nasalized vowels."""
    return bundle.get("manner") == "nasal" or bundle.get("nasalized") == "+"


def is_lateral(bundle: FeatureBundle) -> bool:
    return bundle.get("manner") == "lateral_approximant"


def is_approximant(bundle: FeatureBundle) -> bool:
    return bundle.get("manner") in _APPROXIMANT_MANNERS


def is_aspirated(bundle: FeatureBundle) -> bool:
    return bundle.get("aspirated") == "+"


def is_high_vowel(bundle: FeatureBundle) -> bool:
    return is_vowel(bundle) and bundle.get("height") in _HIGH


def is_mid_vowel(bundle: FeatureBundle) -> bool:
    return is_vowel(bundle) and bundle.get("height") in _MID


def is_low_vowel(bundle: FeatureBundle) -> bool:
    return is_vowel(bundle) and bundle.get("height") in _LOW


def is_diphthong(bundle: FeatureBundle) -> bool:
    """A vowel that glides toward a second quality within one segment."""
    return is_vowel(bundle) and bundle.get("offglide") not in (None, NOT_APPLICABLE)


def feature_set(bundle: FeatureBundle) -> frozenset[str]:
    """Flatten a bundle into a set of signed feature labels.

    Binary-style values become ``+voice`` / ``-voice``; enumerated values
    become ``place=labial``. Not-applicable features are left out, so two
    bundles only share labels for features both actually specify.

    Useful for similarity measures, where set overlap is what matters.
    """
    labels = set()
    for name, value in bundle.items():
        if value == NOT_APPLICABLE:
            continue
        if value in ("+", "-", "±"):
            labels.add(f"{value}{name}")
        else:
            labels.add(f"{name}={value}")
    labels.add(f"category={bundle.category}")
    return frozenset(labels)


def feature_distance(a: FeatureBundle, b: FeatureBundle) -> int:
    """Number of labels present in exactly one of the two feature sets."""
    return len(feature_set(a) ^ feature_set(b))
