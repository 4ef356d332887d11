"""Tests for the feature model: Feature, FeatureBundle, FeatureModel.

Pure data containers, so everything is constructed inline.
"""

import dataclasses

import pytest

from phonemodel.errors import IncompleteBundle, InvalidFeatureValue, UnknownFeature
from phonemodel.features import NOT_APPLICABLE, Feature, FeatureBundle, FeatureModel


@pytest.fixture
def model() -> FeatureModel:
    return FeatureModel([
        Feature.define("voice", "binary", ["consonant", "vowel"]),
        Feature.define("place", "enum", ["consonant"], values=["labial", "velar"]),
        Feature.define("aspirated", "unary", ["consonant"]),
        Feature.define("atr", "ternary", ["vowel"]),
        Feature.define(
            "length", "enum", ["consonant", "vowel"],
            values=["short", "long"], suprasegmental=True,
        ),
    ])


def _p(model: FeatureModel) -> FeatureBundle:
    return model.bundle("consonant", {
        "voice": "-", "place": "labial", "aspirated": "0", "length": "short",
    })


# ---------------------------------------------------------------------------
# Feature
# ---------------------------------------------------------------------------


class TestFeature:
    """Feature.define derives the domain from the kind."""

    def test_binary_domain(self):
        feat = Feature.define("voice", "binary", ["consonant"])
        assert feat.values == ("+", "-")
        assert feat.domain == ("+", "-", NOT_APPLICABLE)

    def test_unary_domain(self):
        feat = Feature.define("aspirated", "unary", ["consonant"])
        assert feat.domain == ("+", NOT_APPLICABLE)

    def test_ternary_domain(self):
        feat = Feature.define("atr", "ternary", ["vowel"])
        assert feat.values == ("+", "-", "±")

    def test_enum_keeps_declared_order(self):
        feat = Feature.define("height", "enum", ["vowel"], values=["high", "mid", "low"])
        assert feat.values == ("high", "mid", "low")

    def test_invalid_kind(self):
        with pytest.raises(ValueError, match="Invalid feature kind"):
            Feature.define("voice", "quaternary", ["consonant"])

    def test_invalid_category(self):
        with pytest.raises(ValueError, match="invalid categories"):
            Feature.define("voice", "binary", ["tone"])

    def test_empty_enum(self):
        with pytest.raises(ValueError, match="declares no values"):
            Feature.define("height", "enum", ["vowel"])

    def test_enum_may_not_claim_not_applicable(self):
        with pytest.raises(ValueError):
            Feature.define("height", "enum", ["vowel"], values=["high", "0"])

    def test_validate(self):
        feat = Feature.define("voice", "binary", ["consonant"])
        feat.validate("+")
        feat.validate(NOT_APPLICABLE)
        with pytest.raises(InvalidFeatureValue) as exc_info:
            feat.validate("maybe")
        assert exc_info.value.feature == "voice"
        assert exc_info.value.value == "maybe"

    def test_invalid_value_is_a_value_error(self):
        feat = Feature.define("voice", "binary", ["consonant"])
        with pytest.raises(ValueError):
            feat.validate("x")

    def test_applies_to(self):
        feat = Feature.define("place", "enum", ["consonant"], values=["labial"])
        assert feat.applies_to("consonant")
        assert not feat.applies_to("vowel")


# ---------------------------------------------------------------------------
# FeatureModel
# ---------------------------------------------------------------------------


class TestFeatureModel:

    def test_names_in_declared_order(self, model):
        assert model.names == ("voice", "place", "aspirated", "atr", "length")

    def test_len_and_contains(self, model):
        assert len(model) == 5
        assert "voice" in model
        assert "nasal" not in model

    def test_getitem_unknown(self, model):
        with pytest.raises(UnknownFeature, match="nasal"):
            model["nasal"]

    def test_duplicate_name_rejected(self):
        voice = Feature.define("voice", "binary", ["consonant"])
        with pytest.raises(ValueError, match="Duplicate"):
            FeatureModel([voice, voice])

    def test_features_for_category(self, model):
        assert [f.name for f in model.features_for("consonant")] == [
            "voice", "place", "aspirated", "length",
        ]
        assert [f.name for f in model.features_for("vowel")] == [
            "voice", "atr", "length",
        ]

    def test_suprasegmentals_apply_to_both_categories(self, model):
        assert model["length"].suprasegmental
        assert model["length"] in model.features_for("vowel")
        assert model["length"] in model.features_for("consonant")

    def test_features_for_unknown_category(self, model):
        with pytest.raises(ValueError, match="Invalid category"):
            model.features_for("click")

    def test_validate(self, model):
        model.validate("place", "velar")
        with pytest.raises(InvalidFeatureValue):
            model.validate("place", "uvular")
        with pytest.raises(UnknownFeature):
            model.validate("nasal", "+")


class TestBundleConstruction:
    """FeatureModel.bundle validates and orders bundles."""

    def test_bundle_is_total_and_ordered(self, model):
        bundle = model.bundle("consonant", {
            "length": "short", "aspirated": "0", "place": "labial", "voice": "-",
        })
        assert bundle.names() == ("voice", "place", "aspirated", "length")

    def test_missing_feature(self, model):
        with pytest.raises(IncompleteBundle, match="aspirated"):
            model.bundle("consonant", {
                "voice": "-", "place": "labial", "length": "short",
            })

    def test_out_of_domain_value(self, model):
        with pytest.raises(InvalidFeatureValue):
            model.bundle("consonant", {
                "voice": "-", "place": "uvular", "aspirated": "0", "length": "short",
            })

    def test_feature_of_other_category(self, model):
        with pytest.raises(InvalidFeatureValue):
            model.bundle("vowel", {
                "voice": "+", "atr": "+", "length": "short", "place": "labial",
            })

    def test_unknown_feature(self, model):
        with pytest.raises(UnknownFeature):
            model.bundle("vowel", {
                "voice": "+", "atr": "+", "length": "short", "nasal": "+",
            })


# ---------------------------------------------------------------------------
# FeatureBundle
# ---------------------------------------------------------------------------


class TestFeatureBundle:

    def test_mapping_access(self, model):
        p = _p(model)
        assert p["voice"] == "-"
        assert "place" in p
        assert "atr" not in p
        assert list(p) == ["voice", "place", "aspirated", "length"]
        assert len(p) == 4

    def test_getitem_absent_feature(self, model):
        with pytest.raises(UnknownFeature):
            _p(model)["atr"]

    def test_get_with_default(self, model):
        p = _p(model)
        assert p.get("atr") is None
        assert p.get("atr", "?") == "?"

    def test_specified_drops_not_applicable(self, model):
        assert _p(model).specified() == {
            "voice": "-", "place": "labial", "length": "short",
        }

    def test_equality_ignores_construction_order(self, model):
        a = model.bundle("consonant", {
            "voice": "-", "place": "labial", "aspirated": "0", "length": "short",
        })
        b = model.bundle("consonant", {
            "length": "short", "aspirated": "0", "voice": "-", "place": "labial",
        })
        assert a == b
        assert hash(a) == hash(b)
        assert len({a, b}) == 1

    def test_category_is_part_of_identity(self):
        a = FeatureBundle("consonant", (("voice", "+"),))
        b = FeatureBundle("vowel", (("voice", "+"),))
        assert a != b

    def test_replace_returns_new_bundle(self, model):
        p = _p(model)
        ph = p.replace({"aspirated": "+"})
        assert ph["aspirated"] == "+"
        assert p["aspirated"] == "0"
        assert ph.names() == p.names()

    def test_replace_unknown_feature(self, model):
        with pytest.raises(UnknownFeature):
            _p(model).replace({"atr": "+"})

    def test_immutable(self, model):
        p = _p(model)
        with pytest.raises(dataclasses.FrozenInstanceError):
            p.category = "vowel"

    def test_to_dict(self, model):
        assert _p(model).to_dict() == {
            "category": "consonant",
            "features": {
                "voice": "-", "place": "labial", "aspirated": "0", "length": "short",
            },
        }

    def test_repr_shows_specified_values(self, model):
        text = repr(_p(model))
        assert "consonant" in text
        assert "place: labial" in text
        assert "aspirated" not in text
