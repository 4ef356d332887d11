"""Tests for loading and validating the authoritative IPA table."""

import json

import pytest

from phonemodel.errors import TableError
from phonemodel.symbols import IPATable, load_table


class TestBundledTable:
    """The table that ships with the package."""

    def test_loads(self, ipa_table):
        assert ipa_table.version == "1.0.0"
        assert ipa_table.size == 75
        assert len(ipa_table.modifiers) == 16

    def test_consonants_precede_vowels(self, ipa_table):
        categories = [b.category for b in ipa_table.glyphs.values()]
        first_vowel = categories.index("vowel")
        assert set(categories[:first_vowel]) == {"consonant"}
        assert set(categories[first_vowel:]) == {"vowel"}

    def test_bundles_are_total(self, ipa_table):
        for glyph, bundle in ipa_table.glyphs.items():
            expected = [f.name for f in ipa_table.features.features_for(bundle.category)]
            assert list(bundle.names()) == expected, glyph

    def test_script_g_is_the_ipa_glyph(self, ipa_table):
        assert "ɡ" in ipa_table.glyphs
        assert "g" not in ipa_table.glyphs

    def test_affricates_are_single_glyphs(self, ipa_table):
        assert ipa_table.glyphs["t͡ʃ"]["manner"] == "affricate"
        assert ipa_table.glyphs["d͡ʒ"]["voice"] == "+"

    def test_diphthongs_are_single_glyphs(self, ipa_table):
        assert ipa_table.glyphs["a͡ɪ"]["offglide"] == "front"
        assert ipa_table.glyphs["o͡ʊ"]["offglide"] == "back"
        assert ipa_table.glyphs["a"]["offglide"] == "0"
        assert ipa_table.glyphs["a͡ɪ"].category == "vowel"

    def test_suprasegmentals(self, ipa_table):
        supra = [f.name for f in ipa_table.features if f.suprasegmental]
        assert supra == ["length", "tone"]

    def test_repr(self, ipa_table):
        assert "1.0.0" in repr(ipa_table)


class TestFromDict:
    """Load-time validation of table dicts."""

    def test_mini_table(self, mini_table):
        assert mini_table.version == "test-1"
        assert list(mini_table.glyphs) == ["p", "b", "t", "k", "m", "s", "a", "i"]

    def test_defaults_fill_rows(self, mini_table):
        assert mini_table.glyphs["a"]["voice"] == "+"
        assert mini_table.glyphs["p"]["aspirated"] == "0"

    def test_row_overrides_default(self, mini_raw):
        mini_raw["vowels"][0]["length"] = "long"
        table = IPATable.from_dict(mini_raw)
        assert table.glyphs["a"]["length"] == "long"

    def test_comment_keys_ignored(self, mini_raw):
        mini_raw["_comment"] = "notes"
        IPATable.from_dict(mini_raw)

    def test_missing_feature(self, mini_raw):
        del mini_raw["consonants"][0]["manner"]
        with pytest.raises(TableError, match="'p'"):
            IPATable.from_dict(mini_raw)

    def test_invalid_value(self, mini_raw):
        mini_raw["consonants"][0]["place"] = "uvular"
        with pytest.raises(TableError, match="uvular"):
            IPATable.from_dict(mini_raw)

    def test_duplicate_glyph(self, mini_raw):
        mini_raw["consonants"].append(dict(mini_raw["consonants"][0]))
        with pytest.raises(TableError, match="Duplicate base glyph"):
            IPATable.from_dict(mini_raw)

    def test_identical_bundles(self, mini_raw):
        clone = dict(mini_raw["consonants"][0], glyph="π")
        mini_raw["consonants"].append(clone)
        with pytest.raises(TableError, match="identical features"):
            IPATable.from_dict(mini_raw)

    def test_bad_feature_kind(self, mini_raw):
        mini_raw["features"][0]["kind"] = "fuzzy"
        with pytest.raises(TableError, match="feature definitions"):
            IPATable.from_dict(mini_raw)

    def test_modifier_on_unknown_feature(self, mini_raw):
        mini_raw["modifiers"][0]["effects"] = {"breathy": "+"}
        with pytest.raises(TableError, match="breathy"):
            IPATable.from_dict(mini_raw)

    def test_modifier_missing_key(self, mini_raw):
        del mini_raw["modifiers"][0]["mark"]
        with pytest.raises(TableError, match="modifier definitions"):
            IPATable.from_dict(mini_raw)

    def test_glyph_ending_in_mark(self, mini_raw):
        mini_raw["consonants"].append(
            {"glyph": "xʰ", "voice": "-", "place": "velar", "manner": "fricative"}
        )
        with pytest.raises(TableError, match="ends in a modifier mark"):
            IPATable.from_dict(mini_raw)


class TestLoadTable:

    def test_from_file(self, tmp_path, mini_raw):
        path = tmp_path / "table.json"
        path.write_text(json.dumps(mini_raw, ensure_ascii=False), encoding="utf-8")
        table = load_table(path)
        assert table.version == "test-1"
        assert table.size == 8

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{ not json", encoding="utf-8")
        with pytest.raises(TableError, match="not valid JSON"):
            load_table(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_table(tmp_path / "absent.json")
