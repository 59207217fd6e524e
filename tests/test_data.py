"""Tests for the confusable weight tables."""

from homograph_scanner.data import (
    COMMON_SCRIPT,
    ConfusableData,
    WeightTable,
    load_default_data,
    script_of,
    tr39_prototypes,
    to_codepoint,
)
from homograph_scanner.models import Weight

from conftest import CYR_A, CYR_IE, GREEK_A


class TestScriptOf:
    def test_latin(self):
        assert script_of('a') == 'Latin'

    def test_cyrillic(self):
        assert script_of(CYR_A) == 'Cyrillic'

    def test_greek(self):
        assert script_of(GREEK_A) == 'Greek'

    def test_digits_are_common(self):
        assert script_of('0') == COMMON_SCRIPT

    def test_multi_char_is_common(self):
        assert script_of('ab') == COMMON_SCRIPT


class TestToCodepoint:
    def test_ascii(self):
        assert to_codepoint('a') == 'U+0061'

    def test_cyrillic(self):
        assert to_codepoint(CYR_A) == 'U+0430'

    def test_astral(self):
        assert to_codepoint('\U0001D41A') == 'U+1D41A'


class TestWeightTable:
    def setup_method(self):
        self.table = WeightTable.from_rows([
            [CYR_A, 'a', 0.99, 0.97, True],
            ['I', 'l', 0.97, 0.94, False],
        ])

    def test_direct_lookup(self):
        assert self.table.weight_of(CYR_A, 'a') == Weight(0.99, 0.97, True)

    def test_reverse_lookup(self):
        assert self.table.weight_of('a', CYR_A) == Weight(0.99, 0.97, True)

    def test_uppercase_fallback(self):
        assert self.table.weight_of('l', 'i') == Weight(0.97, 0.94, False)

    def test_missing_pair(self):
        assert self.table.weight_of('x', 'y') is None

    def test_font_rows_mirror_danger(self):
        table = WeightTable.from_rows([[CYR_A, 'a', 0.9]])
        assert table.weight_of(CYR_A, 'a') == Weight(0.9, 0.9, False)

    def test_len_and_pairs(self):
        assert len(self.table) == 2
        assert (CYR_A, 'a', Weight(0.99, 0.97, True)) in list(self.table.pairs())


class TestConfusableData:
    def test_from_dict(self, sample_data):
        assert sample_data.version == 'test'
        assert sample_data.prototype_of(CYR_IE) == 'e'
        assert sample_data.prototype_of('z') is None
        assert set(sample_data.fonts) == {'Alpha', 'Beta'}

    def test_empty_dict(self):
        data = ConfusableData.from_dict({})
        assert data.prototypes == {}
        assert len(data.weights) == 0
        assert data.fonts == {}

    def test_default_data_is_bundled(self):
        data = load_default_data()
        assert data.prototype_of(CYR_A) == 'a'
        assert data.weights.weight_of(CYR_A, 'a') is not None
        assert 'Arial' in data.fonts

    def test_default_data_is_loaded_once(self):
        assert load_default_data() is load_default_data()

    def test_default_prototypes_come_from_tr39(self):
        data = load_default_data()
        assert data.prototype_of('ϱ') == 'p'
        assert data.prototype_of('ҽ') == 'e'
        assert len(data.prototypes) > 600

    def test_bundled_entries_override_tr39(self):
        data = load_default_data()
        # TR39 lists U+04CF under 'i'
        assert data.prototype_of('ӏ') == 'l'
        assert data.prototype_of('ロ') == '口'


class TestTr39Prototypes:
    def test_maps_confusables_to_prototype(self):
        mapping = tr39_prototypes('p')
        assert mapping['ϱ'] == 'p'
        assert mapping['р'] == 'p'
        assert set(mapping.values()) == {'p'}

    def test_ascii_homoglyphs_are_skipped(self):
        mapping = tr39_prototypes('l')
        assert 'I' not in mapping
        assert '1' not in mapping
        assert 'ⅼ' in mapping

    def test_keys_are_single_non_ascii_chars(self):
        mapping = tr39_prototypes()
        assert all(len(char) == 1 and not char.isascii() for char in mapping)
        assert mapping[CYR_A] == 'a'
