"""Tests for variant enumeration and ranking."""

import pytest

from homograph_scanner.generator import (
    GenerateOptions,
    aggregate_score,
    generate_variants,
    iter_candidates,
    take_distinct,
)
from homograph_scanner.graph import BucketConfig, build_buckets
from homograph_scanner.models import RawVariant

from conftest import CYR_A, CYR_O, GREEK_A, GREEK_O, make_sub


def diff_positions(a, b):
    return [i for i, (x, y) in enumerate(zip(a, b)) if x != y]


class TestIterCandidates:
    def test_single_edit_order(self, sample_buckets):
        labels = [v.label for v in iter_candidates('oa', sample_buckets, max_edits=1)]
        assert labels == [CYR_O + 'a', GREEK_O + 'a', 'o' + CYR_A, 'o' + GREEK_A]

    def test_two_edit_pass_follows(self, sample_buckets):
        variants = list(iter_candidates('oa', sample_buckets, max_edits=2))
        assert [v.edit_count for v in variants] == [1] * 4 + [2] * 4
        assert variants[4].label == CYR_O + CYR_A

    def test_lowercases_label(self, sample_buckets):
        labels = [v.label for v in iter_candidates('OA', sample_buckets, max_edits=1)]
        assert CYR_O + 'a' in labels

    def test_unknown_characters_contribute_nothing(self, sample_buckets):
        assert list(iter_candidates('xyz', sample_buckets)) == []

    def test_short_label_has_no_pairs(self, sample_buckets):
        variants = list(iter_candidates('a', sample_buckets, max_edits=2))
        assert all(v.edit_count == 1 for v in variants)

    def test_max_per_char_bounds_each_position(self, sample_buckets):
        variants = list(iter_candidates('oa', sample_buckets, max_edits=1, max_per_char=1))
        assert [v.label for v in variants] == [CYR_O + 'a', 'o' + CYR_A]


class TestTakeDistinct:
    def test_skips_duplicates_without_counting_them(self):
        candidates = [RawVariant(label, ()) for label in ['a', 'a', 'b', 'a', 'c']]
        assert [v.label for v in take_distinct(candidates, 3)] == ['a', 'b', 'c']

    def test_stops_pulling_at_limit(self):
        pulled = []

        def source():
            for label in 'abcdef':
                pulled.append(label)
                yield RawVariant(label, ())

        assert [v.label for v in take_distinct(source(), 2)] == ['a', 'b']
        assert pulled == ['a', 'b']

    @pytest.mark.parametrize('limit', [0, -1])
    def test_non_positive_limit(self, limit):
        assert list(take_distinct([RawVariant('a', ())], limit)) == []


class TestAggregateScore:
    def test_empty(self):
        assert aggregate_score([]) == 0.0

    def test_single(self):
        assert aggregate_score([make_sub(0.9)]) == pytest.approx(0.9)

    def test_edit_penalty(self):
        subs = [make_sub(0.9), make_sub(0.85, position=1)]
        assert aggregate_score(subs) == pytest.approx(0.6885)

    def test_use_max_danger(self):
        assert aggregate_score([make_sub(0.9, danger=1.0)], use_max_danger=True) == pytest.approx(1.0)


class TestGenerateVariants:
    def test_single_edit_variants_differ_at_one_position(self, sample_buckets):
        options = GenerateOptions(max_edits=1)
        for variant in generate_variants('foobar', options, sample_buckets):
            assert len(diff_positions(variant.label, 'foobar')) == 1
            assert variant.edit_count == 1

    def test_two_edit_positions_increase(self, sample_buckets):
        for variant in generate_variants('foobar', buckets=sample_buckets):
            positions = [sub.position for sub in variant.substitutions]
            assert positions == sorted(set(positions))
            assert len(diff_positions(variant.label, 'foobar')) == variant.edit_count

    def test_no_duplicates_for_repeated_chars(self, sample_buckets):
        labels = [v.label for v in generate_variants('aa', buckets=sample_buckets)]
        assert len(labels) == len(set(labels)) == 8

    def test_sorted_by_aggregate_score(self, sample_buckets):
        variants = generate_variants('paypal', buckets=sample_buckets)
        scores = [aggregate_score(v.substitutions) for v in variants]
        assert scores == sorted(scores, reverse=True)
        assert variants[0].label == 'p' + CYR_A + 'ypal'

    def test_cap_biases_towards_early_positions(self, sample_buckets):
        options = GenerateOptions(max_variants=3)
        variants = generate_variants('oa', options, sample_buckets)
        assert sorted(v.label for v in variants) == sorted([CYR_O + 'a', GREEK_O + 'a', 'o' + CYR_A])

    def test_builds_buckets_when_omitted(self, sample_data):
        options = GenerateOptions(max_edits=1, include_non_pvalid=True)
        labels = [v.label for v in generate_variants('o', options, data=sample_data)]
        assert '0' in labels

    def test_bucket_config_from_options(self):
        options = GenerateOptions(max_per_char=3, include_non_pvalid=True, use_max_danger=True)
        assert options.bucket_config() == BucketConfig(True, 3, True)

    def test_substitution_records(self, sample_data):
        buckets = build_buckets(data=sample_data)
        variant = generate_variants('a', GenerateOptions(max_edits=1), buckets)[0]
        sub = variant.substitutions[0]
        assert (sub.position, sub.original, sub.replacement) == (0, 'a', CYR_A)
        assert sub.script == 'Cyrillic'


def test_default_tables_include_tr39_confusables():
    options = GenerateOptions(max_edits=1, max_per_char=50, include_non_pvalid=True)
    labels = {v.label for v in generate_variants('p', options)}
    assert 'ϱ' in labels
    assert 'р' in labels
