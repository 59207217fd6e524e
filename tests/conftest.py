"""Shared fixtures: a small, hand-written confusable table and a fake resolver."""

import threading

import dns.resolver
import pytest

from homograph_scanner.data import ConfusableData
from homograph_scanner.graph import BucketConfig, build_buckets
from homograph_scanner.models import Substitution

CYR_A = 'а'    # Cyrillic а
CYR_O = 'о'    # Cyrillic о
CYR_IE = 'е'   # Cyrillic е
GREEK_O = 'ο'  # Greek ο
GREEK_A = 'α'  # Greek α
ROMAN_L = 'ⅼ'  # Small roman numeral ⅼ


SAMPLE_TABLES = {
    'version': 'test',
    'prototypes': {
        CYR_A: 'a',
        CYR_O: 'o',
        GREEK_O: 'o',
        CYR_IE: 'e',
        ROMAN_L: 'l',
        '0': 'o',
    },
    'weights': [
        [CYR_A, 'a', 0.99, 0.97, True],
        [CYR_O, 'o', 1.0, 0.98, True],
        [GREEK_O, 'o', 0.99, 0.96, True],
        [GREEK_A, 'a', 0.88, 0.81, True],
        [CYR_IE, 'e', 0.9, 0.95, True],
        ['E', CYR_IE, 0.99, 0.5, False],
        [ROMAN_L, 'l', 0.98, 0.95, False],
    ],
    'fonts': {
        'Alpha': [[CYR_A, 'a', 0.9], [CYR_O, 'o', 0.8]],
        'Beta': [[CYR_A, 'a', 0.95]],
    },
}


@pytest.fixture
def sample_data():
    return ConfusableData.from_dict(SAMPLE_TABLES)


@pytest.fixture
def sample_buckets(sample_data):
    return build_buckets(BucketConfig(), sample_data)


def make_sub(stable_danger, danger=None, script='Cyrillic', position=0,
             original='a', replacement=CYR_A, idna_pvalid=True):
    """Build a Substitution with only the fields a test cares about."""
    return Substitution(
        position=position,
        original=original,
        replacement=replacement,
        codepoint=f"U+{ord(replacement):04X}",
        script=script,
        danger=stable_danger if danger is None else danger,
        stable_danger=stable_danger,
        idna_pvalid=idna_pvalid,
    )


class FakeRdata:
    def __init__(self, text):
        self.text = text

    def to_text(self):
        return self.text


class FakeResolver:
    """Stands in for dns.resolver.Resolver; answers come from a dict."""

    def __init__(self, records=None, errors=None):
        self.records = records or {}
        self.errors = errors or {}
        self.queries = []
        self.lock = threading.Lock()

    def resolve(self, domain, record_type):
        with self.lock:
            self.queries.append((domain, record_type))
        error = self.errors.get((domain, record_type))
        if error is not None:
            raise error
        answers = self.records.get((domain, record_type))
        if answers is None:
            raise dns.resolver.NXDOMAIN()
        return [FakeRdata(text) for text in answers]
