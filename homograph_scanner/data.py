"""
Confusable weight data
======================

Read-only tables consumed by the graph builder, the scorer and the
reverse resolver:

- a prototype mapping (confusable character -> the character it imitates)
- a pairwise similarity table (character -> character -> Weight)
- per-font similarity tables, same shape, used for worst-case font search

The default prototype mapping is built from the Unicode TR39 confusables
shipped with ``confusable_homoglyphs``, overlaid with the extra entries in
``data/confusables.json``. That file also carries the weight and font
tables. Any other source can be plugged in through
``ConfusableData.from_dict``.
"""

import json
import logging
import string
from functools import lru_cache
from importlib import resources
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from confusable_homoglyphs import categories, confusables

from .models import Weight

logger = logging.getLogger(__name__)


# Unicode scripts reported for substitutions, keyed by ISO 15924 alias
SCRIPT_NAMES: Dict[str, str] = {
    'LATIN': 'Latin',
    'CYRILLIC': 'Cyrillic',
    'GREEK': 'Greek',
    'ARMENIAN': 'Armenian',
    'HEBREW': 'Hebrew',
    'ARABIC': 'Arabic',
    'DEVANAGARI': 'Devanagari',
    'HAN': 'Han',
    'HIRAGANA': 'Hiragana',
    'KATAKANA': 'Katakana',
    'HANGUL': 'Hangul',
    'GEORGIAN': 'Georgian',
    'THAI': 'Thai',
}

COMMON_SCRIPT = 'Common'


def script_of(char: str) -> str:
    """Return the Unicode script name of a single character."""
    if len(char) != 1:
        return COMMON_SCRIPT
    return SCRIPT_NAMES.get(categories.alias(char), COMMON_SCRIPT)


def to_codepoint(char: str) -> str:
    """Format the first code point of ``char`` as ``U+XXXX``."""
    if not char:
        return 'U+0000'
    return f"U+{ord(char[0]):04X}"


class WeightTable:
    """Nested ``a -> b -> Weight`` table with a single lookup rule."""

    def __init__(self, table: Mapping[str, Mapping[str, Weight]]):
        self._table = {a: dict(targets) for a, targets in table.items()}

    @classmethod
    def from_rows(cls, rows: List[List[Any]]) -> 'WeightTable':
        """
        Build from ``[a, b, danger, stable_danger, idna_pvalid]`` rows.

        Font tables only carry ``[a, b, danger]``; the stable score then
        mirrors the peak score.
        """
        table: Dict[str, Dict[str, Weight]] = {}
        for row in rows:
            a, b, danger = row[0], row[1], float(row[2])
            stable = float(row[3]) if len(row) > 3 else danger
            pvalid = bool(row[4]) if len(row) > 4 else False
            table.setdefault(a, {})[b] = Weight(danger, stable, pvalid)
        return cls(table)

    def weight_of(self, a: str, b: str) -> Optional[Weight]:
        """
        Look up the weight of the pair ``{a, b}``.

        Tries ``a -> b``, ``b -> a``, then the same two with ``b``
        upper-cased when it is ASCII (prototypes are often keyed by their
        capital).
        """
        candidates = [(a, b), (b, a)]
        if b.isascii() and b.upper() != b:
            candidates += [(a, b.upper()), (b.upper(), a)]
        for first, second in candidates:
            weight = self._table.get(first, {}).get(second)
            if weight is not None:
                return weight
        return None

    def pairs(self) -> Iterator[Tuple[str, str, Weight]]:
        """Iterate over every explicit ``(a, b, weight)`` entry."""
        for a, targets in self._table.items():
            for b, weight in targets.items():
                yield a, b, weight

    def __len__(self) -> int:
        return sum(len(targets) for targets in self._table.values())


class ConfusableData:
    """The prototype mapping, the weight table and the font tables."""

    def __init__(
        self,
        prototypes: Mapping[str, str],
        weights: WeightTable,
        fonts: Optional[Mapping[str, WeightTable]] = None,
        version: str = "custom",
    ):
        self.prototypes: Dict[str, str] = dict(prototypes)
        self.weights = weights
        self.fonts: Dict[str, WeightTable] = dict(fonts or {})
        self.version = version

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> 'ConfusableData':
        fonts = {
            name: WeightTable.from_rows(rows)
            for name, rows in raw.get('fonts', {}).items()
        }
        return cls(
            prototypes=raw.get('prototypes', {}),
            weights=WeightTable.from_rows(raw.get('weights', [])),
            fonts=fonts,
            version=str(raw.get('version', 'custom')),
        )

    def prototype_of(self, char: str) -> Optional[str]:
        return self.prototypes.get(char)

    def __repr__(self) -> str:
        return (f"ConfusableData(version={self.version!r}, "
                f"prototypes={len(self.prototypes)}, weights={len(self.weights)}, "
                f"fonts={len(self.fonts)})")


# Letters come first: a glyph confusable with a letter and a digit maps to the letter
ASCII_PROTOTYPES = string.ascii_lowercase + string.digits


def tr39_prototypes(prototypes: str = ASCII_PROTOTYPES) -> Dict[str, str]:
    """
    Map every single-character TR39 confusable of ``prototypes`` back to
    the prototype it imitates.

    ASCII homoglyphs (``1`` for ``l``, ``I`` for ``l``) are left out; a
    glyph listed under several prototypes keeps the first one.
    """
    mapping: Dict[str, str] = {}
    for prototype in prototypes:
        found = confusables.is_confusable(prototype, greedy=True)
        if not found:
            continue
        for item in found:
            for homoglyph in item.get('homoglyphs', []):
                char = homoglyph.get('c', '')
                if len(char) != 1 or char.isascii():
                    continue
                mapping.setdefault(char, prototype)
    return mapping


@lru_cache(maxsize=1)
def load_default_data() -> ConfusableData:
    """Load the TR39 prototypes and the tables bundled with the package."""
    source = resources.files(__package__) / 'data' / 'confusables.json'
    with source.open('r', encoding='utf-8') as f:
        raw = json.load(f)
    prototypes = tr39_prototypes()
    prototypes.update(raw.get('prototypes', {}))
    data = ConfusableData.from_dict({**raw, 'prototypes': prototypes})
    logger.debug(f"Loaded confusable data: {data!r}")
    return data
