"""
Variant Generator
=================

Enumerates look-alike labels reachable by one or two confusable
substitutions, bounded by per-position and total caps, and ranks them
by aggregate danger.
"""

import logging
from dataclasses import dataclass
from itertools import product
from typing import Iterable, Iterator, List, Optional, Sequence

from .data import ConfusableData
from .graph import BucketConfig, PrototypeBuckets, build_buckets
from .models import RawVariant, Substitution

logger = logging.getLogger(__name__)


# Substitutes crossed per position in the 2-edit pass
MAX_PER_CHAR_PAIRED = 5

MULTI_EDIT_PENALTY = 0.1


@dataclass
class GenerateOptions:
    """Options for variant generation."""
    max_edits: int = 2
    max_per_char: int = 10
    max_variants: int = 5000
    include_non_pvalid: bool = False
    use_max_danger: bool = False

    def bucket_config(self) -> BucketConfig:
        return BucketConfig(
            include_non_pvalid=self.include_non_pvalid,
            max_per_char=self.max_per_char,
            use_max_danger=self.use_max_danger,
        )


def aggregate_score(substitutions: Sequence[Substitution], use_max_danger: bool = False) -> float:
    """Product of the edge scores with a 10% penalty per extra edit."""
    if not substitutions:
        return 0.0
    score = 1.0
    for sub in substitutions:
        score *= sub.score(use_max_danger)
    return score * (1 - MULTI_EDIT_PENALTY * (len(substitutions) - 1))


def _mutate(chars: List[str], edits: Sequence[Substitution]) -> str:
    mutated = list(chars)
    for edit in edits:
        mutated[edit.position] = edit.replacement
    return ''.join(mutated)


def iter_candidates(label: str, buckets: PrototypeBuckets,
                    max_edits: int = 2, max_per_char: int = 10) -> Iterator[RawVariant]:
    """
    Lazily yield candidate variants of ``label``.

    All 1-edit candidates come first (position by position), then the
    2-edit candidates for each position pair ``i < j``. Candidates are not
    deduplicated here.
    """
    chars = list(label.lower())

    for i, char in enumerate(chars):
        for sub in buckets.substitutes(char)[:max_per_char]:
            edit = Substitution.from_substitute(i, char, sub)
            yield RawVariant(_mutate(chars, [edit]), (edit,))

    if max_edits < 2:
        return

    paired = min(max_per_char, MAX_PER_CHAR_PAIRED)
    for i in range(len(chars) - 1):
        subs_i = buckets.substitutes(chars[i])[:paired]
        if not subs_i:
            continue
        for j in range(i + 1, len(chars)):
            subs_j = buckets.substitutes(chars[j])[:paired]
            if not subs_j:
                continue
            for sub_i, sub_j in product(subs_i, subs_j):
                edits = (
                    Substitution.from_substitute(i, chars[i], sub_i),
                    Substitution.from_substitute(j, chars[j], sub_j),
                )
                yield RawVariant(_mutate(chars, edits), edits)


def take_distinct(candidates: Iterable[RawVariant], limit: int) -> Iterator[RawVariant]:
    """
    Yield candidates with a label not seen before, stopping after ``limit``.

    Duplicates do not count toward the limit. Once the limit is reached no
    further candidate is pulled from ``candidates``.
    """
    if limit <= 0:
        return
    seen = set()
    for variant in candidates:
        if variant.label in seen:
            continue
        seen.add(variant.label)
        yield variant
        if len(seen) >= limit:
            logger.debug(f"Variant cap of {limit} reached")
            return


def generate_variants(label: str, options: Optional[GenerateOptions] = None,
                      buckets: Optional[PrototypeBuckets] = None,
                      data: Optional[ConfusableData] = None) -> List[RawVariant]:
    """
    Generate confusable variants of a label, most dangerous first.

    Args:
        label: Domain label without TLD
        options: Generation caps and scoring key
        buckets: Prebuilt buckets; built from ``options`` when omitted
        data: Weight tables used when buckets have to be built

    Returns:
        Distinct raw variants sorted by aggregate score (descending)
    """
    options = options or GenerateOptions()
    if buckets is None:
        buckets = build_buckets(options.bucket_config(), data)

    candidates = iter_candidates(label, buckets, options.max_edits, options.max_per_char)
    variants = list(take_distinct(candidates, options.max_variants))

    variants.sort(
        key=lambda v: aggregate_score(v.substitutions, options.use_max_danger),
        reverse=True,
    )
    logger.debug(f"Generated {len(variants)} variants for '{label}'")
    return variants
