"""
Danger Scorer
=============

Turns raw variants into scored ``DomainVariant`` records: composite
danger score, ACE form and the font in which the variant is most
convincing.
"""

import logging
from dataclasses import dataclass
from typing import List, NamedTuple, Optional, Sequence

from .ace import to_ace
from .data import ConfusableData, WeightTable, load_default_data
from .generator import aggregate_score
from .models import DomainVariant, RawVariant, Substitution

logger = logging.getLogger(__name__)


# Applied when replacements span more than one script
MIXED_SCRIPT_PENALTY = 0.9


@dataclass
class ScoreOptions:
    """Options for scoring."""
    use_max_danger: bool = False
    font: Optional[str] = None


class FontMatch(NamedTuple):
    font: str
    score: float


def compute_danger_score(substitutions: Sequence[Substitution],
                         options: Optional[ScoreOptions] = None) -> float:
    """
    Composite danger of a variant, in [0, 1].

    ``product(score_i) * (1 - 0.1 * (edits - 1))``, times 0.9 when the
    replacements come from more than one script.
    """
    if not substitutions:
        return 0.0
    options = options or ScoreOptions()

    score = aggregate_score(substitutions, options.use_max_danger)
    if len({sub.script for sub in substitutions}) > 1:
        score *= MIXED_SCRIPT_PENALTY
    return max(0.0, min(1.0, score))


def font_score(substitutions: Sequence[Substitution], table: WeightTable) -> Optional[float]:
    """Product of font-specific dangers, or None if any edit is not covered."""
    score = 1.0
    for sub in substitutions:
        weight = table.weight_of(sub.replacement, sub.original)
        if weight is None:
            return None
        score *= weight.danger
    return score


def find_best_font(substitutions: Sequence[Substitution],
                   data: Optional[ConfusableData] = None) -> Optional[FontMatch]:
    """Find the font whose rendering makes the variant most convincing."""
    data = data or load_default_data()
    best: Optional[FontMatch] = None

    for font_name, table in data.fonts.items():
        score = font_score(substitutions, table)
        if score is not None and score > (best.score if best else 0.0):
            best = FontMatch(font_name, score)

    return best


def _font_match(substitutions: Sequence[Substitution], font: Optional[str],
                data: ConfusableData) -> Optional[FontMatch]:
    if not font:
        return find_best_font(substitutions, data)

    table = data.fonts.get(font)
    if table is None:
        logger.debug(f"No font-specific weights for '{font}'")
        return None
    score = font_score(substitutions, table)
    return FontMatch(font, score) if score is not None else None


def score_variants(raw_variants: Sequence[RawVariant], tld: str,
                   options: Optional[ScoreOptions] = None,
                   data: Optional[ConfusableData] = None) -> List[DomainVariant]:
    """Join raw variants with a TLD and score them (input order is kept)."""
    options = options or ScoreOptions()
    data = data or load_default_data()

    scored = []
    for raw in raw_variants:
        domain = f"{raw.label}.{tld}"
        match = _font_match(raw.substitutions, options.font, data)
        scored.append(DomainVariant(
            domain=domain,
            danger_score=compute_danger_score(raw.substitutions, options),
            edit_count=len(raw.substitutions),
            substitutions=raw.substitutions,
            ace=to_ace(domain),
            best_font=match.font if match else None,
            best_font_score=match.score if match else None,
        ))
    return scored
