"""
Reverse Resolver
================

Given a suspicious domain, decode it, map every confusable character back
to its ASCII prototype and report the canonical domain it imitates.
"""

import logging
import re
from typing import List, Optional

from .ace import from_ace, to_ace
from .data import ConfusableData, load_default_data, script_of, to_codepoint
from .models import DEFAULT_WEIGHT, Impersonation, ReverseScanResult, Substitution
from .tld import split_domain

logger = logging.getLogger(__name__)


ASCII_ALNUM = re.compile(r'[a-z0-9]')


def reverse_scan(domain: str, data: Optional[ConfusableData] = None) -> ReverseScanResult:
    """
    Determine what legitimate domain ``domain`` could be impersonating.

    Returns at most one candidate: the skeleton of the label (every
    confusable character replaced by its prototype) joined with the TLD,
    scored by the mean ``stable_danger`` of the substitutions. A domain
    without confusable characters yields no candidate.
    """
    data = data or load_default_data()
    label, tld = split_domain(domain)
    decoded = from_ace(label)

    substitutions: List[Substitution] = []
    canonical: List[str] = []

    for position, char in enumerate(decoded):
        prototype = data.prototype_of(char)
        if prototype is None or prototype == char or not ASCII_ALNUM.fullmatch(prototype):
            canonical.append(char)
            continue

        weight = data.weights.weight_of(char, prototype) or DEFAULT_WEIGHT
        substitutions.append(Substitution(
            position=position,
            original=prototype,
            replacement=char,
            codepoint=to_codepoint(char),
            script=script_of(char),
            danger=weight.danger,
            stable_danger=weight.stable_danger,
            idna_pvalid=weight.idna_pvalid,
        ))
        canonical.append(prototype)

    impersonates = []
    if substitutions:
        similarity = sum(s.stable_danger for s in substitutions) / len(substitutions)
        target = f"{''.join(canonical)}.{tld}"
        impersonates.append(Impersonation(target, similarity, tuple(substitutions)))
        logger.debug(f"{domain} imitates {target} ({len(substitutions)} substitutions)")

    return ReverseScanResult(domain=domain, ace=to_ace(domain), impersonates=impersonates)
