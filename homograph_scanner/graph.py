"""
Confusable Graph Builder
========================

Turns the prototype mapping and the pairwise weight table into
``PrototypeBuckets``: for every character, the characters that can
visually replace it, most dangerous first.

Every edge is inserted in both directions, so Latin ``a`` lists Cyrillic
``а`` and Cyrillic ``а`` lists Latin ``a``. The PVALID filter can drop one
direction of a pair without the other.
"""

import logging
import threading
from collections import abc
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterator, Optional, Tuple

from .data import ConfusableData, load_default_data, script_of, to_codepoint
from .models import DEFAULT_WEIGHT, Substitute

logger = logging.getLogger(__name__)


DEFAULT_MAX_PER_CHAR = 50


@dataclass(frozen=True)
class BucketConfig:
    """Build options; also the memoization key of ``BucketCache``."""
    include_non_pvalid: bool = False
    max_per_char: int = DEFAULT_MAX_PER_CHAR
    use_max_danger: bool = False


class PrototypeBuckets(abc.Mapping):
    """
    Read-only mapping of prototype character -> ranked substitutes.

    Each bucket is a tuple sorted by the configured score key and
    truncated to ``max_per_char``. Instances are safe to share between
    threads.
    """

    def __init__(self, buckets: Dict[str, Tuple[Substitute, ...]], config: BucketConfig):
        self._buckets = MappingProxyType(dict(buckets))
        self.config = config

    def __getitem__(self, char: str) -> Tuple[Substitute, ...]:
        return self._buckets[char]

    def __iter__(self) -> Iterator[str]:
        return iter(self._buckets)

    def __len__(self) -> int:
        return len(self._buckets)

    def substitutes(self, char: str) -> Tuple[Substitute, ...]:
        """Substitutes for ``char``; empty when it has no bucket."""
        return self._buckets.get(char, ())

    def __repr__(self) -> str:
        return f"PrototypeBuckets(chars={len(self)}, config={self.config})"


class _BucketBuilder:
    """Accumulates directed edges before ranking."""

    def __init__(self, include_non_pvalid: bool):
        self.include_non_pvalid = include_non_pvalid
        self.raw: Dict[str, Dict[str, Substitute]] = {}

    def add_edge(self, anchor: str, sub: str, danger: float,
                 stable_danger: float, idna_pvalid: bool):
        """Record that ``sub`` can stand in for ``anchor``."""
        if anchor == sub:
            return
        if not self.include_non_pvalid and not idna_pvalid:
            return

        bucket = self.raw.setdefault(anchor, {})
        existing = bucket.get(sub)
        if existing is not None:
            # Per-field maximum, PVALID flags OR-ed
            danger = max(danger, existing.danger)
            stable_danger = max(stable_danger, existing.stable_danger)
            idna_pvalid = idna_pvalid or existing.idna_pvalid
            codepoint, script = existing.codepoint, existing.script
        else:
            codepoint, script = to_codepoint(sub), script_of(sub)

        bucket[sub] = Substitute(
            char=sub,
            codepoint=codepoint,
            script=script,
            danger=danger,
            stable_danger=stable_danger,
            idna_pvalid=idna_pvalid,
        )

    def finalize(self, config: BucketConfig) -> PrototypeBuckets:
        buckets: Dict[str, Tuple[Substitute, ...]] = {}
        for anchor, subs in self.raw.items():
            ranked = sorted(
                subs.values(),
                key=lambda s: s.score(config.use_max_danger),
                reverse=True,
            )
            buckets[anchor] = tuple(ranked[:config.max_per_char])
        return PrototypeBuckets(buckets, config)


def build_buckets(config: Optional[BucketConfig] = None,
                  data: Optional[ConfusableData] = None) -> PrototypeBuckets:
    """
    Build prototype buckets from the mapping and weight tables.

    1. Each ``confusable -> prototype`` mapping entry becomes two edges,
       weighted from the weight table (0.5 / 0.5 / not PVALID if absent).
    2. Each explicit weight-table pair ``(A, B)`` becomes two edges
       anchored on the lower-cased keys.
    3. Buckets are ranked by ``stable_danger`` (or ``danger`` with
       ``use_max_danger``) and capped at ``max_per_char``.
    """
    config = config or BucketConfig()
    data = data or load_default_data()
    builder = _BucketBuilder(config.include_non_pvalid)

    for char, prototype in data.prototypes.items():
        if char == prototype:
            continue
        weight = data.weights.weight_of(char, prototype) or DEFAULT_WEIGHT
        builder.add_edge(prototype, char, weight.danger, weight.stable_danger, weight.idna_pvalid)
        builder.add_edge(char, prototype, weight.danger, weight.stable_danger, weight.idna_pvalid)

    for key_a, key_b, weight in data.weights.pairs():
        builder.add_edge(key_a.lower(), key_b, weight.danger, weight.stable_danger, weight.idna_pvalid)
        builder.add_edge(key_b.lower(), key_a, weight.danger, weight.stable_danger, weight.idna_pvalid)

    buckets = builder.finalize(config)
    logger.debug(f"Built {len(buckets)} prototype buckets with {config}")
    return buckets


class BucketCache:
    """
    Caller-owned cache of built buckets, one per ``BucketConfig``.

    Building re-scans the whole weight table, so a scanner keeps one of
    these and reuses it for every request.
    """

    def __init__(self, data: Optional[ConfusableData] = None):
        self.data = data or load_default_data()
        self._buckets: Dict[BucketConfig, PrototypeBuckets] = {}
        self._lock = threading.Lock()
        self._build_locks: Dict[BucketConfig, threading.Lock] = {}

    def get(self, config: Optional[BucketConfig] = None) -> PrototypeBuckets:
        config = config or BucketConfig()
        buckets = self._buckets.get(config)
        if buckets is not None:
            return buckets

        # One build per config; builds of different configs run in parallel
        with self._lock:
            build_lock = self._build_locks.setdefault(config, threading.Lock())
        with build_lock:
            buckets = self._buckets.get(config)
            if buckets is None:
                buckets = build_buckets(config, self.data)
                self._buckets[config] = buckets
        return buckets

    def __len__(self) -> int:
        return len(self._buckets)

    def clear(self):
        with self._lock:
            self._buckets.clear()
            self._build_locks.clear()
