#!/usr/bin/env python3
"""
Homograph Scanner - Simplified API

This module provides a clean, easy-to-use API for programmatic access
to forward scans (which look-alikes of my domain exist?) and reverse
scans (which brand does this domain imitate?).

Example usage:
    from homograph_scanner import HomographScanner, ScanConfig

    scanner = HomographScanner()
    result = scanner.scan("paypal.com", ScanConfig(top=10, max_edits=1))

    for variant in result.variants:
        print(f"{variant.domain} ({variant.danger_score:.0%}) -> {variant.ace}")
"""

import logging
from dataclasses import dataclass, replace
from typing import List, Optional

from .data import ConfusableData, load_default_data
from .generator import GenerateOptions, generate_variants
from .graph import BucketCache, BucketConfig, PrototypeBuckets
from .models import RawVariant, ReverseScanResult, ScanResult
from .resolver import DnsResolver
from .reverse import reverse_scan
from .scorer import ScoreOptions, score_variants
from .tld import TLD_VARIANTS_PER_CHAR, get_target_tlds, split_domain

logger = logging.getLogger(__name__)


SERVICE_MAX_TOP = 200


@dataclass
class ScanConfig:
    """Configuration for a forward scan."""
    max_edits: int = 2
    max_per_char: int = 10
    max_variants: int = 5000
    include_non_pvalid: bool = False
    use_max_danger: bool = False
    font: Optional[str] = None
    resolve: bool = False
    top: int = 20
    threshold: float = 0.0
    tlds: Optional[List[str]] = None
    tld_variants: bool = False
    concurrency: int = 10
    timeout: float = 3.0  # seconds per DNS lookup

    def __post_init__(self):
        if self.max_edits not in (1, 2):
            raise ValueError(f"max_edits must be 1 or 2, got {self.max_edits}")
        for name in ('max_per_char', 'max_variants', 'top', 'concurrency'):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be at least 1, got {getattr(self, name)}")
        if not 0.0 <= self.threshold <= 1.0:
            raise ValueError(f"threshold must be between 0 and 1, got {self.threshold}")
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")

    @classmethod
    def service(cls, **overrides) -> 'ScanConfig':
        """
        Latency-bounded preset for request/response use.

        Single edits only, 10 substitutes per position, 2000 variants and
        at most 200 results.
        """
        config = cls(**overrides)
        return replace(
            config,
            max_edits=1,
            max_per_char=10,
            max_variants=2000,
            top=min(SERVICE_MAX_TOP, config.top),
        )

    def generate_options(self) -> GenerateOptions:
        return GenerateOptions(
            max_edits=self.max_edits,
            max_per_char=self.max_per_char,
            max_variants=self.max_variants,
            include_non_pvalid=self.include_non_pvalid,
            use_max_danger=self.use_max_danger,
        )

    def score_options(self) -> ScoreOptions:
        return ScoreOptions(use_max_danger=self.use_max_danger, font=self.font)


class HomographScanner:
    """
    Simplified API for homograph domain scanning.

    The scanner owns the confusable tables and a cache of built prototype
    buckets, so one instance can serve many scans (from several threads).

    Attributes:
        data (ConfusableData): Weight tables used by every scan
        cache (BucketCache): Built buckets, one per bucket configuration
    """

    def __init__(self, data: Optional[ConfusableData] = None, resolver: Optional[DnsResolver] = None):
        """
        Initialize the scanner.

        Args:
            data: Confusable tables (defaults to the bundled ones)
            resolver: DNS resolver used when a scan asks for resolution;
                one is created from the scan config when omitted
        """
        self.data = data or load_default_data()
        self.cache = BucketCache(self.data)
        self.resolver = resolver

    def buckets(self, config: Optional[ScanConfig] = None) -> PrototypeBuckets:
        config = config or ScanConfig()
        return self.cache.get(BucketConfig(
            include_non_pvalid=config.include_non_pvalid,
            max_per_char=config.max_per_char,
            use_max_danger=config.use_max_danger,
        ))

    def generate(self, label: str, config: Optional[ScanConfig] = None) -> List[RawVariant]:
        """Generate ranked raw variants for a label (no TLD, no scoring)."""
        config = config or ScanConfig()
        return generate_variants(label, config.generate_options(), self.buckets(config))

    def scan(self, domain: str, config: Optional[ScanConfig] = None) -> ScanResult:
        """
        Run a full scan of a domain.

        Pipeline: generate variants -> score per target TLD -> threshold
        filter -> sort -> top N -> optional DNS resolution.

        Args:
            domain: Target domain (e.g. "paypal.com")
            config: Scan configuration

        Returns:
            ScanResult with the sorted, filtered variants
        """
        config = config or ScanConfig()
        label, tld = split_domain(domain)

        raw_variants = self.generate(label, config)
        total_generated = len(raw_variants)

        scripts: List[str] = []
        for raw in raw_variants:
            for sub in raw.substitutions:
                if sub.script not in scripts:
                    scripts.append(sub.script)

        tld_buckets = None
        if config.tld_variants:
            tld_buckets = self.cache.get(BucketConfig(max_per_char=TLD_VARIANTS_PER_CHAR))
        tlds = get_target_tlds(
            base_tlds=config.tlds or [tld],
            tld_variants=config.tld_variants,
            scripts=scripts,
            buckets=tld_buckets,
        )

        variants = []
        for target_tld in tlds:
            variants.extend(score_variants(raw_variants, target_tld, config.score_options(), self.data))

        variants = [v for v in variants if v.danger_score >= config.threshold]
        variants.sort(key=lambda v: v.danger_score, reverse=True)
        variants = variants[:config.top]

        logger.info(f"Scanned {domain}: {total_generated} variants generated, "
                    f"{len(tlds)} TLDs, keeping {len(variants)}")

        if config.resolve and variants:
            resolver = self.resolver or DnsResolver(config.concurrency, config.timeout)
            records = resolver.resolve_all(v.ace for v in variants)
            for variant in variants:
                variant.dns = records.get(variant.ace)

            # Registered first, active threats first among those, then danger
            variants.sort(key=lambda v: (
                bool(v.dns and v.dns.registered),
                bool(v.dns and v.dns.threat_level == 'active'),
                v.danger_score,
            ), reverse=True)

        return ScanResult(
            original=domain,
            label=label,
            tld=tld,
            total_generated=total_generated,
            variants=variants,
        )

    def reverse(self, domain: str) -> ReverseScanResult:
        """Find which canonical domain a suspicious domain imitates."""
        return reverse_scan(domain, self.data)
