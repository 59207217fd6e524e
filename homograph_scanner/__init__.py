"""
Homograph Scanner
=================

Finds visually-confusable look-alikes of a domain (Unicode homographs that
could be registered for phishing) and, in reverse, recovers the brand a
suspicious domain imitates.

Usage:
    from homograph_scanner import HomographScanner, ScanConfig

    scanner = HomographScanner()
    result = scanner.scan('paypal.com', ScanConfig(max_edits=1, top=10))

    verdict = scanner.reverse('xn--pypal-4ve.com')
"""

__version__ = '1.0.0'
__license__ = 'MIT'

from .models import (
    Substitute,
    Substitution,
    RawVariant,
    DnsResult,
    DomainVariant,
    ScanResult,
    Impersonation,
    ReverseScanResult,
)
from .data import ConfusableData, WeightTable, load_default_data
from .graph import BucketCache, BucketConfig, PrototypeBuckets, build_buckets
from .generator import GenerateOptions, generate_variants
from .scorer import ScoreOptions, compute_danger_score, find_best_font, score_variants
from .ace import from_ace, to_ace
from .reverse import reverse_scan
from .tld import get_target_tlds, split_domain
from .resolver import DnsResolver
from .api import HomographScanner, ScanConfig
from .formatter import OutputFormatter

__all__ = [
    'Substitute',
    'Substitution',
    'RawVariant',
    'DnsResult',
    'DomainVariant',
    'ScanResult',
    'Impersonation',
    'ReverseScanResult',
    'ConfusableData',
    'WeightTable',
    'load_default_data',
    'BucketCache',
    'BucketConfig',
    'PrototypeBuckets',
    'build_buckets',
    'GenerateOptions',
    'generate_variants',
    'ScoreOptions',
    'compute_danger_score',
    'find_best_font',
    'score_variants',
    'from_ace',
    'to_ace',
    'reverse_scan',
    'get_target_tlds',
    'split_domain',
    'DnsResolver',
    'HomographScanner',
    'ScanConfig',
    'OutputFormatter',
]
