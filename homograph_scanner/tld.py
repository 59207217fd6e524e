"""
Label / TLD handling
====================

Splitting a domain into the label the scanner mutates and the suffix it
keeps, plus the TLD lists a scan checks.
"""

import logging
from typing import Dict, Iterable, List, NamedTuple, Optional, Set

import tldextract

from .graph import PrototypeBuckets

logger = logging.getLogger(__name__)


DEFAULT_TLD = 'com'

# Common TLDs for scanning
DEFAULT_TLDS: List[str] = ['com', 'net', 'org', 'io']

# Multi-part suffixes checked before the public suffix list
KNOWN_MULTI_PART_TLDS: List[str] = [
    'co.uk', 'com.au', 'co.nz', 'co.jp', 'com.br', 'co.kr',
    'co.in', 'com.mx', 'com.cn', 'org.uk', 'net.au', 'ac.uk',
]

# IDN ccTLDs added when variants use the matching script
IDN_TLDS: Dict[str, List[str]] = {
    'Cyrillic': ['xn--p1ai'],               # .рф
    'Arabic': ['xn--mgbaam7a8h'],           # .امارات
    'Han': ['xn--fiqs8s', 'xn--fiqz9s'],    # .中国, .中國
    'Hangul': ['xn--3e0b707e'],             # .한국
    'Thai': ['xn--o3cw4h'],                 # .ไทย
    'Devanagari': ['xn--h2brj9c'],          # .भारत
}

TLD_VARIANTS_PER_CHAR = 5

# Offline extractor: bundled public suffix list snapshot, no HTTP fetch
_extractor = tldextract.TLDExtract(suffix_list_urls=())


class SplitDomain(NamedTuple):
    label: str
    tld: str


def _clean(domain: str) -> str:
    host = domain.strip().lower()
    if '://' in host:
        host = host.split('://', 1)[1]
    if '/' in host:
        host = host.split('/', 1)[0]
    return host.rstrip('.')


def split_domain(domain: str) -> SplitDomain:
    """
    Split a domain into label and TLD.

    ``paypal.co.uk`` -> ``('paypal', 'co.uk')``; ``login.paypal.com`` ->
    ``('login.paypal', 'com')``; a bare ``paypal`` gets ``com``.
    """
    host = _clean(domain)

    for tld in KNOWN_MULTI_PART_TLDS:
        if host.endswith(f".{tld}"):
            return SplitDomain(host[:-(len(tld) + 1)], tld)

    if '.' not in host:
        return SplitDomain(host, DEFAULT_TLD)

    suffix = _extractor(host).suffix
    if suffix and host.endswith(f".{suffix}"):
        return SplitDomain(host[:-(len(suffix) + 1)], suffix)

    label, _, tld = host.rpartition('.')
    return SplitDomain(label, tld)


def generate_tld_variants(tld: str, buckets: PrototypeBuckets) -> List[str]:
    """
    Confusable spellings of a TLD (single substitution only).

    ``com`` -> ``cоm`` (Cyrillic о) and so on.
    """
    chars = list(tld.lower())
    variants: List[str] = []
    seen: Set[str] = set()

    for i, char in enumerate(chars):
        for sub in buckets.substitutes(char)[:TLD_VARIANTS_PER_CHAR]:
            mutated = list(chars)
            mutated[i] = sub.char
            variant = ''.join(mutated)
            if variant not in seen:
                seen.add(variant)
                variants.append(variant)

    return variants


def get_target_tlds(base_tlds: Optional[Iterable[str]] = None,
                    tld_variants: bool = False,
                    scripts: Optional[Iterable[str]] = None,
                    buckets: Optional[PrototypeBuckets] = None) -> List[str]:
    """
    All TLDs a scan should check.

    Starts from ``base_tlds``, adds IDN ccTLDs for the scripts seen in the
    variants and, with ``tld_variants``, confusable spellings of every TLD
    collected so far.
    """
    tlds: List[str] = []
    for tld in (base_tlds if base_tlds is not None else DEFAULT_TLDS):
        if tld not in tlds:
            tlds.append(tld)

    for script in scripts or ():
        for idn_tld in IDN_TLDS.get(script, []):
            if idn_tld not in tlds:
                tlds.append(idn_tld)

    if tld_variants and buckets is not None:
        for tld in list(tlds):
            for variant in generate_tld_variants(tld, buckets):
                if variant not in tlds:
                    tlds.append(variant)

    return tlds
