"""
DNS resolution of candidate domains.

Each lookup is bounded by a timeout and every failure degrades to "no
records"; a batch is fanned out over a bounded thread pool.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Iterable, List

import dns.exception
import dns.resolver

from .models import DnsResult, MxRecord

logger = logging.getLogger(__name__)


RECORD_TYPES = ('A', 'AAAA', 'MX', 'NS')


class DnsResolver:
    """Resolves A, AAAA, MX and NS records for candidate domains."""

    def __init__(self, concurrency: int = 10, timeout: float = 3.0, resolver=None):
        self.concurrency = concurrency
        self.timeout = timeout
        if resolver is None:
            resolver = dns.resolver.Resolver()
        resolver.timeout = timeout
        resolver.lifetime = timeout
        self.dns_resolver = resolver

    def _query(self, domain: str, record_type: str) -> List[str]:
        try:
            answers = self.dns_resolver.resolve(domain, record_type)
        except (dns.resolver.NXDOMAIN, dns.resolver.NoAnswer,
                dns.resolver.NoNameservers, dns.exception.Timeout):
            return []
        except (dns.exception.DNSException, ValueError) as e:
            logger.debug(f"DNS error for {domain} ({record_type}): {e}")
            return []
        return [rdata.to_text() for rdata in answers]

    def _query_mx(self, domain: str) -> List[MxRecord]:
        records = []
        for text in self._query(domain, 'MX'):
            priority, _, exchange = text.partition(' ')
            try:
                records.append(MxRecord(int(priority), exchange.rstrip('.')))
            except ValueError:
                logger.debug(f"Unparseable MX record for {domain}: {text!r}")
        return records

    def resolve(self, domain: str) -> DnsResult:
        """Look up one domain; never raises for DNS failures."""
        return DnsResult.from_records(
            a=self._query(domain, 'A'),
            aaaa=self._query(domain, 'AAAA'),
            mx=self._query_mx(domain),
            ns=[ns.rstrip('.') for ns in self._query(domain, 'NS')],
        )

    def resolve_all(self, domains: Iterable[str]) -> Dict[str, DnsResult]:
        """Resolve many domains with at most ``concurrency`` lookups in flight."""
        unique = list(dict.fromkeys(domains))
        if not unique:
            return {}
        with ThreadPoolExecutor(max_workers=max(1, self.concurrency)) as executor:
            results = executor.map(self.resolve, unique)
            return dict(zip(unique, results))
