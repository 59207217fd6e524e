#!/usr/bin/env python3
"""
Batch Homograph Scanner
=======================

Scan multiple target domains in one run. Targets are read from a file
(one per line) and a failing domain never stops the batch.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn

from .api import HomographScanner, ScanConfig
from .models import ScanResult

logger = logging.getLogger(__name__)


@dataclass
class BatchReport:
    """Results of a batch run, keyed by target domain."""
    results: List[ScanResult] = field(default_factory=list)
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def active_count(self) -> int:
        return sum(
            1 for result in self.results for v in result.variants
            if v.dns and v.dns.threat_level == 'active'
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'summary': {
                'total_domains_scanned': len(self.results) + len(self.errors),
                'failed': len(self.errors),
                'total_variants_generated': sum(r.total_generated for r in self.results),
                'total_active': self.active_count,
            },
            'results': [r.to_dict() for r in self.results],
            'errors': dict(self.errors),
        }


def load_domains_from_file(filepath: str) -> List[str]:
    """Load domain list from file."""
    domains = []

    with open(filepath, 'r', encoding='utf-8') as f:
        for line in f:
            line = line.strip()
            # Skip comments and empty lines
            if line and not line.startswith('#'):
                domains.append(line)

    return domains


def scan_batch(domains: Iterable[str],
               scanner: Optional[HomographScanner] = None,
               config: Optional[ScanConfig] = None,
               show_progress: bool = True,
               console: Optional[Console] = None) -> BatchReport:
    """
    Scan every domain with one shared scanner.

    Args:
        domains: Target domains
        scanner: Scanner to use (its bucket cache is shared by every scan)
        config: Scan configuration applied to each domain
        show_progress: Display a rich progress bar
        console: Console the progress bar writes to

    Returns:
        BatchReport with one ScanResult per successful domain
    """
    domains = list(domains)
    scanner = scanner or HomographScanner()
    config = config or ScanConfig()
    report = BatchReport()

    def scan_one(domain: str):
        try:
            report.results.append(scanner.scan(domain, config))
        except Exception as e:
            logger.warning(f"Scan failed for {domain}: {e}")
            report.errors[domain] = str(e)

    if not show_progress:
        for domain in domains:
            scan_one(domain)
        return report

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console or Console(stderr=True),
    ) as progress:
        task = progress.add_task("[cyan]Scanning domains...", total=len(domains))

        for domain in domains:
            progress.update(task, description=f"[cyan]Scanning {domain}...")
            scan_one(domain)
            progress.advance(task)

    logger.info(f"Batch complete: {len(report.results)} scanned, {len(report.errors)} failed")
    return report
