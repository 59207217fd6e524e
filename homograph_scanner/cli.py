#!/usr/bin/env python3
"""
Command Line Interface for Homograph Scanner

Generate confusable look-alikes of a domain, check which of them are
registered, and find out which brand a suspicious domain imitates.
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from . import __version__
from .api import HomographScanner, ScanConfig
from .batch import load_domains_from_file, scan_batch
from .formatter import OutputFormatter, format_reverse_result, format_scan_result

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_THREATS = 2


def setup_logging(verbose: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        stream=sys.stderr,
    )


def _output_format(args) -> str:
    if getattr(args, 'json', False):
        return 'json'
    if getattr(args, 'csv', False):
        return 'csv'
    return 'table'


def build_config(args) -> ScanConfig:
    """Build a ScanConfig from parsed arguments (raises ValueError on bad values)."""
    options = dict(
        max_edits=args.max_edits,
        max_per_char=args.max_per_char,
        max_variants=args.max_variants,
        include_non_pvalid=args.include_non_pvalid,
        use_max_danger=args.use_max_danger,
        font=args.font,
        resolve=args.resolve,
        top=args.top,
        threshold=args.threshold,
        tlds=[t.strip().lower() for t in args.tlds.split(',') if t.strip()] if args.tlds else None,
        tld_variants=args.tld_variants,
        concurrency=args.concurrency,
        timeout=args.timeout,
    )
    if args.service:
        return ScanConfig.service(**options)
    return ScanConfig(**options)


def run_scan(args, scanner: HomographScanner, config: ScanConfig) -> int:
    result = scanner.scan(args.domain, config)
    print(format_scan_result(result, _output_format(args)))

    active = [v for v in result.variants if v.dns and v.dns.threat_level == 'active']
    return EXIT_THREATS if active else EXIT_OK


def run_reverse(args, scanner: HomographScanner) -> int:
    result = scanner.reverse(args.domain)
    fmt = 'json' if args.json else 'table'
    print(format_reverse_result(result, fmt))
    return EXIT_THREATS if result.impersonates else EXIT_OK


def run_batch(args, scanner: HomographScanner, config: ScanConfig) -> int:
    try:
        domains = load_domains_from_file(args.file)
    except OSError as e:
        print(f"Error: cannot read file \"{args.file}\": {e}", file=sys.stderr)
        return EXIT_ERROR

    if not domains:
        print("No domains to scan!", file=sys.stderr)
        return EXIT_ERROR

    fmt = _output_format(args)
    report = scan_batch(domains, scanner, config, show_progress=fmt == 'table' and sys.stderr.isatty())

    if fmt == 'json':
        print(json.dumps(report.to_dict(), indent=2, ensure_ascii=False))
    elif fmt == 'csv':
        print(''.join(
            OutputFormatter.format_csv(result, header=i == 0)
            for i, result in enumerate(report.results)
        ), end='')
    else:
        for result in report.results:
            print(OutputFormatter.format_table(result))
        for domain, error in report.errors.items():
            print(f"[!] {domain}: {error}", file=sys.stderr)

    if report.active_count:
        return EXIT_THREATS
    return EXIT_ERROR if report.errors and not report.results else EXIT_OK


def _add_scan_options(parser: argparse.ArgumentParser):
    parser.add_argument('--resolve', action='store_true',
                        help='Perform DNS resolution (A, AAAA, MX, NS)')
    output = parser.add_mutually_exclusive_group()
    output.add_argument('--json', action='store_true', help='Output as JSON')
    output.add_argument('--csv', action='store_true', help='Output as CSV')
    parser.add_argument('--top', type=int, default=20,
                        help='Show top N results (default: 20)')
    parser.add_argument('--threshold', type=float, default=0.0,
                        help='Min danger score 0-1 (default: 0.0)')
    parser.add_argument('--max-edits', type=int, choices=[1, 2], default=2,
                        help='Max simultaneous substitutions (default: 2)')
    parser.add_argument('--max-per-char', type=int, default=10,
                        help='Max substitutes per position (default: 10)')
    parser.add_argument('--max-variants', type=int, default=5000,
                        help='Hard cap on generated variants (default: 5000)')
    parser.add_argument('--font', help='Use font-specific weights')
    parser.add_argument('--use-max-danger', action='store_true',
                        help='Score with max similarity instead of the stable (p95) one')
    parser.add_argument('--include-non-pvalid', action='store_true',
                        help='Include characters IDNA does not allow')
    parser.add_argument('--tlds', help='TLDs to check, comma-separated (default: the domain\'s own)')
    parser.add_argument('--tld-variants', action='store_true',
                        help='Also generate confusable TLD substitutions')
    parser.add_argument('--concurrency', type=int, default=10,
                        help='Max parallel DNS lookups (default: 10)')
    parser.add_argument('--timeout', type=float, default=3.0,
                        help='DNS timeout in seconds (default: 3)')
    parser.add_argument('--service', action='store_true',
                        help='Latency-bounded preset: 1 edit, 10 per char, 2000 variants, top <= 200')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable debug logging')


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='homograph-scanner',
        description="Homograph Scanner - Find confusable look-alikes of a domain",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s scan paypal.com
  %(prog)s scan paypal.com --resolve --top 50
  %(prog)s scan google.com --json --font Arial
  %(prog)s reverse xn--pypal-4ve.com
  %(prog)s batch domains.txt --resolve --csv
        """
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    scan_parser = subparsers.add_parser('scan', help='Generate confusable variants of a domain')
    scan_parser.add_argument('domain', help='Target domain (e.g. paypal.com)')
    _add_scan_options(scan_parser)

    reverse_parser = subparsers.add_parser('reverse', help='What does this domain impersonate?')
    reverse_parser.add_argument('domain', help='Suspicious domain (Unicode or xn-- form)')
    reverse_parser.add_argument('--json', action='store_true', help='Output as JSON')
    reverse_parser.add_argument('-v', '--verbose', action='store_true',
                                help='Enable debug logging')

    batch_parser = subparsers.add_parser('batch', help='Scan multiple domains from a file')
    batch_parser.add_argument('file', help='File containing domains (one per line)')
    _add_scan_options(batch_parser)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return EXIT_ERROR

    setup_logging(args.verbose)
    scanner = HomographScanner()

    if args.command == 'reverse':
        return run_reverse(args, scanner)

    try:
        config = build_config(args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR

    if args.command == 'scan':
        return run_scan(args, scanner, config)
    return run_batch(args, scanner, config)


if __name__ == '__main__':
    sys.exit(main())
