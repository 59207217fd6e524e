"""Tests for table, JSON and CSV output."""

import csv
import io
import json

import pytest

from homograph_scanner.formatter import (
    CSV_FIELDS,
    OutputFormatter,
    format_reverse_result,
    format_scan_result,
)
from homograph_scanner.models import DnsResult, DomainVariant, MxRecord, ReverseScanResult, ScanResult
from homograph_scanner.reverse import reverse_scan

from conftest import CYR_A, make_sub


@pytest.fixture
def scan_result():
    sub = make_sub(0.97, danger=0.99, position=1)
    variant = DomainVariant(
        domain='p' + CYR_A + 'ypal.com',
        danger_score=0.97,
        edit_count=1,
        substitutions=(sub,),
        ace='xn--pypal-4ve.com',
        best_font='Helvetica',
        best_font_score=1.0,
    )
    return ScanResult(original='paypal.com', label='paypal', tld='com',
                      total_generated=12, variants=[variant])


@pytest.fixture
def resolved_result(scan_result):
    scan_result.variants[0].dns = DnsResult.from_records(
        ['192.0.2.1'], [], [MxRecord(10, 'mx.example')], ['ns1.example'])
    return scan_result


class TestTable:
    def test_contains_variant_rows(self, scan_result):
        output = OutputFormatter.format_table(scan_result)
        assert 'paypal.com' in output
        assert 'xn--pypal-4ve.com' in output
        assert '97%' in output
        assert 'Cyrillic' in output
        assert '12 variants generated' in output
        assert 'Helvetica' in output

    def test_dns_columns_only_when_resolved(self, scan_result):
        assert 'Status' not in OutputFormatter.format_table(scan_result)

    def test_dns_summary(self, resolved_result):
        output = OutputFormatter.format_table(resolved_result)
        assert 'ACTIVE' in output
        assert '192.0.2.1' in output
        assert '1 variant(s) with MX records' in output


class TestJson:
    def test_structure(self, scan_result):
        data = json.loads(OutputFormatter.format_json(scan_result))
        assert data['original'] == 'paypal.com'
        assert data['total_generated'] == 12
        [variant] = data['variants']
        assert variant['ace'] == 'xn--pypal-4ve.com'
        assert variant['scripts'] == ['Cyrillic']
        assert variant['substitutions'][0]['codepoint'] == 'U+0430'
        assert variant['dns'] is None

    def test_dns_fields(self, resolved_result):
        data = json.loads(format_scan_result(resolved_result, 'json'))
        dns = data['variants'][0]['dns']
        assert dns['threat_level'] == 'active'
        assert dns['mx'] == [{'priority': 10, 'exchange': 'mx.example'}]


class TestCsv:
    def test_header_and_row(self, scan_result):
        output = OutputFormatter.format_csv(scan_result)
        assert output.startswith('domain,danger_score')
        [row] = list(csv.DictReader(io.StringIO(output)))
        assert list(row) == CSV_FIELDS
        assert row['danger_score'] == '0.9700'
        assert row['punycode'] == 'xn--pypal-4ve.com'
        assert row['best_font_ssim'] == '1.0000'
        assert row['registered'] == 'false'
        assert row['threat_level'] == ''

    def test_dns_columns(self, resolved_result):
        [row] = list(csv.DictReader(io.StringIO(format_scan_result(resolved_result, 'csv'))))
        assert row['registered'] == 'true'
        assert row['threat_level'] == 'active'
        assert row['a_records'] == '192.0.2.1'
        assert row['mx_records'] == '10:mx.example'

    def test_without_header(self, scan_result):
        output = OutputFormatter.format_csv(scan_result, header=False)
        assert not output.startswith('domain,')
        assert len(output.strip().splitlines()) == 1


class TestReverse:
    def test_table_with_candidate(self):
        output = format_reverse_result(reverse_scan('xn--pypal-4ve.com'))
        assert 'Impersonates' in output
        assert 'paypal.com' in output
        assert 'U+0430' in output
        assert 'Cyrillic' in output

    def test_clean_table(self):
        output = OutputFormatter.format_reverse_table(ReverseScanResult('paypal.com', 'paypal.com'))
        assert 'No confusable substitutions detected' in output

    def test_json(self):
        data = json.loads(format_reverse_result(reverse_scan('p' + CYR_A + 'ypal.com'), 'json'))
        assert data['ace'] == 'xn--pypal-4ve.com'
        [target] = data['impersonates']
        assert target['domain'] == 'paypal.com'
        assert target['substitutions'][0]['script'] == 'Cyrillic'
