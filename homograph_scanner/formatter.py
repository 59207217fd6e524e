"""
Output formatters for scan and reverse-scan results (table, JSON, CSV).
"""

import csv
import io
import json

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import DomainVariant, ReverseScanResult, ScanResult

OUTPUT_FORMATS = ('table', 'json', 'csv')

CSV_FIELDS = [
    'domain', 'danger_score', 'edit_count', 'scripts', 'punycode',
    'best_font', 'best_font_ssim', 'registered', 'threat_level',
    'a_records', 'mx_records',
]


def _danger_text(score: float) -> Text:
    if score >= 0.8:
        style = 'red bold'
    elif score >= 0.5:
        style = 'yellow'
    else:
        style = 'green'
    return Text(f"{score * 100:.0f}%", style=style)


def _threat_text(variant: DomainVariant) -> Text:
    if variant.dns is None:
        return Text('---', style='dim')
    level = variant.dns.threat_level
    if level == 'active':
        return Text(' ACTIVE ', style='bold white on red')
    if level == 'parked':
        return Text('parked', style='yellow')
    return Text('---', style='dim')


def _render(*renderables) -> str:
    buffer = io.StringIO()
    console = Console(file=buffer, width=180, force_terminal=False, color_system=None)
    for renderable in renderables:
        console.print(renderable)
    return buffer.getvalue()


class OutputFormatter:
    """Formats scan and reverse-scan results."""

    @staticmethod
    def format_table(result: ScanResult) -> str:
        """Render a scan result as a console table."""
        header = Panel(
            f"[bold]Homograph scan for [cyan]{result.original}[/cyan][/bold]\n"
            f"{result.total_generated} variants generated, showing top {len(result.variants)}",
            title="Scan Complete",
        )

        has_dns = any(v.dns is not None for v in result.variants)
        has_font = any(v.best_font for v in result.variants)

        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Domain", style="cyan", no_wrap=True)
        table.add_column("Danger", justify="right")
        table.add_column("Edits", justify="right")
        table.add_column("Script(s)", style="dim")
        table.add_column("Punycode", no_wrap=True)
        if has_dns:
            table.add_column("Status", justify="center")
            table.add_column("IP", style="dim")
        if has_font:
            table.add_column("Best Font", style="dim")

        for variant in result.variants:
            row = [
                Text(variant.domain),
                _danger_text(variant.danger_score),
                str(variant.edit_count),
                '+'.join(variant.scripts),
                variant.ace,
            ]
            if has_dns:
                row.append(_threat_text(variant))
                row.append(variant.dns.a[0] if variant.dns and variant.dns.a else '')
            if has_font:
                row.append(variant.best_font or '')
            table.add_row(*row)

        renderables = [header, table]

        if has_dns:
            registered = sum(1 for v in result.variants if v.dns and v.dns.registered)
            active = sum(1 for v in result.variants if v.dns and v.dns.threat_level == 'active')
            if active:
                renderables.append(Text(
                    f"! {active} variant(s) with MX records (potential phishing)",
                    style='bold red',
                ))
            if registered:
                renderables.append(Text(
                    f"{registered} registered of {len(result.variants)} checked",
                    style='yellow',
                ))

        return _render(*renderables)

    @staticmethod
    def format_json(result: ScanResult) -> str:
        return json.dumps(result.to_dict(), indent=2, ensure_ascii=False)

    @staticmethod
    def format_csv(result: ScanResult, header: bool = True) -> str:
        """Format scan results as CSV."""
        output = io.StringIO()
        writer = csv.DictWriter(output, fieldnames=CSV_FIELDS, lineterminator='\n')
        if header:
            writer.writeheader()

        for variant in result.variants:
            dns = variant.dns
            writer.writerow({
                'domain': variant.domain,
                'danger_score': f"{variant.danger_score:.4f}",
                'edit_count': variant.edit_count,
                'scripts': '+'.join(variant.scripts),
                'punycode': variant.ace,
                'best_font': variant.best_font or '',
                'best_font_ssim': (f"{variant.best_font_score:.4f}"
                                   if variant.best_font_score is not None else ''),
                'registered': 'true' if dns and dns.registered else 'false',
                'threat_level': dns.threat_level if dns else '',
                'a_records': ';'.join(dns.a) if dns else '',
                'mx_records': ';'.join(f"{m.priority}:{m.exchange}" for m in dns.mx) if dns else '',
            })

        return output.getvalue()

    @staticmethod
    def format_reverse_table(result: ReverseScanResult) -> str:
        """Render a reverse-scan result as a console table."""
        lines = f"[bold]Reverse scan for [cyan]{result.domain}[/cyan][/bold]"
        if result.ace != result.domain:
            lines += f"\nPunycode: {result.ace}"
        renderables = [Panel(lines, title="Reverse Scan")]

        if not result.impersonates:
            renderables.append(Text("No confusable substitutions detected.", style='green'))
            return _render(*renderables)

        for target in result.impersonates:
            title = Text.assemble(
                "Impersonates: ", (target.domain, 'bold'), " (similarity: ",
                _danger_text(target.similarity), ")",
            )
            table = Table(title=title, show_header=True, header_style="bold magenta")
            table.add_column("Pos", justify="right")
            table.add_column("Original")
            table.add_column("Replacement")
            table.add_column("Codepoint", style="dim")
            table.add_column("Script")
            table.add_column("Danger", justify="right")
            for sub in target.substitutions:
                table.add_row(
                    str(sub.position), sub.original, sub.replacement,
                    sub.codepoint, sub.script, _danger_text(sub.stable_danger),
                )
            renderables.append(table)

        return _render(*renderables)

    @staticmethod
    def format_reverse_json(result: ReverseScanResult) -> str:
        return json.dumps(result.to_dict(), indent=2, ensure_ascii=False)


def format_scan_result(result: ScanResult, fmt: str = 'table') -> str:
    """Select and apply the right formatter."""
    if fmt == 'json':
        return OutputFormatter.format_json(result)
    if fmt == 'csv':
        return OutputFormatter.format_csv(result)
    return OutputFormatter.format_table(result)


def format_reverse_result(result: ReverseScanResult, fmt: str = 'table') -> str:
    if fmt == 'json':
        return OutputFormatter.format_reverse_json(result)
    return OutputFormatter.format_reverse_table(result)
