"""Command line entry point.

Usage:
    i18n-audit [ROOT] [--messages DIR] [--locale en --locale zh] [--json]
"""

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from i18n_audit.catalog.loader import load_catalogs
from i18n_audit.config import AnalyzerSettings, settings
from i18n_audit.constants import MAX_LISTED_KEYS, REPORT_FILENAME
from i18n_audit.models.report import ScanReport
from i18n_audit.services.discovery import discover_sources
from i18n_audit.services.scanner import TranslationScanner

logger = logging.getLogger(__name__)

console = Console()


def build_parser() -> argparse.ArgumentParser:
    """Argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="i18n-audit",
        description="Scan JS/TS sources for translation keys and compare them with the catalogs",
    )
    parser.add_argument("root", nargs="?", default=".", help="Project root (default: current directory)")
    parser.add_argument("--messages", help=f"Catalog directory (default: {settings.messages_dir})")
    parser.add_argument("--output", help=f"Report directory (default: {settings.output_dir})")
    parser.add_argument("--locale", action="append", dest="locales", help="Locale to check (repeatable)")
    parser.add_argument(
        "--allow", action="append", dest="allow", help="Short key allowed to match several namespaces"
    )
    parser.add_argument("--pattern", action="append", dest="patterns", help="Source glob (repeatable)")
    parser.add_argument("--jobs", type=int, help="Worker threads for per-file extraction")
    parser.add_argument("--json", action="store_true", help="Print the report JSON instead of a summary")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return parser


def settings_from_args(args: argparse.Namespace, base: AnalyzerSettings) -> AnalyzerSettings:
    """Overlay CLI options on the environment-derived settings."""
    overrides: dict[str, object] = {}
    if args.messages:
        overrides["messages_dir"] = args.messages
    if args.output:
        overrides["output_dir"] = args.output
    if args.locales:
        overrides["locales"] = args.locales
    if args.allow:
        overrides["allow_multi_namespace_keys"] = [*base.allow_multi_namespace_keys, *args.allow]
    if args.patterns:
        overrides["scan_patterns"] = args.patterns
    if args.jobs:
        overrides["jobs"] = args.jobs
    return base.model_copy(update=overrides)


def write_report(report: ScanReport, output_dir: Path) -> Path:
    """Persist the report as JSON."""
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / REPORT_FILENAME
    path.write_text(report.to_json(), encoding="utf-8")
    return path


def print_summary(report: ScanReport) -> None:
    """Render counts and the first missing/unused keys."""
    summary = report.summary
    table = Table(title="Translation Key Scan")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("Scanned files", f"{summary.scanned_files}/{summary.total_files}")
    table.add_row("Keys in code", str(summary.unique_keys))
    table.add_row("Keys in catalogs", str(summary.total_keys))
    table.add_row("Missing", str(summary.missing_keys))
    table.add_row("Unused", str(summary.unused_keys))
    table.add_row("Namespace misuse", str(summary.misuse_keys))
    table.add_row("Errors", str(summary.error_count))
    table.add_row("Warnings", str(summary.warning_count))
    console.print(table)

    if report.analysis.missing_keys:
        console.print("[bold red]Missing keys:[/bold red]")
        for key in report.analysis.missing_keys[:MAX_LISTED_KEYS]:
            console.print(f"  - {key} (used {len(report.key_usages.get(key, []))} times)")
        _print_overflow(len(report.analysis.missing_keys))
    if report.analysis.unused_keys:
        console.print("[bold yellow]Unused keys:[/bold yellow]")
        for key in report.analysis.unused_keys[:MAX_LISTED_KEYS]:
            console.print(f"  - {key}")
        _print_overflow(len(report.analysis.unused_keys))
    for error in report.errors:
        location = f"{error.file}:{error.line}" if error.line is not None else error.file or "-"
        console.print(f"[red]{error.type}[/red] {location} {error.error}")


def _print_overflow(count: int) -> None:
    if count > MAX_LISTED_KEYS:
        console.print(f"  [dim]... and {count - MAX_LISTED_KEYS} more[/dim]")


def run(argv: list[str] | None = None) -> int:
    """Run the scan and return the process exit code."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )
    config = settings_from_args(args, settings)
    root = Path(args.root).resolve()

    paths = discover_sources(root, config.scan_patterns, config.exclude_patterns)
    catalogs, catalog_issues = load_catalogs(root / config.messages_dir, config.locales)
    scanner = TranslationScanner(config)
    report = scanner.scan_paths(paths, catalogs, catalog_issues, root=root)
    report_path = write_report(report, root / config.output_dir)

    if args.json:
        console.print_json(report.to_json())
    else:
        print_summary(report)
        console.print(f"[dim]Report written to {report_path}[/dim]")

    if report.passed:
        console.print("[bold green]Translation key scan passed[/bold green]")
        return 0
    if not report.errors:
        console.print("[bold yellow]Scan finished with missing translation keys[/bold yellow]")
    else:
        console.print("[bold red]Scan failed with errors[/bold red]")
    return 1


def main() -> None:
    """Console script entry point."""
    sys.exit(run())


if __name__ == "__main__":
    main()
