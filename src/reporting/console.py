"""Plain-text console report: per-category tables and a summary."""
from __future__ import annotations

import sys
from collections import Counter
from typing import Iterable, List, Optional, Sequence, TextIO, Tuple

from constants import Constants
from analysis.categories import BINARY_CATEGORIES, ReportCategory, report_category
from analysis.exclusions import ExclusionReason
from resolution.models import PackageRecord, PlatformSupport, PlatformSupportStatus

RULE_WIDTH = 71
NAME_WIDTH = 20

SECTION_TITLES = {
    ReportCategory.OFFICIAL_BINARY: "Official Binary Wheels (PyPI)",
    ReportCategory.PYSWIFT_BINARY: "PySwift Binary Wheels",
    ReportCategory.KIVYSCHOOL_BINARY: "KivySchool Binary Wheels",
    ReportCategory.PURE_PYTHON: "Pure Python Packages",
    ReportCategory.BINARY_WITHOUT_MOBILE: "Binary Packages Without Mobile Support",
}

STATUS_LABELS = {
    PlatformSupportStatus.SUPPORTED: "supported",
    PlatformSupportStatus.PURE_PYTHON: "pure python",
    PlatformSupportStatus.UNAVAILABLE: "not available",
    PlatformSupportStatus.UNKNOWN: "unknown",
}


def format_status(support: PlatformSupport) -> str:
    label = STATUS_LABELS[support.status]
    if support.status is PlatformSupportStatus.SUPPORTED and support.version:
        return f"{label} ({support.version})"
    return label


def _table_header(with_dependencies: bool) -> str:
    if with_dependencies:
        return f"{'Package':<{NAME_WIDTH}} {'Android':<20} {'iOS':<20} {'Deps OK':<10}"
    return f"{'Package':<{NAME_WIDTH}} {'Android':<25} {'iOS':<25}"


def _table_row(record: PackageRecord, with_dependencies: bool) -> str:
    android = format_status(record.android)
    ios = format_status(record.ios)
    if with_dependencies:
        deps_ok = "yes" if record.all_dependencies_supported else "no"
        count = len(record.dependencies or ())
        return f"{record.name:<{NAME_WIDTH}} {android:<20} {ios:<20} {deps_ok} ({count})"
    return f"{record.name:<{NAME_WIDTH}} {android:<25} {ios:<25}"


def render_section(
    title: str,
    records: Sequence[PackageRecord],
    with_dependencies: bool = False,
    max_rows: int = Constants.MAX_REPORT_ROWS,
) -> List[str]:
    lines = ["", f"{title}:", "=" * RULE_WIDTH, _table_header(with_dependencies), "-" * RULE_WIDTH]
    for position, record in enumerate(records):
        if position >= max_rows:
            lines.append(f"... +{len(records) - max_rows} more")
            break
        lines.append(_table_row(record, with_dependencies))
    return lines


def render_summary(
    records: Sequence[PackageRecord],
    total_checked: int,
    with_dependencies: bool = False,
) -> List[str]:
    counts = Counter(report_category(r) for r in records)
    binaries = [r for r in records if report_category(r) in BINARY_CATEGORIES.values()]
    android = sum(1 for r in binaries if r.android.status is PlatformSupportStatus.SUPPORTED)
    ios = sum(1 for r in binaries if r.ios.status is PlatformSupportStatus.SUPPORTED)
    both = sum(
        1
        for r in binaries
        if r.android.status is PlatformSupportStatus.SUPPORTED and r.ios.status is PlatformSupportStatus.SUPPORTED
    )
    lines = [
        "",
        "Summary:",
        f"- Total packages checked: {total_checked}",
        f"- Official binary wheels (PyPI): {counts[ReportCategory.OFFICIAL_BINARY]}",
        f"- PySwift binary wheels: {counts[ReportCategory.PYSWIFT_BINARY]}",
        f"- KivySchool binary wheels: {counts[ReportCategory.KIVYSCHOOL_BINARY]}",
        f"- Pure Python: {counts[ReportCategory.PURE_PYTHON]}",
        f"- Binary without mobile support: {counts[ReportCategory.BINARY_WITHOUT_MOBILE]}",
        "",
        "Binary Wheels Platform Support:",
        f"- Android support: {android}/{len(binaries)}",
        f"- iOS support: {ios}/{len(binaries)}",
        f"- Both platforms: {both}/{len(binaries)}",
    ]
    if with_dependencies:
        checked = [r for r in records if r.dependencies is not None]
        ok = sum(1 for r in checked if r.all_dependencies_supported)
        lines += ["", "Dependency Status:", f"- All dependencies supported: {ok}/{len(checked)}"]
        if ok < len(checked):
            lines.append("- Some packages have unsupported dependencies")
    return lines


def render_exclusions(excluded: Iterable[Tuple[str, ExclusionReason]]) -> List[str]:
    """Per-reason counts of packages skipped before resolution."""
    counts = Counter(reason for _, reason in excluded)
    total = sum(counts.values())
    if not total:
        return []
    lines = ["", f"Excluded {total} packages:"]
    for reason in ExclusionReason:
        if counts[reason]:
            lines.append(f"- {reason.value}: {counts[reason]}")
    return lines


def render_report(
    records: Sequence[PackageRecord],
    total_checked: Optional[int] = None,
    with_dependencies: bool = False,
    excluded: Sequence[Tuple[str, ExclusionReason]] = (),
    max_rows: int = Constants.MAX_REPORT_ROWS,
) -> List[str]:
    """Full report: one table per category, exclusions, then the summary."""
    lines: List[str] = []
    for category, title in SECTION_TITLES.items():
        section = [r for r in records if report_category(r) is category]
        lines += render_section(title, section, with_dependencies, max_rows)
    lines += render_exclusions(excluded)
    lines += render_summary(
        records,
        total_checked if total_checked is not None else len(records),
        with_dependencies,
    )
    return lines


def print_report(lines: Iterable[str], stream: Optional[TextIO] = None) -> None:
    out = stream if stream is not None else sys.stdout
    for line in lines:
        print(line, file=out)
