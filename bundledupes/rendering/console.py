"""Plain-text rendering of a DuplicateReport for the terminal."""

from __future__ import annotations

import sys
from typing import List, Optional, TextIO

from bundledupes.models import DuplicateReport, ResolvedPackage

GREEN = "\033[32m"
YELLOW = "\033[33m"
RED = "\033[31m"
RESET = "\033[0m"

DEFAULT_WARN_BYTES = 20000


class _Palette:
    def __init__(self, color: bool, warn_bytes: int):
        self.color = color
        self.warn_bytes = warn_bytes

    def paint(self, code: str, text: str) -> str:
        return f"{code}{text}{RESET}" if self.color else text

    def size(self, size: float) -> str:
        return self.paint(RED if size > self.warn_bytes else YELLOW, f"{size / 1024:.2f} KB")


def _file_lines(pkg: ResolvedPackage, pal: _Palette) -> List[str]:
    if len(pkg.files) <= 1:
        return []
    return [f"    {pal.size(f.size)} ({f.path})" for f in pkg.files_by_size()]


def render_report(report: DuplicateReport, *, color: bool = True, warn_bytes: int = DEFAULT_WARN_BYTES) -> str:
    pal = _Palette(color, warn_bytes)
    lines: List[str] = [
        f"Analyzing browser bundle from {report.report_path}.",
        "Sizes shown are for minified and tree-shaken files (before compression).",
        f"Total size of all node_modules, minified: {pal.size(report.total_size)}",
        "",
    ]

    if report.duplicates:
        lines.append(pal.paint(RED, f"{len(report.duplicates)} duplicate packages found."))
        lines.append(f"Estimated size wasted: {pal.size(report.wasted)}")
    else:
        lines.append(pal.paint(GREEN, "No duplicate packages found."))
    lines.append("")

    for group in report.duplicates:
        lines.append(f"{group.name} has {len(group.installs)} versions:")
        for pkg in group.installs:
            lines.append(f"  {pkg.version} ({pal.size(pkg.size)}) (in {pkg.manifest_path})")
            nested = _file_lines(pkg, pal)
            if nested:
                lines.extend(nested)
                lines.append("")
        lines.append("")

    for pkg in report.unique:
        lines.append(f"{pkg.name} has a single version:")
        lines.append(f"{pkg.version} ({pal.size(pkg.size)}) (in {pkg.manifest_path})")
        lines.extend(_file_lines(pkg, pal))
        lines.append("")

    return "\n".join(lines) + "\n"


def print_report(
    report: DuplicateReport,
    *,
    color: bool = True,
    warn_bytes: int = DEFAULT_WARN_BYTES,
    stream: Optional[TextIO] = None,
) -> None:
    out = stream or sys.stdout
    out.write(render_report(report, color=color, warn_bytes=warn_bytes))
    out.flush()
