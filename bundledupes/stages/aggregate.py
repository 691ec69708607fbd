from __future__ import annotations

from typing import Dict, Iterable, List

from bundledupes.models import DuplicateReport, FileEntry, PackageGroup, ResolvedPackage
from bundledupes.utils import get_logger

logger = get_logger(__name__)


def group_by_name(packages: Iterable[ResolvedPackage]) -> List[PackageGroup]:
    """Partition installs by declared name, keeping first-seen order."""
    by_name: Dict[str, List[ResolvedPackage]] = {}
    for pkg in packages:
        by_name.setdefault(pkg.name, []).append(pkg)
    return [PackageGroup(name=name, installs=installs) for name, installs in by_name.items()]


def aggregate(
    entries: Iterable[FileEntry],
    packages: Iterable[ResolvedPackage],
    *,
    report_path: str,
) -> DuplicateReport:
    total = sum(e.size for e in entries)

    duplicates: List[PackageGroup] = []
    unique: List[ResolvedPackage] = []
    for group in group_by_name(packages):
        if group.is_duplicate:
            duplicates.append(group)
        else:
            unique.append(group.installs[0])

    duplicates.sort(key=lambda g: g.size, reverse=True)
    unique.sort(key=lambda p: p.size, reverse=True)

    logger.info("aggregate: duplicates=%d unique=%d total_bytes=%d", len(duplicates), len(unique), total)
    return DuplicateReport(report_path=report_path, total_size=total, duplicates=duplicates, unique=unique)
