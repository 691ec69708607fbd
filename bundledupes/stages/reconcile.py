from __future__ import annotations

import os
import re
from typing import Iterable, List

from bundledupes.errors import InvalidEntryError
from bundledupes.models import FileEntry
from bundledupes.utils import get_logger

logger = get_logger(__name__)

STORE_PREFIX = "./node_modules/.pnpm/"

_CONCATENATED_RE = re.compile(r" \+ [0-9]+ modules \(concatenated\)")
_NODE_MODULES_PREFIX_RE = re.compile(r"^.*?node_modules")


def split_concatenated(path: str) -> str:
    """Pick the inner module path out of a "+ N modules (concatenated)" entry.

    Paths without the annotation come back unchanged.
    """
    parts = _CONCATENATED_RE.split(path)
    if len(parts) > 1 and parts[1]:
        return "." + parts[1]
    return parts[0]


def in_store(path: str) -> bool:
    return STORE_PREFIX in path


def normalize_prefix(path: str) -> str:
    # the analyzer resolves node_modules against its own target dir, not the project root
    return _NODE_MODULES_PREFIX_RE.sub("./node_modules", path, count=1)


def validate_entry(entry: FileEntry, root: str = ".") -> None:
    if not entry.path:
        raise InvalidEntryError(f"{entry.path!r} is not a valid item")
    if not entry.path.startswith(STORE_PREFIX):
        raise InvalidEntryError(f"{entry.path} is not in the node_modules directory")
    if not os.path.exists(os.path.join(root, entry.path)):
        raise InvalidEntryError(f"{entry.path} does not exist (root={root})")


def reconcile(entries: Iterable[FileEntry], root: str = ".") -> List[FileEntry]:
    entries = list(entries)
    out: List[FileEntry] = []
    for entry in entries:
        path = split_concatenated(entry.path)
        if not in_store(path):
            continue
        out.append(FileEntry(path=normalize_prefix(path), size=entry.size))

    for entry in out:
        validate_entry(entry, root)

    logger.info("reconcile: kept=%d from=%d", len(out), len(entries))
    return out
