from __future__ import annotations

import json
import os
import re
from typing import Dict, Iterable, List, Tuple

from jsonschema.exceptions import ValidationError

from bundledupes.errors import ManifestParseError, ManifestReadError, UnresolvableEntryError
from bundledupes.models import FileEntry, ResolvedPackage
from bundledupes.utils import check_schema, get_logger

logger = get_logger(__name__)

# ./node_modules/.pnpm/<key>/node_modules/<@scope/name | name>
_SEGMENT = r"[@.A-Za-z0-9+_-]+"
_INSTALLATION_RE = re.compile(
    rf"(\./node_modules/\.pnpm/({_SEGMENT})/node_modules/((@{_SEGMENT})/({_SEGMENT})|({_SEGMENT})))"
)

MANIFEST_NAME = "package.json"


def installation_identity(path: str) -> str:
    m = _INSTALLATION_RE.search(path)
    if not m:
        raise UnresolvableEntryError(f"{path} does not match the pnpm store layout")
    return m.group(1)


def group_by_installation(entries: Iterable[FileEntry]) -> Dict[str, List[FileEntry]]:
    groups: Dict[str, List[FileEntry]] = {}
    for entry in entries:
        groups.setdefault(installation_identity(entry.path), []).append(entry)
    return groups


def read_manifest(identity: str, root: str = ".") -> Tuple[str, str]:
    """Return ``(name, version)`` declared by the package.json inside ``identity``."""
    manifest = os.path.join(root, identity, MANIFEST_NAME)
    try:
        with open(manifest, "r", encoding="utf-8") as f:
            raw = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestReadError(f"Cannot read {manifest}: {e}") from e

    try:
        data = json.loads(raw)
        check_schema(data, "manifest.schema.json")
    except json.JSONDecodeError as e:
        raise ManifestParseError(f"{manifest} is not valid JSON: {e}") from e
    except ValidationError as e:
        raise ManifestParseError(f"{manifest}: {e.message}") from e

    return data["name"], data["version"]


def resolve_packages(entries: Iterable[FileEntry], root: str = ".") -> List[ResolvedPackage]:
    packages: List[ResolvedPackage] = []
    for identity, files in group_by_installation(entries).items():
        name, version = read_manifest(identity, root)
        packages.append(ResolvedPackage(manifest_path=identity, name=name, version=version, files=files))
    logger.info("resolver: installs=%d", len(packages))
    return packages
