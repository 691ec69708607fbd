from __future__ import annotations

from typing import Iterable, List, Optional

from bundledupes.models import FileEntry, Internal, Leaf, SizeNode
from bundledupes.utils import get_logger

logger = get_logger(__name__)


def _leaf_size(raw: dict) -> Optional[int]:
    # parsedSize is missing for CSS modules
    size = raw.get("parsedSize")
    if size is None:
        size = raw.get("statSize")
    return size


def parse_node(raw: dict) -> Optional[SizeNode]:
    groups = raw.get("groups") or []
    if groups:
        return Internal(children=parse_nodes(groups))
    if raw.get("path"):
        return Leaf(path=raw["path"], size=_leaf_size(raw))
    return None


def parse_nodes(raw_nodes: Iterable[dict]) -> List[SizeNode]:
    nodes: List[SizeNode] = []
    for raw in raw_nodes:
        node = parse_node(raw)
        if node is not None:
            nodes.append(node)
    return nodes


def _walk(nodes: Iterable[SizeNode], out: List[Leaf]) -> None:
    for node in nodes:
        if isinstance(node, Internal):
            _walk(node.children, out)
        else:
            out.append(node)


def flatten(nodes: Iterable[SizeNode]) -> List[FileEntry]:
    """Depth-first list of every leaf; a leaf without any size counts as 0 bytes."""
    leaves: List[Leaf] = []
    _walk(nodes, leaves)
    unsized = sum(1 for leaf in leaves if leaf.size is None)
    if unsized:
        logger.debug("flatten: %d leaves without size, counted as 0", unsized)
    logger.info("flatten: leaves=%d", len(leaves))
    return [FileEntry(path=leaf.path, size=leaf.size or 0) for leaf in leaves]
