"""
Conversion of flat records into the ownership tree.

The builder resolves parent references, breaks cyclic parent chains and
drops isolated records (no parent and no children) so the returned forest
only holds connected entries.
"""

import warnings
from typing import Iterable, Optional

from .errors import DuplicateIdWarning
from .models import FlatRecord, OrgNode
from ..infrastructure.logging_config import get_logger


logger = get_logger(__name__)


def build_forest(records: Iterable[FlatRecord]) -> list[OrgNode]:
    """
    Convert flat records into a forest of OrgNode trees.

    Children are attached in source order. References to a missing record or
    to the record itself count as "no parent". A node that ends up with no
    parent and no children is isolated and left out of the result entirely.

    Args:
        records: Flat records, typically from the record parser.

    Returns:
        Root nodes in source order, each carrying its full subtree.
    """
    node_map = _index_records(records)
    if not node_map:
        return []

    # Resolve parents; anything unresolved becomes a root candidate
    parent_of: dict[str, Optional[str]] = {}
    for node in node_map.values():
        parent_id = node.parent_id
        if parent_id and parent_id != node.id and parent_id in node_map:
            parent_of[node.id] = parent_id
            node_map[parent_id].children.append(node)
        else:
            if parent_id:
                logger.debug(f"Node {node.id} has unresolved parent {parent_id!r}, treating as root")
            node.parent_id = None
            parent_of[node.id] = None

    _break_cycles(node_map, parent_of)

    roots = []
    isolated = 0
    for node in node_map.values():
        if parent_of[node.id] is not None:
            continue
        if not node.children:
            isolated += 1
            continue
        roots.append(node)

    logger.info(
        f"Built forest with {len(roots)} root(s) from {len(node_map)} record(s), "
        f"{isolated} isolated record(s) dropped"
    )
    return roots


def _index_records(records: Iterable[FlatRecord]) -> dict[str, OrgNode]:
    """
    Index records by id, keeping source order.

    Records without an id are skipped. A repeated id keeps the position of
    its first occurrence and the values of its last one.
    """
    node_map: dict[str, OrgNode] = {}
    duplicates = []

    for record in records:
        if not record.id:
            logger.debug(f"Skipping record without id: {record.name!r}")
            continue
        if record.id in node_map:
            duplicates.append(record.id)
        node_map[record.id] = OrgNode.from_record(record)

    if duplicates:
        message = f"Duplicate ids in imported data, last occurrence wins: {', '.join(sorted(set(duplicates)))}"
        warnings.warn(message, DuplicateIdWarning, stacklevel=3)

    return node_map


def _break_cycles(node_map: dict[str, OrgNode], parent_of: dict[str, Optional[str]]) -> None:
    """
    Turn one member of every parent cycle into a root.

    Nodes on a cycle (A is B's parent and B is A's parent, possibly through
    longer chains) are not reachable from any root. For each cycle, the
    member that appears first in source order is detached from its parent.
    """
    order = {node_id: index for index, node_id in enumerate(node_map)}
    settled: set[str] = set()

    for start in node_map:
        path: list[str] = []
        on_path: set[str] = set()
        current: Optional[str] = start

        while current is not None and current not in settled and current not in on_path:
            path.append(current)
            on_path.add(current)
            current = parent_of[current]

        if current is not None and current in on_path:
            cycle = path[path.index(current):]
            new_root = min(cycle, key=order.__getitem__)
            old_parent = parent_of[new_root]
            siblings = node_map[old_parent].children
            siblings[:] = [child for child in siblings if child.id != new_root]
            parent_of[new_root] = None
            node_map[new_root].parent_id = None
            logger.warning(
                f"Parent cycle detected through {' -> '.join(cycle)}; promoting {new_root} to root"
            )

        settled.update(path)
