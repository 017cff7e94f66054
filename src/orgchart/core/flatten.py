"""
Flattening of the ownership tree back into records for export.
"""

from typing import Optional, Sequence

from .models import FlatRecord, OrgNode


def flatten(roots: Sequence[OrgNode], parent_id: Optional[str] = None) -> list[FlatRecord]:
    """
    Serialize a forest into flat records, parents before children.

    Each record carries the parent id seen during traversal rather than the
    node's stored ``parent_id``; the two agree for any forest kept by
    Forest or build_forest().

    Args:
        roots: Nodes to emit, in order.
        parent_id: Parent id to assign to ``roots``.

    Returns:
        Flat records in depth-first pre-order.
    """
    records = []
    stack = [(node, parent_id) for node in reversed(roots)]
    while stack:
        node, node_parent_id = stack.pop()
        records.append(node.to_record(node_parent_id))
        stack.extend((child, node.id) for child in reversed(node.children))
    return records
