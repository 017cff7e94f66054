"""
Error and warning types raised by the org chart core.

Hard failures derive from OrgChartError and abort the operation that raised
them; the forest is left in its last valid state. Warnings are issued through
the standard ``warnings`` module and never abort anything.
"""

from typing import Optional


class OrgChartError(Exception):
    """Base class for all org chart errors."""


class ParseError(OrgChartError, ValueError):
    """Raised when delimited input cannot be turned into records."""

    def __init__(self, message: str, line: Optional[int] = None):
        self.line = line
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)


class NotFoundError(OrgChartError, KeyError):
    """Raised when a mutation references a node id that is not in the forest."""

    def __init__(self, node_id: str):
        self.node_id = node_id
        super().__init__(node_id)

    def __str__(self) -> str:
        return f"Node not found: {self.node_id}"


class CycleError(OrgChartError, ValueError):
    """Raised when a node would become its own ancestor."""

    def __init__(self, node_id: str, parent_id: str):
        self.node_id = node_id
        self.parent_id = parent_id
        super().__init__(
            f"Cannot place node {node_id} under {parent_id}: "
            f"{parent_id} is the node itself or one of its descendants"
        )


class DuplicateIdError(OrgChartError, ValueError):
    """Raised when inserting a node whose id is already in the forest."""

    def __init__(self, node_id: str):
        self.node_id = node_id
        super().__init__(f"Node id already exists: {node_id}")


class ValidationError(OrgChartError, ValueError):
    """Raised when an editor form submission is rejected."""


class EmptyResultWarning(UserWarning):
    """Import succeeded but every record was isolated and filtered away."""


class DuplicateIdWarning(UserWarning):
    """Imported data contains the same id more than once; the last one wins."""
