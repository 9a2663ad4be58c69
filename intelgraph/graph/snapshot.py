"""Immutable graph snapshots.

A snapshot is the only input the analysis engine accepts: an ordered
node list and an ordered edge list, captured once from the authoring
layer and never mutated afterwards. Node and edge order matter because
they drive tie-breaking in community detection.

Snapshots can be built directly or from the plain-dict canvas format::

    {
        "nodes": [{"id": "n1", "type": "EMAIL", "title": "...",
                   "content": "...", "data": {"email": "a@b.io"}}],
        "connections": [{"id": "c1", "sourceId": "n1", "targetId": "n2"}]
    }
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Mapping

logger = logging.getLogger(__name__)


class SnapshotError(ValueError):
    """Raised when a snapshot payload cannot be interpreted at all."""


def _freeze_attributes(raw: Any) -> Mapping[str, Any]:
    """Normalize an attribute payload into a read-only ordered mapping.

    Accepts a mapping or the legacy list-of-pairs form
    ``[{"key": k, "value": v}, ...]``.
    """
    if raw is None:
        return MappingProxyType({})
    if isinstance(raw, Mapping):
        return MappingProxyType(dict(raw))
    if isinstance(raw, (list, tuple)):
        pairs: dict[str, Any] = {}
        for item in raw:
            if isinstance(item, Mapping) and "key" in item:
                pairs[str(item["key"])] = item.get("value")
            elif isinstance(item, (list, tuple)) and len(item) == 2:
                pairs[str(item[0])] = item[1]
        return MappingProxyType(pairs)
    return MappingProxyType({})


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


@dataclass(frozen=True)
class Node:
    """An entity on the canvas."""

    id: str
    type: str = ""
    title: str = ""
    content: str = ""
    attributes: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self) -> None:
        if not isinstance(self.attributes, MappingProxyType):
            object.__setattr__(self, "attributes", _freeze_attributes(self.attributes))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Node":
        attrs = data.get("attributes", data.get("data"))
        return cls(
            id=_text(data["id"]),
            type=_text(data.get("type")),
            title=_text(data.get("title")),
            content=_text(data.get("content")),
            attributes=_freeze_attributes(attrs),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "title": self.title,
            "content": self.content,
            "attributes": dict(self.attributes),
        }


@dataclass(frozen=True)
class Edge:
    """A relationship between two nodes. Direction is ignored by analysis."""

    id: str
    source_id: str
    target_id: str
    label: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Edge":
        source = data.get("source_id", data.get("sourceId"))
        target = data.get("target_id", data.get("targetId"))
        if source is None or target is None:
            raise KeyError("source_id/target_id")
        label = data.get("label")
        return cls(
            id=_text(data.get("id")),
            source_id=_text(source),
            target_id=_text(target),
            label=None if label is None else _text(label),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "source_id": self.source_id,
            "target_id": self.target_id,
            "label": self.label,
        }


@dataclass(frozen=True)
class GraphSnapshot:
    """Ordered, immutable node and edge lists for one analysis call."""

    nodes: tuple[Node, ...] = ()
    edges: tuple[Edge, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "nodes", tuple(self.nodes))
        object.__setattr__(self, "edges", tuple(self.edges))

    @property
    def node_count(self) -> int:
        return len(self.nodes)

    @property
    def edge_count(self) -> int:
        return len(self.edges)

    def node(self, node_id: str) -> Node | None:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def restrict(self, node_ids: Iterable[str]) -> "GraphSnapshot":
        """Sub-snapshot holding only ``node_ids`` and edges fully inside them.

        Input order of the original snapshot is preserved.
        """
        selected = set(node_ids)
        nodes = tuple(n for n in self.nodes if n.id in selected)
        kept = {n.id for n in nodes}
        edges = tuple(
            e for e in self.edges
            if e.source_id in kept and e.target_id in kept
        )
        return GraphSnapshot(nodes=nodes, edges=edges)

    @classmethod
    def from_dict(cls, data: Any) -> "GraphSnapshot":
        """Build a snapshot from the plain-dict canvas format.

        Raises
        ------
        SnapshotError
            If ``data`` is not a mapping or carries no node list.
            Individual malformed records are skipped with a warning.
        """
        if not isinstance(data, Mapping):
            raise SnapshotError(
                f"Snapshot must be a JSON object, got {type(data).__name__}"
            )
        raw_nodes = data.get("nodes")
        if not isinstance(raw_nodes, list):
            raise SnapshotError("Snapshot has no 'nodes' list")
        raw_edges = data.get("edges", data.get("connections", []))
        if not isinstance(raw_edges, list):
            raise SnapshotError("Snapshot 'edges' must be a list")

        nodes: list[Node] = []
        for i, record in enumerate(raw_nodes):
            if not isinstance(record, Mapping) or not record.get("id"):
                logger.warning("Skipping malformed node record at index %d", i)
                continue
            nodes.append(Node.from_dict(record))

        edges: list[Edge] = []
        for i, record in enumerate(raw_edges):
            if not isinstance(record, Mapping):
                logger.warning("Skipping malformed edge record at index %d", i)
                continue
            try:
                edges.append(Edge.from_dict(record))
            except KeyError:
                logger.warning(
                    "Skipping edge record at index %d without endpoints", i
                )

        return cls(nodes=tuple(nodes), edges=tuple(edges))

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
        }
