"""Snapshot → NetworkX adjacency conversion.

The analysis algorithms treat every relationship as undirected, so the
builder produces a simple ``nx.Graph``: one node per snapshot node (in
snapshot order, isolated nodes included) and one undirected edge per
distinct endpoint pair. NetworkX keeps insertion order for both nodes and
neighbour dicts, which is what makes downstream tie-breaking reproducible.

Edges that reference unknown node ids are dropped rather than creating
placeholder nodes: a dangling reference carries no entity data to score.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

import networkx as nx

from intelgraph.graph.snapshot import GraphSnapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildStats:
    """Statistics from an adjacency build."""

    nodes_loaded: int = 0
    skipped_nodes: int = 0
    edges_loaded: int = 0
    dangling_edges: int = 0
    duplicate_edges: int = 0
    self_loops: int = 0
    type_counts: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes_loaded": self.nodes_loaded,
            "skipped_nodes": self.skipped_nodes,
            "edges_loaded": self.edges_loaded,
            "dangling_edges": self.dangling_edges,
            "duplicate_edges": self.duplicate_edges,
            "self_loops": self.self_loops,
            "type_counts": dict(self.type_counts),
        }


def build_adjacency(snapshot: GraphSnapshot) -> tuple[nx.Graph, BuildStats]:
    """Build the undirected adjacency graph for a snapshot.

    Returns
    -------
    Tuple of (graph, build_stats). Node attributes carry ``type`` and
    ``title``; edge attributes carry the first ``edge_id`` and ``label``
    seen for that endpoint pair.
    """
    graph = nx.Graph()
    counts = dict.fromkeys(
        ("nodes_loaded", "skipped_nodes", "edges_loaded",
         "dangling_edges", "duplicate_edges", "self_loops"),
        0,
    )
    type_counts: dict[str, int] = {}

    for node in snapshot.nodes:
        if node.id in graph:
            counts["skipped_nodes"] += 1
            logger.debug("Duplicate node id %r ignored", node.id)
            continue
        graph.add_node(node.id, type=node.type, title=node.title)
        counts["nodes_loaded"] += 1
        type_counts[node.type] = type_counts.get(node.type, 0) + 1

    for edge in snapshot.edges:
        if edge.source_id not in graph or edge.target_id not in graph:
            counts["dangling_edges"] += 1
            continue
        if graph.has_edge(edge.source_id, edge.target_id):
            counts["duplicate_edges"] += 1
            continue
        if edge.source_id == edge.target_id:
            counts["self_loops"] += 1

        graph.add_edge(
            edge.source_id,
            edge.target_id,
            edge_id=edge.id,
            label=edge.label or "",
        )
        counts["edges_loaded"] += 1

    if counts["dangling_edges"]:
        logger.debug(
            "Dropped %d edge(s) referencing unknown node ids",
            counts["dangling_edges"],
        )

    return graph, BuildStats(type_counts=MappingProxyType(type_counts), **counts)


def neighbor_count(graph: nx.Graph, node_id: str) -> int:
    """Size of the neighbour set; a self-loop counts once."""
    return len(graph.adj[node_id])
