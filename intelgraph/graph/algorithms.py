"""Structural graph analysis.

Wraps community detection and centrality scoring with the key-node
selection rule and assembles the structural result bundle:

  - community assignment (node id → contiguous community id)
  - composite centrality (node id → score in [0, 1])
  - key nodes (ids ordered by descending centrality)
  - community count

:class:`StructuralAnalysis` also offers per-community breakdowns and
summary statistics for reporting.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

import networkx as nx

from intelgraph.config.params import StructuralParams
from intelgraph.graph.centrality import CentralityScores, composite_centrality
from intelgraph.graph.community import CommunityDetection, detect_communities

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class StructuralResult:
    """Structural result bundle for one snapshot."""

    communities: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))
    centrality: Mapping[str, float] = field(default_factory=lambda: MappingProxyType({}))
    key_nodes: tuple[str, ...] = ()
    community_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "communities": dict(self.communities),
            "centrality": dict(self.centrality),
            "key_nodes": list(self.key_nodes),
            "community_count": self.community_count,
        }


@dataclass(frozen=True)
class CommunityResult:
    """A detected community with its composition."""

    community_id: int
    member_count: int
    members: tuple[dict[str, str], ...]  # ({id, title, type}, ...)
    dominant_type: str
    key_members: tuple[str, ...]


# ---------------------------------------------------------------------------
# Key-node selection
# ---------------------------------------------------------------------------


def select_key_nodes(
    centrality: Mapping[str, float],
    params: StructuralParams | None = None,
) -> list[str]:
    """Flag nodes at or above the key-node threshold.

    The threshold is the larger of ``params.key_node_threshold`` and the
    score found at the top-percentile rank of the descending ordering.
    """
    params = params or StructuralParams()
    if not centrality:
        return []

    ranked = sorted(centrality.items(), key=lambda item: item[1], reverse=True)
    cutoff_index = min(int(len(ranked) * params.key_node_percentile), len(ranked) - 1)
    threshold = max(params.key_node_threshold, ranked[cutoff_index][1])

    return [node_id for node_id, score in ranked if score >= threshold]


# ---------------------------------------------------------------------------
# Analysis engine
# ---------------------------------------------------------------------------


class StructuralAnalysis:
    """Run community detection and centrality scoring on an adjacency graph.

    Parameters
    ----------
    graph:
        Undirected adjacency built by :func:`intelgraph.graph.builder.build_adjacency`.
    params:
        Structural parameters.
    """

    def __init__(self, graph: nx.Graph, params: StructuralParams | None = None) -> None:
        self._graph = graph
        self._params = params or StructuralParams()
        self._communities: CommunityDetection | None = None
        self._scores: CentralityScores | None = None

    @property
    def graph(self) -> nx.Graph:
        return self._graph

    @property
    def communities(self) -> CommunityDetection:
        if self._communities is None:
            self._communities = detect_communities(self._graph, self._params)
        return self._communities

    @property
    def scores(self) -> CentralityScores:
        if self._scores is None:
            self._scores = composite_centrality(self._graph, self._params)
        return self._scores

    def _node_info(self, node_id: str) -> dict[str, str]:
        data = self._graph.nodes.get(node_id, {})
        return {
            "id": node_id,
            "title": data.get("title") or node_id,
            "type": data.get("type") or "UNKNOWN",
        }

    def run(self) -> StructuralResult:
        """Produce the structural result bundle."""
        if self._graph.number_of_nodes() == 0:
            return StructuralResult()

        detection = self.communities
        composite = self.scores.composite
        key_nodes = select_key_nodes(composite, self._params)

        logger.debug(
            "Structural analysis: %d communities, %d key node(s)",
            detection.community_count, len(key_nodes),
        )

        return StructuralResult(
            communities=detection.assignment,
            centrality=composite,
            key_nodes=tuple(key_nodes),
            community_count=detection.community_count,
        )

    def find_communities(self, min_size: int = 1) -> list[CommunityResult]:
        """Describe each community, largest first."""
        key_nodes = set(self.run().key_nodes)
        results = []
        groups = self.communities.members()
        for comm_id, members in sorted(groups.items(), key=lambda x: (-len(x[1]), x[0])):
            if len(members) < min_size:
                continue
            infos = tuple(self._node_info(m) for m in members)
            types = Counter(info["type"] for info in infos)
            results.append(CommunityResult(
                community_id=comm_id,
                member_count=len(members),
                members=infos,
                dominant_type=types.most_common(1)[0][0],
                key_members=tuple(m for m in members if m in key_nodes),
            ))
        return results

    def summary(self) -> dict[str, Any]:
        """Return high-level graph statistics."""
        return graph_summary(self._graph)


def graph_summary(graph: nx.Graph) -> dict[str, Any]:
    """Node/edge counts, density, component structure and type distribution."""
    components = list(nx.connected_components(graph))
    type_counts: dict[str, int] = {}
    for _, data in graph.nodes(data=True):
        t = data.get("type") or "UNKNOWN"
        type_counts[t] = type_counts.get(t, 0) + 1

    return {
        "node_count": graph.number_of_nodes(),
        "edge_count": graph.number_of_edges(),
        "density": nx.density(graph) if graph.number_of_nodes() > 1 else 0.0,
        "connected_components": len(components),
        "largest_component_size": max((len(c) for c in components), default=0),
        "isolated_nodes": sum(1 for _ in nx.isolates(graph)),
        "node_type_distribution": type_counts,
    }
