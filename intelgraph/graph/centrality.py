"""Node importance: degree, betweenness, PageRank and their composite.

All scores are rescaled into [0, 1] so the measures can be blended:

- Degree centrality: neighbour count divided by the largest neighbour
  count in the graph.
- Betweenness centrality: networkx Brandes betweenness (normalized by
  the pair count) divided by the maximum so the top broker reads 1.0.
- PageRank: fixed-iteration power method on the undirected graph,
  divided by the maximum rank.
- Composite: weighted blend of the three, rescaled so the most central
  node reads 1.0 whenever the graph has at least one edge.

Degenerate graphs (no nodes, no edges, isolated nodes) produce zeros or
uniform scores, never NaN.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

import networkx as nx

from intelgraph.config.params import StructuralParams
from intelgraph.graph.builder import neighbor_count

logger = logging.getLogger(__name__)

_EPSILON = 1e-12


@dataclass(frozen=True)
class CentralityScores:
    """All centrality measures for one graph, each in [0, 1]."""

    degree: Mapping[str, float]
    betweenness: Mapping[str, float]
    pagerank: Mapping[str, float]
    composite: Mapping[str, float]


def _rescale_by_max(scores: dict[str, float]) -> dict[str, float]:
    peak = max(scores.values(), default=0.0)
    if peak <= 0:
        return scores
    return {node_id: value / peak for node_id, value in scores.items()}


def degree_centrality(graph: nx.Graph) -> dict[str, float]:
    """Neighbour count over the maximum neighbour count (floored at 1)."""
    counts = {node_id: neighbor_count(graph, node_id) for node_id in graph.nodes()}
    max_degree = max(max(counts.values(), default=0), 1)
    return {node_id: count / max_degree for node_id, count in counts.items()}


def betweenness_centrality(graph: nx.Graph) -> dict[str, float]:
    """Brandes betweenness, normalized then rescaled so the peak is 1.0.

    Nodes without edges always score exactly 0.
    """
    return _rescale_by_max(nx.betweenness_centrality(graph))


def pagerank(graph: nx.Graph, params: StructuralParams | None = None) -> dict[str, float]:
    """Power-iteration PageRank over the undirected graph.

    Runs exactly ``params.pagerank_iterations`` rounds with no convergence
    check. Rank held by isolated nodes is not redistributed.
    """
    params = params or StructuralParams()
    node_ids = list(graph.nodes())
    n = len(node_ids)
    if n == 0:
        return {}

    damping = params.pagerank_damping
    degrees = {node_id: neighbor_count(graph, node_id) for node_id in node_ids}
    ranks = dict.fromkeys(node_ids, 1 / n)

    for _ in range(params.pagerank_iterations):
        ranks = {
            node_id: (1 - damping) / n + damping * sum(
                ranks[nbr] / degrees[nbr] for nbr in graph.adj[node_id]
            )
            for node_id in node_ids
        }

    peak = max(max(ranks.values()), _EPSILON)
    return {node_id: rank / peak for node_id, rank in ranks.items()}


def composite_centrality(
    graph: nx.Graph,
    params: StructuralParams | None = None,
) -> CentralityScores:
    """Compute every measure and blend them into the composite score."""
    params = params or StructuralParams()
    weights = params.weights

    degree = degree_centrality(graph)
    between = betweenness_centrality(graph)
    ranks = pagerank(graph, params)

    composite = {
        node_id: (
            weights.degree * degree.get(node_id, 0.0)
            + weights.betweenness * between.get(node_id, 0.0)
            + weights.pagerank * ranks.get(node_id, 0.0)
        )
        for node_id in graph.nodes()
    }
    if params.normalize_composite and graph.number_of_edges() > 0:
        composite = _rescale_by_max(composite)

    logger.debug(
        "Centrality computed for %d nodes (peak composite %.3f)",
        len(composite), max(composite.values(), default=0.0),
    )

    return CentralityScores(
        degree=MappingProxyType(degree),
        betweenness=MappingProxyType(between),
        pagerank=MappingProxyType(ranks),
        composite=MappingProxyType(composite),
    )
