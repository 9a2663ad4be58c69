"""Louvain-style community detection (single-level local moving).

Every node starts in its own community, numbered by input position.
Each pass visits nodes in input order and moves a node to the neighbouring
community with the largest positive modularity gain:

    gain(C) = k_in(C) / m  -  Σtot(C) · k_i / (2m²)

net of the loss of leaving its current community. Passes repeat until
nothing moves or the pass cap is hit, then surviving ids are renumbered
contiguously in ascending order of their original id.

This is the local-moving phase of Louvain only. There is no aggregation
of communities into super-nodes, so partitions are an approximation of
what full multi-level Louvain would return.

Ties between candidate communities go to the lowest community id, which
keeps results independent of neighbour iteration order.
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


@dataclass(frozen=True)
class CommunityDetection:
    """Outcome of a community detection run."""

    assignment: Mapping[str, int]
    community_count: int
    passes: int
    modularity: float

    def members(self) -> dict[int, list[str]]:
        """Community id → member node ids, in input order."""
        groups: dict[int, list[str]] = {}
        for node_id, comm_id in self.assignment.items():
            groups.setdefault(comm_id, []).append(node_id)
        return dict(sorted(groups.items()))


def detect_communities(
    graph: nx.Graph,
    params: StructuralParams | None = None,
) -> CommunityDetection:
    """Partition ``graph`` into communities by local modularity moves."""
    params = params or StructuralParams()
    node_ids = list(graph.nodes())
    m = graph.number_of_edges()

    if not node_ids:
        return CommunityDetection(MappingProxyType({}), 0, 0, 0.0)

    if m == 0:
        singletons = {node_id: idx for idx, node_id in enumerate(node_ids)}
        return CommunityDetection(
            assignment=MappingProxyType(singletons),
            community_count=len(singletons),
            passes=0,
            modularity=0.0,
        )

    m2 = 2 * m
    node2comm: dict[str, int] = {node_id: idx for idx, node_id in enumerate(node_ids)}
    degrees: dict[str, int] = {node_id: neighbor_count(graph, node_id) for node_id in node_ids}

    # Σtot per community
    total_degree: dict[int, float] = {
        idx: degrees[node_id] for node_id, idx in node2comm.items()
    }

    passes = 0
    improved = True
    while improved and passes < params.louvain_max_passes:
        improved = False
        passes += 1

        for node_id in node_ids:
            current = node2comm[node_id]
            k_i = degrees[node_id]

            # Edge weight from this node into each neighbouring community
            links: dict[int, int] = {}
            for nbr in graph.adj[node_id]:
                comm = node2comm[nbr]
                links[comm] = links.get(comm, 0) + 1

            k_in_current = links.get(current, 0)
            remove_loss = (
                k_in_current / m
                - ((total_degree[current] - k_i) * k_i) / (m2 * m)
            )

            best_comm = current
            best_gain = 0.0
            for comm in sorted(links):
                if comm == current:
                    continue
                gain = (
                    links[comm] / m
                    - (total_degree[comm] * k_i) / (m2 * m)
                    - remove_loss
                )
                if gain > best_gain:
                    best_gain = gain
                    best_comm = comm

            if best_comm != current and best_gain > params.louvain_min_gain:
                total_degree[current] -= k_i
                total_degree[best_comm] += k_i
                node2comm[node_id] = best_comm
                improved = True

    surviving = sorted(set(node2comm.values()))
    renumber = {old: new for new, old in enumerate(surviving)}
    assignment = {node_id: renumber[node2comm[node_id]] for node_id in node_ids}

    groups: dict[int, set[str]] = {}
    for node_id, comm_id in assignment.items():
        groups.setdefault(comm_id, set()).add(node_id)
    modularity = nx.community.modularity(graph, list(groups.values()))

    logger.debug(
        "Community detection: %d communities after %d pass(es), Q=%.4f",
        len(surviving), passes, modularity,
    )

    return CommunityDetection(
        assignment=MappingProxyType(assignment),
        community_count=len(surviving),
        passes=passes,
        modularity=modularity,
    )
