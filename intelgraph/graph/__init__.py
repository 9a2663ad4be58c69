"""intelgraph structural analytics.

Builds an undirected NetworkX adjacency from a graph snapshot and runs
community detection and centrality scoring on it.

Usage::

    from intelgraph.graph import GraphSnapshot, StructuralAnalysis, build_adjacency

    snapshot = GraphSnapshot.from_dict(payload)
    graph, stats = build_adjacency(snapshot)

    structural = StructuralAnalysis(graph).run()
    print(structural.community_count, structural.key_nodes)
"""

from intelgraph.graph.algorithms import (
    CommunityResult,
    StructuralAnalysis,
    StructuralResult,
    graph_summary,
    select_key_nodes,
)
from intelgraph.graph.builder import BuildStats, build_adjacency
from intelgraph.graph.centrality import CentralityScores, composite_centrality
from intelgraph.graph.community import CommunityDetection, detect_communities
from intelgraph.graph.snapshot import Edge, GraphSnapshot, Node, SnapshotError

__all__ = [
    "BuildStats",
    "CentralityScores",
    "CommunityDetection",
    "CommunityResult",
    "Edge",
    "GraphSnapshot",
    "Node",
    "SnapshotError",
    "StructuralAnalysis",
    "StructuralResult",
    "build_adjacency",
    "composite_centrality",
    "detect_communities",
    "graph_summary",
    "select_key_nodes",
]
