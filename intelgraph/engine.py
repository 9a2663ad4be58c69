"""Graph analytics engine — high-level orchestrator.

Provides the primary API: take a graph snapshot, build the adjacency once
and produce both result bundles (structural + data quality).

Usage::

    engine = GraphEngine()

    result = engine.analyze(snapshot)
    result.structural.key_nodes
    result.quality.defective_nodes

    # Only the nodes an analyst has selected
    scoped = engine.analyze_selection(snapshot, ["n1", "n2", "n3"])

    # Export
    GraphExporter(snapshot, result).to_gexf("output/network.gexf")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Mapping

from intelgraph.config.params import AnalysisParams
from intelgraph.graph.algorithms import StructuralAnalysis, StructuralResult, graph_summary
from intelgraph.graph.builder import BuildStats, build_adjacency
from intelgraph.graph.snapshot import GraphSnapshot
from intelgraph.quality.report import DataQualityReport, assess_quality

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GraphAnalysisResult:
    """Both result bundles for one snapshot, plus build statistics."""

    structural: StructuralResult
    quality: DataQualityReport
    stats: BuildStats
    summary: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    @property
    def node_count(self) -> int:
        return self.stats.nodes_loaded

    @property
    def edge_count(self) -> int:
        return self.stats.edges_loaded

    def to_dict(self) -> dict[str, Any]:
        return {
            "structural": self.structural.to_dict(),
            "quality": self.quality.to_dict(),
            "graph_summary": dict(self.summary),
            "build_stats": self.stats.to_dict(),
        }


@dataclass(frozen=True)
class BriefingContext:
    """Structural context handed to a report writer.

    ``communities`` is only populated when the graph splits into more than
    one community; ``key_nodes`` holds titles, most central first.
    """

    communities: dict[int, list[str]] | None
    key_nodes: list[str] | None
    connections: list[tuple[str, str]]


class GraphEngine:
    """Analyze intelligence graph snapshots.

    Parameters
    ----------
    params:
        Immutable algorithm parameters. Use :meth:`intelgraph.config.settings.Settings.analysis_params`
        to take them from the environment.
    """

    def __init__(self, params: AnalysisParams | None = None) -> None:
        self._params = params or AnalysisParams()

    @property
    def params(self) -> AnalysisParams:
        return self._params

    def analyze_structure(self, snapshot: GraphSnapshot) -> StructuralResult:
        """Community detection, centrality and key nodes only."""
        graph, _ = build_adjacency(snapshot)
        return StructuralAnalysis(graph, self._params.structural).run()

    def analyze_quality(self, snapshot: GraphSnapshot) -> DataQualityReport:
        """Information-pressure quality report only."""
        graph, _ = build_adjacency(snapshot)
        return assess_quality(snapshot, self._params.quality, graph=graph)

    def analyze(self, snapshot: GraphSnapshot) -> GraphAnalysisResult:
        """Run both analyses over a single adjacency build."""
        graph, stats = build_adjacency(snapshot)
        structural = StructuralAnalysis(graph, self._params.structural).run()
        quality = assess_quality(snapshot, self._params.quality, graph=graph)

        logger.info(
            "Graph analyzed: %d nodes, %d edges (%d dangling dropped), "
            "%d communities, %d key nodes, %d node(s) need attention",
            stats.nodes_loaded, stats.edges_loaded, stats.dangling_edges,
            structural.community_count, len(structural.key_nodes),
            len(quality.defective_nodes),
        )

        return GraphAnalysisResult(
            structural=structural,
            quality=quality,
            stats=stats,
            summary=MappingProxyType(graph_summary(graph)),
        )

    def analyze_selection(
        self,
        snapshot: GraphSnapshot,
        node_ids: Iterable[str],
    ) -> GraphAnalysisResult:
        """Analyze only the selected nodes and the edges between them."""
        scoped = snapshot.restrict(node_ids)
        logger.info(
            "Analyzing selection of %d/%d nodes",
            scoped.node_count, snapshot.node_count,
        )
        return self.analyze(scoped)

    def briefing_context(
        self,
        snapshot: GraphSnapshot,
        structural: StructuralResult | None = None,
    ) -> BriefingContext:
        """Community membership and key node titles for a written briefing."""
        if structural is None:
            structural = self.analyze_structure(snapshot)

        titles: dict[str, str] = {}
        for node in snapshot.nodes:
            titles.setdefault(node.id, node.title or node.id)

        communities: dict[int, list[str]] = {}
        for node_id, comm_id in structural.communities.items():
            communities.setdefault(comm_id, []).append(titles[node_id])

        key_titles = [titles[n] for n in structural.key_nodes if n in titles]
        connections = [
            (titles.get(e.source_id, "Unknown"), titles.get(e.target_id, "Unknown"))
            for e in snapshot.edges
            if e.source_id in titles and e.target_id in titles
        ]

        return BriefingContext(
            communities=dict(sorted(communities.items())) if len(communities) > 1 else None,
            key_nodes=key_titles or None,
            connections=connections,
        )
