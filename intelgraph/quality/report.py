"""Data quality report assembly.

Runs the information-pressure pipeline end to end:

  1. initial pressure P0 and node-local defects for every node
  2. pressure propagation across the adjacency graph
  3. structural defects, quality levels and attention flags
  4. low-pressure cluster detection
  5. summary histogram

and packages everything into an immutable :class:`DataQualityReport`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import networkx as nx

from intelgraph.config.params import QualityParams
from intelgraph.graph.builder import build_adjacency
from intelgraph.graph.snapshot import GraphSnapshot
from intelgraph.quality.defects import (
    Defect,
    QualityLevel,
    find_low_pressure_clusters,
    needs_attention,
    quality_level,
    structural_defects,
)
from intelgraph.quality.pressure import (
    EntropyBreakdown,
    estimate_initial_pressure,
    propagate_pressure,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class NodeQualityResult:
    """Quality assessment of a single node."""

    node_id: str
    node_title: str
    node_type: str
    initial_pressure: float
    final_pressure: float
    entropy_breakdown: EntropyBreakdown
    defects: tuple[Defect, ...]
    quality_level: QualityLevel
    needs_attention: bool

    @property
    def worst_severity(self) -> str | None:
        if not self.defects:
            return None
        return max(self.defects, key=lambda d: d.severity.rank).severity.value

    def to_dict(self) -> dict[str, Any]:
        return {
            "node_id": self.node_id,
            "node_title": self.node_title,
            "node_type": self.node_type,
            "initial_pressure": self.initial_pressure,
            "final_pressure": self.final_pressure,
            "entropy_breakdown": self.entropy_breakdown.to_dict(),
            "defects": [d.to_dict() for d in self.defects],
            "quality_level": self.quality_level.value,
            "needs_attention": self.needs_attention,
        }


@dataclass(frozen=True)
class QualitySummary:
    total_nodes: int = 0
    excellent_count: int = 0
    good_count: int = 0
    fair_count: int = 0
    poor_count: int = 0
    critical_count: int = 0
    average_pressure: float = 0.0
    defect_rate: float = 0.0

    def count(self, level: QualityLevel) -> int:
        return getattr(self, f"{level.value}_count")

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_nodes": self.total_nodes,
            "excellent_count": self.excellent_count,
            "good_count": self.good_count,
            "fair_count": self.fair_count,
            "poor_count": self.poor_count,
            "critical_count": self.critical_count,
            "average_pressure": self.average_pressure,
            "defect_rate": self.defect_rate,
        }


@dataclass(frozen=True)
class AlgorithmParams:
    """Parameters echoed for reproducibility."""

    alpha: float
    threshold: float
    warning_threshold: float
    convergence_threshold: float
    max_iterations: int
    iterations: int
    converged: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "alpha": self.alpha,
            "threshold": self.threshold,
            "warning_threshold": self.warning_threshold,
            "convergence_threshold": self.convergence_threshold,
            "max_iterations": self.max_iterations,
            "iterations": self.iterations,
            "converged": self.converged,
        }


@dataclass(frozen=True)
class DataQualityReport:
    """Quality result bundle for one snapshot."""

    summary: QualitySummary
    node_results: tuple[NodeQualityResult, ...]
    defective_nodes: tuple[NodeQualityResult, ...]
    low_pressure_clusters: tuple[tuple[str, ...], ...]
    algorithm_params: AlgorithmParams

    def result_for(self, node_id: str) -> NodeQualityResult | None:
        for result in self.node_results:
            if result.node_id == node_id:
                return result
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "summary": self.summary.to_dict(),
            "node_results": [r.to_dict() for r in self.node_results],
            "defective_nodes": [r.to_dict() for r in self.defective_nodes],
            "low_pressure_clusters": [list(c) for c in self.low_pressure_clusters],
            "algorithm_params": self.algorithm_params.to_dict(),
        }


# ---------------------------------------------------------------------------
# Assembly
# ---------------------------------------------------------------------------


def summarize(results: tuple[NodeQualityResult, ...] | list[NodeQualityResult]) -> QualitySummary:
    """Histogram of quality levels plus average pressure and defect rate."""
    total = len(results)
    if total == 0:
        return QualitySummary()

    counts = {level: 0 for level in QualityLevel}
    for result in results:
        counts[result.quality_level] += 1

    return QualitySummary(
        total_nodes=total,
        excellent_count=counts[QualityLevel.EXCELLENT],
        good_count=counts[QualityLevel.GOOD],
        fair_count=counts[QualityLevel.FAIR],
        poor_count=counts[QualityLevel.POOR],
        critical_count=counts[QualityLevel.CRITICAL],
        average_pressure=sum(r.final_pressure for r in results) / total,
        defect_rate=sum(1 for r in results if r.needs_attention) / total,
    )


def assess_quality(
    snapshot: GraphSnapshot,
    params: QualityParams | None = None,
    graph: nx.Graph | None = None,
) -> DataQualityReport:
    """Run the information-pressure model on ``snapshot``.

    Parameters
    ----------
    snapshot:
        Nodes and edges to assess.
    params:
        Quality parameters.
    graph:
        Pre-built adjacency for ``snapshot``. Built on demand if omitted.
    """
    params = params or QualityParams()
    if graph is None:
        graph, _ = build_adjacency(snapshot)

    nodes = []
    seen: set[str] = set()
    for node in snapshot.nodes:
        if node.id not in seen:
            seen.add(node.id)
            nodes.append(node)

    if not nodes:
        return DataQualityReport(
            summary=QualitySummary(),
            node_results=(),
            defective_nodes=(),
            low_pressure_clusters=(),
            algorithm_params=AlgorithmParams(
                alpha=params.alpha,
                threshold=params.defect_threshold,
                warning_threshold=params.warning_threshold,
                convergence_threshold=params.convergence_threshold,
                max_iterations=params.max_iterations,
                iterations=0,
                converged=True,
            ),
        )

    estimates = {node.id: estimate_initial_pressure(node, params) for node in nodes}
    initial = {node_id: est.pressure for node_id, est in estimates.items()}
    propagation = propagate_pressure(graph, initial, params)

    results: list[NodeQualityResult] = []
    for node in nodes:
        estimate = estimates[node.id]
        p0 = estimate.pressure
        p = propagation.final.get(node.id, 0.0)
        defects = list(estimate.defects)
        defects.extend(structural_defects(p0, p, len(graph.adj[node.id]), params))

        results.append(NodeQualityResult(
            node_id=node.id,
            node_title=node.title,
            node_type=node.type,
            initial_pressure=p0,
            final_pressure=p,
            entropy_breakdown=estimate.breakdown,
            defects=tuple(defects),
            quality_level=quality_level(p),
            needs_attention=needs_attention(p, defects, params),
        ))

    clusters = find_low_pressure_clusters(graph, propagation.final, params.defect_threshold)
    defective = sorted(
        (r for r in results if r.needs_attention),
        key=lambda r: r.final_pressure,
    )
    summary = summarize(results)

    logger.debug(
        "Quality assessment: %d nodes, %d need attention, avg pressure %.3f",
        summary.total_nodes, len(defective), summary.average_pressure,
    )

    return DataQualityReport(
        summary=summary,
        node_results=tuple(results),
        defective_nodes=tuple(defective),
        low_pressure_clusters=tuple(tuple(c) for c in clusters),
        algorithm_params=AlgorithmParams(
            alpha=params.alpha,
            threshold=params.defect_threshold,
            warning_threshold=params.warning_threshold,
            convergence_threshold=params.convergence_threshold,
            max_iterations=params.max_iterations,
            iterations=propagation.iterations,
            converged=propagation.converged,
        ),
    )
