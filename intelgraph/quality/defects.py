"""Defect vocabulary, quality levels and low-pressure cluster detection."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

import networkx as nx

from intelgraph.config.params import QualityParams

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Vocabulary
# ---------------------------------------------------------------------------


class DefectType(str, Enum):
    EMPTY_TITLE = "empty_title"
    EMPTY_CONTENT = "empty_content"
    EMPTY_DATA = "empty_data"
    PLACEHOLDER_DETECTED = "placeholder_detected"
    FORMAT_INVALID = "format_invalid"
    LOW_INFORMATION = "low_information"
    STRUCTURAL_ISOLATION = "structural_isolation"
    CLUSTER_DEFECT = "cluster_defect"

    @property
    def label(self) -> str:
        return _DEFECT_LABELS[self]


_DEFECT_LABELS = {
    DefectType.EMPTY_TITLE: "Empty title",
    DefectType.EMPTY_CONTENT: "Empty content",
    DefectType.EMPTY_DATA: "No data",
    DefectType.PLACEHOLDER_DETECTED: "Placeholder",
    DefectType.FORMAT_INVALID: "Invalid format",
    DefectType.LOW_INFORMATION: "Low information",
    DefectType.STRUCTURAL_ISOLATION: "Isolated",
    DefectType.CLUSTER_DEFECT: "Cluster defect",
}


class DefectSeverity(str, Enum):
    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"

    @property
    def rank(self) -> int:
        """Higher is more severe."""
        return {"critical": 3, "warning": 2, "info": 1}[self.value]

    @property
    def label(self) -> str:
        return self.value.capitalize()


class QualityLevel(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"
    CRITICAL = "critical"

    @property
    def label(self) -> str:
        return self.value.capitalize()


@dataclass(frozen=True)
class Defect:
    """A single data-quality finding on a node."""

    type: DefectType
    severity: DefectSeverity
    message: str
    field: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "severity": self.severity.value,
            "field": self.field,
            "message": self.message,
        }


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


def quality_level(pressure: float) -> QualityLevel:
    """Map a final pressure onto the five-step quality scale."""
    if pressure >= 0.8:
        return QualityLevel.EXCELLENT
    if pressure >= 0.6:
        return QualityLevel.GOOD
    if pressure >= 0.45:
        return QualityLevel.FAIR
    if pressure >= 0.3:
        return QualityLevel.POOR
    return QualityLevel.CRITICAL


def structural_defects(
    initial: float,
    final: float,
    neighbor_count: int,
    params: QualityParams | None = None,
) -> list[Defect]:
    """Defects that only show up once pressure has propagated."""
    params = params or QualityParams()
    defects: list[Defect] = []

    if neighbor_count == 0 and initial < params.warning_threshold:
        defects.append(Defect(
            type=DefectType.STRUCTURAL_ISOLATION,
            severity=DefectSeverity.WARNING,
            message="Node is isolated and carries too little information",
        ))

    if initial > params.warning_threshold and final < params.defect_threshold:
        defects.append(Defect(
            type=DefectType.CLUSTER_DEFECT,
            severity=DefectSeverity.INFO,
            message="Node is adequate on its own but surrounded by low-quality data",
        ))

    return defects


def needs_attention(
    final: float,
    defects: list[Defect] | tuple[Defect, ...],
    params: QualityParams | None = None,
) -> bool:
    params = params or QualityParams()
    return final < params.warning_threshold or bool(defects)


# ---------------------------------------------------------------------------
# Low-pressure clusters
# ---------------------------------------------------------------------------


def find_low_pressure_clusters(
    graph: nx.Graph,
    pressures: Mapping[str, float],
    threshold: float,
) -> list[list[str]]:
    """Connected groups of nodes whose pressure is below ``threshold``.

    Traversal only follows edges between two low-pressure nodes. Clusters
    are returned largest first; members are in BFS discovery order.
    """
    low = [node_id for node_id in graph.nodes() if pressures.get(node_id, 0.0) < threshold]
    sub = graph.subgraph(low)
    visited: set[str] = set()
    clusters: list[list[str]] = []

    for seed in low:
        if seed in visited:
            continue
        cluster = list(nx.bfs_tree(sub, seed))
        visited.update(cluster)
        clusters.append(cluster)

    clusters.sort(key=len, reverse=True)
    if clusters:
        logger.debug(
            "Found %d low-pressure cluster(s), largest has %d node(s)",
            len(clusters), len(clusters[0]),
        )
    return clusters
