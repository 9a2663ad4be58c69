"""Information pressure: per-node estimate and network diffusion.

Each node gets an initial pressure P0 from the entropy of its own data,
independent of any source-reliability rating:

    P0 = w_title·H(title) + w_content·H(content) + w_data·H(data) + w_format·F

Pressure then diffuses over the relationship graph:

    P_{t+1}(v) = α·P0(v) + (1 − α)·mean(P_t(neighbours))

Isolated nodes substitute ``P0(v)·decay`` for the neighbour mean. Because
α < 1 and every input is in [0, 1] the iteration is a contraction and
stops when the largest per-node change drops below the convergence
threshold, or at the iteration cap.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

import networkx as nx

from intelgraph.config.params import QualityParams
from intelgraph.graph.snapshot import Node
from intelgraph.quality.defects import Defect, DefectSeverity, DefectType
from intelgraph.quality.entropy import field_entropy, is_placeholder, string_entropy
from intelgraph.quality.formats import validate_format

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EntropyBreakdown:
    title: float
    content: float
    data: float
    format: float

    def to_dict(self) -> dict[str, float]:
        return {
            "title": self.title,
            "content": self.content,
            "data": self.data,
            "format": self.format,
        }


@dataclass(frozen=True)
class InitialPressure:
    pressure: float
    breakdown: EntropyBreakdown
    defects: tuple[Defect, ...]


@dataclass(frozen=True)
class PropagationResult:
    final: Mapping[str, float]
    iterations: int
    converged: bool


def estimate_initial_pressure(node: Node, params: QualityParams | None = None) -> InitialPressure:
    """Compute P0, its entropy breakdown and the node-local defects."""
    params = params or QualityParams()
    defects: list[Defect] = []

    title_entropy = string_entropy(node.title)
    if not node.title or not node.title.strip():
        defects.append(Defect(
            type=DefectType.EMPTY_TITLE,
            severity=DefectSeverity.CRITICAL,
            field="title",
            message="Title is empty",
        ))
    elif is_placeholder(node.title):
        defects.append(Defect(
            type=DefectType.PLACEHOLDER_DETECTED,
            severity=DefectSeverity.WARNING,
            field="title",
            message="Title looks like a placeholder",
        ))

    content_entropy = string_entropy(node.content)
    if not node.content or not node.content.strip():
        defects.append(Defect(
            type=DefectType.EMPTY_CONTENT,
            severity=DefectSeverity.INFO,
            field="content",
            message="Content is empty",
        ))

    data_entropy = 0.0
    if not node.attributes:
        defects.append(Defect(
            type=DefectType.EMPTY_DATA,
            severity=DefectSeverity.WARNING,
            message="Node has no data fields",
        ))
    else:
        scores: list[float] = []
        for key, value in node.attributes.items():
            scores.append(field_entropy(value))
            if isinstance(value, str) and is_placeholder(value):
                defects.append(Defect(
                    type=DefectType.PLACEHOLDER_DETECTED,
                    severity=DefectSeverity.INFO,
                    field=key,
                    message=f"Field '{key}' looks like a placeholder",
                ))
        data_entropy = sum(scores) / len(scores)

    check = validate_format(node.type, node.attributes)
    for key in check.failed_fields:
        defects.append(Defect(
            type=DefectType.FORMAT_INVALID,
            severity=DefectSeverity.WARNING,
            field=key,
            message=f"Field '{key}' has an invalid format",
        ))

    w = params.weights
    pressure = (
        w.title * title_entropy
        + w.content * content_entropy
        + w.data * data_entropy
        + w.format * check.score
    )

    if pressure < params.defect_threshold:
        defects.append(Defect(
            type=DefectType.LOW_INFORMATION,
            severity=DefectSeverity.CRITICAL,
            message="Overall information content is too low",
        ))

    return InitialPressure(
        pressure=pressure,
        breakdown=EntropyBreakdown(
            title=title_entropy,
            content=content_entropy,
            data=data_entropy,
            format=check.score,
        ),
        defects=tuple(defects),
    )


def propagate_pressure(
    graph: nx.Graph,
    initial: Mapping[str, float],
    params: QualityParams | None = None,
) -> PropagationResult:
    """Diffuse pressure across ``graph`` until it settles."""
    params = params or QualityParams()
    alpha = params.alpha
    current: dict[str, float] = {node_id: initial.get(node_id, 0.0) for node_id in graph.nodes()}

    iterations = 0
    converged = False
    while iterations < params.max_iterations:
        updated: dict[str, float] = {}
        max_diff = 0.0

        for node_id in graph.nodes():
            p0 = initial.get(node_id, 0.0)
            neighbors = graph.adj[node_id]
            if neighbors:
                neighbor_pressure = sum(current[nbr] for nbr in neighbors) / len(neighbors)
            else:
                neighbor_pressure = p0 * params.isolation_decay

            value = alpha * p0 + (1 - alpha) * neighbor_pressure
            updated[node_id] = value
            max_diff = max(max_diff, abs(value - current[node_id]))

        current = updated
        iterations += 1
        if max_diff < params.convergence_threshold:
            converged = True
            break

    logger.debug(
        "Pressure propagation: %d iteration(s), converged=%s",
        iterations, converged,
    )
    return PropagationResult(
        final=MappingProxyType(current),
        iterations=iterations,
        converged=converged,
    )
