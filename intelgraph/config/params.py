"""Immutable algorithm parameters.

Every analysis call receives an :class:`AnalysisParams` value instead of
reading module-level constants, so alternate parameter sets can be tested
side by side. Defaults are the tuned production values.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field


def _check_unit(name: str, value: float) -> None:
    if not 0.0 <= value <= 1.0:
        raise ValueError(f"{name} must be within [0, 1]; got {value!r}")


def _check_positive(name: str, value: int) -> None:
    if value < 1:
        raise ValueError(f"{name} must be >= 1; got {value!r}")


# ---------------------------------------------------------------------------
# Structural analysis
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CentralityWeights:
    """Blend of the three centrality measures into the composite score.

    Must approximately sum to 1.0 (tolerance 0.05).
    """

    degree: float = 0.25
    betweenness: float = 0.35
    pagerank: float = 0.40

    def __post_init__(self) -> None:
        total = self.degree + self.betweenness + self.pagerank
        if not math.isclose(total, 1.0, abs_tol=0.05):
            raise ValueError(
                f"CentralityWeights must sum to ~1.0; got {total:.4f} "
                f"(degree={self.degree}, betweenness={self.betweenness}, "
                f"pagerank={self.pagerank})"
            )


@dataclass(frozen=True)
class StructuralParams:
    """Community detection, centrality and key-node selection settings."""

    louvain_max_passes: int = 20
    louvain_min_gain: float = 1e-10
    pagerank_damping: float = 0.85
    pagerank_iterations: int = 20
    key_node_threshold: float = 0.5
    key_node_percentile: float = 0.2
    normalize_composite: bool = True
    weights: CentralityWeights = field(default_factory=CentralityWeights)

    def __post_init__(self) -> None:
        _check_positive("louvain_max_passes", self.louvain_max_passes)
        _check_positive("pagerank_iterations", self.pagerank_iterations)
        _check_unit("pagerank_damping", self.pagerank_damping)
        _check_unit("key_node_threshold", self.key_node_threshold)
        if not 0.0 <= self.key_node_percentile < 1.0:
            raise ValueError(
                f"key_node_percentile must be within [0, 1); got {self.key_node_percentile!r}"
            )
        if self.louvain_min_gain < 0:
            raise ValueError("louvain_min_gain must be non-negative")


# ---------------------------------------------------------------------------
# Data quality
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class EntropyWeights:
    """Contribution of each entropy component to the initial pressure P0.

    Must approximately sum to 1.0 (tolerance 0.05).
    """

    title: float = 0.30
    content: float = 0.20
    data: float = 0.35
    format: float = 0.15

    def __post_init__(self) -> None:
        total = self.title + self.content + self.data + self.format
        if not math.isclose(total, 1.0, abs_tol=0.05):
            raise ValueError(
                f"EntropyWeights must sum to ~1.0; got {total:.4f}"
            )


@dataclass(frozen=True)
class QualityParams:
    """Information-pressure model settings.

    ``alpha`` is the share of a node's own P0 kept at every propagation
    step; the remainder comes from the neighbour mean.
    """

    alpha: float = 0.65
    convergence_threshold: float = 0.001
    max_iterations: int = 50
    defect_threshold: float = 0.35
    warning_threshold: float = 0.50
    isolation_decay: float = 0.8
    weights: EntropyWeights = field(default_factory=EntropyWeights)

    def __post_init__(self) -> None:
        if not 0.0 < self.alpha < 1.0:
            raise ValueError(f"alpha must be within (0, 1); got {self.alpha!r}")
        _check_positive("max_iterations", self.max_iterations)
        _check_unit("defect_threshold", self.defect_threshold)
        _check_unit("warning_threshold", self.warning_threshold)
        _check_unit("isolation_decay", self.isolation_decay)
        if self.convergence_threshold <= 0:
            raise ValueError("convergence_threshold must be positive")


@dataclass(frozen=True)
class AnalysisParams:
    """Umbrella configuration passed into every analysis call."""

    structural: StructuralParams = field(default_factory=StructuralParams)
    quality: QualityParams = field(default_factory=QualityParams)


DEFAULT_PARAMS = AnalysisParams()
