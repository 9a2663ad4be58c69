from intelgraph.config.params import (
    DEFAULT_PARAMS,
    AnalysisParams,
    CentralityWeights,
    EntropyWeights,
    QualityParams,
    StructuralParams,
)

__all__ = [
    "DEFAULT_PARAMS",
    "AnalysisParams",
    "CentralityWeights",
    "EntropyWeights",
    "QualityParams",
    "StructuralParams",
]
