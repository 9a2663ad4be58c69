"""Information-pressure data quality model.

Scores every node by the entropy of its own data, diffuses that score
across the relationship graph and reports the nodes (and connected
regions) that stay under-documented.

Usage::

    from intelgraph.quality import assess_quality

    report = assess_quality(snapshot)
    for result in report.defective_nodes:
        print(result.node_title, result.quality_level.label)
"""

from intelgraph.quality.defects import Defect, DefectSeverity, DefectType, QualityLevel
from intelgraph.quality.report import DataQualityReport, NodeQualityResult, assess_quality

__all__ = [
    "Defect",
    "DefectSeverity",
    "DefectType",
    "QualityLevel",
    "DataQualityReport",
    "NodeQualityResult",
    "assess_quality",
]
