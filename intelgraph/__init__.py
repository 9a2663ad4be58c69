"""intelgraph — graph analytics for intelligence graphs.

Two analyses over an immutable snapshot of entities and relationships:

  - structure: communities, centrality and key nodes
  - data quality: entropy-based information pressure and its diffusion

Usage::

    from intelgraph import GraphEngine, GraphSnapshot

    snapshot = GraphSnapshot.from_dict(payload)
    result = GraphEngine().analyze(snapshot)
"""

from intelgraph.engine import BriefingContext, GraphAnalysisResult, GraphEngine
from intelgraph.graph.snapshot import Edge, GraphSnapshot, Node

__all__ = [
    "BriefingContext",
    "Edge",
    "GraphAnalysisResult",
    "GraphEngine",
    "GraphSnapshot",
    "Node",
]

__version__ = "0.1.0"
