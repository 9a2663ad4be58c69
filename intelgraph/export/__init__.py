"""Export of analyzed graphs (GEXF, GraphML, Cytoscape/D3 JSON, CSV)."""

from intelgraph.export.graph_exporter import (
    COMMUNITY_COLORS,
    QUALITY_COLORS,
    GraphExporter,
    community_color,
)

__all__ = ["COMMUNITY_COLORS", "QUALITY_COLORS", "GraphExporter", "community_color"]
