"""Export analyzed graphs for external visualization tools.

Supported formats:
  - GEXF: Gephi
  - GraphML: General-purpose XML graph format
  - Cytoscape JSON: Cytoscape.js / Sigma.js web views
  - D3 JSON: D3.js force-directed layouts
  - CSV: Node and edge tables for spreadsheet analysis

Every node record carries the analysis outcome: community id and colour,
composite centrality, key-node flag, initial/final pressure and quality
level. Node size follows centrality so key nodes stand out.
"""

from __future__ import annotations

import csv
import io
import json
import logging
from pathlib import Path
from typing import Any

import networkx as nx

from intelgraph.engine import GraphAnalysisResult
from intelgraph.graph.builder import build_adjacency
from intelgraph.graph.snapshot import GraphSnapshot

logger = logging.getLogger(__name__)

# One colour per community, cycled when there are more than ten
COMMUNITY_COLORS: tuple[str, ...] = (
    "#06B6D4",  # cyan
    "#F97316",  # orange
    "#22C55E",  # green
    "#A855F7",  # purple
    "#EC4899",  # pink
    "#EAB308",  # yellow
    "#EF4444",  # red
    "#3B82F6",  # blue
    "#6366F1",  # indigo
    "#14B8A6",  # teal
)

QUALITY_COLORS: dict[str, str] = {
    "excellent": "#22C55E",
    "good": "#06B6D4",
    "fair": "#EAB308",
    "poor": "#F97316",
    "critical": "#EF4444",
}

NODE_CSV_COLUMNS = [
    "id", "title", "type", "community", "centrality", "key_node",
    "initial_pressure", "final_pressure", "quality_level",
]


def community_color(community_id: int) -> str:
    return COMMUNITY_COLORS[community_id % len(COMMUNITY_COLORS)]


class GraphExporter:
    """Export a snapshot together with its analysis results.

    Parameters
    ----------
    snapshot:
        The snapshot that was analyzed.
    result:
        Output of :meth:`intelgraph.engine.GraphEngine.analyze` for
        ``snapshot``.
    graph:
        Pre-built adjacency for ``snapshot``. Built on demand if omitted.
    """

    def __init__(
        self,
        snapshot: GraphSnapshot,
        result: GraphAnalysisResult,
        graph: nx.Graph | None = None,
    ) -> None:
        self._snapshot = snapshot
        self._result = result
        if graph is None:
            graph, _ = build_adjacency(snapshot)
        self._graph = graph
        self._quality = {r.node_id: r for r in result.quality.node_results}
        self._key_nodes = set(result.structural.key_nodes)

    # -- Node records --------------------------------------------------------

    def _node_record(self, node_id: str) -> dict[str, Any]:
        data = self._graph.nodes[node_id]
        structural = self._result.structural
        community = structural.communities.get(node_id, -1)
        quality = self._quality.get(node_id)
        return {
            "id": node_id,
            "title": data.get("title", ""),
            "type": data.get("type", ""),
            "community": community,
            "community_color": community_color(community) if community >= 0 else "#95A5A6",
            "centrality": structural.centrality.get(node_id, 0.0),
            "key_node": node_id in self._key_nodes,
            "initial_pressure": quality.initial_pressure if quality else 0.0,
            "final_pressure": quality.final_pressure if quality else 0.0,
            "quality_level": quality.quality_level.value if quality else "",
            "quality_color": QUALITY_COLORS.get(quality.quality_level.value, "#95A5A6") if quality else "#95A5A6",
        }

    def _records(self) -> list[dict[str, Any]]:
        return [self._node_record(node_id) for node_id in self._graph.nodes()]

    # -- GEXF (Gephi) -------------------------------------------------------

    def to_gexf(self, path: str | Path) -> None:
        """Export to GEXF format for Gephi."""
        export_graph = self._prepare_export_graph()
        nx.write_gexf(export_graph, str(path))
        logger.info("Exported GEXF to %s (%d nodes, %d edges)",
                    path, export_graph.number_of_nodes(), export_graph.number_of_edges())

    # -- GraphML -------------------------------------------------------------

    def to_graphml(self, path: str | Path) -> None:
        """Export to GraphML format."""
        export_graph = self._prepare_export_graph()
        nx.write_graphml(export_graph, str(path))
        logger.info("Exported GraphML to %s", path)

    # -- Cytoscape JSON ------------------------------------------------------

    def to_cytoscape_json(self) -> dict[str, Any]:
        """Export to Cytoscape.js JSON format for web visualization."""
        elements: list[dict[str, Any]] = []

        for record in self._records():
            node_data = dict(record)
            node_data["label"] = record["title"] or record["id"]
            elements.append({"data": node_data, "group": "nodes"})

        for u, v, data in self._graph.edges(data=True):
            elements.append({
                "data": {
                    "id": data.get("edge_id") or f"{u}--{v}",
                    "source": u,
                    "target": v,
                    "label": data.get("label", ""),
                },
                "group": "edges",
            })

        return {"elements": elements}

    # -- D3 JSON -------------------------------------------------------------

    def to_d3_json(self) -> dict[str, Any]:
        """Export to D3.js force-directed JSON format."""
        nodes = []
        node_index: dict[str, int] = {}

        for i, record in enumerate(self._records()):
            node_index[record["id"]] = i
            nodes.append({**record, "group": record["community"]})

        links = []
        for u, v, data in self._graph.edges(data=True):
            links.append({
                "source": node_index[u],
                "target": node_index[v],
                "label": data.get("label", ""),
            })

        return {"nodes": nodes, "links": links}

    # -- CSV -----------------------------------------------------------------

    def to_csv_nodes(self) -> str:
        """Export node table as CSV string."""
        output = io.StringIO()
        writer = csv.writer(output)
        writer.writerow(NODE_CSV_COLUMNS)
        for record in self._records():
            writer.writerow([record[col] for col in NODE_CSV_COLUMNS])
        return output.getvalue()

    def to_csv_edges(self) -> str:
        """Export edge table as CSV string."""
        output = io.StringIO()
        writer = csv.writer(output)
        writer.writerow(["edge_id", "source_id", "target_id", "label", "same_community"])

        communities = self._result.structural.communities
        for u, v, data in self._graph.edges(data=True):
            writer.writerow([
                data.get("edge_id", ""),
                u, v,
                data.get("label", ""),
                communities.get(u) == communities.get(v),
            ])
        return output.getvalue()

    def to_csv_files(self, directory: str | Path) -> tuple[Path, Path]:
        """Write node and edge CSV files to a directory."""
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)

        nodes_path = directory / "nodes.csv"
        edges_path = directory / "edges.csv"

        nodes_path.write_text(self.to_csv_nodes(), encoding="utf-8")
        edges_path.write_text(self.to_csv_edges(), encoding="utf-8")

        logger.info("Exported CSV to %s (nodes + edges)", directory)
        return nodes_path, edges_path

    def to_json(self) -> str:
        """Full analysis result as a JSON document."""
        return json.dumps(self._result.to_dict(), indent=2, ensure_ascii=False)

    # -- Helpers -------------------------------------------------------------

    def _prepare_export_graph(self) -> nx.Graph:
        """Copy the adjacency with flat, XML-serializable attributes."""
        export = nx.Graph()
        for record in self._records():
            attrs = {k: v for k, v in record.items() if k != "id"}
            attrs["size"] = max(5.0, attrs["centrality"] * 50)
            export.add_node(record["id"], **attrs)

        for u, v, data in self._graph.edges(data=True):
            export.add_edge(u, v, label=data.get("label", ""), edge_id=data.get("edge_id", ""))

        return export
