"""intelgraph CLI — analyze canvas snapshots from the command line.

Usage:
    intelgraph analyze canvas.json                   # Full JSON analysis
    intelgraph analyze canvas.json --only n1 n2 n3   # Selected nodes only
    intelgraph structure canvas.json                 # Communities and key nodes
    intelgraph quality canvas.json --limit 10        # Worst-documented nodes
    intelgraph export canvas.json --format gexf -o network.gexf

Snapshots are JSON objects with ``nodes`` and ``edges`` (or
``connections``) lists.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Sequence

logger = logging.getLogger(__name__)

EXPORT_FORMATS = ("d3", "cytoscape", "csv", "gexf", "graphml")


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="intelgraph",
        description="intelgraph — structural and data-quality analysis of intelligence graphs",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Verbose output"
    )

    subparsers = parser.add_subparsers(dest="command")

    # analyze
    ana = subparsers.add_parser("analyze", help="Run both analyses, print JSON")
    ana.add_argument("snapshot", help="Snapshot JSON file")
    ana.add_argument("--only", nargs="+", metavar="NODE_ID", help="Restrict to these nodes")
    ana.add_argument("--output", "-o", help="Write JSON to file instead of stdout")

    # structure
    st = subparsers.add_parser("structure", help="Communities and key nodes")
    st.add_argument("snapshot", help="Snapshot JSON file")

    # quality
    q = subparsers.add_parser("quality", help="Data quality report")
    q.add_argument("snapshot", help="Snapshot JSON file")
    q.add_argument("--limit", type=int, default=20, help="Max nodes to list")

    # export
    ex = subparsers.add_parser("export", help="Export the analyzed graph")
    ex.add_argument("snapshot", help="Snapshot JSON file")
    ex.add_argument("--format", "-f", choices=EXPORT_FORMATS, default="d3")
    ex.add_argument("--output", "-o", required=True, help="Output file (directory for csv)")

    args = parser.parse_args(argv)

    # Logging
    level = logging.DEBUG if args.verbose else _configured_level()
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    if not args.command:
        parser.print_help()
        sys.exit(1)

    # Dispatch
    try:
        if args.command == "analyze":
            _cmd_analyze(args)
        elif args.command == "structure":
            _cmd_structure(args)
        elif args.command == "quality":
            _cmd_quality(args)
        elif args.command == "export":
            _cmd_export(args)
    except KeyboardInterrupt:
        print("\nInterrupted.")
        sys.exit(130)
    except (OSError, ValueError) as exc:
        # SnapshotError and json.JSONDecodeError are both ValueErrors
        logger.error("Error: %s", exc)
        if args.verbose:
            raise
        sys.exit(1)


def _configured_level() -> int:
    from intelgraph.config.settings import get_settings
    return getattr(logging, get_settings().LOG_LEVEL)


def _engine():
    from intelgraph.config.settings import get_settings
    from intelgraph.engine import GraphEngine
    return GraphEngine(get_settings().analysis_params())


def _load_snapshot(path: str):
    from intelgraph.graph.snapshot import GraphSnapshot
    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    snapshot = GraphSnapshot.from_dict(payload)
    logger.debug(
        "Loaded snapshot %s: %d nodes, %d edges",
        path, snapshot.node_count, snapshot.edge_count,
    )
    return snapshot


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def _cmd_analyze(args: argparse.Namespace) -> None:
    snapshot = _load_snapshot(args.snapshot)
    engine = _engine()
    if args.only:
        result = engine.analyze_selection(snapshot, args.only)
    else:
        result = engine.analyze(snapshot)

    text = json.dumps(result.to_dict(), indent=2, ensure_ascii=False)
    if args.output:
        Path(args.output).write_text(text, encoding="utf-8")
        print(f"📄 Analysis saved to {args.output}")
    else:
        print(text)


def _cmd_structure(args: argparse.Namespace) -> None:
    snapshot = _load_snapshot(args.snapshot)
    engine = _engine()
    structural = engine.analyze_structure(snapshot)
    briefing = engine.briefing_context(snapshot, structural)

    print(f"🕸  {snapshot.node_count} nodes, {snapshot.edge_count} edges")
    print(f"   Communities: {structural.community_count}")
    if briefing.communities:
        for comm_id, members in briefing.communities.items():
            preview = ", ".join(members[:8])
            more = f" (+{len(members) - 8})" if len(members) > 8 else ""
            print(f"     [{comm_id}] {preview}{more}")

    print(f"   Key nodes:   {len(structural.key_nodes)}")
    for node_id in structural.key_nodes:
        node = snapshot.node(node_id)
        title = node.title if node and node.title else node_id
        print(f"     ★ {title}  ({structural.centrality[node_id]:.3f})")


def _cmd_quality(args: argparse.Namespace) -> None:
    from intelgraph.quality.defects import QualityLevel

    snapshot = _load_snapshot(args.snapshot)
    report = _engine().analyze_quality(snapshot)
    summary = report.summary

    print(f"🧪 Data quality: {summary.total_nodes} nodes")
    print(f"   Average pressure: {summary.average_pressure:.0%}")
    print(f"   Needs attention:  {summary.defect_rate:.0%}")
    for level in QualityLevel:
        print(f"     {level.label:<10} {summary.count(level)}")

    params = report.algorithm_params
    print(
        f"   Propagation: {params.iterations} iteration(s), "
        f"{'converged' if params.converged else 'not converged'}"
    )

    if report.low_pressure_clusters:
        print(f"   Low-pressure clusters: {len(report.low_pressure_clusters)}")

    for result in report.defective_nodes[: args.limit]:
        title = result.node_title or result.node_id
        print(
            f"\n   {title}  [{result.quality_level.label}]  "
            f"P0={result.initial_pressure:.2f} → P={result.final_pressure:.2f}"
        )
        for defect in result.defects:
            print(f"     - {defect.severity.label}: {defect.type.label} — {defect.message}")


def _cmd_export(args: argparse.Namespace) -> None:
    from intelgraph.export import GraphExporter

    snapshot = _load_snapshot(args.snapshot)
    result = _engine().analyze(snapshot)
    exporter = GraphExporter(snapshot, result)

    if args.format == "gexf":
        exporter.to_gexf(args.output)
    elif args.format == "graphml":
        exporter.to_graphml(args.output)
    elif args.format == "csv":
        exporter.to_csv_files(args.output)
    else:
        data = exporter.to_d3_json() if args.format == "d3" else exporter.to_cytoscape_json()
        Path(args.output).write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")

    print(f"📦 Exported {args.format} to {args.output}")


if __name__ == "__main__":
    main()
