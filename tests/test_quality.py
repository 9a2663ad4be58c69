"""Tests for intelgraph.quality — the information-pressure model.

Tests cover:
  - String/field entropy and the placeholder vocabulary
  - Type-specific format validation
  - Initial pressure P0 and node-local defects
  - Pressure propagation (convergence, isolation decay, diffusion)
  - Quality levels, structural defects and low-pressure clusters
  - DataQualityReport assembly
"""

import math

import networkx as nx
import pytest

from intelgraph.config.params import QualityParams
from intelgraph.graph.builder import build_adjacency
from intelgraph.graph.snapshot import Edge, GraphSnapshot, Node
from intelgraph.quality.defects import (
    Defect,
    DefectSeverity,
    DefectType,
    QualityLevel,
    find_low_pressure_clusters,
    needs_attention,
    quality_level,
    structural_defects,
)
from intelgraph.quality.entropy import (
    PLACEHOLDER_SCORE,
    field_entropy,
    is_placeholder,
    string_entropy,
)
from intelgraph.quality.formats import validate_format
from intelgraph.quality.pressure import estimate_initial_pressure, propagate_pressure
from intelgraph.quality.report import assess_quality


# ---------------------------------------------------------------------------
# Test fixtures
# ---------------------------------------------------------------------------

def _documented(node_id: str) -> Node:
    """A well-documented email entity."""
    return Node(
        id=node_id,
        type="EMAIL",
        title=f"Procurement mailbox {node_id.upper()}",
        content=(
            "Mailbox used by the Harbor Logistics procurement desk to "
            "negotiate fuel contracts with three offshore suppliers in 2021."
        ),
        attributes={
            "email": f"procurement.{node_id}@harbor-logistics.com",
            "provider": "Fastmail",
            "verified": True,
        },
    )


def _empty(node_id: str) -> Node:
    return Node(id=node_id)


def _types(defects) -> set:
    return {d.type for d in defects}


@pytest.fixture
def investigation() -> GraphSnapshot:
    """Mixed-quality network: three documented mailboxes around a stub."""
    return GraphSnapshot(
        nodes=(
            _documented("h1"),
            _documented("h2"),
            _documented("h3"),
            Node(id="stub", type="PERSON", title="Unknown"),
            _empty("orphan"),
        ),
        edges=(
            Edge("e1", "stub", "h1"),
            Edge("e2", "stub", "h2"),
            Edge("e3", "stub", "h3"),
        ),
    )


# ---------------------------------------------------------------------------
# Entropy
# ---------------------------------------------------------------------------


class TestEntropy:

    @pytest.mark.parametrize("value", [
        "unknown", "Unknown", "N/A", "na", "????", "xxxx", "aaaaaa", "1111",
        "New Entity", "new node", "untitled", "TBD", "todo", "test", "test_2",
        "---", "123", "null", "未知", "待补充", "  placeholder  ",
    ])
    def test_placeholders_score_floor(self, value):
        assert is_placeholder(value)
        assert string_entropy(value) <= PLACEHOLDER_SCORE

    @pytest.mark.parametrize("value", ["testing", "Dana Reyes", "xy", "1234", "contest"])
    def test_real_text_is_not_placeholder(self, value):
        assert not is_placeholder(value)

    def test_empty_values(self):
        assert string_entropy("") == 0.0
        assert string_entropy("   ") == 0.0
        assert string_entropy(None) == 0.0
        assert not is_placeholder("")

    def test_single_character(self):
        assert string_entropy("k") == pytest.approx(0.1)

    def test_two_distinct_characters(self):
        # Shannon 1 bit over log2(2) → 1.0; length term log2(3)/7
        assert string_entropy("ab") == pytest.approx(0.6 + 0.4 * math.log2(3) / 7)

    def test_longer_text_scores_higher(self):
        short = string_entropy("Acme")
        long = string_entropy("Acme Offshore Holdings registered in Limassol, Cyprus")
        assert 0 < short < long <= 1.0

    def test_field_entropy_by_type(self):
        assert field_entropy(None) == 0.0
        assert field_entropy(True) == 0.5
        assert field_entropy(False) == 0.5
        assert field_entropy(42) == 0.7
        assert field_entropy(3.5) == 0.7
        assert field_entropy(float("nan")) == 0.0
        assert field_entropy(float("inf")) == 0.0
        assert field_entropy("unknown") == PLACEHOLDER_SCORE
        assert field_entropy(object()) == 0.3

    def test_field_entropy_containers_average(self):
        assert field_entropy([]) == 0.0
        assert field_entropy({}) == 0.0
        assert field_entropy([1, True]) == pytest.approx(0.6)
        assert field_entropy({"a": 1, "b": None}) == pytest.approx(0.35)
        assert field_entropy([[1], [None]]) == pytest.approx(0.35)


# ---------------------------------------------------------------------------
# Format validation
# ---------------------------------------------------------------------------


class TestFormatValidation:

    def test_valid_email(self):
        check = validate_format("EMAIL", {"email": "analyst@example.org"})
        assert check.score == 1.0
        assert check.checked == 1
        assert check.failed_fields == ()

    def test_invalid_email(self):
        check = validate_format("EMAIL", {"email": "not-an-email"})
        assert check.score == 0.0
        assert check.failed_fields == ("email",)

    def test_type_is_case_insensitive(self):
        assert validate_format("email", {"email": "analyst@example.org"}).score == 1.0

    def test_type_without_rules_is_neutral(self):
        assert validate_format("PERSON", {"name": "Dana"}).score == 0.7
        assert validate_format("", {}).score == 0.7

    def test_rules_but_nothing_populated(self):
        assert validate_format("EMAIL", {"name": "Ops"}).score == 0.5
        assert validate_format("EMAIL", {"email": "   "}).score == 0.5
        assert validate_format("EMAIL", {"email": 12}).score == 0.5

    def test_ip_addresses(self):
        assert validate_format("IP_ADDRESS", {"ip": "192.168.10.4"}).score == 1.0
        assert validate_format("IP_ADDRESS", {"ip": "999.1.1.1"}).score == 0.0
        assert validate_format(
            "IP_ADDRESS", {"ip_address": "2001:0db8:85a3:0000:0000:8a2e:0370:7334"}
        ).score == 1.0

    def test_domain_and_phone(self):
        assert validate_format("DOMAIN", {"domain": "harbor-logistics.com"}).score == 1.0
        assert validate_format("DOMAIN", {"domain": "localhost"}).score == 0.0
        assert validate_format("PHONE_NUMBER", {"phone": "+357 22 123456"}).score == 1.0
        assert validate_format("PHONE_NUMBER", {"phone": "call me"}).score == 0.0

    def test_crypto_wallet(self):
        eth = "0x" + "a" * 40
        assert validate_format("CRYPTO_WALLET", {"wallet": eth}).score == 1.0
        assert validate_format("CRYPTO_WALLET", {"address": "1BoatSLRHtKNngkdXEeobR76b53LETtpyT"}).score == 1.0
        assert validate_format("CRYPTO_WALLET", {"wallet": "not a wallet"}).score == 0.0

    def test_file_hash_fraction(self):
        check = validate_format("FILE_HASH", {"md5": "d41d8cd98f00b204e9800998ecf8427e", "sha256": "abc"})
        assert check.checked == 2
        assert check.score == 0.5
        assert check.failed_fields == ("sha256",)

    def test_localized_field_names(self):
        assert validate_format("EMAIL", {"邮箱地址": "a@b.io"}).score == 1.0


# ---------------------------------------------------------------------------
# Initial pressure
# ---------------------------------------------------------------------------


class TestInitialPressure:

    def test_pressure_is_weighted_breakdown(self):
        estimate = estimate_initial_pressure(_documented("h1"))
        b = estimate.breakdown
        expected = 0.30 * b.title + 0.20 * b.content + 0.35 * b.data + 0.15 * b.format
        assert estimate.pressure == pytest.approx(expected)
        assert b.format == 1.0
        assert estimate.pressure > 0.5
        assert estimate.defects == ()

    def test_empty_node_defects(self):
        estimate = estimate_initial_pressure(_empty("c"))
        assert _types(estimate.defects) >= {
            DefectType.EMPTY_TITLE,
            DefectType.EMPTY_CONTENT,
            DefectType.EMPTY_DATA,
            DefectType.LOW_INFORMATION,
        }
        # Only the neutral format score contributes
        assert estimate.pressure == pytest.approx(0.15 * 0.7)

    def test_defect_severities(self):
        by_type = {d.type: d for d in estimate_initial_pressure(_empty("c")).defects}
        assert by_type[DefectType.EMPTY_TITLE].severity is DefectSeverity.CRITICAL
        assert by_type[DefectType.EMPTY_CONTENT].severity is DefectSeverity.INFO
        assert by_type[DefectType.EMPTY_DATA].severity is DefectSeverity.WARNING
        assert by_type[DefectType.LOW_INFORMATION].severity is DefectSeverity.CRITICAL
        assert by_type[DefectType.EMPTY_TITLE].field == "title"

    def test_placeholder_title_and_field(self):
        node = Node(
            id="p", type="PERSON", title="Unknown",
            content="Seen at the port office twice in March",
            attributes={"nationality": "n/a", "age": 41},
        )
        defects = estimate_initial_pressure(node).defects
        placeholders = [d for d in defects if d.type is DefectType.PLACEHOLDER_DETECTED]
        assert [(d.field, d.severity) for d in placeholders] == [
            ("title", DefectSeverity.WARNING),
            ("nationality", DefectSeverity.INFO),
        ]
        assert "nationality" in placeholders[1].message

    def test_format_failure_defect(self):
        node = Node(id="m", type="EMAIL", title="Ops mailbox", attributes={"email": "ops-at-example"})
        estimate = estimate_initial_pressure(node)
        failures = [d for d in estimate.defects if d.type is DefectType.FORMAT_INVALID]
        assert len(failures) == 1
        assert failures[0].field == "email"
        assert failures[0].severity is DefectSeverity.WARNING
        assert estimate.breakdown.format == 0.0

    def test_custom_weights_change_pressure(self):
        from intelgraph.config.params import EntropyWeights

        params = QualityParams(weights=EntropyWeights(title=1.0, content=0.0, data=0.0, format=0.0))
        node = _documented("h1")
        estimate = estimate_initial_pressure(node, params)
        assert estimate.pressure == pytest.approx(string_entropy(node.title))


# ---------------------------------------------------------------------------
# Propagation
# ---------------------------------------------------------------------------


class TestPropagation:

    def test_isolated_node_decays(self):
        graph = nx.Graph()
        graph.add_node("a")
        result = propagate_pressure(graph, {"a": 0.5})
        assert result.final["a"] == pytest.approx(0.5 * (0.65 + 0.35 * 0.8))
        assert result.converged
        assert result.iterations == 2

    def test_iteration_cap(self):
        graph = nx.Graph()
        graph.add_node("a")
        result = propagate_pressure(graph, {"a": 0.5}, QualityParams(max_iterations=1))
        assert result.iterations == 1
        assert not result.converged

    def test_low_node_raised_by_neighbours(self):
        graph = nx.Graph([("low", "h1"), ("low", "h2"), ("low", "h3")])
        initial = {"low": 0.1, "h1": 0.9, "h2": 0.85, "h3": 0.8}
        result = propagate_pressure(graph, initial)
        assert result.final["low"] > initial["low"]
        assert all(result.final[h] < initial[h] for h in ("h1", "h2", "h3"))

    def test_terminates_within_cap(self):
        graph = nx.path_graph(40)
        graph = nx.relabel_nodes(graph, {i: f"n{i}" for i in graph.nodes()})
        initial = {n: (i % 2) * 1.0 for i, n in enumerate(graph.nodes())}
        result = propagate_pressure(graph, initial)
        assert result.iterations <= 50
        assert all(0.0 <= p <= 1.0 for p in result.final.values())

    def test_fixed_point(self):
        graph = nx.Graph([("a", "b")])
        initial = {"a": 0.2, "b": 0.8}
        final = propagate_pressure(graph, initial).final
        # p = α·p0 + (1-α)·p_neighbour at convergence
        assert final["a"] == pytest.approx(0.65 * 0.2 + 0.35 * final["b"], abs=2e-3)


# ---------------------------------------------------------------------------
# Classification and clusters
# ---------------------------------------------------------------------------


class TestDefects:

    @pytest.mark.parametrize("pressure,level", [
        (0.95, QualityLevel.EXCELLENT),
        (0.8, QualityLevel.EXCELLENT),
        (0.79, QualityLevel.GOOD),
        (0.6, QualityLevel.GOOD),
        (0.45, QualityLevel.FAIR),
        (0.3, QualityLevel.POOR),
        (0.29, QualityLevel.CRITICAL),
        (0.0, QualityLevel.CRITICAL),
    ])
    def test_quality_level_boundaries(self, pressure, level):
        assert quality_level(pressure) is level

    def test_isolation_defect(self):
        defects = structural_defects(0.4, 0.37, neighbor_count=0)
        assert _types(defects) == {DefectType.STRUCTURAL_ISOLATION}
        assert defects[0].severity is DefectSeverity.WARNING

    def test_well_documented_isolated_node_is_not_flagged(self):
        assert structural_defects(0.7, 0.65, neighbor_count=0) == []

    def test_cluster_defect(self):
        defects = structural_defects(0.6, 0.3, neighbor_count=3)
        assert _types(defects) == {DefectType.CLUSTER_DEFECT}
        assert defects[0].severity is DefectSeverity.INFO

    def test_needs_attention(self):
        info = Defect(DefectType.EMPTY_CONTENT, DefectSeverity.INFO, "Content is empty")
        assert needs_attention(0.49, [])
        assert not needs_attention(0.9, [])
        assert needs_attention(0.9, [info])

    def test_labels_and_ranks(self):
        assert DefectType.EMPTY_DATA.label == "No data"
        assert DefectSeverity.CRITICAL.rank > DefectSeverity.WARNING.rank > DefectSeverity.INFO.rank
        assert QualityLevel.FAIR.label == "Fair"

    def test_low_pressure_clusters(self):
        graph = nx.Graph([("a", "b"), ("b", "c"), ("c", "d"), ("d", "e"), ("e", "g")])
        graph.add_node("f")
        pressures = {"a": 0.1, "b": 0.2, "c": 0.9, "d": 0.1, "e": 0.3, "g": 0.2, "f": 0.0}
        clusters = find_low_pressure_clusters(graph, pressures, 0.35)
        assert clusters == [["d", "e", "g"], ["a", "b"], ["f"]]

    def test_cluster_members_in_breadth_first_order(self):
        graph = nx.Graph([("s", "x"), ("s", "y"), ("x", "z"), ("y", "y"), ("z", "h")])
        pressures = {"s": 0.1, "x": 0.2, "y": 0.1, "z": 0.3, "h": 0.9}
        clusters = find_low_pressure_clusters(graph, pressures, 0.35)
        assert clusters == [["s", "x", "y", "z"]]

    def test_no_low_pressure_clusters(self):
        graph = nx.Graph([("a", "b")])
        assert find_low_pressure_clusters(graph, {"a": 0.9, "b": 0.8}, 0.35) == []


# ---------------------------------------------------------------------------
# Report
# ---------------------------------------------------------------------------


class TestQualityReport:

    def test_empty_node_is_critical(self):
        report = assess_quality(GraphSnapshot(nodes=(_empty("c"),)))
        result = report.result_for("c")
        assert result.quality_level is QualityLevel.CRITICAL
        assert _types(result.defects) >= {
            DefectType.EMPTY_TITLE,
            DefectType.EMPTY_CONTENT,
            DefectType.EMPTY_DATA,
            DefectType.LOW_INFORMATION,
            DefectType.STRUCTURAL_ISOLATION,
        }
        assert result.needs_attention
        assert result.worst_severity == "critical"

    def test_diffusion_raises_low_node(self, investigation):
        report = assess_quality(investigation)
        stub = report.result_for("stub")
        assert stub.final_pressure > stub.initial_pressure

    def test_defective_nodes_sorted_ascending(self, investigation):
        report = assess_quality(investigation)
        pressures = [r.final_pressure for r in report.defective_nodes]
        assert pressures == sorted(pressures)
        assert {r.node_id for r in report.defective_nodes} >= {"stub", "orphan"}
        assert all(r.needs_attention for r in report.defective_nodes)

    def test_summary(self, investigation):
        report = assess_quality(investigation)
        s = report.summary
        assert s.total_nodes == 5
        assert sum(s.count(level) for level in QualityLevel) == 5
        assert s.average_pressure == pytest.approx(
            sum(r.final_pressure for r in report.node_results) / 5
        )
        assert s.defect_rate == pytest.approx(len(report.defective_nodes) / 5)

    def test_clusters_use_defect_threshold(self, investigation):
        report = assess_quality(investigation)
        assert ("orphan",) in report.low_pressure_clusters
        for cluster in report.low_pressure_clusters:
            for node_id in cluster:
                assert report.result_for(node_id).final_pressure < 0.35

    def test_algorithm_params_echoed(self, investigation):
        params = assess_quality(investigation).algorithm_params
        assert params.alpha == 0.65
        assert params.threshold == 0.35
        assert params.warning_threshold == 0.50
        assert params.max_iterations == 50
        assert 1 <= params.iterations <= 50
        assert params.converged

    def test_deterministic(self, investigation):
        assert assess_quality(investigation).to_dict() == assess_quality(investigation).to_dict()

    def test_prebuilt_graph_gives_same_report(self, investigation):
        graph, _ = build_adjacency(investigation)
        assert assess_quality(investigation, graph=graph) == assess_quality(investigation)

    def test_empty_snapshot(self):
        report = assess_quality(GraphSnapshot())
        assert report.summary.total_nodes == 0
        assert report.node_results == ()
        assert report.algorithm_params.iterations == 0
        assert report.algorithm_params.converged

    def test_duplicate_node_ids_keep_first(self):
        snapshot = GraphSnapshot(nodes=(_documented("x"), _empty("x")))
        report = assess_quality(snapshot)
        assert len(report.node_results) == 1
        assert report.node_results[0].node_title == "Procurement mailbox X"

    def test_to_dict(self, investigation):
        data = assess_quality(investigation).to_dict()
        assert set(data) == {
            "summary", "node_results", "defective_nodes",
            "low_pressure_clusters", "algorithm_params",
        }
        first = data["node_results"][0]
        assert set(first["entropy_breakdown"]) == {"title", "content", "data", "format"}
        assert first["quality_level"] in {level.value for level in QualityLevel}
