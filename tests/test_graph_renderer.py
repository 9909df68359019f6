"""
Tests for GraphRenderer (DOT / JSON / Mermaid output).
"""
from __future__ import annotations

import json

import pytest

from cobol_analyzer.models import SourceFile
from cobol_analyzer.output.graph_renderer import GraphRenderer
from cobol_analyzer.pipeline.dependency_graph import build_dependency_graph


@pytest.fixture(scope="module")
def graph():
    files = [
        SourceFile("MAIN.cbl", (
            "IDENTIFICATION DIVISION.\nPROGRAM-ID. MAIN.\nDATA DIVISION.\n"
            "COPY COMMON-REC.\nPROCEDURE DIVISION.\n"
            "CALL 'SUB'.\nCALL 'GHOST'.\n"
        )),
        SourceFile("SUB.cbl", (
            "IDENTIFICATION DIVISION.\nPROGRAM-ID. SUB.\nDATA DIVISION.\n"
            "LINKAGE SECTION.\nPROCEDURE DIVISION.\nGOBACK.\n"
        )),
        SourceFile("LONE.cbl", (
            "IDENTIFICATION DIVISION.\nPROGRAM-ID. LONE.\nPROCEDURE DIVISION.\nSTOP RUN.\n"
        )),
        SourceFile("ODD.cbl", "PROCEDURE DIVISION.\nCALL 'SUB'.\n"),
    ]
    return build_dependency_graph(files)


# ─────────────────────────────────────────────────────────────────────────────
# GraphView
# ─────────────────────────────────────────────────────────────────────────────


class TestBuild:
    def test_node_statuses(self, graph):
        view = GraphRenderer().build(graph)
        statuses = {n.id: n.status for n in view.nodes}
        assert statuses == {
            "MAIN": "main",
            "SUB": "subprogram",
            "LONE": "orphan",
            "ODD": "program",
            "GHOST": "missing",
        }

    def test_call_edges(self, graph):
        view = GraphRenderer().build(graph)
        edges = {(e.from_id, e.to_id, e.to_status) for e in view.edges}
        assert edges == {
            ("MAIN", "SUB", "subprogram"),
            ("MAIN", "GHOST", "missing"),
            ("ODD", "SUB", "subprogram"),
        }

    def test_copybooks_excluded_by_default(self, graph):
        view = GraphRenderer().build(graph)
        assert all(e.kind == "CALL" for e in view.edges)
        assert "COMMON-REC" not in {n.id for n in view.nodes}

    def test_copybooks_included(self, graph):
        view = GraphRenderer(include_copybooks=True).build(graph)
        nodes = {n.id: n.status for n in view.nodes}
        assert nodes["COMMON-REC"] == "copybook"
        assert any(e.kind == "COPY" and e.to_id == "COMMON-REC" for e in view.edges)


# ─────────────────────────────────────────────────────────────────────────────
# Renderers
# ─────────────────────────────────────────────────────────────────────────────


class TestDot:
    def test_structure(self, graph):
        dot = GraphRenderer().to_dot(graph)
        assert dot.startswith('digraph "COBOL_DEPENDENCIES" {')
        assert dot.rstrip().endswith("}")

    def test_missing_edge_dashed(self, graph):
        dot = GraphRenderer().to_dot(graph)
        assert '"MAIN" -> "GHOST"' in dot
        ghost_edge = next(l for l in dot.splitlines() if '"MAIN" -> "GHOST"' in l)
        assert "style=dashed" in ghost_edge

    def test_main_node_shape(self, graph):
        dot = GraphRenderer().to_dot(graph)
        main_line = next(l for l in dot.splitlines() if l.strip().startswith('"MAIN" ['))
        assert "doubleoctagon" in main_line
        assert "[MAIN]" in main_line

    def test_copy_edge_dotted(self, graph):
        dot = GraphRenderer(include_copybooks=True).to_dot(graph)
        copy_edge = next(l for l in dot.splitlines() if '-> "COMMON-REC"' in l)
        assert "style=dotted" in copy_edge


class TestJson:
    def test_round_trip(self, graph):
        renderer = GraphRenderer()
        data = json.loads(renderer.to_json_str(graph))
        assert data == renderer.to_json(graph)

    def test_content(self, graph):
        data = GraphRenderer().to_json(graph)
        assert {n["id"] for n in data["nodes"]} == {"MAIN", "SUB", "LONE", "ODD", "GHOST"}
        assert data["missing_programs"] == ["GHOST"]
        assert data["orphaned_programs"] == ["LONE"]
        ghost = next(n for n in data["nodes"] if n["id"] == "GHOST")
        assert ghost["color"] == "#E74C3C"
        assert ghost["source_file"] == ""


class TestMermaid:
    def test_header(self, graph):
        mmd = GraphRenderer().to_mermaid(graph)
        assert mmd.startswith("---\ntitle:")
        assert "flowchart LR" in mmd

    def test_edges(self, graph):
        mmd = GraphRenderer().to_mermaid(graph)
        assert "MAIN -->|CALL| SUB" in mmd
        assert "MAIN -.->|CALL| GHOST" in mmd

    def test_copybook_ids_prefixed_and_sanitised(self, graph):
        mmd = GraphRenderer(include_copybooks=True).to_mermaid(graph)
        assert 'cpy_COMMON_REC["COMMON-REC"]:::copybook' in mmd
        assert "MAIN -.-o cpy_COMMON_REC" in mmd

    def test_class_definitions(self, graph):
        mmd = GraphRenderer().to_mermaid(graph)
        for status in ("main", "subprogram", "program", "orphan", "missing", "copybook"):
            assert f"classDef {status}" in mmd


# ─────────────────────────────────────────────────────────────────────────────
# Awkward names
# ─────────────────────────────────────────────────────────────────────────────


class TestAwkwardNames:
    def test_mermaid_ids_stay_distinct(self):
        graph = build_dependency_graph([
            SourceFile("A-B.cbl", (
                "IDENTIFICATION DIVISION.\nPROGRAM-ID. A-B.\nPROCEDURE DIVISION.\n"
                "CALL 'A_B'.\n"
            )),
        ])
        mmd = GraphRenderer().to_mermaid(graph)
        assert 'A_B["A-B\\nMAIN"]:::main' in mmd
        assert 'A_B_2["A_B\\nNOT FOUND"]:::missing' in mmd
        assert "A_B -.->|CALL| A_B_2" in mmd

    def test_dot_escapes_backslash(self):
        graph = build_dependency_graph([
            SourceFile("MAIN.cbl", (
                "IDENTIFICATION DIVISION.\nPROGRAM-ID. MAIN.\nPROCEDURE DIVISION.\n"
                "CALL 'A\\'.\n"
            )),
        ])
        assert graph.missing_programs == ["A\\"]
        dot = GraphRenderer().to_dot(graph)
        assert '"MAIN" -> "A\\\\" [' in dot
        assert '    "A\\\\" [label="A\\\\\\n[NOT FOUND]"' in dot
