"""
Tests for ProgramDependencyMap (NetworkX-backed graph queries).
"""
from __future__ import annotations

import pytest

from cobol_analyzer.models import DependencyGraph, ProgramDependency
from cobol_analyzer.pipeline.dependency_map import ProgramDependencyMap


def _graph(edges: dict, missing=()) -> DependencyGraph:
    graph = DependencyGraph()
    for name, calls in edges.items():
        graph.programs[name] = ProgramDependency(program_name=name, called_programs=list(calls))
    graph.missing_programs = list(missing)
    return graph


@pytest.fixture
def chain():
    # DRIVER -> A -> B -> C, DRIVER -> GHOST (missing), LONE isolated
    return ProgramDependencyMap(_graph(
        {
            "DRIVER": ["A", "GHOST"],
            "A": ["B"],
            "B": ["C"],
            "C": [],
            "LONE": [],
        },
        missing=["GHOST"],
    ))


class TestQueries:
    def test_direct_dependencies(self, chain):
        assert chain.get_direct_dependencies("DRIVER") == {"A", "GHOST"}

    def test_transitive_dependencies(self, chain):
        assert chain.get_all_dependencies("DRIVER") == {"A", "B", "C", "GHOST"}
        assert chain.get_all_dependencies("B") == {"C"}

    def test_transitive_callers(self, chain):
        assert chain.get_all_callers("C") == {"A", "B", "DRIVER"}
        assert chain.get_all_callers("DRIVER") == set()

    def test_unknown_program(self, chain):
        assert chain.get_direct_dependencies("NOPE") == set()
        assert chain.get_all_dependencies("NOPE") == set()
        assert chain.get_all_callers("NOPE") == set()

    def test_entry_points(self, chain):
        assert chain.entry_points() == ["DRIVER"]

    def test_missing_vertex(self, chain):
        assert "GHOST" in chain.vertices()
        assert chain.is_missing("GHOST")
        assert not chain.is_missing("A")
        assert not chain.is_missing("NOPE")

    def test_edges(self, chain):
        assert sorted(chain.edges()) == [
            ("A", "B"),
            ("B", "C"),
            ("DRIVER", "A"),
            ("DRIVER", "GHOST"),
        ]

    def test_no_cycles(self, chain):
        assert chain.cycles() == []


class TestCycles:
    def test_cycle_rotated_to_smallest_name(self):
        dep_map = ProgramDependencyMap(_graph({"X": ["Y"], "Y": ["Z"], "Z": ["X"]}))
        assert dep_map.cycles() == [["X", "Y", "Z"]]

    def test_self_cycle(self):
        dep_map = ProgramDependencyMap(_graph({"R": ["R"]}))
        assert dep_map.cycles() == [["R"]]

    def test_cycle_programs_are_not_entry_points(self):
        dep_map = ProgramDependencyMap(_graph({"X": ["Y"], "Y": ["X"]}))
        assert dep_map.entry_points() == []


class TestSerialisation:
    def test_to_dict(self, chain):
        data = chain.to_dict()
        assert data["vertices"] == ["A", "B", "C", "DRIVER", "GHOST", "LONE"]
        assert {"src": "DRIVER", "dest": "A"} in data["edges"]
        assert data["entry_points"] == ["DRIVER"]
        assert data["cycles"] == []

    def test_empty_graph(self):
        data = ProgramDependencyMap(DependencyGraph()).to_dict()
        assert data == {"vertices": [], "edges": [], "entry_points": [], "cycles": []}
