"""
ProgramDependencyMap
====================

Graph queries over a built :class:`~cobol_analyzer.models.DependencyGraph`.

The dependency graph itself only records direct CALL edges.  This class
loads those edges into a NetworkX ``DiGraph`` to answer transitive
questions: everything a program reaches, everything that reaches it, and
call cycles.  Missing programs appear as vertices with no outgoing edges.
"""
from __future__ import annotations

from typing import Any, Dict, List, Set, Tuple

import networkx as nx

from ..models import DependencyGraph


class ProgramDependencyMap:
    """
    Directed ``CALLS`` relationships between programs.

    Attributes
    ----------
    graph:
        The dependency graph the map was built from.
    """

    def __init__(self, graph: DependencyGraph) -> None:
        self.graph = graph
        self._g = nx.DiGraph()
        for name, program in graph.programs.items():
            self._g.add_node(name, missing=False)
            for callee in program.called_programs:
                self._g.add_edge(name, callee)
        for name in graph.missing_programs:
            self._g.add_node(name, missing=True)

    # ------------------------------------------------------------------
    # Dependency queries
    # ------------------------------------------------------------------

    def get_direct_dependencies(self, program: str) -> Set[str]:
        """Programs that *program* CALLs directly."""
        if program not in self._g:
            return set()
        return set(self._g.successors(program))

    def get_all_dependencies(self, program: str) -> Set[str]:
        """Transitive closure of the programs *program* CALLs."""
        if program not in self._g:
            return set()
        return set(nx.descendants(self._g, program))

    def get_all_callers(self, program: str) -> Set[str]:
        """Every program from which *program* can be reached."""
        if program not in self._g:
            return set()
        return set(nx.ancestors(self._g, program))

    def cycles(self) -> List[List[str]]:
        """
        Call cycles, each rotated to start at its smallest name and the list
        sorted, so output is stable across runs.
        """
        result: List[List[str]] = []
        for cycle in nx.simple_cycles(self._g):
            pivot = cycle.index(min(cycle))
            result.append(cycle[pivot:] + cycle[:pivot])
        return sorted(result)

    def entry_points(self) -> List[str]:
        """Programs that call something but are called by nothing."""
        return [
            name for name in self.graph.programs
            if self._g.in_degree(name) == 0 and self._g.out_degree(name) > 0
        ]

    def vertices(self) -> Set[str]:
        """All program names, defined or missing."""
        return set(self._g.nodes)

    def edges(self) -> List[Tuple[str, str]]:
        """All (caller, callee) pairs."""
        return list(self._g.edges)

    def is_missing(self, program: str) -> bool:
        return bool(self._g.nodes.get(program, {}).get("missing", False))

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        return {
            "vertices": sorted(self.vertices()),
            "edges": [{"src": s, "dest": d} for s, d in sorted(self.edges())],
            "entry_points": self.entry_points(),
            "cycles": self.cycles(),
        }
