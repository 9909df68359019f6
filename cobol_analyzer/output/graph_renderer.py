"""
graph_renderer.py
=================

Render a :class:`~cobol_analyzer.models.DependencyGraph` for people and
tools.

Graph semantics
---------------
* **Nodes** – one per program in the graph, one per missing CALL target and,
  when requested, one per COPY target.
* **Edges** – ``CALL`` from a program to each program it calls, ``COPY``
  from a program to each copybook it includes.
* **Color coding**

  ==============  =======  ================================================
  Status          Color    Meaning
  ==============  =======  ================================================
  ``main``        Blue     Main program (entry point).
  ``subprogram``  Green    Program called by another or with LINKAGE.
  ``program``     Slate    Program whose type could not be determined.
  ``orphan``      Grey     Program that neither calls nor is called.
  ``missing``     Red      CALL target with no source in the file set.
  ``copybook``    Amber    COPY target (only with ``include_copybooks``).
  ==============  =======  ================================================

Outputs
-------
* **DOT** (Graphviz) – renderable with ``dot -Tsvg -o out.svg graph.dot``.
* **JSON** – machine-readable graph for web renderers or further processing.
* **Mermaid** – embeddable in GitHub Markdown / Notion / Confluence.
"""
from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Dict, List, Set

from ..models import DependencyGraph

# ---------------------------------------------------------------------------
# Colour + shape constants
# ---------------------------------------------------------------------------

_FILL = {
    "main":       "#2E86AB",   # steel blue
    "subprogram": "#27AE60",   # emerald green
    "program":    "#5D6D7E",   # slate
    "orphan":     "#95A5A6",   # concrete grey
    "missing":    "#E74C3C",   # alizarin red
    "copybook":   "#F39C12",   # amber
}
_DOT_STYLE = {
    "main":       "filled",
    "subprogram": "filled",
    "program":    "filled",
    "orphan":     "filled",
    "missing":    "filled,dashed",
    "copybook":   "filled",
}
_DOT_SHAPE = {
    "main":       "doubleoctagon",
    "subprogram": "box",
    "program":    "box",
    "orphan":     "box",
    "missing":    "box",
    "copybook":   "note",
}
_NODE_TAG = {
    "main":    "MAIN",
    "orphan":  "ORPHAN",
    "missing": "NOT FOUND",
}
_EDGE_COLOR = {
    "CALL":    "#444444",
    "MISSING": "#E74C3C",
    "COPY":    "#B9770E",
}

_MERMAID_ID_RE = re.compile(r"[^A-Za-z0-9_]")


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------


@dataclass
class GraphNode:
    """A single node of the rendered graph."""

    id: str             # Program or copybook name
    status: str         # see module docstring
    source_file: str    # Empty for missing programs and copybooks


@dataclass
class GraphEdge:
    """A directed edge between two nodes."""

    from_id: str
    to_id: str
    kind: str           # "CALL" | "COPY"
    to_status: str      # mirrors the target node status


@dataclass
class GraphView:
    """Nodes and edges ready for rendering."""

    nodes: List[GraphNode] = field(default_factory=list)
    edges: List[GraphEdge] = field(default_factory=list)


def _mermaid_id(name: str, prefix: str = "") -> str:
    return prefix + _MERMAID_ID_RE.sub("_", name)


def _dot_escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')


# ---------------------------------------------------------------------------
# GraphRenderer
# ---------------------------------------------------------------------------


class GraphRenderer:
    """
    Turn a :class:`DependencyGraph` into DOT, JSON or Mermaid text.

    Parameters
    ----------
    include_copybooks:
        Add copybook nodes and ``COPY`` edges.  Off by default: in large
        systems copybooks dominate the picture.
    """

    def __init__(self, include_copybooks: bool = False) -> None:
        self.include_copybooks = include_copybooks

    def build(self, graph: DependencyGraph) -> GraphView:
        """Build the :class:`GraphView` for *graph*."""
        view = GraphView()
        orphaned = set(graph.orphaned_programs)
        missing = set(graph.missing_programs)
        status_of: Dict[str, str] = {}

        for name, program in graph.programs.items():
            if name in orphaned:
                status = "orphan"
            elif program.is_main_program:
                status = "main"
            elif program.is_subprogram:
                status = "subprogram"
            else:
                status = "program"
            status_of[name] = status
            view.nodes.append(GraphNode(id=name, status=status, source_file=program.source_file))

        for name in graph.missing_programs:
            if name in status_of:
                continue
            status_of[name] = "missing"
            view.nodes.append(GraphNode(id=name, status="missing", source_file=""))

        for name, program in graph.programs.items():
            for callee in program.called_programs:
                to_status = "missing" if callee in missing else status_of.get(callee, "missing")
                view.edges.append(GraphEdge(from_id=name, to_id=callee, kind="CALL", to_status=to_status))

        if self.include_copybooks:
            seen_copybooks: Dict[str, None] = {}
            for name, program in graph.programs.items():
                for copybook in program.copybooks:
                    seen_copybooks[copybook] = None
                    view.edges.append(GraphEdge(from_id=name, to_id=copybook, kind="COPY", to_status="copybook"))
            # Copybooks sharing a name with a program are drawn once, as the program
            for copybook in seen_copybooks:
                if copybook not in status_of:
                    view.nodes.append(GraphNode(id=copybook, status="copybook", source_file=""))

        return view

    # ------------------------------------------------------------------
    # DOT (Graphviz) renderer
    # ------------------------------------------------------------------

    def to_dot(self, graph: DependencyGraph, title: str = "COBOL Dependency Graph") -> str:
        """Render *graph* as a Graphviz DOT string."""
        view = self.build(graph)
        lines: List[str] = [
            'digraph "COBOL_DEPENDENCIES" {',
            f'    label="{_dot_escape(title)}";',
            '    labelloc=t;',
            '    rankdir=LR;',
            '    node [fontname="Courier New", fontsize=11, margin="0.2,0.1"];',
            '    edge [fontname="Courier New", fontsize=9];',
            '',
        ]

        for node in view.nodes:
            node_id = _dot_escape(node.id)
            label = node_id
            tag = _NODE_TAG.get(node.status)
            if tag:
                label += f"\\n[{tag}]"
            attrs = (
                f'label="{label}", '
                f'shape={_DOT_SHAPE[node.status]}, '
                f'style="{_DOT_STYLE[node.status]}", '
                f'fillcolor="{_FILL[node.status]}", '
                'fontcolor="white"'
            )
            lines.append(f'    "{node_id}" [{attrs}];')

        lines.append('')

        for edge in view.edges:
            if edge.kind == "COPY":
                color, style = _EDGE_COLOR["COPY"], "dotted"
            elif edge.to_status == "missing":
                color, style = _EDGE_COLOR["MISSING"], "dashed"
            else:
                color, style = _EDGE_COLOR["CALL"], "solid"
            lines.append(
                f'    "{_dot_escape(edge.from_id)}" -> "{_dot_escape(edge.to_id)}" '
                f'[label="{edge.kind}", color="{color}", style={style}];'
            )

        lines.append('}')
        return '\n'.join(lines) + '\n'

    # ------------------------------------------------------------------
    # JSON renderer
    # ------------------------------------------------------------------

    def to_json(self, graph: DependencyGraph) -> dict:
        """Render *graph* as a JSON-serialisable dictionary."""
        view = self.build(graph)
        return {
            "nodes": [
                {
                    "id": n.id,
                    "status": n.status,
                    "color": _FILL[n.status],
                    "source_file": n.source_file,
                }
                for n in view.nodes
            ],
            "edges": [
                {
                    "from": e.from_id,
                    "to": e.to_id,
                    "kind": e.kind,
                    "to_status": e.to_status,
                }
                for e in view.edges
            ],
            "missing_programs": list(graph.missing_programs),
            "orphaned_programs": list(graph.orphaned_programs),
        }

    def to_json_str(self, graph: DependencyGraph, indent: int = 2) -> str:
        """Return *graph* serialised to a JSON string."""
        return json.dumps(self.to_json(graph), indent=indent)

    # ------------------------------------------------------------------
    # Mermaid renderer
    # ------------------------------------------------------------------

    def to_mermaid(self, graph: DependencyGraph, title: str = "COBOL Dependency Graph") -> str:
        """
        Render *graph* as a Mermaid flowchart.

        Colour coding uses ``classDef`` directives.  Copybook node ids are
        prefixed with ``cpy_`` so a copybook never collides with a program.
        Names that sanitise to the same id are told apart by a numeric suffix.
        """
        view = self.build(graph)
        lines: List[str] = [
            "---",
            f'title: "{title}"',
            "---",
            "flowchart LR",
        ]

        ids: Dict[str, str] = {}
        used: Set[str] = set()
        for node in view.nodes:
            base = _mermaid_id(node.id, "cpy_" if node.status == "copybook" else "")
            # Names that sanitise alike (A-B, A_B) get a numeric suffix
            nid, n = base, 2
            while nid in used:
                nid, n = f"{base}_{n}", n + 1
            used.add(nid)
            ids[node.id] = nid
            tag = _NODE_TAG.get(node.status)
            label = f"{node.id}\\n{tag}" if tag else node.id
            lines.append(f'    {nid}["{label}"]:::{node.status}')

        lines.append('')

        for edge in view.edges:
            src, dst = ids[edge.from_id], ids[edge.to_id]
            if edge.kind == "COPY":
                lines.append(f'    {src} -.-o {dst}')
            elif edge.to_status == "missing":
                lines.append(f'    {src} -.->|CALL| {dst}')
            else:
                lines.append(f'    {src} -->|CALL| {dst}')

        lines.append('')
        lines.append('    classDef main       fill:#2E86AB,color:#fff,stroke:#1a5276')
        lines.append('    classDef subprogram fill:#27AE60,color:#fff,stroke:#1e8449')
        lines.append('    classDef program    fill:#5D6D7E,color:#fff,stroke:#34495e')
        lines.append('    classDef orphan     fill:#95A5A6,color:#fff,stroke:#7f8c8d')
        lines.append('    classDef missing    fill:#E74C3C,color:#fff,stroke:#922b21,stroke-dasharray:5 5')
        lines.append('    classDef copybook   fill:#F39C12,color:#fff,stroke:#b9770e')

        return '\n'.join(lines) + '\n'
