"""
export_graph.py
===============

Write the dependency graph of a COBOL source set in every supported format.

For the given sources the script produces, under ``--output-dir``:

* ``graph.dot``      – Graphviz DOT source (render with ``dot -Tsvg -o graph.svg graph.dot``)
* ``graph.json``     – Machine-readable graph (nodes + edges with colour codes)
* ``graph.mmd``      – Mermaid flowchart (paste into a GitHub Markdown fenced block)
* ``analysis.json``  – Per-file classification plus the raw dependency graph

Usage
-----
    python scripts/export_graph.py \\
        --sources tests/fixtures/payroll \\
        --output-dir outputs/graph --copybooks

Render to SVG (requires Graphviz installed)
-------------------------------------------
    dot -Tsvg outputs/graph/graph.dot -o outputs/graph/graph.svg
"""
from __future__ import annotations

import argparse
import json
import subprocess
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from cobol_analyzer.output.graph_renderer import GraphRenderer
from cobol_analyzer.pipeline.cobol_analysis import CobolAnalysis


def _try_render_svg(dot_path: Path) -> None:
    """Try to render the DOT file to SVG via Graphviz if available."""
    try:
        svg_path = dot_path.with_suffix(".svg")
        subprocess.run(
            ["dot", "-Tsvg", str(dot_path), "-o", str(svg_path)],
            check=True,
            capture_output=True,
        )
        print(f"  rendered: {svg_path}")
    except (FileNotFoundError, subprocess.CalledProcessError):
        print("  (Graphviz not available – SVG skipped)")


def export(sources: list[str], output_dir: Path, include_copybooks: bool, render_svg: bool) -> None:
    result = CobolAnalysis().analyze_paths(sources)
    graph = result.graph
    renderer = GraphRenderer(include_copybooks=include_copybooks)

    print(
        f"  programs: {len(graph.programs)}  copybooks: {len(graph.copybooks)}  "
        f"missing: {len(graph.missing_programs)}  orphaned: {len(graph.orphaned_programs)}"
    )

    output_dir.mkdir(parents=True, exist_ok=True)

    dot_path = output_dir / "graph.dot"
    dot_path.write_text(renderer.to_dot(graph), encoding="utf-8")
    print(f"  wrote   : {dot_path}")
    if render_svg:
        _try_render_svg(dot_path)

    json_path = output_dir / "graph.json"
    json_path.write_text(renderer.to_json_str(graph), encoding="utf-8")
    print(f"  wrote   : {json_path}")

    mmd_path = output_dir / "graph.mmd"
    mmd_path.write_text(renderer.to_mermaid(graph), encoding="utf-8")
    print(f"  wrote   : {mmd_path}")

    analysis_path = output_dir / "analysis.json"
    analysis_path.write_text(json.dumps(result.to_dict(), indent=2), encoding="utf-8")
    print(f"  wrote   : {analysis_path}")


def main() -> None:
    p = argparse.ArgumentParser(
        description="Export COBOL dependency graphs (DOT / JSON / Mermaid)"
    )
    p.add_argument("--sources", "-s", nargs="+", required=True, metavar="PATH",
                   help="COBOL source files or directories")
    p.add_argument("--output-dir", "-o", default="outputs/graph", metavar="DIR")
    p.add_argument("--copybooks", action="store_true",
                   help="Include copybook nodes and COPY edges")
    p.add_argument("--render-svg", action="store_true",
                   help="Attempt to auto-render DOT → SVG via Graphviz")
    args = p.parse_args()

    export(args.sources, Path(args.output_dir), args.copybooks, args.render_svg)


if __name__ == "__main__":
    main()
