"""
COBOL Analyzer – command-line interface
========================================

Usage
-----
::

    python -m cobol_analyzer.cli SOURCE [SOURCE ...] [OPTIONS]

SOURCE may be a COBOL file or a directory; directories are searched for
``.cbl``, ``.cob``, ``.cobol``, ``.cpy`` and ``.copy`` files.

Options
-------
--output, -o          Output file path (default: stdout).
--format, -f          Output format: ``json`` (default) or ``text``.
--graph               Emit the dependency graph instead of the analysis.
--graph-format        Graph format: dot (default), json, or mermaid.
--copybooks           Include copybook nodes / COPY edges in --graph output.
--no-recursive        Do not descend into sub-directories.
--fail-on-missing     Exit with status 1 when called programs are missing.
--verbose, -v         Enable DEBUG logging.

Examples
--------
::

    python -m cobol_analyzer.cli src/
    python -m cobol_analyzer.cli MAIN.cbl SUB.cbl -f text
    python -m cobol_analyzer.cli src/ --graph --graph-format mermaid -o deps.mmd
    python -m cobol_analyzer.cli src/ --fail-on-missing
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from .pipeline.cobol_analysis import AnalysisResult, CobolAnalysis


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="cobol_analyzer",
        description="COBOL Analyzer – classify COBOL sources and build their dependency graph",
    )
    p.add_argument("sources", nargs="+", metavar="SOURCE", help="COBOL file or directory")
    p.add_argument(
        "--output", "-o",
        default="-",
        metavar="FILE",
        help="Output file (default: stdout)",
    )
    p.add_argument(
        "--format", "-f",
        choices=["json", "text"],
        default="json",
        help="Output format (default: json)",
    )
    p.add_argument(
        "--graph",
        action="store_true",
        help="Emit the dependency graph.  Use --graph-format to choose the format.",
    )
    p.add_argument(
        "--graph-format",
        choices=["dot", "json", "mermaid"],
        default="dot",
        metavar="FMT",
        help="Graph output format when --graph is set: dot (default), json, or mermaid",
    )
    p.add_argument(
        "--copybooks",
        action="store_true",
        help="Include copybooks and COPY edges in --graph output",
    )
    p.add_argument(
        "--no-recursive",
        action="store_true",
        help="Only read files directly inside SOURCE directories",
    )
    p.add_argument(
        "--fail-on-missing",
        action="store_true",
        help="Exit with status 1 if any called program has no source",
    )
    p.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )
    return p


def _format_text(result: AnalysisResult) -> str:
    lines: list[str] = []
    graph = result.graph

    lines.append(f"{'═'*60}\n  FILES ({len(result.analyses)})\n{'═'*60}")
    lines.append(f"  {'NAME':<24}  {'TYPE':<13}  DIVISIONS")
    lines.append(f"  {'─'*24}  {'─'*13}  {'─'*30}")
    for name, analysis in result.analyses.items():
        divisions = ", ".join(dict.fromkeys(analysis.divisions)) or "(none)"
        note = "  ** needs manual review **" if analysis.needs_review else ""
        lines.append(f"  {name:<24}  {analysis.file_type:<13}  {divisions}{note}")

    lines.append(f"\n{'═'*60}\n  PROGRAMS ({len(graph.programs)})\n{'═'*60}")
    for name, prog in graph.programs.items():
        kind = "MAIN" if prog.is_main_program else "SUB" if prog.is_subprogram else "?"
        lines.append(
            f"\n{'─'*60}\n"
            f"  Program  : {name} [{kind}]\n"
            f"  File     : {prog.source_file}\n"
            f"  Calls    : {', '.join(prog.called_programs) or '(none)'}\n"
            f"  Called by: {', '.join(prog.called_by) or '(none)'}\n"
            f"  Copybooks: {', '.join(prog.copybooks) or '(none)'}"
        )

    def _section(title: str, names: list[str]) -> None:
        if names:
            lines.append(f"\n{'═'*60}\n  {title} ({len(names)})\n{'═'*60}")
            for n in names:
                lines.append(f"  {n}")

    _section("MISSING PROGRAMS", graph.missing_programs)
    _section("ORPHANED PROGRAMS", graph.orphaned_programs)
    _section("COPYBOOKS", graph.copybooks)
    _section("DUPLICATE PROGRAMS", graph.duplicate_programs)
    _section("CALL CYCLES", [" -> ".join(c + c[:1]) for c in result.cycles])
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    analysis = CobolAnalysis(recursive=not args.no_recursive)
    try:
        result = analysis.analyze_paths(args.sources)
    except FileNotFoundError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    if not result.files:
        print("error: no COBOL sources found", file=sys.stderr)
        return 2

    # ------------------------------------------------------------------
    # Graph mode
    # ------------------------------------------------------------------
    if args.graph:
        from .output.graph_renderer import GraphRenderer
        renderer = GraphRenderer(include_copybooks=args.copybooks)
        fmt = args.graph_format
        if fmt == "dot":
            output_text = renderer.to_dot(result.graph)
        elif fmt == "mermaid":
            output_text = renderer.to_mermaid(result.graph)
        else:
            output_text = renderer.to_json_str(result.graph)
    elif args.format == "json":
        output_text = json.dumps(result.to_dict(), indent=2)
    else:
        output_text = _format_text(result)

    if args.output == "-":
        print(output_text)
    else:
        Path(args.output).write_text(output_text, encoding="utf-8")
        print(f"Output written to {args.output}", file=sys.stderr)

    missing = result.graph.missing_programs
    if missing:
        print(
            f"\nWARNING: {len(missing)} called program"
            f"{'' if len(missing) == 1 else 's'} not found: {', '.join(missing)}",
            file=sys.stderr,
        )
        if args.fail_on_missing:
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
