"""
DependencyGraphBuilder
======================

Aggregates per-file classifications across a whole file set into a
:class:`~cobol_analyzer.models.DependencyGraph`.

Passes
------
1. **Collect** – classify every file and resolve its program name.  Copybooks
   are listed and take no further part.  Every other file becomes a
   :class:`~cobol_analyzer.models.ProgramDependency`; every CALL target is
   remembered for missing-program detection.
2. **Link** – for each program (in input order) and each program it calls,
   append the caller to the callee's ``called_by`` and promote the callee to
   subprogram, whatever its own classification said.
3. **Missing** – CALL targets that never became a program key.
4. **Orphans** – programs that neither call nor are called.

The promotion in pass 2 depends only on ``called_programs``, which the pass
never changes, so a single sweep gives the same result in any order.

Duplicate program names keep the first file's record; later files that
resolve to the same name are logged and listed in
``DependencyGraph.duplicate_programs``.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Union

from ..models import (
    COPYBOOK,
    MAIN_PROGRAM,
    SUBPROGRAM,
    DependencyGraph,
    ProgramDependency,
    SourceFile,
)
from ..parser.file_classifier import FileClassifier
from ..parser.program_name import resolve_program_name

logger = logging.getLogger(__name__)

FileLike = Union[SourceFile, Mapping[str, Any]]


def _dedupe(items: Iterable[str]) -> List[str]:
    """Drop repeats, keeping first-seen order."""
    return list(dict.fromkeys(items))


def _as_source_file(item: FileLike) -> SourceFile:
    if isinstance(item, SourceFile):
        return item
    return SourceFile(
        name=str(item.get("name") or ""),
        content=str(item.get("content") or ""),
    )


class DependencyGraphBuilder:
    """Builds a :class:`DependencyGraph` from a sequence of source files."""

    def __init__(self) -> None:
        self._classifier = FileClassifier()

    def build(self, files: Iterable[FileLike]) -> DependencyGraph:
        """
        Build the dependency graph for *files*.

        Parameters
        ----------
        files:
            :class:`~cobol_analyzer.models.SourceFile` objects or
            ``{"name": ..., "content": ...}`` mappings.  May be empty.

        Returns
        -------
        DependencyGraph
        """
        graph = DependencyGraph()
        copybooks: Dict[str, None] = {}
        all_call_targets: List[str] = []

        # ----------------------------------------------------------------
        # Pass 1: classify and collect
        # ----------------------------------------------------------------
        for item in files or ():
            source = _as_source_file(item)
            analysis = self._classifier.classify(source.content, source.name)
            name = resolve_program_name(source.content, source.name)

            if analysis.file_type == COPYBOOK:
                copybooks[name] = None
                continue

            if name in graph.programs:
                logger.warning(
                    "Duplicate program %s in %s ignored (first defined in %s)",
                    name,
                    source.name,
                    graph.programs[name].source_file,
                )
                if name not in graph.duplicate_programs:
                    graph.duplicate_programs.append(name)
                continue

            calls = analysis.dependencies.call_statements
            all_call_targets.extend(calls)
            graph.programs[name] = ProgramDependency(
                program_name=name,
                called_programs=_dedupe(calls),
                copybooks=_dedupe(analysis.dependencies.copy_statements),
                is_subprogram=analysis.file_type == SUBPROGRAM,
                is_main_program=analysis.file_type == MAIN_PROGRAM,
                source_file=source.name,
            )

        graph.copybooks = list(copybooks)

        # ----------------------------------------------------------------
        # Pass 2: reverse edges + promotion of called programs
        # ----------------------------------------------------------------
        for name, program in graph.programs.items():
            for callee in program.called_programs:
                target = graph.programs.get(callee)
                if target is None:
                    continue
                target.called_by.append(name)
                target.mark_as_subprogram()

        # ----------------------------------------------------------------
        # Pass 3 + 4: missing and orphaned programs
        # ----------------------------------------------------------------
        graph.missing_programs = [
            target for target in _dedupe(all_call_targets)
            if target not in graph.programs
        ]
        graph.orphaned_programs = [
            name for name, program in graph.programs.items()
            if not program.called_by and not program.called_programs
        ]

        if graph.missing_programs:
            logger.warning(
                "%d called program%s not found: %s",
                len(graph.missing_programs),
                "" if len(graph.missing_programs) == 1 else "s",
                ", ".join(graph.missing_programs),
            )
        logger.info(
            "Dependency graph: %d programs, %d copybooks, %d missing, %d orphaned",
            len(graph.programs),
            len(graph.copybooks),
            len(graph.missing_programs),
            len(graph.orphaned_programs),
        )
        return graph


def build_dependency_graph(files: Iterable[FileLike]) -> DependencyGraph:
    """Build a dependency graph.  See :class:`DependencyGraphBuilder`."""
    return DependencyGraphBuilder().build(files)
