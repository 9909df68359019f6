"""
COBOL Analyzer
==============

Static, heuristic analysis of COBOL sources: classifies each file as a main
program, subprogram, copybook or unknown, extracts its COPY / CALL / file /
embedded SQL and CICS references, and builds a cross-file dependency graph
with reverse edges, missing programs and orphans.

Quick start
-----------
>>> from cobol_analyzer import build_dependency_graph
>>> graph = build_dependency_graph([
...     {"name": "MAIN.cbl", "content": main_source},
...     {"name": "SUB.cbl", "content": sub_source},
... ])
>>> graph.programs["SUB"].called_by
['MAIN']
"""

from .models import (
    DependencyGraph,
    FileAnalysis,
    FileDependencies,
    ProgramDependency,
    SourceFile,
)
from .parser.file_classifier import FileClassifier, classify_file
from .parser.program_name import extract_program_name, resolve_program_name
from .pipeline.cobol_analysis import AnalysisResult, CobolAnalysis
from .pipeline.dependency_graph import DependencyGraphBuilder, build_dependency_graph
from .pipeline.dependency_map import ProgramDependencyMap

__version__ = "0.1.0"
__all__ = [
    "DependencyGraph",
    "FileAnalysis",
    "FileDependencies",
    "ProgramDependency",
    "SourceFile",
    "FileClassifier",
    "classify_file",
    "extract_program_name",
    "resolve_program_name",
    "AnalysisResult",
    "CobolAnalysis",
    "DependencyGraphBuilder",
    "build_dependency_graph",
    "ProgramDependencyMap",
]
