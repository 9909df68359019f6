"""
Core data models for the COBOL dependency analyzer.

Every structure here is rebuilt from scratch on each analysis call and is
owned by the caller; nothing is cached or persisted.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List


# ---------------------------------------------------------------------------
# File types
# ---------------------------------------------------------------------------

MAIN_PROGRAM = "main-program"
SUBPROGRAM = "subprogram"
COPYBOOK = "copybook"
UNKNOWN = "unknown"

FILE_TYPES = {
    MAIN_PROGRAM,   # Entry point, not known to be CALLed by anything
    SUBPROGRAM,     # Invoked via CALL (or has a LINKAGE SECTION and no CALLs)
    COPYBOOK,       # Shared data definitions pulled in via COPY
    UNKNOWN,        # No recognisable structure – needs manual review
}

# Tags recorded in FileDependencies.database_connections
SQL_DATABASE = "SQL Database"
CICS_TRANSACTION = "CICS Transaction"


# ---------------------------------------------------------------------------
# Input
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SourceFile:
    """A named COBOL source text supplied by the caller."""

    name: str
    content: str

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "content": self.content}


# ---------------------------------------------------------------------------
# Single-file analysis
# ---------------------------------------------------------------------------


@dataclass
class FileDependencies:
    """
    References found in one source file.

    Lists keep one entry per occurrence; deduplication happens only when
    the file is folded into a :class:`ProgramDependency`.
    """

    copy_statements: List[str] = field(default_factory=list)
    call_statements: List[str] = field(default_factory=list)
    file_assignments: List[str] = field(default_factory=list)
    database_connections: List[str] = field(default_factory=list)
    # Reserved; no extraction rule populates it.
    external_references: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "copy_statements": list(self.copy_statements),
            "call_statements": list(self.call_statements),
            "file_assignments": list(self.file_assignments),
            "database_connections": list(self.database_connections),
            "external_references": list(self.external_references),
        }


@dataclass
class FileAnalysis:
    """Structural classification of a single COBOL source file."""

    file_type: str = UNKNOWN
    divisions: List[str] = field(default_factory=list)
    has_identification_division: bool = False
    has_environment_division: bool = False
    has_data_division: bool = False
    has_procedure_division: bool = False
    dependencies: FileDependencies = field(default_factory=FileDependencies)

    @property
    def needs_review(self) -> bool:
        return self.file_type == UNKNOWN

    def __repr__(self) -> str:
        return (
            f"FileAnalysis(type={self.file_type!r}, "
            f"divisions={self.divisions}, "
            f"calls={self.dependencies.call_statements})"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "file_type": self.file_type,
            "divisions": list(self.divisions),
            "has_identification_division": self.has_identification_division,
            "has_environment_division": self.has_environment_division,
            "has_data_division": self.has_data_division,
            "has_procedure_division": self.has_procedure_division,
            "dependencies": self.dependencies.to_dict(),
        }


# ---------------------------------------------------------------------------
# Cross-file graph
# ---------------------------------------------------------------------------


@dataclass
class ProgramDependency:
    """
    One non-copybook program in the dependency graph.

    ``called_by`` is empty when the record is created and is filled in by the
    second pass of :class:`~cobol_analyzer.pipeline.dependency_graph.DependencyGraphBuilder`.
    """

    program_name: str
    called_programs: List[str] = field(default_factory=list)
    called_by: List[str] = field(default_factory=list)
    copybooks: List[str] = field(default_factory=list)
    is_subprogram: bool = False
    is_main_program: bool = False
    source_file: str = ""

    def mark_as_subprogram(self) -> None:
        self.is_subprogram = True
        self.is_main_program = False

    def __repr__(self) -> str:
        return (
            f"ProgramDependency(name={self.program_name!r}, "
            f"calls={self.called_programs}, called_by={self.called_by})"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "program_name": self.program_name,
            "called_programs": list(self.called_programs),
            "called_by": list(self.called_by),
            "copybooks": list(self.copybooks),
            "is_subprogram": self.is_subprogram,
            "is_main_program": self.is_main_program,
            "source_file": self.source_file,
        }


@dataclass
class DependencyGraph:
    """
    Programs, their CALL edges and the anomalies found across a file set.

    ``programs`` is an insertion-ordered dict: iteration follows the order in
    which the source files were supplied.
    """

    programs: Dict[str, ProgramDependency] = field(default_factory=dict)
    missing_programs: List[str] = field(default_factory=list)
    copybooks: List[str] = field(default_factory=list)
    orphaned_programs: List[str] = field(default_factory=list)
    duplicate_programs: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.programs and not self.copybooks

    def __repr__(self) -> str:
        return (
            f"DependencyGraph(programs={list(self.programs)}, "
            f"missing={self.missing_programs}, "
            f"orphaned={self.orphaned_programs})"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "programs": {
                name: prog.to_dict() for name, prog in self.programs.items()
            },
            "missing_programs": list(self.missing_programs),
            "copybooks": list(self.copybooks),
            "orphaned_programs": list(self.orphaned_programs),
            "duplicate_programs": list(self.duplicate_programs),
        }
