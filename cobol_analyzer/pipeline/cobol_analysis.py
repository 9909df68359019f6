"""
CobolAnalysis
=============

High-level facade tying together file ingestion,
:class:`~cobol_analyzer.parser.file_classifier.FileClassifier` (per-file
classification), :class:`~cobol_analyzer.pipeline.dependency_graph.DependencyGraphBuilder`
(cross-file graph) and :class:`~cobol_analyzer.pipeline.dependency_map.ProgramDependencyMap`
(transitive queries).

Files can be supplied as strings, as paths, or as directories that are
walked for COBOL sources.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Set

from ..models import DependencyGraph, FileAnalysis, SourceFile
from ..parser.file_classifier import FileClassifier
from ..pipeline.dependency_graph import DependencyGraphBuilder
from ..pipeline.dependency_map import ProgramDependencyMap

logger = logging.getLogger(__name__)

# Program sources first, then copybooks
COBOL_EXTENSIONS = (".cbl", ".cob", ".cobol", ".cpy", ".copy")


@dataclass
class AnalysisResult:
    """Everything produced by one :meth:`CobolAnalysis.analyze_paths` call."""

    files: List[SourceFile]
    analyses: Dict[str, FileAnalysis]
    graph: DependencyGraph
    cycles: List[List[str]] = field(default_factory=list)

    @property
    def needs_review(self) -> List[str]:
        """Names of files the classifier could not place."""
        return [name for name, a in self.analyses.items() if a.needs_review]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "files": {name: a.to_dict() for name, a in self.analyses.items()},
            "graph": self.graph.to_dict(),
            "cycles": self.cycles,
            "needs_review": self.needs_review,
        }


class CobolAnalysis:
    """
    High-level facade for COBOL dependency analysis.

    Parameters
    ----------
    recursive:
        Walk sub-directories when a directory is given to
        :meth:`load_sources` / :meth:`analyze_paths`.
    extensions:
        File extensions (case-insensitive) picked up from directories.
        Files named explicitly are always read, whatever their extension.
    """

    def __init__(
        self,
        recursive: bool = True,
        extensions: Sequence[str] = COBOL_EXTENSIONS,
    ) -> None:
        self.recursive = recursive
        self.extensions = tuple(ext.lower() for ext in extensions)
        self._classifier = FileClassifier()
        self._builder = DependencyGraphBuilder()
        #: Set by :meth:`build_graph` / :meth:`analyze_paths`.
        self.dependency_map: Optional[ProgramDependencyMap] = None

    # ------------------------------------------------------------------
    # Ingestion
    # ------------------------------------------------------------------

    def load_sources(self, paths: Iterable[str]) -> List[SourceFile]:
        """
        Read COBOL sources from files and directories.

        Directory entries are visited in sorted order so the resulting graph
        is reproducible.  A source found under a directory is named by its
        path relative to that directory (``copybooks/SLIPFMT.copy``); a file
        given explicitly keeps the path it was given as.  When two different
        files would share a name, the later one is named by its absolute
        path.  A file reached twice is only loaded once.

        Raises
        ------
        FileNotFoundError
            If a path does not exist.
        """
        sources: List[SourceFile] = []
        seen: Set[Path] = set()
        names: Set[str] = set()

        def add(path: Path, name: str) -> None:
            resolved = path.resolve()
            if resolved in seen:
                logger.debug("Skipping %s: already loaded", path)
                return
            seen.add(resolved)
            if name in names:
                logger.warning("File name %s already used – naming %s by its full path", name, path)
                name = resolved.as_posix()
            names.add(name)
            sources.append(self._read(path, name))

        for raw in paths:
            path = Path(raw)
            if path.is_dir():
                pattern = "**/*" if self.recursive else "*"
                for candidate in sorted(path.glob(pattern)):
                    if candidate.is_file() and self._is_cobol(candidate):
                        add(candidate, candidate.relative_to(path).as_posix())
            elif path.is_file():
                add(path, path.as_posix())
            else:
                raise FileNotFoundError(f"Source path not found: {raw}")
        logger.info("Loaded %d COBOL source file(s)", len(sources))
        return sources

    # ------------------------------------------------------------------
    # Primary API
    # ------------------------------------------------------------------

    def analyze_text(self, content: str, name: str = "") -> FileAnalysis:
        """Classify COBOL source supplied as a string."""
        return self._classifier.classify(content, name)

    def analyze_file(self, file_path: str) -> FileAnalysis:
        """Classify a single COBOL source file on disk."""
        source = self._read(Path(file_path))
        return self.analyze_text(source.content, source.name)

    def build_graph(self, sources: Iterable[SourceFile]) -> DependencyGraph:
        """Build the dependency graph for already-loaded *sources*."""
        graph = self._builder.build(sources)
        self.dependency_map = ProgramDependencyMap(graph)
        return graph

    def analyze_paths(self, paths: Iterable[str]) -> AnalysisResult:
        """
        Load every source under *paths*, classify each one and build the
        cross-file dependency graph.
        """
        files = self.load_sources(paths)
        analyses: Dict[str, FileAnalysis] = {}
        for source in files:
            analyses[source.name] = self.analyze_text(source.content, source.name)

        graph = self._builder.build(files)
        dep_map = ProgramDependencyMap(graph)
        self.dependency_map = dep_map
        cycles = dep_map.cycles()
        if cycles:
            logger.info("%d call cycle(s) detected", len(cycles))
        return AnalysisResult(files=files, analyses=analyses, graph=graph, cycles=cycles)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _is_cobol(self, path: Path) -> bool:
        return path.suffix.lower() in self.extensions

    @staticmethod
    def _read(path: Path, name: Optional[str] = None) -> SourceFile:
        if not path.is_file():
            raise FileNotFoundError(f"Source file not found: {path}")
        logger.debug("Reading %s", path)
        text = path.read_text(encoding="utf-8", errors="replace")
        return SourceFile(name=name or path.name, content=text)
