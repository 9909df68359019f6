"""
File classifier – decides what kind of COBOL unit a source file is and
collects the references it makes to other files.

Classification is heuristic and line-oriented; it is advisory, not a
validator.  A file with no recognisable structure is reported as
``unknown`` with empty dependency lists rather than raising.

Evaluation order
----------------
1. The file name decides first: ``.cpy`` / ``.copy`` anywhere in the last
   path segment (case-insensitive) makes the file a copybook.
2. Every line is scanned for division markers and dependency markers.
3. If the name did not decide, the division flags do:

   ===========================  =========================================
   Flags                        Result
   ===========================  =========================================
   no IDENTIFICATION, DATA      ``copybook``
   IDENTIFICATION, PROCEDURE    ``main-program`` – or ``subprogram`` when
                                the file makes no CALLs but declares a
                                ``LINKAGE SECTION``
   DATA, no PROCEDURE           ``copybook``
   anything else                ``unknown``
   ===========================  =========================================
"""
from __future__ import annotations

import logging
from typing import Optional

from ..models import (
    COPYBOOK,
    MAIN_PROGRAM,
    SUBPROGRAM,
    UNKNOWN,
    FileAnalysis,
)
from ..passes.line_scanner import LINKAGE_SECTION_MARKER, LineScanner
from ..passes.normalise import UppercaseNormalisePass

logger = logging.getLogger(__name__)

COPYBOOK_NAME_HINTS = (".cpy", ".copy")


class FileClassifier:
    """Builds a :class:`~cobol_analyzer.models.FileAnalysis` for one file."""

    def __init__(self) -> None:
        self._normalise = UppercaseNormalisePass()
        self._scanner = LineScanner()

    def classify(self, content: Optional[str], file_name: Optional[str] = "") -> FileAnalysis:
        """
        Classify *content* and extract its dependencies.

        Parameters
        ----------
        content:
            Raw source text (any case, any line endings).
        file_name:
            Name the file was supplied under; only used for the copybook
            name hint.

        Returns
        -------
        FileAnalysis
        """
        content = content or ""
        file_name = file_name or ""
        analysis = FileAnalysis()

        base_name = file_name.replace("\\", "/").rsplit("/", 1)[-1].lower()
        if any(hint in base_name for hint in COPYBOOK_NAME_HINTS):
            analysis.file_type = COPYBOOK

        deps = analysis.dependencies
        for line in self._normalise.run(content):
            for division in self._scanner.divisions(line):
                self._mark_division(analysis, division)

            copy_target = self._scanner.copy_target(line)
            if copy_target:
                deps.copy_statements.append(copy_target)

            call_target = self._scanner.call_target(line)
            if call_target:
                deps.call_statements.append(call_target)

            assignment = self._scanner.file_assignment(line)
            if assignment:
                deps.file_assignments.append(assignment)

            deps.database_connections.extend(self._scanner.database_connections(line))

        if analysis.file_type != COPYBOOK:
            analysis.file_type = self._resolve_type(analysis, content)

        logger.debug(
            "Classified %s as %s (divisions=%s, calls=%d, copies=%d)",
            file_name or "<inline>",
            analysis.file_type,
            analysis.divisions,
            len(deps.call_statements),
            len(deps.copy_statements),
        )
        return analysis

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _mark_division(analysis: FileAnalysis, division: str) -> None:
        analysis.divisions.append(division)
        if division == "IDENTIFICATION":
            analysis.has_identification_division = True
        elif division == "ENVIRONMENT":
            analysis.has_environment_division = True
        elif division == "DATA":
            analysis.has_data_division = True
        elif division == "PROCEDURE":
            analysis.has_procedure_division = True

    @staticmethod
    def _resolve_type(analysis: FileAnalysis, content: str) -> str:
        ident = analysis.has_identification_division
        data = analysis.has_data_division
        proc = analysis.has_procedure_division

        if not ident and data:
            return COPYBOOK
        if ident and proc:
            if (
                not analysis.dependencies.call_statements
                and LINKAGE_SECTION_MARKER in content.upper()
            ):
                return SUBPROGRAM
            return MAIN_PROGRAM
        if data and not proc:
            return COPYBOOK
        return UNKNOWN


def classify_file(content: Optional[str], file_name: Optional[str] = "") -> FileAnalysis:
    """Classify a single COBOL source text.  See :class:`FileClassifier`."""
    return FileClassifier().classify(content, file_name)
