"""
LineScanner
===========

Keyword marker tests applied to one normalised (upper-cased, trimmed) line.

Each method answers a single question about a line and never raises.  The
scanner holds no state, so a single instance can be shared freely; the
classifier folds these answers over every line of a file.

Markers
-------
================================  ===========================================
Marker                            Result
================================  ===========================================
``IDENTIFICATION DIVISION``       division ``IDENTIFICATION``
``ENVIRONMENT DIVISION``          division ``ENVIRONMENT``
``DATA DIVISION``                 division ``DATA``
``PROCEDURE DIVISION``            division ``PROCEDURE``
``COPY <name>``                   copybook reference
``CALL '<name>'``                 static program call (quoted literal only)
``SELECT … ASSIGN TO <name>``     external file assignment
``EXEC SQL`` / ``EXEC CICS``      database / transaction tag
================================  ===========================================
"""
from __future__ import annotations

import re
from typing import List, Optional, Tuple

from ..models import CICS_TRANSACTION, SQL_DATABASE

# (marker substring, division name) – checked in this order on every line
DIVISION_MARKERS: Tuple[Tuple[str, str], ...] = (
    ("IDENTIFICATION DIVISION", "IDENTIFICATION"),
    ("ENVIRONMENT DIVISION", "ENVIRONMENT"),
    ("DATA DIVISION", "DATA"),
    ("PROCEDURE DIVISION", "PROCEDURE"),
)

LINKAGE_SECTION_MARKER = "LINKAGE SECTION"

_COPY_RE = re.compile(r"COPY\s+([A-Z0-9-]+)")
_CALL_RE = re.compile(r"CALL\s+['\"]([^'\"]+)['\"]")
_ASSIGN_RE = re.compile(r"ASSIGN\s+TO\s+([A-Z0-9-]+)")


class LineScanner:
    """Stateless marker tests over a single upper-cased source line."""

    def divisions(self, line: str) -> List[str]:
        """Return the division names whose marker appears in *line*."""
        return [name for marker, name in DIVISION_MARKERS if marker in line]

    def copy_target(self, line: str) -> Optional[str]:
        """Return the copybook named by a ``COPY`` statement, if any."""
        if "COPY " not in line:
            return None
        m = _COPY_RE.search(line)
        return m.group(1) if m else None

    def call_target(self, line: str) -> Optional[str]:
        """
        Return the quoted program name of a static ``CALL``, if any.

        ``CALL WS-PGM-NAME`` (a dynamic call through a data item) is not
        resolved and yields ``None``.
        """
        if "CALL " not in line:
            return None
        m = _CALL_RE.search(line)
        return m.group(1) if m else None

    def file_assignment(self, line: str) -> Optional[str]:
        """Return the external name of a ``SELECT … ASSIGN TO`` clause."""
        if "SELECT " not in line or "ASSIGN TO" not in line:
            return None
        m = _ASSIGN_RE.search(line)
        return m.group(1) if m else None

    def database_connections(self, line: str) -> List[str]:
        """
        Return the embedded-statement tags found on *line*.

        ``EXEC SQL`` is checked before ``EXEC CICS``; a line carrying both
        produces two tags.
        """
        tags: List[str] = []
        if "EXEC SQL" in line:
            tags.append(SQL_DATABASE)
        if "EXEC CICS" in line:
            tags.append(CICS_TRANSACTION)
        return tags
