"""
Program name resolution.

The canonical identity of a COBOL program is the token following
``PROGRAM-ID.`` in its IDENTIFICATION DIVISION.  When a file has no
``PROGRAM-ID`` the dependency graph falls back to the file name.
"""
from __future__ import annotations

import re
from typing import Optional

from ..passes.normalise import normalise_lines

_PROGRAM_ID_RE = re.compile(r"PROGRAM-ID\.\s*([A-Z0-9-]+)")

# Extensions stripped from a file name used as a fallback program name
PROGRAM_EXTENSIONS = (".cobol", ".cbl", ".cob")


def extract_program_name(content: Optional[str]) -> str:
    """
    Return the first ``PROGRAM-ID`` token in *content*, scanning top to
    bottom, or ``""`` when the marker is absent.

    >>> extract_program_name("       PROGRAM-ID. FOO-BAR.")
    'FOO-BAR'
    """
    for line in normalise_lines(content):
        m = _PROGRAM_ID_RE.search(line)
        if m:
            return m.group(1)
    return ""


def program_name_from_file_name(file_name: Optional[str]) -> str:
    """
    Derive a program name from a file name: directory components and a
    ``.cbl`` / ``.cob`` / ``.cobol`` extension are dropped and the rest is
    upper-cased.  Other extensions are kept.
    """
    base = (file_name or "").replace("\\", "/").rsplit("/", 1)[-1]
    lowered = base.lower()
    for ext in PROGRAM_EXTENSIONS:
        if lowered.endswith(ext):
            base = base[: -len(ext)]
            break
    return base.upper()


def resolve_program_name(content: Optional[str], file_name: Optional[str] = "") -> str:
    """``PROGRAM-ID`` of *content*, or the name derived from *file_name*."""
    return extract_program_name(content) or program_name_from_file_name(file_name)
